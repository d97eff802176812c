"""Background signal check."""

import zlib
from enum import Enum
from typing import Optional, Protocol

import structlog

from ..data.models import AssetAnalysis, TradeAction
from ..delivery.base import BaseNotifier
from ..engine import AnalysisPipeline
from ..persistence.prefs_store import WalletAddressProvider
from .policy import SignalAlertPolicy

logger = structlog.get_logger(__name__)


class SignalCheckResult(Enum):
    SUCCESS = "success"
    RETRY = "retry"


class ActionStore(Protocol):
    def get_last_action(self, asset_id: str) -> Optional[str]:
        ...

    def set_last_action(self, asset_id: str, action: str) -> None:
        ...


def notification_id_for(asset_id: str) -> int:
    """Stable across processes, unlike hash()."""
    return zlib.crc32(asset_id.encode("utf-8")) & 0x7FFFFFFF


class SignalCheck:
    """
    One pass of the periodic signal check.

    Analyses the saved wallet's assets and notifies when an asset's final
    action changed to BUY or SELL since the last delivered alert.
    """

    def __init__(
        self,
        pipeline: AnalysisPipeline,
        prefs: WalletAddressProvider,
        actions: ActionStore,
        notifier: BaseNotifier,
        policy: Optional[SignalAlertPolicy] = None,
    ):
        self.pipeline = pipeline
        self.prefs = prefs
        self.actions = actions
        self.notifier = notifier
        self.policy = policy or SignalAlertPolicy()

    async def run(self) -> SignalCheckResult:
        try:
            addresses = self.prefs.get_wallet_addresses()
            assets = await self.pipeline.resolver.resolve(addresses)
            if not assets:
                logger.info("Signal check skipped, no assets")
                return SignalCheckResult.SUCCESS

            analyses = await self.pipeline.analyze_assets(assets, addresses)
            notified = sum(1 for analysis in analyses if self._process(analysis))
        except Exception as e:
            logger.warning("Signal check failed, will retry", error=str(e))
            return SignalCheckResult.RETRY

        logger.info("Signal check complete", assets=len(analyses), notified=notified)
        return SignalCheckResult.SUCCESS

    def _process(self, analysis: AssetAnalysis) -> bool:
        asset = analysis.asset
        action = analysis.final_action
        previous = self.actions.get_last_action(asset.id) or TradeAction.HOLD.value

        delivered = False
        if self.policy.should_attempt_notification(action, previous):
            delivered = self.notifier.deliver(
                notification_id_for(asset.id),
                f"{asset.symbol}: {action.value} signal",
                f"{asset.display_name} flagged {action.value} by multi-algorithm vote.",
            )
            logger.info("Signal alert", asset_id=asset.id, action=action.value,
                        previous=previous, delivered=delivered)

        if self.policy.should_cache_action(action, delivered):
            self.actions.set_last_action(asset.id, action.value)
        return delivered
