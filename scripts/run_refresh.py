#!/usr/bin/env python3
"""Run one refresh cycle (or one signal check) from the command line.

Usage:
    python scripts/run_refresh.py bc1q... 0x742d...
    python scripts/run_refresh.py --base 0x742d... --check
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cryptomon.alerts import SignalCheck, SignalCheckResult
from cryptomon.config.loader import ConfigLoader
from cryptomon.data.models import Chain, WalletAddressSet
from cryptomon.delivery.stdout_delivery import StdoutNotifier
from cryptomon.domain import detect_chain
from cryptomon.engine import RefreshCoordinator, create_pipeline
from cryptomon.errors import ConfigurationError
from cryptomon.logging import configure_logging
from cryptomon.persistence import PrefsStore
from cryptomon.remote.http import create_http_client


def build_addresses(raw_addresses: list[str], base_addresses: list[str]) -> WalletAddressSet:
    addresses = WalletAddressSet()
    for raw in raw_addresses:
        chain = detect_chain(raw)
        if chain is None:
            print(f"⚠️  Unrecognized address, skipping: {raw}")
            continue
        addresses = addresses.with_address(chain, raw.strip())
    for raw in base_addresses:
        addresses = addresses.with_address(Chain.BASE, raw.strip())
    return addresses


def print_analyses(state) -> None:
    if state.error:
        print(f"❌ Refresh failed: {state.error}")
    for analysis in state.analyses:
        balance = f"{analysis.balance.amount:.6f}" if analysis.balance.is_known else "unknown"
        value = f"${analysis.value_usd:,.2f}" if analysis.value_usd is not None else "-"
        print(
            f"{analysis.asset.symbol:>6}  ${analysis.current_price_usd:>12,.4f}  "
            f"{balance:>16}  {value:>14}  {analysis.final_action.value}"
        )


async def run(args: argparse.Namespace) -> int:
    config = ConfigLoader.create(args.config_dir).build_config()
    addresses = build_addresses(args.addresses, args.base)

    async with create_http_client(config.http) as http_client:
        pipeline = create_pipeline(config, http_client=http_client)

        if args.check:
            prefs = PrefsStore(args.db)
            if addresses.present_chains():
                prefs.save_wallet_addresses(addresses)
            check = SignalCheck(pipeline, prefs, prefs, StdoutNotifier(format=args.output))
            result = await check.run()
            print(f"Signal check: {result.value}")
            return 0 if result == SignalCheckResult.SUCCESS else 1

        if not addresses.present_chains():
            print("❌ No recognized wallet addresses given")
            return 1

        coordinator = RefreshCoordinator(pipeline)
        state = await coordinator.refresh(addresses)
        print_analyses(state)
        return 1 if state.error else 0


def main():
    parser = argparse.ArgumentParser(description="Analyse wallet assets with a multi-indicator vote")
    parser.add_argument("addresses", nargs="*", help="Wallet addresses, chain detected from format")
    parser.add_argument("--base", action="append", default=[], help="EVM address to track on Base")
    parser.add_argument("--check", action="store_true", help="Run the background signal check once")
    parser.add_argument("--db", default="cryptomon.db", help="Preferences database for --check")
    parser.add_argument("--output", choices=["pretty", "json"], default="pretty")
    parser.add_argument("--config-dir", type=Path, default=None)
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("--log-json", action="store_true")
    args = parser.parse_args()

    configure_logging(level=args.log_level, format_json=args.log_json)

    try:
        sys.exit(asyncio.run(run(args)))
    except ConfigurationError as e:
        print(f"❌ {e}")
        for error in e.errors:
            print(f"  • {error}")
        sys.exit(2)


if __name__ == "__main__":
    main()
