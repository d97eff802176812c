"""SQLite-backed wallet addresses and last notified actions."""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import fields
from pathlib import Path
from typing import Optional, Protocol

from ..data.models import Chain, WalletAddressSet
from ..utils.time import format_timestamp, utc_now


class WalletAddressProvider(Protocol):
    """Source of the user's saved wallet addresses."""

    def get_wallet_addresses(self) -> WalletAddressSet:
        ...

    def save_wallet_addresses(self, addresses: WalletAddressSet) -> WalletAddressSet:
        ...


class PrefsStore:
    """
    Key-value preference store.

    Wallet addresses are stored one row per chain under `wallet.<chain>`;
    last notified actions under `last_action.<asset id>`.
    """

    WALLET_PREFIX = "wallet."
    ACTION_PREFIX = "last_action."

    def __init__(self, db_path: str = "cryptomon.db"):
        self.db_path = Path(db_path)
        self.logger = logging.getLogger("prefs.store")
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS prefs (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    @contextmanager
    def _get_connection(self):
        """Get database connection, rolling back on error."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error(f"Database error: {str(e)}")
            raise
        finally:
            if conn:
                conn.close()

    def _get(self, key: str) -> Optional[str]:
        with self._get_connection() as conn:
            row = conn.execute("SELECT value FROM prefs WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def _set_many(self, items: dict[str, str]) -> None:
        now = format_timestamp(utc_now())
        with self._lock:
            with self._get_connection() as conn:
                conn.executemany(
                    """
                    INSERT INTO prefs (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                                   updated_at = excluded.updated_at
                    """,
                    [(key, value, now) for key, value in items.items()],
                )
                conn.commit()

    def get_wallet_addresses(self) -> WalletAddressSet:
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT key, value FROM prefs WHERE key LIKE ?", (f"{self.WALLET_PREFIX}%",)
            ).fetchall()

        slots = {f.name for f in fields(WalletAddressSet)}
        stored = {row["key"][len(self.WALLET_PREFIX):]: row["value"] for row in rows}
        return WalletAddressSet(**{name: value for name, value in stored.items() if name in slots})

    def save_wallet_addresses(self, addresses: WalletAddressSet) -> WalletAddressSet:
        """Persist all six slots, trimmed. Returns what was stored."""
        normalized = addresses.normalized()
        self._set_many({
            f"{self.WALLET_PREFIX}{chain.value}": getattr(normalized, chain.value)
            for chain in Chain
        })
        self.logger.info(f"Saved wallet addresses for {len(normalized.present_chains())} chains")
        return normalized

    def get_last_action(self, asset_id: str) -> Optional[str]:
        return self._get(f"{self.ACTION_PREFIX}{asset_id}")

    def set_last_action(self, asset_id: str, action: str) -> None:
        self._set_many({f"{self.ACTION_PREFIX}{asset_id}": action})
