"""Local preference storage."""

from .prefs_store import PrefsStore, WalletAddressProvider

__all__ = ["PrefsStore", "WalletAddressProvider"]
