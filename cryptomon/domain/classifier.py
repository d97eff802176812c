"""Wallet address classification by address format."""

import re
from typing import Optional

from ..data.models import Chain

# Evaluated in order, first full match wins. Several base58 formats overlap,
# so the order is part of the contract.
ADDRESS_PATTERNS: list[tuple[Chain, re.Pattern]] = [
    (Chain.ETHEREUM, re.compile(r"0x[a-fA-F0-9]{40}")),
    (Chain.CARDANO, re.compile(r"addr1[0-9a-z]{20,}")),
    (Chain.DOGECOIN, re.compile(r"D[5-9A-HJ-NP-U][1-9A-HJ-NP-Za-km-z]{32}")),
    (Chain.BITCOIN, re.compile(r"bc1[ac-hj-np-z02-9]{11,71}|[13][a-km-zA-HJ-NP-Z1-9]{25,34}")),
    (Chain.SOLANA, re.compile(r"[1-9A-HJ-NP-Za-km-z]{32,44}")),
]


def detect_chain(address: Optional[str]) -> Optional[Chain]:
    """
    Classify a wallet address by its format.

    Args:
        address: Raw address string, surrounding whitespace ignored

    Returns:
        Matching chain, or None for blank or unrecognized input
    """
    if address is None:
        return None
    normalized = address.strip()
    if not normalized:
        return None

    for chain, pattern in ADDRESS_PATTERNS:
        if pattern.fullmatch(normalized):
            return chain
    return None
