"""Tests for wallet address classification"""

import pytest

from cryptomon.data.models import Chain
from cryptomon.domain import detect_chain
from cryptomon.domain.classifier import ADDRESS_PATTERNS


class TestDetectChain:
    """Test format-based chain detection"""

    @pytest.mark.parametrize("address,expected", [
        ("0x742d35Cc6634C0532925a3b844Bc454e4438f44e", Chain.ETHEREUM),
        ("bc1qar0srrr7xfkvy5l643lydnw9re59gtzzwf5mdq", Chain.BITCOIN),
        ("1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa", Chain.BITCOIN),
        ("3J98t1WpEZ73CNmQviecrnyiWrnqRhWNLy", Chain.BITCOIN),
        ("DH5yaieqoZN36fDVciNyRueRGvGLR3mr7L", Chain.DOGECOIN),
        ("So11111111111111111111111111111111111111112", Chain.SOLANA),
        ("addr1qx2fxv2umyhttkxyxp8x0dlpdt3k6cwng5pxj3jhsydzer3n0d3vllmyqwsx5wktcd8cc3sq835lu7drv2xwl2wywfgse35a3x",
         Chain.CARDANO),
    ])
    def test_known_formats(self, address, expected):
        assert detect_chain(address) == expected

    def test_unrecognized(self):
        assert detect_chain("not-a-real-wallet") is None

    @pytest.mark.parametrize("blank", [None, "", "   ", "\n\t"])
    def test_blank_input(self, blank):
        assert detect_chain(blank) is None

    def test_surrounding_whitespace_ignored(self):
        assert detect_chain("  0x742d35Cc6634C0532925a3b844Bc454e4438f44e\n") == Chain.ETHEREUM

    def test_requires_full_match(self):
        assert detect_chain("0x742d35Cc6634C0532925a3b844Bc454e4438f44e00") is None
        assert detect_chain("wallet 0x742d35Cc6634C0532925a3b844Bc454e4438f44e") is None

    def test_evm_address_classified_as_ethereum(self):
        """Base shares the EVM format and is never inferred"""
        assert detect_chain("0x" + "1" * 40) == Chain.ETHEREUM

    def test_legacy_bitcoin_preferred_over_solana(self):
        """Base58 overlap: the Bitcoin rule is evaluated first"""
        address = "1BvBMSEYstWetqTFn5Au4m4GFg7xJaNVN2"
        assert detect_chain(address) == Chain.BITCOIN

    def test_dogecoin_preferred_over_solana(self):
        assert detect_chain("DH5yaieqoZN36fDVciNyRueRGvGLR3mr7L") == Chain.DOGECOIN


def test_pattern_order():
    assert [chain for chain, _ in ADDRESS_PATTERNS] == [
        Chain.ETHEREUM, Chain.CARDANO, Chain.DOGECOIN, Chain.BITCOIN, Chain.SOLANA,
    ]
