"""
Crypto Monitor - Wallet Asset Tracking and Signal Engine

Resolves the assets behind a set of wallet addresses, collects prices and
on-chain balances from several public networks, and classifies each asset
as BUY, SELL or HOLD using a multi-indicator technical analysis vote.
"""

__version__ = "0.1.0"
__author__ = "Crypto Monitor Team"
