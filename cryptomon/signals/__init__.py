"""
Signal engine: converts a price history into indicator signals and a vote.
"""
from .engine import SignalEngine

__all__ = ["SignalEngine"]
