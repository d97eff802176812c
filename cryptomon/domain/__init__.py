"""
Domain rules that need no I/O: wallet address classification.
"""
from .classifier import detect_chain

__all__ = ["detect_chain"]
