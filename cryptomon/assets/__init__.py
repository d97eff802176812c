"""
Asset resolution: wallet addresses to a deduplicated list of tracked assets.
"""
from .resolver import AssetResolver

__all__ = ["AssetResolver"]
