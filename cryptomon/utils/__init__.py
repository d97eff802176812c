"""
Utility functions module.

Time Semantics:
- Price points and analysis records carry timezone-aware UTC datetimes
- Cache freshness is measured on the monotonic clock so wall-clock jumps
  never extend or cut short a TTL
"""
