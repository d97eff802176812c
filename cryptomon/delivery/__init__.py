"""Notification delivery for BUY/SELL signal alerts."""
