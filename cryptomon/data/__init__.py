"""
Data models, provider payload parsing and price history reconstruction.
"""
