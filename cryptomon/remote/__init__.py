"""
HTTP clients for the market-data provider and the chain data sources.
"""
