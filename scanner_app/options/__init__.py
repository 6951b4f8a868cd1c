"""
Options chain module.

Synthetic Greeks approximations, a synthetic chain generator used when no
market-data feed is available, and chain aggregates (PCR, max pain, GEX).
"""
