"""
Scanner App - Options Trade Setup Analytics

Computation layer for an options/technical-analysis research dashboard.
Turns price history and options-chain snapshots into technical indicators,
market aggregates, classified trade setups and risk calculations.
"""

__version__ = "0.1.0"
__author__ = "Scanner Team"
