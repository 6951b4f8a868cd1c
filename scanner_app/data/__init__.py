"""
Data ingestion module.

Input records for price history and options chains, parsers from the
dict/JSON shapes handed over by the data layer, and ingestion validators.
"""
