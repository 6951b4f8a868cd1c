"""
Utility functions module.

Shared helpers for date handling, guarded arithmetic and result caching.

Numeric Semantics:
- Divisions by zero never raise; callers pick a documented sentinel
- NaN and Infinity never leave the computation layer
"""
