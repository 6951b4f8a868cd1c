"""Derived output records produced by the computation layer."""
