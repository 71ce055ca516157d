"""Guarded numeric core and formula catalog for personal-finance calculators."""

__version__ = "0.1.0"
