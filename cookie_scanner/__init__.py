"""Scan websites for cookies set only after consent is given."""

__version__ = "0.1.0"
