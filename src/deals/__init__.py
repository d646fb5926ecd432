"""Deals admin: in-memory catalog engine for a deals and flyers marketplace."""

__version__ = "1.0.0"
