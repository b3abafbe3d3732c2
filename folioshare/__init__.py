"""Folioshare: transient, link-shareable investment portfolios."""

__version__ = "1.0.0"
