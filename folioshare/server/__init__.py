"""FastAPI server for creating, viewing and editing shared portfolios."""

from folioshare import __version__

__all__ = ["__version__"]
