"""Shared HTTP client infrastructure."""

from folioshare.api.base_client import BaseAPIClient

__all__ = ["BaseAPIClient"]
