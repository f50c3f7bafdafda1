"""
Pi-hole Errors — Failure taxonomy for one refresh cycle.

Every error aborts the cycle; widgets reset their data and re-raise.
"""

from __future__ import annotations


class PiholeError(Exception):
    """Base class for appliance failures."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(f"{message}: {path}" if path else message)


class AuthError(PiholeError):
    """Session establishment failed."""


class FetchError(PiholeError):
    """HTTP-level failure on a specific endpoint."""


class ValidationError(PiholeError):
    """Response was well-formed JSON but missed required fields."""
