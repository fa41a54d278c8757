"""Error taxonomy for the bridge service.

Each error carries the HTTP status the request handlers surface it with.
A matcher finding no board item is not an error; it returns ``None``.
"""

from __future__ import annotations


class BridgeError(Exception):
    """Base class for failures surfaced to the caller."""

    status_code: int = 500


class ValidationError(BridgeError):
    """Missing or invalid request input."""

    status_code = 400


class NotFoundError(BridgeError):
    """The remote system has no record for the requested identifier.

    Surfaced as a pipeline failure like any other upstream error.
    """


class UpstreamQueryError(BridgeError):
    """A remote API answered with an application-level error payload."""


class NetworkError(BridgeError):
    """Transport-level failure talking to a remote system."""


class ConfigurationError(BridgeError):
    """Required configuration is missing."""


__all__ = [
    "BridgeError",
    "ValidationError",
    "NotFoundError",
    "UpstreamQueryError",
    "NetworkError",
    "ConfigurationError",
]
