"""Custom exception hierarchy for tempbridge."""

from __future__ import annotations


class BridgeError(Exception):
    """Base exception for all tempbridge errors."""


class BridgeConfigError(BridgeError):
    """Invalid or missing configuration."""


class BridgeTransportError(BridgeError):
    """HTTP-level failure (network error, unreadable response)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class SourceError(BridgeError):
    """The sensor cloud could not be reached or rejected a request.

    Fatal to the run; raised before any decision is made, so the stored
    watermark is never touched.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class SourceAuthenticationError(SourceError):
    """Login failed or the access token was rejected."""


class ExtractionError(BridgeError):
    """The status payload held no usable numeric temperature."""


class DeliveryError(BridgeError):
    """The ingestion endpoint rejected the reading or was unreachable.

    The stored watermark is left unchanged so the same value is reported
    again on the next scheduled run.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        detail: str = "",
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.endpoint = endpoint
        super().__init__(message)


class PersistenceError(BridgeError):
    """The last-reported value could not be written after a confirmed delivery."""

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)
