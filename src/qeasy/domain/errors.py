"""Error taxonomy shared by the marketplace adapters and the orchestrator."""

from __future__ import annotations

from enum import StrEnum


class FailureKind(StrEnum):
    INVALID_ASIN = "INVALID_ASIN"
    CREDENTIALS_MISSING = "CREDENTIALS_MISSING"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"
    PUBLISH_FAILED = "PUBLISH_FAILED"


class ReconciliationError(RuntimeError):
    """Base class for failures talking to either marketplace."""

    kind: FailureKind = FailureKind.TRANSPORT_FAILURE

    def __init__(self, message: str, *, code: int | str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class CredentialsMissingError(ReconciliationError):
    """Raised when required account secrets are not configured."""

    kind = FailureKind.CREDENTIALS_MISSING


class AuthenticationFailedError(ReconciliationError):
    """Raised when the destination marketplace rejects the account credentials."""

    kind = FailureKind.AUTHENTICATION_FAILED


class TransportFailureError(ReconciliationError):
    """Raised on network or HTTP-level failures."""

    kind = FailureKind.TRANSPORT_FAILURE


class PublishFailedError(ReconciliationError):
    """Raised when the destination marketplace refuses to create a listing."""

    kind = FailureKind.PUBLISH_FAILED
