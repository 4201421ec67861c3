"""Error taxonomy shared by the relay services. Each error knows its HTTP status."""

from __future__ import annotations


class RelayError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationError(RelayError):
    """Missing or malformed client input."""

    status_code = 400
    code = "invalid_request"


class NotFoundError(RelayError):
    """Unknown (or expired) session token."""

    status_code = 404
    code = "session_not_found"


class UpstreamError(RelayError):
    """An external service was unreachable or answered with a failure."""

    status_code = 500
    code = "upstream_unavailable"


class VerificationFailure(RelayError):
    """A payment notification was rejected by the verifier or names no known session."""

    status_code = 400
    code = "verification_failed"
