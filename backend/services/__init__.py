from .errors import NotFoundError, RelayError, UpstreamError, ValidationError, VerificationFailure
from .store import InMemorySessionStore, SessionStore, get_session_store, sessions

__all__ = [
    "sessions",
    "get_session_store",
    "InMemorySessionStore",
    "SessionStore",
    "RelayError",
    "ValidationError",
    "NotFoundError",
    "UpstreamError",
    "VerificationFailure",
]
