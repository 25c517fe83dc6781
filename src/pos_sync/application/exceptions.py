from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ConflictError(AppError):
    """Operation refused in the entry's current state."""


class SyncError(AppError):
    """Failure talking to the remote gateway or the local store."""


class NetworkError(SyncError):
    """Transient: timeouts, connection errors, 5xx. Retried with backoff."""


class AuthError(SyncError):
    """Credentials rejected. Retrying cannot succeed until re-authentication."""


class ValidationError(SyncError):
    """Server rejected the payload as malformed."""


class StorageError(SyncError):
    """Local persistence failure. Aborts the current pass."""


def describe_error(exc: BaseException, limit: int = 200) -> str:
    """Short diagnostic for ``last_error`` columns and logs."""
    detail = exc.detail if isinstance(exc, AppError) else str(exc)
    text = f"{exc.__class__.__name__}: {detail}" if detail else exc.__class__.__name__
    return text[:limit]
