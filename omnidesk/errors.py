"""Error hierarchy for OmniDesk.

Every failure surfaced to a caller is an ``OmnideskError`` carrying a
human-readable message and a stable code.
"""

from typing import Any, Dict, Optional


class OmnideskError(Exception):
    """Base error for all OmniDesk failures."""

    code = "OMNIDESK_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a dictionary for structured output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(OmnideskError):
    """The home or data directory cannot be resolved."""

    code = "NOT_FOUND"


class CorruptStateError(OmnideskError):
    """A persisted file exists but does not match its expected schema."""

    code = "CORRUPT_STATE"

    def __init__(self, path: Any, diagnostic: str):
        self.path = str(path)
        self.diagnostic = diagnostic
        super().__init__(
            f"Corrupt state in {self.path}: {diagnostic}",
            details={"path": self.path, "diagnostic": diagnostic},
        )


class IoFailureError(OmnideskError):
    """A filesystem operation failed."""

    code = "IO_FAILURE"

    def __init__(self, action: str, path: Any, error: OSError):
        self.path = str(path)
        super().__init__(
            f"Failed to {action} {self.path}: {error.strerror or error}",
            details={"path": self.path, "errno": error.errno},
        )


class ExternalCallError(OmnideskError):
    """The market-data endpoint failed or returned an undecodable response."""

    code = "EXTERNAL_CALL_FAILURE"


class ProcessControlError(OmnideskError):
    """Starting, stopping or signalling the companion daemon failed."""

    code = "PROCESS_CONTROL_FAILURE"


class InvalidRequestError(OmnideskError):
    """An operation was invoked with invalid arguments."""

    code = "INVALID_REQUEST"
