"""Domain error taxonomy shared by the gateway, services and controllers."""

from __future__ import annotations

from typing import Dict, List, Optional


class HabitTrackerError(Exception):
    """Base error; carries the wire code and HTTP status used by the API layer."""

    code = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class ValidationError(HabitTrackerError):
    """Malformed or out-of-range input, with per-field messages."""

    code = "validation_error"
    status_code = 400

    def __init__(self, message: str = "Invalid request", details: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["details"] = self.details
        return body

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationError":
        """Collapse a pydantic ValidationError into field -> [messages]."""
        details: Dict[str, List[str]] = {}
        for err in exc.errors():
            loc = ".".join(str(part) for part in err.get("loc", ()) if part != "__root__")
            details.setdefault(loc or "_schema", []).append(err.get("msg", "invalid"))
        return cls("Invalid request", details)


class NotFoundError(HabitTrackerError):
    code = "not_found"
    status_code = 404


class StorageError(HabitTrackerError):
    """Persistence failure. The message is operation-specific; the driver error is chained."""

    code = "storage_error"
    status_code = 500


__all__ = ["HabitTrackerError", "NotFoundError", "StorageError", "ValidationError"]
