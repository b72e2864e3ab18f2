"""Mission Control exceptions.

The manager raises these; the API layer maps them to HTTP status codes
(see squadboard.api.serve.register_exception_handlers).
"""

from typing import Any


class MissionControlError(Exception):
    """Base exception for Mission Control errors."""

    code = "mission_control_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to the API error envelope."""
        return {"detail": self.message, "code": self.code}


class NotFoundError(MissionControlError):
    """Raised when a task, comment, agent or blob does not exist."""

    code = "not_found"

    def __init__(self, entity: str, key: str):
        super().__init__(f"{entity.capitalize()} {key} not found", {"entity": entity, "key": key})
        self.entity = entity
        self.key = key


class InvalidSignatureError(MissionControlError):
    """Raised when a signed storage URL is forged or expired."""

    code = "invalid_signature"
