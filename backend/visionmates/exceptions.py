from __future__ import annotations

from fastapi import status


class VisionMatesError(RuntimeError):
    """Base error for domain operations.

    Every subclass maps to one HTTP status code; the API layer renders the
    message (and optional machine-readable ``code``) as the response body.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class UnauthorizedError(VisionMatesError):
    """Raised when no valid caller identity is available."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(VisionMatesError):
    """Raised when the caller is authenticated but not entitled."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(VisionMatesError):
    """Raised when a referenced row does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class InvalidArgumentError(VisionMatesError):
    """Raised for malformed enum values, bad content or self-targeting."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(VisionMatesError):
    """Raised when a strict insert hits an existing unique row."""

    status_code = status.HTTP_409_CONFLICT


class ProjectNotFoundError(NotFoundError):
    """Raised when a project identifier cannot be resolved."""

    def __init__(self, project_id: str):
        super().__init__("Project not found")
        self.project_id = project_id
