"""
Error taxonomy for the data-access layer.

Every domain error carries an HTTP-like status code so outer surfaces
(the CLI, or any web layer built on top) can translate it without
inspecting the message.
"""

from typing import List, Optional


class JoblyError(Exception):
    """Base class for domain errors."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(JoblyError):
    """Client supplied data that cannot be used (empty update, bad bounds, bad fields)."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class NotFoundError(JoblyError):
    """Target row does not exist."""

    status_code = 404


class DuplicateError(JoblyError):
    """Uniqueness violation on create."""

    status_code = 400
