"""
DevFlow Backend — Error Taxonomy
==================================

What:  Application-specific exceptions plus the `ErrorKind` tag they carry.
Why:   Actions never leak exceptions to callers; they turn them into a
       failure envelope. Giving every exception a fixed kind and HTTP status
       makes that conversion a lookup instead of message sniffing.
How:   Each subclass sets `kind` and `status_code` as class attributes.
       `devflow.services.guard.handle_error` reads them.
Who:   Raised by the Action Guard, services, the store, and the fetch handler.

Exception Hierarchy:
    DevFlowError (base)             → internal_error  500
    ├── ValidationError             → validation_error 400 (field map)
    ├── UnauthorizedError           → unauthorized     401
    ├── ForbiddenError              → forbidden        403
    ├── NotFoundError               → not_found        404
    ├── ConflictError               → conflict         409
    ├── RequestError                → request_error    upstream status
    └── DatabaseError               → internal_error   500
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """Closed set of failure categories reported in `ActionError.kind`."""

    VALIDATION = "validation_error"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    REQUEST = "request_error"
    INTERNAL = "internal_error"


class DevFlowError(Exception):
    """
    Base exception for all DevFlow application errors.

    Attributes:
        message:  User-facing error description (safe to return in responses)
        context:  Additional debug info (logged, never returned)
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(DevFlowError):
    """
    Raised when input does not match the declared schema.

    `field_errors` maps each offending field to its messages, e.g.
    {"title": ["Title must be at least 5 characters"]}. The message joins
    them for callers that only display one string.
    """

    kind = ErrorKind.VALIDATION
    status_code = 400

    def __init__(
        self,
        field_errors: Optional[Dict[str, List[str]]] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.field_errors = field_errors or {}
        super().__init__(
            message=message or self.format_field_errors(self.field_errors),
            context=context,
        )

    @staticmethod
    def format_field_errors(field_errors: Dict[str, List[str]]) -> str:
        if not field_errors:
            return "Validation failed"
        parts = []
        for field, messages in field_errors.items():
            parts.append(f"{field}: {' and '.join(messages)}")
        return ", ".join(parts)


class UnauthorizedError(DevFlowError):
    """No resolvable session, or credentials did not verify."""

    kind = ErrorKind.UNAUTHORIZED
    status_code = 401

    def __init__(
        self,
        message: str = "You must be logged in to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(DevFlowError):
    """Caller is known but may not act on this resource (e.g. not the author)."""

    kind = ErrorKind.FORBIDDEN
    status_code = 403

    def __init__(
        self,
        message: str = "You are not allowed to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(DevFlowError):
    """A referenced entity does not exist."""

    kind = ErrorKind.NOT_FOUND
    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(DevFlowError):
    """A create would duplicate a unique key (email, username, provider account)."""

    kind = ErrorKind.CONFLICT
    status_code = 409

    def __init__(
        self,
        message: str = "A record with the same unique key already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RequestError(DevFlowError):
    """
    An outbound HTTP call failed.

    Carries the upstream status so the envelope can report it unchanged.
    """

    kind = ErrorKind.REQUEST

    def __init__(
        self,
        status_code: int,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.status_code = status_code


class DatabaseError(DevFlowError):
    """
    A storage operation failed unexpectedly.

    The message returned to the client is always generic; details stay in
    the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
