"""
DevFlow Backend — Action Guard
================================

What:  The validate-then-authorize gate every action passes through, and the
       error normalizer that turns any failure into a failure envelope.
Why:   One choke point means no action repeats validation or session checks,
       and no exception ever escapes an action to its caller.
How:   `action()` is a pure function: raw params + schema + explicit session
       in, `ActionContext` out (or ValidationError / UnauthorizedError).
       `server_action` wraps a service method with `action()`, runs it, and
       converts the outcome with `handle_error()`.
Who:   Every service method that is exposed as an action.

Flow:
    caller ──▶ action(params, schema, authorize, session)
                 ├─ schema mismatch    → ValidationError(field map)
                 ├─ authorize, no user → UnauthorizedError
                 └─ ok                 → ActionContext(params, session)
           ──▶ handler(ctx)            → data
           ──▶ ActionResponse(success=True, data) | handle_error(exc)
"""

import functools
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Type, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from devflow.exceptions import (
    DatabaseError,
    DevFlowError,
    ErrorKind,
    UnauthorizedError,
    ValidationError,
)
from devflow.schemas.common import ActionError, ActionResponse

logger = logging.getLogger(__name__)

Params = Union[Mapping[str, Any], BaseModel, None]

UNIQUE_VIOLATION = "23505"


class AuthSession(BaseModel):
    """The caller's resolved identity. Absent (None) for anonymous callers."""
    user_id: uuid.UUID
    name: Optional[str] = None
    image: Optional[str] = None


@dataclass
class ActionContext:
    """Validated params plus the session they were submitted under."""
    params: Any
    session: Optional[AuthSession] = None

    @property
    def user_id(self) -> Optional[uuid.UUID]:
        return self.session.user_id if self.session else None


def field_errors(exc: PydanticValidationError) -> Dict[str, List[str]]:
    """Flatten pydantic errors into {"field": ["message", ...]}."""
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "params"
        if err["type"] == "value_error" and "error" in err.get("ctx", {}):
            # strip pydantic's "Value error, " prefix from validator messages
            message = str(err["ctx"]["error"])
        else:
            message = err["msg"]
        errors.setdefault(field, []).append(message)
    return errors


def action(
    params: Params,
    schema: Optional[Type[BaseModel]] = None,
    authorize: bool = False,
    session: Optional[AuthSession] = None,
) -> ActionContext:
    """
    Validate params against `schema` and enforce the session requirement.

    Args:
        params:    Untyped input record (dict) or an already-built schema instance
        schema:    Pydantic model describing the required shape; None skips
                   validation for actions without input
        authorize: When True a missing session is an error, never "anonymous"
        session:   The caller's session, resolved by whoever called the action

    Raises:
        ValidationError:   params do not match the schema (field-keyed map)
        UnauthorizedError: authorize=True and no session
    """
    parsed: Any = params
    if schema is not None:
        try:
            parsed = schema.model_validate(params if params is not None else {})
        except PydanticValidationError as e:
            raise ValidationError(field_errors(e)) from e

    if authorize and session is None:
        raise UnauthorizedError()

    return ActionContext(params=parsed, session=session)


def is_unique_violation(exc: IntegrityError) -> bool:
    """
    True when the driver reports a unique-key violation.

    asyncpg exposes the SQLSTATE on the wrapped error; sqlite3 only says so
    in its message.
    """
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code == UNIQUE_VIOLATION
    return "UNIQUE constraint failed" in str(orig)


def handle_error(exc: BaseException) -> ActionResponse:
    """
    Convert any exception into a failure envelope.

    DevFlowError subclasses carry their own kind and status. A unique-key
    IntegrityError is a conflict; other integrity failures (foreign key,
    NOT NULL) and storage errors become DatabaseError. Anything else is
    logged with its traceback and reported as a generic internal error.
    """
    if isinstance(exc, DevFlowError):
        if exc.status_code >= 500:
            logger.error("%s: %s | Context: %s", type(exc).__name__, exc.message, exc.context)
        else:
            logger.warning("%s: %s", type(exc).__name__, exc.message)
        details = exc.field_errors if isinstance(exc, ValidationError) else None
        error = ActionError(kind=exc.kind, message=exc.message, details=details or None)
        return ActionResponse(success=False, error=error, status=exc.status_code)

    if isinstance(exc, IntegrityError) and is_unique_violation(exc):
        logger.warning("Unique constraint violated: %s", exc.orig)
        error = ActionError(
            kind=ErrorKind.CONFLICT,
            message="A record with the same unique key already exists",
        )
        return ActionResponse(success=False, error=error, status=409)

    if isinstance(exc, SQLAlchemyError):
        return handle_error(DatabaseError(context={"original_error": repr(exc)}))

    logger.error("Unexpected error in action: %s", exc, exc_info=exc)
    error = ActionError(
        kind=ErrorKind.INTERNAL,
        message="An unexpected error occurred. Please try again later.",
    )
    return ActionResponse(success=False, error=error, status=500)


def server_action(
    schema: Optional[Type[BaseModel]] = None,
    *,
    authorize: bool = False,
    status: int = 200,
) -> Callable:
    """
    Decorator turning a service method `handler(self, ctx)` into an action.

    The wrapped method is called as `method(params=None, session=None)` and
    always returns an ActionResponse; `status` is the success status (201
    for creations).

    Usage:
        class QuestionService:
            @server_action(AskQuestionParams, authorize=True, status=201)
            async def create_question(self, ctx: ActionContext) -> QuestionOut:
                ...

        result = await question_service.create_question(body, session=session)
    """

    def decorator(handler: Callable[[Any, ActionContext], Awaitable[Any]]) -> Callable:
        @functools.wraps(handler)
        async def wrapper(
            self,
            params: Params = None,
            session: Optional[AuthSession] = None,
        ) -> ActionResponse:
            try:
                ctx = action(params, schema, authorize=authorize, session=session)
                data = await handler(self, ctx)
            except Exception as exc:
                return handle_error(exc)
            return ActionResponse(success=True, data=data, status=status)

        return wrapper

    return decorator
