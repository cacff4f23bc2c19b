"""
DevFlow Backend — Action Guard Unit Tests
===========================================

What we test:
    ✅ Valid params are coerced into the schema type
    ✅ Schema mismatch → ValidationError with a field-keyed message map
    ✅ authorize=True without a session → UnauthorizedError
    ✅ Page size default and cap come from settings
    ✅ handle_error maps every error kind to its status
    ✅ Only unique-key integrity errors are conflicts
    ✅ server_action never lets an exception escape
"""

import uuid

import pytest
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import IntegrityError, OperationalError

from devflow.config import settings
from devflow.exceptions import (
    ConflictError,
    ErrorKind,
    ForbiddenError,
    NotFoundError,
    RequestError,
    UnauthorizedError,
    ValidationError,
)
from devflow.schemas.common import PaginatedSearchParams
from devflow.schemas.question import AskQuestionParams
from devflow.services.guard import AuthSession, action, handle_error, server_action


class _Params(BaseModel):
    name: str = Field(min_length=3)
    count: int = 1

    @field_validator("name")
    @classmethod
    def no_spaces(cls, v: str) -> str:
        if " " in v:
            raise ValueError("Name cannot contain spaces.")
        return v


SESSION = AuthSession(user_id=uuid.uuid4(), name="Ada")


class TestAction:
    def test_returns_coerced_params_and_session(self):
        ctx = action({"name": "abc", "count": "4"}, _Params, session=SESSION)

        assert isinstance(ctx.params, _Params)
        assert ctx.params.count == 4
        assert ctx.user_id == SESSION.user_id

    def test_anonymous_allowed_without_authorize(self):
        ctx = action({"name": "abc"}, _Params)
        assert ctx.session is None
        assert ctx.user_id is None

    def test_validation_error_has_field_map(self):
        with pytest.raises(ValidationError) as exc_info:
            action({"name": "ab", "count": "many"}, _Params)

        errors = exc_info.value.field_errors
        assert set(errors) == {"name", "count"}
        assert all(isinstance(messages, list) and messages for messages in errors.values())

    def test_validator_message_is_unprefixed(self):
        with pytest.raises(ValidationError) as exc_info:
            action({"name": "a b c"}, _Params)
        assert exc_info.value.field_errors == {"name": ["Name cannot contain spaces."]}

    def test_missing_params_is_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            action(None, _Params)
        assert "name" in exc_info.value.field_errors

    def test_authorize_without_session_raises(self):
        with pytest.raises(UnauthorizedError):
            action({"name": "abc"}, _Params, authorize=True, session=None)

    def test_question_tags_deduplicated_case_insensitively(self):
        ctx = action(
            {"title": "Hello world", "content": "Body", "tags": ["React", "react", "Next"]},
            AskQuestionParams,
        )
        assert ctx.params.tags == ["React", "Next"]

    def test_too_many_tags_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            action(
                {"title": "Hello world", "content": "Body", "tags": ["a", "b", "c", "d"]},
                AskQuestionParams,
            )
        assert "tags" in exc_info.value.field_errors

    def test_page_size_defaults_from_settings(self):
        ctx = action({}, PaginatedSearchParams)
        assert ctx.params.page_size == settings.default_page_size
        assert ctx.params.skip == 0

    def test_page_size_capped_by_settings(self):
        with pytest.raises(ValidationError) as exc_info:
            action({"page_size": settings.max_page_size + 1}, PaginatedSearchParams)
        assert "page_size" in exc_info.value.field_errors


class TestHandleError:
    @pytest.mark.parametrize(
        "exc, kind, status",
        [
            (ValidationError({"title": ["Required"]}), ErrorKind.VALIDATION, 400),
            (UnauthorizedError(), ErrorKind.UNAUTHORIZED, 401),
            (ForbiddenError(), ErrorKind.FORBIDDEN, 403),
            (NotFoundError("Question"), ErrorKind.NOT_FOUND, 404),
            (ConflictError(), ErrorKind.CONFLICT, 409),
            (RequestError(502, "HTTP error! status: 502"), ErrorKind.REQUEST, 502),
            (RuntimeError("boom"), ErrorKind.INTERNAL, 500),
        ],
    )
    def test_kind_and_status(self, exc, kind, status):
        result = handle_error(exc)

        assert result.success is False
        assert result.error.kind == kind
        assert result.status == status

    def test_validation_details_only_for_validation(self):
        assert handle_error(ValidationError({"title": ["Required"]})).error.details == {
            "title": ["Required"]
        }
        assert handle_error(NotFoundError("Question")).error.details is None

    def test_integrity_error_is_conflict(self):
        exc = IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed"))
        result = handle_error(exc)
        assert result.error.kind == ErrorKind.CONFLICT
        assert result.status == 409

    def test_foreign_key_violation_is_not_a_conflict(self):
        exc = IntegrityError("INSERT ...", {}, Exception("FOREIGN KEY constraint failed"))
        result = handle_error(exc)
        assert result.error.kind == ErrorKind.INTERNAL
        assert result.status == 500
        assert "FOREIGN KEY" not in result.error.message

    @pytest.mark.parametrize(
        "sqlstate, kind, status",
        [
            ("23505", ErrorKind.CONFLICT, 409),  # unique_violation
            ("23503", ErrorKind.INTERNAL, 500),  # foreign_key_violation
            ("23502", ErrorKind.INTERNAL, 500),  # not_null_violation
        ],
    )
    def test_integrity_error_classified_by_sqlstate(self, sqlstate, kind, status):
        class DriverError(Exception):
            pass

        orig = DriverError("constraint violated")
        orig.sqlstate = sqlstate
        result = handle_error(IntegrityError("INSERT ...", {}, orig))
        assert result.error.kind == kind
        assert result.status == status

    def test_other_database_error_is_generic_internal(self):
        result = handle_error(OperationalError("SELECT 1", {}, Exception("connection refused")))
        assert result.error.kind == ErrorKind.INTERNAL
        assert result.status == 500
        assert "connection refused" not in result.error.message

    def test_unexpected_error_message_is_generic(self):
        result = handle_error(RuntimeError("password=hunter2"))
        assert "hunter2" not in result.error.message

    def test_status_not_serialized(self):
        dumped = handle_error(ForbiddenError()).model_dump()
        assert "status" not in dumped


class _Service:
    @server_action(_Params, authorize=True, status=201)
    async def make(self, ctx):
        return {"name": ctx.params.name, "by": str(ctx.user_id)}

    @server_action(_Params)
    async def explode(self, ctx):
        raise KeyError("missing")


class TestServerAction:
    @pytest.mark.asyncio
    async def test_success_envelope(self):
        result = await _Service().make({"name": "abc"}, session=SESSION)

        assert result.success is True
        assert result.status == 201
        assert result.data == {"name": "abc", "by": str(SESSION.user_id)}

    @pytest.mark.asyncio
    async def test_unauthorized_envelope(self):
        result = await _Service().make({"name": "abc"})

        assert result.success is False
        assert result.error.kind == ErrorKind.UNAUTHORIZED
        assert result.status == 401

    @pytest.mark.asyncio
    async def test_handler_exception_becomes_envelope(self):
        result = await _Service().explode({"name": "abc"})

        assert result.success is False
        assert result.error.kind == ErrorKind.INTERNAL
