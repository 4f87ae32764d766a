"""Unit tests for the validation error translation and the store-failure handler."""

import json

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from todo_service.api.v1.error_handlers import (
    INVALID_CONTENT_DETAIL,
    TYPE_MISMATCH_DETAIL,
    UNREADABLE_MESSAGE_DETAIL,
    register_exception_handlers,
    translate_validation_errors,
)
from todo_service.exceptions.base import ConstraintViolationError, RepositoryError


def missing_title(**overrides) -> dict:
    error = {
        "type": "value_error",
        "loc": ("body", "title"),
        "msg": "Value error, The title of the task is mandatory",
        "ctx": {"error": ValueError("The title of the task is mandatory")},
    }
    error.update(overrides)
    return error


class TestTranslateValidationErrors:

    def test_field_violations_keep_binder_order(self):
        errors = [
            missing_title(),
            {"type": "string_too_long", "loc": ("body", "description"), "msg": "String should have at most 10 characters"},
        ]

        problem = translate_validation_errors(errors, entity="taskDTO", instance="/tasks")

        assert problem.status == 400
        assert problem.title == "Bad Request"
        assert problem.instance == "/tasks"
        assert [(p.entity, p.field, p.message) for p in problem.errors] == [
            ("taskDTO", "title", "The title of the task is mandatory"),
            ("taskDTO", "description", "String should have at most 10 characters"),
        ]
        assert "with 2 error(s)" in problem.detail
        assert "on field 'title': The title of the task is mandatory" in problem.detail

    def test_nested_field_names_are_dotted(self):
        problem = translate_validation_errors(
            [{"type": "missing", "loc": ("body", "owner", "name"), "msg": "Field required"}],
            entity="taskDTO",
            instance=None,
        )
        assert problem.errors[0].field == "owner.name"
        assert problem.errors[0].message == "Field required"

    def test_path_parameter_error_is_type_mismatch(self):
        errors = [
            {"type": "uuid_parsing", "loc": ("path", "task_id"), "msg": "Input should be a valid UUID"},
            missing_title(),
        ]
        problem = translate_validation_errors(errors, entity="taskDTO", instance="/tasks/x")

        assert problem.detail == TYPE_MISMATCH_DETAIL
        assert problem.errors is None

    def test_invalid_json_wins(self):
        errors = [
            {"type": "json_invalid", "loc": ("body", 11), "msg": "JSON decode error"},
            {"type": "uuid_parsing", "loc": ("path", "task_id"), "msg": "Input should be a valid UUID"},
        ]
        problem = translate_validation_errors(errors, entity="taskDTO", instance="/tasks")
        assert problem.detail == UNREADABLE_MESSAGE_DETAIL

    def test_missing_body(self):
        problem = translate_validation_errors(
            [{"type": "missing", "loc": ("body",), "msg": "Field required"}],
            entity="taskDTO",
            instance="/tasks",
        )
        assert problem.detail == INVALID_CONTENT_DETAIL
        assert problem.errors is None

    def test_undecodable_value_is_unreadable(self):
        errors = [
            missing_title(),
            {"type": "datetime_from_date_parsing", "loc": ("body", "startDateTime"), "msg": "Input should be a valid datetime"},
        ]
        problem = translate_validation_errors(errors, entity="taskDTO", instance="/tasks")
        assert problem.detail == UNREADABLE_MESSAGE_DETAIL
        assert problem.errors is None

    def test_value_error_without_context_uses_msg(self):
        problem = translate_validation_errors(
            [missing_title(ctx=None)], entity="taskDTO", instance="/tasks"
        )
        assert problem.errors[0].message == "Value error, The title of the task is mandatory"


@pytest.mark.asyncio
class TestRepositoryErrorHandler:

    @pytest.fixture
    def failing_app(self) -> FastAPI:
        app = FastAPI()
        register_exception_handlers(app)

        @app.get("/conflict")
        async def conflict():
            raise ConstraintViolationError("Task violates a constraint on field(s): title", fields=["title"])

        @app.get("/down")
        async def down():
            raise RepositoryError("Failed to operate on Task")

        return app

    async def test_constraint_violation_is_409(self, failing_app):
        async with AsyncClient(transport=ASGITransport(app=failing_app), base_url="http://test") as ac:
            response = await ac.get("/conflict")

        assert response.status_code == 409
        assert json.loads(response.content) == {
            "type": "about:blank",
            "title": "Conflict",
            "status": 409,
            "detail": "Task violates a constraint on field(s): title",
            "instance": "/conflict",
            "code": "constraint_violation",
            "fields": ["title"],
        }

    async def test_store_failure_is_500(self, failing_app):
        async with AsyncClient(transport=ASGITransport(app=failing_app), base_url="http://test") as ac:
            response = await ac.get("/down")

        assert response.status_code == 500
        body = response.json()
        assert body["title"] == "Internal Server Error"
        assert body["detail"] == "Failed to operate on Task"
