"""
FastAPI exception handlers that render every client-visible failure as a
problem body (`application/problem+json`):

    {
      "type": "about:blank",
      "title": "Bad Request",
      "status": 400,
      "detail": "...",
      "instance": "/tasks",
      "errors": [{"entity": "taskDTO", "field": "title", "message": "..."}]
    }

`errors` is only present for field-validation failures. Binding failures that
are not field rules (malformed JSON, a missing body, a path parameter of the
wrong type) keep a generic detail and no `errors` list. Framework HTTP errors
(404 for unknown routes, 405, 415) keep their own status and detail.

Business "not found" never reaches these handlers: the routes answer it with an
empty 404 themselves.
"""

import logging
from http import HTTPStatus
from typing import Any, Iterable, Mapping

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...exceptions.base import RepositoryError
from ...schemas.problem import PROBLEM_JSON_MEDIA_TYPE, InvalidRequestParameter, ProblemDetail

logger = logging.getLogger(__name__)

TYPE_MISMATCH_DETAIL = "Type mismatch."
INVALID_CONTENT_DETAIL = "Invalid request content"
UNREADABLE_MESSAGE_DETAIL = "Failed to read HTTP message"

# Pydantic error types that describe a broken rule on a well-formed value.
# Any other error on a body field means the value itself could not be decoded.
_FIELD_RULE_ERROR_TYPES = frozenset({
    "missing",
    "value_error",
    "assertion_error",
    "string_too_short",
    "string_too_long",
})
_PARAMETER_LOCATIONS = frozenset({"path", "query", "header", "cookie"})


# -----------------------
# Pure translation
# -----------------------

def _violation_message(error: Mapping[str, Any]) -> str:
    # custom validators surface as "Value error, <message>"; keep only <message>
    if error.get("type") == "value_error":
        ctx = error.get("ctx") or {}
        if ctx.get("error") is not None:
            return str(ctx["error"])
    return str(error.get("msg", ""))


def _field_name(loc: tuple) -> str:
    return ".".join(str(part) for part in loc[1:])


def build_problem(
    status: int,
    detail: str | None,
    instance: str | None,
    *,
    title: str | None = None,
    errors: list[InvalidRequestParameter] | None = None,
) -> ProblemDetail:
    """Build a problem body; the title defaults to the status reason phrase."""
    return ProblemDetail(
        title=title or HTTPStatus(status).phrase,
        status=status,
        detail=detail,
        instance=instance,
        errors=errors,
    )


def translate_validation_errors(
    errors: Iterable[Mapping[str, Any]],
    *,
    entity: str,
    instance: str | None,
) -> ProblemDetail:
    """
    Turn the error list of a RequestValidationError into a 400 problem.

    Precedence (first match wins):
      1. undecodable JSON                          -> "Failed to read HTTP message"
      2. path/query/header parameter errors        -> "Type mismatch."
      3. the body as a whole is missing or not an object -> "Invalid request content"
      4. a body field could not be decoded         -> "Failed to read HTTP message"
      5. otherwise: field rule violations, one InvalidRequestParameter each,
         in the order reported.
    """
    errors = list(errors)
    locs = [tuple(error.get("loc", ())) for error in errors]

    if any(error.get("type") == "json_invalid" for error in errors):
        return build_problem(400, UNREADABLE_MESSAGE_DETAIL, instance)

    if any(loc and loc[0] in _PARAMETER_LOCATIONS for loc in locs):
        return build_problem(400, TYPE_MISMATCH_DETAIL, instance)

    if any(len(loc) <= 1 for loc in locs):
        return build_problem(400, INVALID_CONTENT_DETAIL, instance)

    if any(error.get("type") not in _FIELD_RULE_ERROR_TYPES for error in errors):
        return build_problem(400, UNREADABLE_MESSAGE_DETAIL, instance)

    invalid_parameters = [
        InvalidRequestParameter(entity=entity, field=_field_name(loc), message=_violation_message(error))
        for error, loc in zip(errors, locs)
    ]
    field_errors = "; ".join(
        f"[Field error in object '{p.entity}' on field '{p.field}': {p.message}]"
        for p in invalid_parameters
    )
    detail = (
        f"{INVALID_CONTENT_DETAIL}. Validation failed for argument '{entity}' "
        f"with {len(invalid_parameters)} error(s): {field_errors}"
    )
    return build_problem(400, detail, instance, title="Bad Request", errors=invalid_parameters)


# -----------------------
# Rendering helpers
# -----------------------

def problem_response(
    problem: ProblemDetail,
    *,
    headers: Mapping[str, str] | None = None,
    extra: Mapping[str, Any] | None = None,
) -> JSONResponse:
    content = problem.model_dump(mode="json", exclude_none=True)
    if extra:
        content.update(extra)
    return JSONResponse(
        status_code=problem.status,
        content=content,
        headers=dict(headers) if headers else None,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )


def _body_entity_name(request: Request) -> str:
    """
    Name of the object bound from the request body, e.g. TaskDTO -> "taskDTO".
    """
    route = request.scope.get("route")
    body_field = getattr(route, "body_field", None)
    annotation = getattr(getattr(body_field, "field_info", None), "annotation", None)
    name = getattr(annotation, "__name__", None) or "request"
    return name[:1].lower() + name[1:]


# -----------------------
# Handlers
# -----------------------

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problem = translate_validation_errors(
        exc.errors(),
        entity=_body_entity_name(request),
        instance=request.url.path,
    )
    logger.info(
        "Request validation failed for %s %s: %s",
        request.method,
        request.url.path,
        problem.detail,
        extra={"invalid_fields": [p.field for p in problem.errors or []]},
    )
    return problem_response(problem)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else None
    problem = build_problem(exc.status_code, detail, request.url.path)
    logger.info("HTTP %s for %s %s: %s", exc.status_code, request.method, request.url.path, detail)
    return problem_response(problem, headers=getattr(exc, "headers", None))


async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    """
    Store failures: 409 for constraint violations, 500 otherwise. The message
    is the exception's client-safe text; driver details stay in the logs.
    """
    status = exc.http_status()
    if status >= 500:
        logger.error("RepositoryError for %s %s: %s", request.method, request.url.path, str(exc))
    else:
        logger.warning("RepositoryError for %s %s: %s", request.method, request.url.path, str(exc))
    problem = build_problem(status, exc.message, request.url.path)
    return problem_response(problem, extra=exc.to_payload())


# Helper to register all handlers on an app (called from the app factory)
def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RepositoryError, repository_error_handler)
