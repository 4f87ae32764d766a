import logging

from fastapi import FastAPI
from starlette.testclient import TestClient

from todo_service.core.logging.filters import get_request_id
from todo_service.core.logging.middleware import RequestIDMiddleware


def make_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/hello")
    async def hello():
        logging.getLogger("todo_service.hello").info("handling hello")
        return {"request_id": get_request_id()}

    return app


def test_generated_request_id_in_response_and_logs(caplog):
    caplog.set_level(logging.INFO, logger="todo_service.hello")
    client = TestClient(make_app())

    resp = client.get("/hello")

    assert resp.status_code == 200
    rid = resp.headers.get("X-Request-ID")
    assert rid
    assert resp.json() == {"request_id": rid}
    assert [r.getMessage() for r in caplog.records if r.name == "todo_service.hello"] == ["handling hello"]


def test_incoming_request_id_is_echoed():
    client = TestClient(make_app())

    resp = client.get("/hello", headers={"X-Request-ID": "abc-123"})

    assert resp.headers["X-Request-ID"] == "abc-123"
    assert resp.json() == {"request_id": "abc-123"}


def test_oversized_request_id_is_replaced():
    client = TestClient(make_app())

    resp = client.get("/hello", headers={"X-Request-ID": "x" * 500})

    assert resp.headers["X-Request-ID"] != "x" * 500
    assert resp.json() == {"request_id": resp.headers["X-Request-ID"]}


def test_request_id_cleared_after_request():
    client = TestClient(make_app())
    client.get("/hello", headers={"X-Request-ID": "abc-123"})

    assert get_request_id() is None
