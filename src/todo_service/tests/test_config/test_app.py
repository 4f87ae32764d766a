import pytest
from httpx import ASGITransport, AsyncClient

from todo_service.config import get_settings
from todo_service.database.session import get_engine
from todo_service.main import create_app

from ..test_fixtures.settings import make_test_settings


@pytest.fixture
def file_database(tmp_path, monkeypatch):
    """Point the process-wide settings (and so the engine) at a throwaway SQLite file."""
    db_path = tmp_path / "todo.db"
    monkeypatch.setenv("DB_URL", f"sqlite+aiosqlite:///{db_path.as_posix()}")
    get_settings.cache_clear()
    yield db_path
    get_settings.cache_clear()


@pytest.mark.asyncio
class TestApplicationLifespan:

    async def test_lifespan_creates_schema_and_disposes_engine(self, file_database):
        app = create_app(make_test_settings(DB_CREATE_SCHEMA=True))

        async with app.router.lifespan_context(app):
            assert file_database.exists()
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
                created = await ac.post("/tasks", json={"title": "persisted"})
                assert created.status_code == 201
                listed = await ac.get("/tasks")
                assert [t["title"] for t in listed.json()] == ["persisted"]

        assert get_engine.cache_info().currsize == 0

    async def test_api_prefix_is_applied(self, file_database):
        app = create_app(make_test_settings(DB_CREATE_SCHEMA=True, API_PREFIX="/v1"))

        async with app.router.lifespan_context(app):
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
                assert (await ac.get("/v1/tasks")).status_code == 200
                assert (await ac.get("/tasks")).status_code == 404
