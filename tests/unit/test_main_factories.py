"""Unit tests for component wiring in src.main."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from src.config.settings import Settings
from src.main import build_components, close_components, create_app, open_components
from src.services.chat_service import ChatService
from src.services.ingestion.ingestion_service import IngestionService
from src.utils.errors import ConfigurationError


class TestBuildComponents:
    def test_missing_credentials_refused(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("GEMINI_API_KEY", "NEWS_API_KEY", "JINA_API_KEY"):
            monkeypatch.delenv(name, raising=False)

        with pytest.raises(ConfigurationError):
            build_components(Settings(_env_file=None))

    @pytest.mark.asyncio
    async def test_builds_and_opens_everything(self, app_settings: Settings) -> None:
        components = build_components(app_settings)
        try:
            assert isinstance(components["ingestion_service"], IngestionService)
            assert isinstance(components["chat_service"], ChatService)
            assert components["provider_registry"] == {
                "feed": True,
                "scraper": True,
                "embedding": True,
                "llm": True,
            }

            await open_components(components)

            assert await components["vector_store"].count() == 0
            assert components["vector_store"].is_available() is True
        finally:
            await close_components(components)


class TestCreateApp:
    def test_create_app_does_no_io(self) -> None:
        app = create_app(Settings(_env_file=None))
        paths = {route.path for route in app.routes}
        assert {"/", "/health", "/session", "/chat", "/history/{session_id}", "/ingest"} <= paths

    def test_lifespan_wires_state(self, app_settings: Settings) -> None:
        with TestClient(create_app(app_settings)) as client:
            assert client.get("/").json()["service"] == "newsrag"
            assert client.post("/session").status_code == 201
            health = client.get("/health").json()
            assert health["providers"]["corpus_points"] == 0
