"""Tests for application startup and exception handlers."""

from pathlib import Path
from unittest.mock import MagicMock

import fastapi
import pytest
from fastapi.exceptions import RequestValidationError

from core.config import clear_settings_cache
from main import global_exception_handler, lifespan, validation_exception_handler

pytestmark = pytest.mark.unit


class TestLifespan:
    async def test_loads_rules_from_marker_directory(
        self, marker_dir: Path, rules, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("RULES_SOURCE", "directory")
        monkeypatch.setenv("RULES_DIR", str(marker_dir))
        clear_settings_cache()
        app = fastapi.FastAPI()

        async with lifespan(app):
            assert app.state.rules == rules
            assert app.state.rules_error is None

    async def test_loads_rules_from_file(
        self, rules_file: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("RULES_SOURCE", "file")
        monkeypatch.setenv("RULES_FILE", str(rules_file))
        clear_settings_cache()
        app = fastapi.FastAPI()

        async with lifespan(app):
            assert len(app.state.rules) == 3

    async def test_records_load_failure(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("RULES_SOURCE", "file")
        monkeypatch.setenv("RULES_FILE", str(tmp_path / "missing.txt"))
        clear_settings_cache()
        app = fastapi.FastAPI()

        async with lifespan(app):
            assert app.state.rules is None
            assert "Rules file not found" in app.state.rules_error


class TestExceptionHandlers:
    async def test_global_handler_returns_500(self):
        request = MagicMock()
        request.url.path = "/redirect"
        request.method = "GET"

        response = await global_exception_handler(request, RuntimeError("boom"))

        assert response.status_code == 500
        assert b"unexpected error" in response.body

    async def test_validation_handler_returns_422(self):
        request = MagicMock()
        request.url.path = "/redirect"
        request.method = "GET"
        exc = RequestValidationError(
            [{"loc": ("query", "version"), "msg": "bad", "type": "value_error"}]
        )

        response = await validation_exception_handler(request, exc)

        assert response.status_code == 422
