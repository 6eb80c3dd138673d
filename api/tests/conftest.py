"""Pytest configuration and shared fixtures.

This module provides:
- A deterministic rule table and on-disk rule sources (marker directory, rules file)
- FastAPI app and async HTTP client fixtures for route tests
- Settings cache reset between tests
"""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from core.config import clear_settings_cache
from services.version_router import RuleTable, ThresholdRule

# =============================================================================
# Rule Fixtures
# =============================================================================

# Mirrors a typical deployment: one bucket per LTS line, newest last.
TEST_RULES: RuleTable = (
    ThresholdRule(threshold="1.600", bucket="stable-1.600"),
    ThresholdRule(threshold="2.000", bucket="stable-2.000"),
    ThresholdRule(threshold="2.401", bucket="stable-2.401"),
)


@pytest.fixture
def rules() -> RuleTable:
    return TEST_RULES


@pytest.fixture
def marker_dir(tmp_path: Path) -> Path:
    """A directory of <bucket>/cap.txt markers matching TEST_RULES."""
    for rule in TEST_RULES:
        bucket_dir = tmp_path / rule.bucket
        bucket_dir.mkdir()
        (bucket_dir / "cap.txt").write_text(f"{rule.threshold}\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def rules_file(tmp_path: Path) -> Path:
    """A versions.txt style rules file."""
    path = tmp_path / "versions.txt"
    path.write_text("1.600\n2.000\n\n2.401\n", encoding="utf-8")
    return path


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def app(rules: RuleTable) -> AsyncGenerator[FastAPI]:
    """FastAPI app with the test rule table already loaded.

    ASGITransport does not run the lifespan, so state is set here.
    """
    from main import app as fastapi_app

    fastapi_app.state.rules = rules
    fastapi_app.state.rules_error = None

    yield fastapi_app

    fastapi_app.state.rules = None
    fastapi_app.state.rules_error = None


@pytest_asyncio.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client over plain HTTP (mirror network)."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def secure_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client over HTTPS."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="https://test",
    ) as ac:
        yield ac


# =============================================================================
# Utility Fixtures
# =============================================================================


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio backend for anyio (required by httpx)."""
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None]:
    """Reset settings cache before each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
