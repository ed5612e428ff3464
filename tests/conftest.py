from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime

import pytest

from ipmatcher.api.main import create_app
from ipmatcher.core.metrics import reset_metrics
from ipmatcher.services.matcher import Matcher
from ipmatcher.settings import Settings

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _clean_metrics() -> Iterator[None]:
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def log_lines() -> list[str]:
    return []


@pytest.fixture
def matcher(log_lines: list[str]) -> Matcher:
    return Matcher(log=log_lines.append, clock=lambda: FIXED_NOW)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        log_level="INFO",
        admin_api_key="dev-admin-key",
        cache_enabled=True,
        cache_invalidation="full",
        seed_file="",
    )


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Key": "dev-admin-key"}


@pytest.fixture
def app(settings: Settings, matcher: Matcher):
    return create_app(settings=settings, matcher=matcher)
