"""Shared fixtures for all tests."""

import pytest
import structlog

from charstats.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    """Give every test freshly loaded settings and default structlog config.

    Settings are cached with lru_cache, so tests that change CHARSTATS_*
    environment variables would otherwise see stale values. The CLI
    reconfigures structlog globally; reset it so tests stay independent.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()
