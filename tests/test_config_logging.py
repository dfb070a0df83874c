# ============================================================================
# CONFIGURATION AND LOGGING TESTS
# ============================================================================
# STATUS: Tests - Environment defaults and structured logging
# PURPOSE: Verify env overrides, key fallback and JSON log context
# CREATED: 19 OCT 2026
# ============================================================================
"""
Config and Logging Tests

Run with:
    pytest tests/test_config_logging.py -v
"""

import asyncio
import json
import logging

import pytest

from core.config import Defaults, MapDefaults, get_defaults, reset_defaults
from core.logging import (
    ComponentType,
    HumanFormatter,
    StructuredFormatter,
    get_current_context,
    get_logger,
    log_context,
)


@pytest.fixture(autouse=True)
def _fresh_defaults():
    reset_defaults()
    yield
    reset_defaults()


# ============================================================================
# CONFIG
# ============================================================================

class TestDefaults:

    def test_builtin_defaults(self):
        defaults = Defaults()
        assert defaults.map.center == (77.2881183, 28.690229)
        assert defaults.map.zoom == 16
        assert defaults.map.popup_offset == (0, -30)
        assert defaults.backend.base_url == "http://localhost:5000/api"
        assert defaults.reconcile.retry_attempts == 1
        assert not defaults.map.has_api_key

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("GIS_MAP_API_KEY", "k1")
        monkeypatch.setenv("GIS_MAP_ZOOM", "12")
        monkeypatch.setenv("GIS_BACKEND_URL", "http://api.test")
        monkeypatch.setenv("GIS_PERSIST_COMMITS", "false")
        monkeypatch.setenv("GIS_RECONCILE_RETRIES", "3")

        defaults = get_defaults()

        assert defaults.map.api_key == "k1"
        assert defaults.map.zoom == 12
        assert defaults.backend.base_url == "http://api.test"
        assert defaults.backend.persist_commits is False
        assert defaults.reconcile.retry_attempts == 3

    def test_legacy_key_fallback(self, monkeypatch):
        monkeypatch.delenv("GIS_MAP_API_KEY", raising=False)
        monkeypatch.setenv("NEXT_PUBLIC_OLA_API_KEY", "legacy")
        assert MapDefaults.from_env().api_key == "legacy"

    def test_get_defaults_cached(self):
        assert get_defaults() is get_defaults()


# ============================================================================
# LOGGING
# ============================================================================

class TestLogging:

    def _record(self, logger, message):
        records = []

        class Capture(logging.Handler):
            def emit(self, record):
                records.append(record)

        handler = Capture()
        logger.logger.addHandler(handler)
        logger.logger.setLevel(logging.INFO)
        try:
            logger.info(message)
        finally:
            logger.logger.removeHandler(handler)
        return records[0]

    def test_context_nests_and_unwinds(self):
        with log_context(session_id="s1"):
            with log_context(asset_id="a1"):
                ctx = get_current_context()
                assert ctx.session_id == "s1"
                assert ctx.asset_id == "a1"
            assert get_current_context().asset_id is None
        assert get_current_context().session_id is None

    def test_json_output_includes_context(self):
        logger = get_logger("tests.logging", ComponentType.RECONCILER)
        with log_context(session_id="s1", asset_id="a1", operation="add_marker"):
            record = self._record(logger, "Marker added")
            payload = json.loads(StructuredFormatter().format(record))

        assert payload["message"] == "Marker added"
        assert payload["level"] == "INFO"
        assert payload["context"]["asset_id"] == "a1"
        assert payload["data"]["component"] == "reconciler"

    def test_context_follows_each_task_across_awaits(self):
        async def action(session_id):
            with log_context(session_id=session_id, operation="commit"):
                await asyncio.sleep(0)
                return get_current_context().session_id

        async def interleaved():
            return await asyncio.gather(action("s1"), action("s2"))

        assert asyncio.run(interleaved()) == ["s1", "s2"]

    def test_human_output_inlines_context(self):
        logger = get_logger("tests.logging", ComponentType.SESSION)
        with log_context(session_id="s1", operation="delete"):
            record = self._record(logger, "Asset removed")
            line = HumanFormatter().format(record)

        assert "[session=s1, op=delete]" in line
        assert line.endswith("tests.logging [session=s1, op=delete]: Asset removed")
