import importlib
import logging
import os
from pathlib import Path

import pytest

from src import config

import conftest


@pytest.fixture
def reload_config(monkeypatch):
    """Reload src.config under patched env, restoring the real values afterwards"""
    yield lambda: importlib.reload(config)
    monkeypatch.undo()
    importlib.reload(config)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level, handlers = root.level, root.handlers[:]
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_int_settings_use_valid_values(monkeypatch, reload_config):
    monkeypatch.setenv("WEATHER_CACHE_TTL", "120")
    monkeypatch.setenv("PORT", "8080")
    reload_config()

    assert config.WEATHER_CACHE_TTL == 120
    assert config.PORT == 8080


@pytest.mark.parametrize("value", ["0", "-5", "abc", ""])
def test_int_settings_fall_back_to_defaults(monkeypatch, reload_config, value):
    monkeypatch.setenv("WEATHER_CACHE_TTL", value)
    monkeypatch.setenv("WEATHER_CACHE_MAX_ENTRIES", value)
    monkeypatch.setenv("PORT", value)
    reload_config()

    assert config.WEATHER_CACHE_TTL == 600
    assert config.WEATHER_CACHE_MAX_ENTRIES == 256
    assert config.PORT == 5000


def test_log_level_is_upper_cased(monkeypatch, reload_config):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    reload_config()

    assert config.LOG_LEVEL == "DEBUG"


def test_configure_logging_overrides_existing_handler(monkeypatch, reload_config, restore_root_logger):
    # Library modules install an INFO handler on import
    logging.basicConfig(level=logging.INFO)
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    reload_config()

    config.configure_logging()

    assert restore_root_logger.level == logging.DEBUG


def test_configure_logging_explicit_level(restore_root_logger):
    config.configure_logging("WARNING")

    assert restore_root_logger.level == logging.WARNING


def test_alert_store_kept_in_session_temp_dir():
    if conftest.ALERTS_DIR is None:
        pytest.skip("ALERTS_FILE set by the environment")

    assert Path(os.environ["ALERTS_FILE"]).parent == Path(conftest.ALERTS_DIR)
