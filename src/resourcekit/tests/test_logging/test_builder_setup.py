# src/resourcekit/tests/test_logging/test_builder_setup.py
import logging

import pytest

from resourcekit.core.logging.builder import make_dict_config, setup_logging
from resourcekit.core.logging.filters import RequestIdFilter
from resourcekit.core.logging.formatters import ColorFormatter


# Create a minimal Settings-like object for testing
class DummySettings:
    LOG_FORMAT = "json"
    LOG_LEVEL = "INFO"
    LOG_TO_STDOUT = False
    LOG_DIR = None  # will be set in test
    LOG_MAX_BYTES = 1000
    LOG_BACKUP_COUNT = 1
    ENV = "development"
    SERVICE_NAME = "roles-api"
    ENABLE_SQL_LOGGING = False


@pytest.fixture
def settings(tmp_path):
    s = DummySettings()
    s.LOG_DIR = tmp_path
    return s


def test_make_dict_config_with_log_dir_writes_files(settings):
    cfg = make_dict_config(settings)

    assert set(cfg["handlers"]) == {"console", "file", "error_file"}
    assert cfg["handlers"]["file"]["filename"].endswith("app.log")
    assert cfg["handlers"]["error_file"]["level"] == "ERROR"
    assert cfg["formatters"]["json"]["service"] == "roles-api"
    assert cfg["formatters"]["json"]["env"] == "development"


def test_make_dict_config_stdout_only_uses_error_console(settings):
    settings.LOG_TO_STDOUT = True

    cfg = make_dict_config(settings)

    assert set(cfg["handlers"]) == {"console", "error_console"}
    assert cfg["loggers"][""]["handlers"] == ["console", "error_console"]


def test_every_handler_runs_request_id_and_redact_filters(settings):
    cfg = make_dict_config(settings)

    for handler in cfg["handlers"].values():
        assert handler["filters"] == ["request_id", "redact"]


def test_text_format_uses_color_formatter(settings):
    settings.LOG_FORMAT = "text"

    cfg = make_dict_config(settings)

    assert cfg["formatters"]["standard"]["()"] is ColorFormatter
    assert cfg["handlers"]["console"]["formatter"] == "standard"
    # error files stay structured
    assert cfg["handlers"]["error_file"]["formatter"] == "json"


def test_sql_logging_is_opt_in(settings):
    assert make_dict_config(settings)["loggers"]["sqlalchemy.engine"]["level"] == "WARNING"

    settings.ENABLE_SQL_LOGGING = True
    assert make_dict_config(settings)["loggers"]["sqlalchemy.engine"]["level"] == "INFO"


def test_setup_logging_creates_log_dir(tmp_path, settings, restore_logging):
    settings.LOG_DIR = tmp_path / "logs"
    # ensure DIR does not exist
    assert not settings.LOG_DIR.exists()

    setup_logging(settings)

    # setup should create log dir
    assert settings.LOG_DIR.exists()
    root = logging.getLogger()
    assert root.handlers
    assert sum(isinstance(f, RequestIdFilter) for f in root.filters) == 1

    # a second call does not stack another root filter
    setup_logging(settings)
    assert sum(isinstance(f, RequestIdFilter) for f in root.filters) == 1
