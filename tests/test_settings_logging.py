"""Tests for settings loading and logging setup."""
from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import pytest
from pydantic import ValidationError

from navkit.logging import setup_logging
from navkit.settings import Settings, load_settings


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    """Run from an empty directory so no stray .env is picked up."""
    monkeypatch.chdir(tmp_path)
    for name in Settings.model_fields:
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def test_settings_defaults(clean_env):
    settings = load_settings()

    assert settings.NAVKIT_LOG_LEVEL == "INFO"
    assert settings.NAVKIT_LOG_TO_FILE is False
    assert settings.NAVKIT_FLOW_FIRST_DELAY == 1.0
    assert settings.NAVKIT_FLOW_SECOND_DELAY == 2.0
    assert settings.NAVKIT_CHECKOUT_DELAY == 2.0
    assert settings.NAVKIT_STRICT_THREADING is True


def test_settings_from_environment(clean_env, monkeypatch):
    monkeypatch.setenv("NAVKIT_FLOW_FIRST_DELAY", "0.25")
    monkeypatch.setenv("NAVKIT_STRICT_THREADING", "false")

    settings = load_settings()
    assert settings.NAVKIT_FLOW_FIRST_DELAY == 0.25
    assert settings.NAVKIT_STRICT_THREADING is False


def test_settings_from_dotenv(clean_env):
    (clean_env / ".env").write_text("NAVKIT_CHECKOUT_DELAY=0.5\nUNRELATED=1\n", encoding="utf-8")

    assert load_settings().NAVKIT_CHECKOUT_DELAY == 0.5


def test_negative_delay_is_rejected(clean_env, monkeypatch):
    monkeypatch.setenv("NAVKIT_FLOW_SECOND_DELAY", "-1")

    with pytest.raises(ValidationError):
        load_settings()


def test_setup_logging_console_only(clean_env, restore_root_logging):
    settings = Settings(NAVKIT_LOG_LEVEL="debug")

    assert setup_logging(settings) is None
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1


def test_setup_logging_to_file(clean_env, restore_root_logging):
    """Test file logging writes navkit.log under a relative log dir."""
    settings = Settings(NAVKIT_LOG_TO_FILE=True, NAVKIT_LOG_DIR=Path("logs"), NAVKIT_LOG_BACKUP_COUNT=3)

    log_file = setup_logging(settings)
    logging.getLogger("navkit.test").info("hello from the test")

    assert log_file == Path.cwd() / "logs" / "navkit.log"
    assert log_file.exists()
    file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, TimedRotatingFileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].backupCount == 3
    file_handlers[0].flush()
    assert "hello from the test" in log_file.read_text(encoding="utf-8")


def test_setup_logging_twice_does_not_duplicate(clean_env, restore_root_logging):
    settings = Settings(NAVKIT_LOG_TO_FILE=True, NAVKIT_LOG_DIR=clean_env / "abs")

    setup_logging(settings)
    setup_logging(settings)

    assert len(logging.getLogger().handlers) == 2
