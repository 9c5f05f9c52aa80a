"""
Shared test fixtures for wordesc tests.
"""

import pytest
import structlog

from wordesc.core import config as config_module
from wordesc.core.classify import C_CLASSIFIER, UTF8_CLASSIFIER


@pytest.fixture
def utf8():
    return UTF8_CLASSIFIER


@pytest.fixture
def c_locale():
    return C_CLASSIFIER


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run with no user, project, or env config visible. Returns the cwd."""
    monkeypatch.setattr(config_module, "USER_CONFIG", tmp_path / "home" / "config")
    monkeypatch.delenv(config_module.ENV_CONFIG, raising=False)
    cwd = tmp_path / "work"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd


@pytest.fixture
def reset_logging(monkeypatch):
    """Undo any structlog configuration a test performs."""
    monkeypatch.setattr(config_module, "_logger", None)
    monkeypatch.setattr(config_module, "_log_full", False)
    monkeypatch.setattr(config_module, "_log_file", None)
    yield
    config_module.close_logging()
    structlog.reset_defaults()
