import pytest

from barsmith.logging_setup import configure_logging


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path, monkeypatch):
    """Keeps a developer's ~/.config/barsmith/config.toml out of every test."""
    monkeypatch.setattr("barsmith.config.loader.USER_CONFIG_FILE", tmp_path / "no-user-config" / "config.toml")


@pytest.fixture(autouse=True)
def stderr_logging():
    """Routes structlog through the stdlib handler on stderr so stdout assertions stay clean."""
    configure_logging("warning")
