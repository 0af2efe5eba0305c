"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from trellis.config import Settings


def test_env_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRELLIS_MAX_BULK_TASKS", "25")
    monkeypatch.setenv("TRELLIS_DEFAULT_RESPONSE_FORMAT", "json")

    settings = Settings(_env_file=None)

    assert settings.max_bulk_tasks == 25
    assert settings.default_response_format == "json"


def test_bulk_limit_bounds() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, max_bulk_tasks=0)


def test_default_password_rejected_in_production() -> None:
    with pytest.raises(ValidationError, match="forbidden in production"):
        Settings(_env_file=None, environment="production")

    settings = Settings(_env_file=None, environment="production", falkordb_password="s3cret")
    assert settings.falkordb_url == "redis://:s3cret@localhost:6380"
