"""
Unit tests for application settings.
"""

import pytest
from pydantic import ValidationError

from upkeep.config import Settings


@pytest.mark.unit
class TestSettings:
    """Test settings parsing."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TASK_SCHEDULE", raising=False)

        settings = Settings(_env_file=None)

        assert settings.TASK_SCHEDULE == {}
        assert settings.SCHEDULER_TIMEZONE == "UTC"
        assert settings.SCHEDULER_MAX_WORKERS == 10
        assert settings.ADMIN_API_TOKEN == ""

    def test_task_schedule_from_env(self, monkeypatch):
        """Overrides are read as JSON from the environment."""
        monkeypatch.setenv("TASK_SCHEDULE", '{"Cleanup Tokens": 300, "Cleanup Images": 0}')

        settings = Settings(_env_file=None)

        assert settings.TASK_SCHEDULE == {"Cleanup Tokens": 300, "Cleanup Images": 0}

    def test_invalid_task_schedule(self, monkeypatch):
        monkeypatch.setenv("TASK_SCHEDULE", '{"Cleanup Tokens": "soon"}')

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_max_workers_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, SCHEDULER_MAX_WORKERS=0)
