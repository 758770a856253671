"""Unit tests for AppConfig.from_env"""

from unittest.mock import patch

import pytest
from siteprogress.config import AppConfig

_CONFIG_VARS = (
    "PROJECT_ID",
    "FIRESTORE_DATABASE",
    "TASKS_COLLECTION",
    "BOQ_COLLECTION",
    "DISPLAY_TIMEZONE",
    "READ_TIMEOUT_SECONDS",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Environment without any setting, and no .env loading"""
    for name in _CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    with patch("siteprogress.config.load_dotenv"):
        yield monkeypatch


class TestFromEnv:
    def test_defaults(self, clean_env):
        clean_env.setenv("PROJECT_ID", "portal-prod")

        config = AppConfig.from_env()

        assert config == AppConfig(project_id="portal-prod")
        assert config.firestore_database == "(default)"
        assert config.tasks_collection == "tasks"
        assert config.boq_collection == "boq_files"
        assert config.display_timezone == "UTC"
        assert config.read_timeout_seconds == 10.0

    def test_overrides(self, clean_env):
        clean_env.setenv("PROJECT_ID", "portal-dev")
        clean_env.setenv("FIRESTORE_DATABASE", "portal")
        clean_env.setenv("TASKS_COLLECTION", "tasks_v2")
        clean_env.setenv("BOQ_COLLECTION", "boq_v2")
        clean_env.setenv("DISPLAY_TIMEZONE", "Asia/Jakarta")
        clean_env.setenv("READ_TIMEOUT_SECONDS", "2.5")

        config = AppConfig.from_env()

        assert config.firestore_database == "portal"
        assert config.tasks_collection == "tasks_v2"
        assert config.boq_collection == "boq_v2"
        assert config.display_timezone == "Asia/Jakarta"
        assert config.read_timeout_seconds == 2.5

    def test_missing_project_id(self, clean_env):
        with pytest.raises(ValueError, match="PROJECT_ID"):
            AppConfig.from_env()

    def test_invalid_timezone(self, clean_env):
        clean_env.setenv("PROJECT_ID", "portal-dev")
        clean_env.setenv("DISPLAY_TIMEZONE", "Mars/Olympus_Mons")

        with pytest.raises(ValueError, match="DISPLAY_TIMEZONE"):
            AppConfig.from_env()

    @pytest.mark.parametrize("raw", ["soon", "0", "-1"])
    def test_invalid_timeout(self, clean_env, raw):
        clean_env.setenv("PROJECT_ID", "portal-dev")
        clean_env.setenv("READ_TIMEOUT_SECONDS", raw)

        with pytest.raises(ValueError, match="READ_TIMEOUT_SECONDS"):
            AppConfig.from_env()
