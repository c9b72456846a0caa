"""AppConfig.from_env tests"""

from unittest.mock import patch

import pytest
from sgrvias.config import BACKEND_FIRESTORE, BACKEND_LOCAL, AppConfig
from sgrvias.domain.errors import ConfigLoadError

_KEYS = (
    "SGR_BACKEND",
    "PROJECT_ID",
    "SGR_DATA_PATH",
    "SGR_ROLE_LABELS_PATH",
    "SGR_GATEWAY_TIMEOUT",
    "SGR_TOAST_TTL_MS",
    "SGR_TOAST_ERROR_TTL_MS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate from the host environment and any .env file"""
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)
    with patch("sgrvias.config.load_dotenv"):
        yield


class TestFromEnv:
    def test_defaults(self):
        config = AppConfig.from_env()

        assert config.backend == BACKEND_LOCAL
        assert config.gateway_timeout == 10.0
        assert config.toast_ttl_ms == 3000
        assert config.toast_error_ttl_ms == 5000

    def test_firestore_backend(self, monkeypatch):
        monkeypatch.setenv("SGR_BACKEND", "Firestore")
        monkeypatch.setenv("PROJECT_ID", "sgr-vias-prod")
        monkeypatch.setenv("SGR_GATEWAY_TIMEOUT", "2.5")

        config = AppConfig.from_env()

        assert config.backend == BACKEND_FIRESTORE
        assert config.project_id == "sgr-vias-prod"
        assert config.gateway_timeout == 2.5

    def test_firestore_requires_project_id(self, monkeypatch):
        monkeypatch.setenv("SGR_BACKEND", "firestore")

        with pytest.raises(ConfigLoadError, match="PROJECT_ID"):
            AppConfig.from_env()

    def test_unknown_backend(self, monkeypatch):
        monkeypatch.setenv("SGR_BACKEND", "sqlite")

        with pytest.raises(ConfigLoadError, match="SGR_BACKEND"):
            AppConfig.from_env()

    @pytest.mark.parametrize("value", ["0", "-1", "abc"])
    def test_invalid_timeout(self, monkeypatch, value):
        monkeypatch.setenv("SGR_GATEWAY_TIMEOUT", value)

        with pytest.raises(ConfigLoadError, match="SGR_GATEWAY_TIMEOUT"):
            AppConfig.from_env()

    def test_toast_ttls(self, monkeypatch):
        monkeypatch.setenv("SGR_TOAST_TTL_MS", "1500")
        monkeypatch.setenv("SGR_TOAST_ERROR_TTL_MS", "8000")

        config = AppConfig.from_env()

        assert config.toast_ttl_ms == 1500
        assert config.toast_error_ttl_ms == 8000
