"""Configuration - typed loading of environment variables"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from sgrvias.domain.errors import ConfigLoadError

BACKEND_FIRESTORE = "firestore"
BACKEND_LOCAL = "local"
_BACKENDS = (BACKEND_FIRESTORE, BACKEND_LOCAL)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigLoadError(f"{name} must be a number, got {raw!r}") from e


@dataclass(frozen=True)
class AppConfig:
    """Application settings"""

    backend: str = BACKEND_LOCAL
    project_id: str = ""
    data_path: str = "sgr_data.json"
    role_labels_path: str = "sgr_role_labels.json"
    gateway_timeout: float = 10.0
    toast_ttl_ms: int = 3000
    toast_error_ttl_ms: int = 5000

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load settings from the environment (and .env if present)"""
        load_dotenv()

        backend = os.getenv("SGR_BACKEND", BACKEND_LOCAL).strip().lower()
        if backend not in _BACKENDS:
            raise ConfigLoadError(f"SGR_BACKEND must be one of {_BACKENDS}, got {backend!r}")

        project_id = os.getenv("PROJECT_ID", "")
        if backend == BACKEND_FIRESTORE and not project_id:
            raise ConfigLoadError("PROJECT_ID is not set in environment")

        gateway_timeout = _float_env("SGR_GATEWAY_TIMEOUT", 10.0)
        if gateway_timeout <= 0:
            raise ConfigLoadError("SGR_GATEWAY_TIMEOUT must be positive")

        return cls(
            backend=backend,
            project_id=project_id,
            data_path=os.getenv("SGR_DATA_PATH", "sgr_data.json"),
            role_labels_path=os.getenv("SGR_ROLE_LABELS_PATH", "sgr_role_labels.json"),
            gateway_timeout=gateway_timeout,
            toast_ttl_ms=int(_float_env("SGR_TOAST_TTL_MS", 3000)),
            toast_error_ttl_ms=int(_float_env("SGR_TOAST_ERROR_TTL_MS", 5000)),
        )
