from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings
from functools import lru_cache

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Medicine Admin Console"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Which adapters back the stores: Firebase REST APIs or local development stand-ins
    store_backend: Literal["firebase", "local"] = "local"

    # Collections
    medicines_collection: str = "medicines"
    orders_collection: str = "orders"

    # Firebase configuration
    firebase_api_key: str = ""
    firebase_project_id: str = ""
    firebase_storage_bucket: str = ""
    firebase_auth_base_url: str = "https://identitytoolkit.googleapis.com/v1"
    firestore_base_url: str = "https://firestore.googleapis.com/v1"
    firebase_storage_base_url: str = "https://firebasestorage.googleapis.com/v0"

    # Transport timeout (seconds) for all remote calls; the sync core adds none
    http_timeout: float = 30.0

    # Local backend
    database_url: str = "sqlite:///data/console.db"
    upload_dir: str = "uploads"
    asset_base_url: str = "http://localhost:8020/assets"
    local_admin_email: str = "admin@example.com"
    local_admin_password: str = "change-me"

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine SQL queries
    log_level_http: str = "WARNING"          # httpx / httpcore outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_sync: str = "INFO"             # record cache, coordinator, edit sessions
    log_level_firebase: str = "INFO"         # Firebase REST adapters

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    @property
    def is_local(self) -> bool:
        return self.store_backend == "local"


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
