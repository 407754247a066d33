"""Unit tests for application settings configuration."""

from pathlib import Path

import pytest

from medadmin.config import Settings
from medadmin.infrastructure.auth.firebase_auth_provider import FirebaseAuthProvider
from medadmin.infrastructure.auth.local_auth_provider import LocalAuthProvider
from medadmin.infrastructure.dependencies import build_adapters


def test_settings_uses_project_env_file_independent_of_cwd():
    """Settings should always include the project's .env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_project_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_project_env in normalized
    assert str(Path(".env")) in normalized


def test_backend_is_read_from_environment(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "firebase")
    monkeypatch.setenv("FIREBASE_PROJECT_ID", "demo")

    settings = Settings(_env_file=None)

    assert settings.store_backend == "firebase"
    assert settings.is_local is False
    assert settings.firebase_project_id == "demo"


async def test_local_backend_adapters(tmp_path):
    settings = Settings(
        _env_file=None,
        store_backend="local",
        database_url=f"sqlite:///{tmp_path / 'db' / 'console.db'}",
        upload_dir=str(tmp_path / "uploads"),
    )

    adapters = build_adapters(settings)
    try:
        assert isinstance(adapters.auth_provider, LocalAuthProvider)
        assert (tmp_path / "db").is_dir()
        assert adapters.asset_dir == tmp_path / "uploads"
    finally:
        await adapters.aclose()


async def test_firebase_backend_adapters_share_one_client():
    settings = Settings(
        _env_file=None,
        store_backend="firebase",
        firebase_api_key="key",
        firebase_project_id="demo",
    )

    adapters = build_adapters(settings)
    try:
        assert isinstance(adapters.auth_provider, FirebaseAuthProvider)
        assert adapters.http_client is not None
        assert adapters.engine is None
    finally:
        await adapters.aclose()


def test_firebase_backend_requires_credentials():
    with pytest.raises(RuntimeError):
        build_adapters(Settings(_env_file=None, store_backend="firebase"))
