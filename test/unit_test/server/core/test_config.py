"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds the variables documented in
.env.example and that the grouped configuration views agree with it.
"""

from pathlib import Path

import pytest

from mathsolve_ai.server.core.config import (
    CORSConfig,
    DatabaseConfig,
    GoogleOAuthConfig,
    JWTConfig,
    Settings,
    UploadConfig,
)


@pytest.fixture
def env_example_path() -> Path:
    """Get path to .env.example file."""
    return Path(__file__).resolve().parents[4] / ".env.example"


@pytest.fixture
def env_example_vars(env_example_path: Path) -> dict[str, str]:
    """Parse .env.example file and return environment variables."""
    env_vars = {}
    with open(env_example_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, value = line.split("=", 1)
                env_vars[key.strip()] = value.strip()
    return env_vars


@pytest.fixture
def example_settings(env_example_vars: dict[str, str], monkeypatch) -> Settings:
    for key, value in env_example_vars.items():
        monkeypatch.setenv(key, value)
    return Settings(_env_file=None)


class TestSettingsBinding:
    def test_every_settings_alias_is_documented(self, env_example_vars: dict[str, str]):
        aliases = {field.alias for field in Settings.model_fields.values()}
        missing = aliases - set(env_example_vars)
        assert not missing

    def test_server_binding(self, example_settings: Settings, env_example_vars: dict[str, str]):
        assert example_settings.server_host == env_example_vars["MATHSOLVE_SERVER_HOST"]
        assert example_settings.server_port == int(env_example_vars["MATHSOLVE_SERVER_PORT"])
        assert example_settings.log_level == env_example_vars["MATHSOLVE_LOG_LEVEL"]
        assert example_settings.environment == env_example_vars["ENVIRONMENT"]

    def test_database_binding(self, example_settings: Settings, env_example_vars: dict[str, str]):
        assert example_settings.database.url == env_example_vars["DATABASE_URL"]
        assert example_settings.database.auto_create is True

    def test_jwt_binding(self, example_settings: Settings, env_example_vars: dict[str, str]):
        jwt_config = example_settings.jwt
        assert jwt_config.secret == env_example_vars["JWT_SECRET"]
        assert jwt_config.refresh_secret == env_example_vars["JWT_REFRESH_SECRET"]
        assert jwt_config.access_expire_minutes == 15
        assert jwt_config.refresh_expire_days == 7

    def test_cors_lists_parse_from_json(self, example_settings: Settings):
        assert example_settings.cors.origins == ["http://localhost:3000"]
        assert "OPTIONS" in example_settings.cors.allow_methods

    def test_google_binding(self, example_settings: Settings, env_example_vars: dict[str, str]):
        assert example_settings.google.client_id == env_example_vars["GOOGLE_CLIENT_ID"]
        assert example_settings.google.mock is True

    def test_uploads_binding(self, example_settings: Settings):
        assert example_settings.uploads.max_avatar_bytes == 5 * 1024 * 1024

    def test_override(self, monkeypatch):
        monkeypatch.setenv("MATHSOLVE_SERVER_PORT", "8080")
        monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")
        settings = Settings(_env_file=None)
        assert settings.server_port == 8080
        assert settings.rate_limit_enabled is False


class TestDefaults:
    @pytest.fixture
    def bare_settings(self, monkeypatch) -> Settings:
        for field in Settings.model_fields.values():
            monkeypatch.delenv(field.alias, raising=False)
        return Settings(_env_file=None)

    def test_server_defaults(self, bare_settings: Settings):
        assert bare_settings.server_host == "0.0.0.0"
        assert bare_settings.server_port == 5000
        assert bare_settings.environment == "development"
        assert bare_settings.is_production is False

    def test_security_defaults(self, bare_settings: Settings):
        assert bare_settings.security.bcrypt_rounds == 12
        assert bare_settings.jwt.algorithm == "HS256"
        assert bare_settings.rate_limit_enabled is True

    def test_production_flag(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "Production")
        assert Settings(_env_file=None).is_production is True


class TestGroupedModels:
    def test_populate_by_name(self):
        assert DatabaseConfig(url="sqlite://").url == "sqlite://"
        assert UploadConfig(directory="/tmp/x").directory == "/tmp/x"
        assert GoogleOAuthConfig(mock=False).mock is False
        assert CORSConfig(origins=["https://mathsolve.example"]).origins == ["https://mathsolve.example"]

    def test_jwt_requires_secrets(self):
        with pytest.raises(ValueError):
            JWTConfig()
