"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class DatabaseConfig(BaseModel):
    """Application database configuration."""

    url: str = Field(
        default="sqlite+aiosqlite:///./mathsolve.db",
        alias="DATABASE_URL",
        description="Async database connection URL",
    )
    auto_create: bool = Field(
        default=True,
        alias="DATABASE_AUTO_CREATE",
        description="Create missing tables on startup (use Alembic in production)",
    )

    model_config = {"populate_by_name": True}


class JWTConfig(BaseModel):
    """JWT signing configuration for access and refresh tokens."""

    secret: str = Field(alias="JWT_SECRET", description="Secret used to sign access tokens")
    refresh_secret: str = Field(alias="JWT_REFRESH_SECRET", description="Secret used to sign refresh tokens")
    algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM", description="JWT signing algorithm")
    access_expire_minutes: int = Field(
        default=15, alias="JWT_ACCESS_EXPIRE_MINUTES", description="Access token lifetime in minutes"
    )
    refresh_expire_days: int = Field(
        default=7, alias="JWT_REFRESH_EXPIRE_DAYS", description="Refresh token lifetime in days"
    )
    issuer: str = Field(default="mathsolve-ai", alias="JWT_ISSUER", description="Token issuer claim")
    audience: str = Field(default="mathsolve-ai-users", alias="JWT_AUDIENCE", description="Token audience claim")

    model_config = {"populate_by_name": True}


class SecurityConfig(BaseModel):
    """Password hashing and account recovery configuration."""

    bcrypt_rounds: int = Field(default=12, alias="BCRYPT_ROUNDS", description="bcrypt cost factor")
    password_reset_expire_minutes: int = Field(
        default=60, alias="PASSWORD_RESET_EXPIRE_MINUTES", description="Password reset token lifetime"
    )

    model_config = {"populate_by_name": True}


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(
        default=["http://localhost:3000"], alias="CORS_ORIGINS", description="Allowed CORS origins"
    )
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
        description="Allowed HTTP methods",
    )
    allow_headers: list[str] = Field(
        default=["Content-Type", "Authorization"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers"
    )

    model_config = {"populate_by_name": True}


class GoogleOAuthConfig(BaseModel):
    """Google OAuth configuration."""

    client_id: Optional[str] = Field(default=None, alias="GOOGLE_CLIENT_ID", description="Google OAuth client id")
    client_secret: Optional[str] = Field(
        default=None, alias="GOOGLE_CLIENT_SECRET", description="Google OAuth client secret"
    )
    redirect_uri: str = Field(
        default="http://localhost:3000/auth/google/callback",
        alias="GOOGLE_REDIRECT_URI",
        description="Redirect URI registered with Google",
    )
    mock: bool = Field(
        default=True,
        alias="GOOGLE_OAUTH_MOCK",
        description="Return canned Google identities instead of calling Google",
    )
    auth_url: str = Field(
        default="https://accounts.google.com/o/oauth2/v2/auth",
        alias="GOOGLE_AUTH_URL",
        description="Google authorization endpoint",
    )
    token_url: str = Field(
        default="https://oauth2.googleapis.com/token", alias="GOOGLE_TOKEN_URL", description="Google token endpoint"
    )
    tokeninfo_url: str = Field(
        default="https://oauth2.googleapis.com/tokeninfo",
        alias="GOOGLE_TOKENINFO_URL",
        description="Google ID token introspection endpoint",
    )

    model_config = {"populate_by_name": True}


class UploadConfig(BaseModel):
    """User upload storage configuration."""

    directory: str = Field(default="uploads", alias="UPLOAD_DIR", description="Directory for uploaded files")
    max_avatar_bytes: int = Field(
        default=5 * 1024 * 1024, alias="MAX_AVATAR_BYTES", description="Maximum avatar upload size in bytes"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # MathSolve AI Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="Server host address to bind to",
        alias="MATHSOLVE_SERVER_HOST",
    )
    server_port: int = Field(
        default=5000,
        description="Server port number",
        alias="MATHSOLVE_SERVER_PORT",
    )
    log_level: str = Field(
        default="INFO",
        description="Server logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="MATHSOLVE_LOG_LEVEL",
    )
    environment: str = Field(
        default="development",
        description="Deployment environment (development, production, test)",
        alias="ENVIRONMENT",
    )
    frontend_url: str = Field(
        default="http://localhost:3000",
        description="Public URL of the web frontend, used in emailed links",
        alias="FRONTEND_URL",
    )

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./mathsolve.db",
        description="Async connection URL for application database",
        alias="DATABASE_URL",
    )
    database_auto_create: bool = Field(
        default=True,
        description="Create missing tables on startup",
        alias="DATABASE_AUTO_CREATE",
    )

    # =====================================================================
    # Auth Configuration
    # =====================================================================
    jwt_secret: str = Field(
        default="dev-access-secret-change-me",
        description="Secret used to sign access tokens",
        alias="JWT_SECRET",
    )
    jwt_refresh_secret: str = Field(
        default="dev-refresh-secret-change-me",
        description="Secret used to sign refresh tokens",
        alias="JWT_REFRESH_SECRET",
    )
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_access_expire_minutes: int = Field(default=15, alias="JWT_ACCESS_EXPIRE_MINUTES")
    jwt_refresh_expire_days: int = Field(default=7, alias="JWT_REFRESH_EXPIRE_DAYS")
    jwt_issuer: str = Field(default="mathsolve-ai", alias="JWT_ISSUER")
    jwt_audience: str = Field(default="mathsolve-ai-users", alias="JWT_AUDIENCE")
    bcrypt_rounds: int = Field(default=12, alias="BCRYPT_ROUNDS")
    password_reset_expire_minutes: int = Field(default=60, alias="PASSWORD_RESET_EXPIRE_MINUTES")

    # =====================================================================
    # CORS Configuration
    # =====================================================================
    cors_origins: list[str] = Field(default=["http://localhost:3000"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"], alias="CORS_ALLOW_METHODS"
    )
    cors_allow_headers: list[str] = Field(default=["Content-Type", "Authorization"], alias="CORS_ALLOW_HEADERS")

    # =====================================================================
    # Google OAuth Configuration
    # =====================================================================
    google_client_id: Optional[str] = Field(default=None, alias="GOOGLE_CLIENT_ID")
    google_client_secret: Optional[str] = Field(default=None, alias="GOOGLE_CLIENT_SECRET")
    google_redirect_uri: str = Field(
        default="http://localhost:3000/auth/google/callback", alias="GOOGLE_REDIRECT_URI"
    )
    google_oauth_mock: bool = Field(default=True, alias="GOOGLE_OAUTH_MOCK")
    google_auth_url: str = Field(default="https://accounts.google.com/o/oauth2/v2/auth", alias="GOOGLE_AUTH_URL")
    google_token_url: str = Field(default="https://oauth2.googleapis.com/token", alias="GOOGLE_TOKEN_URL")
    google_tokeninfo_url: str = Field(
        default="https://oauth2.googleapis.com/tokeninfo", alias="GOOGLE_TOKENINFO_URL"
    )

    # =====================================================================
    # Rate Limiting and Uploads
    # =====================================================================
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enforce per-client request rate limits",
        alias="RATE_LIMIT_ENABLED",
    )
    upload_dir: str = Field(default="uploads", alias="UPLOAD_DIR")
    max_avatar_bytes: int = Field(default=5 * 1024 * 1024, alias="MAX_AVATAR_BYTES")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def database(self) -> DatabaseConfig:
        """Get database configuration from environment variables."""
        return DatabaseConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def jwt(self) -> JWTConfig:
        """Get JWT configuration from environment variables."""
        return JWTConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def security(self) -> SecurityConfig:
        """Get password hashing configuration from environment variables."""
        return SecurityConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def google(self) -> GoogleOAuthConfig:
        """Get Google OAuth configuration from environment variables."""
        return GoogleOAuthConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def uploads(self) -> UploadConfig:
        """Get upload storage configuration from environment variables."""
        return UploadConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
