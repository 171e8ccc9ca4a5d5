"""Configuration Settings for Account Service

Manages environment variables and application configuration.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""

    # Service info
    service_name: str = "account-service"
    service_version: str = "1.0.0"
    environment: str = "development"

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Public base URL of the web application (workflow routes live under it)
    api_endpoint: str = "http://localhost:3000"

    # Redis configuration
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None

    @property
    def redis_url(self) -> str:
        """Construct Redis URL from components"""
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    # Database configuration
    database_url: str = "sqlite+aiosqlite:///./accounts.db"
    sql_echo: bool = False
    auto_create_tables: bool = True  # Use migrations instead in production

    # Rate limiting (fixed window per caller IP)
    rate_limit_enabled: bool = True
    rate_limit_requests: int = 5
    rate_limit_period: int = 60  # seconds
    rate_limit_prefix: str = "ratelimit"
    too_fast_path: str = "/too-fast"

    # Password hashing
    password_hash_rounds: int = 10

    # Session configuration
    auth_provider: str = "credentials"
    session_secret_key: str = "dev-secret-change-in-production"
    session_algorithm: str = "HS256"
    session_max_age_seconds: int = 30 * 24 * 60 * 60  # 30 days
    session_cookie_name: str = "session"
    session_cookie_secure: bool = False

    # Onboarding workflow trigger
    workflow_token: Optional[str] = None
    workflow_timeout_seconds: float = 10.0

    # CORS configuration
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance

    Returns:
        Settings instance
    """
    return Settings()
