from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration using Pydantic Settings.

    Values are read from the environment (or a local .env file):
    1. Service identity and runtime mode
    2. Key-value store backend selection
    3. Token verification for the external identity provider
    4. Request and listing limits
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",  # Allow extra fields from .env
    )

    # Application
    app_name: str = "ACWhisk Social"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"  # development, staging, production
    log_level: str = "INFO"
    api_prefix: str = "/api/v1"
    cors_origins: List[str] = ["*"]

    # Key-value store
    kv_backend: str = "redis"  # redis, memory
    redis_url: str = "redis://localhost:6379/0"
    kv_key_prefix: str = "acwhisk:"
    kv_scan_batch_size: int = 200

    # Identity provider tokens
    jwt_secret: str = "change-this-jwt-secret"
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"

    # Request handling
    request_timeout_seconds: float = 25.0

    # Listing limits
    conversation_list_limit: int = 50
    user_list_limit: int = 100
    top_rated_limit: int = 10

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


# Global settings instance
settings = Settings()
