"""Client configuration with startup validation.

All config is validated at import time via pydantic-settings.
Invalid values cause an immediate, clear error.
Credentials are optional here; they are required only when a client is built
through the factory.
"""

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "GC_", "env_file": ".env"}

    # Service
    # Bearer tokens from the SSO exchange are valid on the connectapi host.
    base_url: str = "https://connectapi.garmin.com"
    user_agent: str = "GCM-iOS-5.7.2.1"

    # Credentials
    username: str = ""
    password: SecretStr = SecretStr("")
    token_dir: str | None = None

    # Transport
    request_timeout_seconds: float = 30.0
    retry_max_attempts: int = 3
    retry_max_wait_seconds: int = 30

    # Pagination
    page_size: int = 20
    max_pages: int | None = None

    # Logging
    log_json: bool = False
    log_level: str = "INFO"

    @model_validator(mode="after")
    def validate_limits_and_credentials(self) -> "Settings":
        """Fail fast on unusable pagination limits or half-configured credentials."""
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")
        if self.max_pages is not None and self.max_pages < 1:
            raise ValueError(f"max_pages must be >= 1 when set, got {self.max_pages}")
        if self.retry_max_attempts < 1:
            raise ValueError(
                f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}"
            )
        if self.username and not self.password.get_secret_value():
            raise ValueError("GC_USERNAME is set but GC_PASSWORD is missing")
        return self


settings = Settings()
