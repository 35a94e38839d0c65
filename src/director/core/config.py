from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Autonomous Channel Director"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True  # Set to False in production

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    # Scheduling
    custom_cadence_days: int = 7  # Offset used for "custom" frequency

    # Run engine
    # Cap on a single simulated run. Only simulators that await can hit it;
    # the default narrator returns without suspending.
    run_timeout_seconds: float = 30.0

    # Seed one demo automation on startup
    seed_demo_data: bool = False

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Validate CORS origins - reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @field_validator("custom_cadence_days")
    @classmethod
    def validate_custom_cadence_days(cls, v: int) -> int:
        if v < 1:
            raise ValueError("CUSTOM_CADENCE_DAYS must be at least 1")
        return v

    @field_validator("run_timeout_seconds")
    @classmethod
    def validate_run_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("RUN_TIMEOUT_SECONDS must be positive")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
