from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TASKAPI_",
    )

    # Server
    bind_addr: str = "http://0.0.0.0:8080/api"
    api_prefix: str = "/api"

    # Tokens
    token_ttl_seconds: int = 300  # 5 minutes
    token_leeway_seconds: int = 0

    # Task store eviction
    cleanup_enabled: bool = True
    cleanup_interval_seconds: int = 60
    task_retention_seconds: int = 3600  # 1 hour

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    # CORS
    cors_origins: list[str] | str = []

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        if v.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return v

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


settings = Settings()
