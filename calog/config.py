from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Session client defaults
    api_base_url: str = "http://localhost:4000"
    request_timeout_seconds: float = 10.0  # Only used when the client builds its own transport

    # Metrics service
    api_key: str | None = None  # Unset = no auth on /metrics
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_prefix": "CALOG_", "extra": "ignore"}


settings = Settings()
