import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Settings(BaseModel):
    """Settings loaded from TOML configuration files.

    Load order (each layer overrides the previous):
        1. config_path    — base settings, skipped when the file is absent
        2. secrets_path   — credentials (gitignored)
        3. override_path  — per-deployment overrides

    Usage:
        Settings()                                      # config.toml + secrets
        Settings(config_path="config.test.toml")        # test config
        Settings(override_path="config.staging.toml")   # base + secrets + override
    """

    model_config = ConfigDict(extra="forbid")

    def __init__(
        self,
        config_path: str = "config.toml",
        override_path: str | None = None,
        secrets_path: str = "secrets.toml",
    ) -> None:
        data: dict = {}
        if Path(config_path).is_file():
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        if Path(secrets_path).is_file():
            with open(secrets_path, "rb") as f:
                data |= tomllib.load(f)
        if override_path:
            with open(override_path, "rb") as f:
                data |= tomllib.load(f)
        super().__init__(**data)

    PROJECT_NAME: str = "healthcheck"
    LOG_LEVEL: str = "INFO"

    # OpenTelemetry
    ENABLE_METRICS: bool = False
    SERVICE_NAME: str = "healthcheck"
    SERVICE_VERSION: str = "0.1.0"
    OTEL_EXPORTER_OTLP_ENDPOINT: str | None = None

    # MongoDB checker; no checker is built while MONGODB_URL is unset
    MONGODB_URL: str | None = None
    MONGODB_USERNAME: str = ""
    MONGODB_PASSWORD: str = ""
    MONGODB_AUTH_SOURCE: str = ""
    MONGODB_AUTH_MECHANISM: str = ""
    MONGODB_DATABASE: str = ""
    MONGODB_COLLECTION: str = ""
    MONGODB_PING: bool = True
    MONGODB_DIAL_TIMEOUT: float = Field(
        default=1.0,
        description="Seconds allowed for connect, ping, query and disconnect. Non-positive means the default.",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
