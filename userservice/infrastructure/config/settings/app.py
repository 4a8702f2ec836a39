from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from userservice import BASE_DIR
from userservice.infrastructure.types import LogHandler
from userservice.infrastructure.types import LogLevel


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="USERSERVICE_",
        env_file=[BASE_DIR / ".env"],
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    DEBUG: bool = False

    API_V1_PREFIX: str = "/api/v1"

    LOG_LEVEL_API: LogLevel = "INFO"
    LOG_HANDLERS_API: list[LogHandler] = ["console"]

    LOG_LEVEL_CLI: LogLevel = "INFO"
    LOG_HANDLERS_CLI: list[LogHandler] = ["cli"]

    CACHE_ENABLED: bool = True
    CACHE_MAX_SIZE: int = Field(default=1024, ge=1)
    CACHE_TTL_SECONDS: float = Field(default=600.0, gt=0)


app_settings = AppSettings()
