from typing import Self

from pydantic import Field
from pydantic import model_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from userservice import BASE_DIR


class ExecutorSettings(BaseSettings):
    """Sizing of the worker pool running the asynchronous lookups.

    Jobs first start new workers up to `CORE_WORKERS`, then wait in a queue of
    `QUEUE_CAPACITY` slots. Once the queue is full, extra workers are started up
    to `MAX_WORKERS`, after which any new job is rejected.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXECUTOR_",
        env_file=[BASE_DIR / ".env"],
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    CORE_WORKERS: int = Field(default=20, ge=1)
    MAX_WORKERS: int = Field(default=1000, ge=1)
    QUEUE_CAPACITY: int = Field(default=500, ge=1)
    WORKER_NAME_PREFIX: str = "UserService-Async-"
    KEEP_ALIVE_SECONDS: float = Field(default=60.0, gt=0)

    @model_validator(mode="after")
    def validate_workers(self) -> Self:
        if self.MAX_WORKERS < self.CORE_WORKERS:
            raise ValueError(
                f"EXECUTOR_MAX_WORKERS ({self.MAX_WORKERS}) cannot be lower "
                f"than EXECUTOR_CORE_WORKERS ({self.CORE_WORKERS})"
            )
        return self


executor_settings = ExecutorSettings()
