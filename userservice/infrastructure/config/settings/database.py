from typing import Self

from pydantic import PostgresDsn
from pydantic import model_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from userservice import BASE_DIR


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        env_file=[BASE_DIR / ".env"],
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Either a complete SQLAlchemy URL (any async driver, e.g. sqlite+aiosqlite)...
    URI: str | None = None

    # ... or the PostgreSQL components to build it from.
    HOST: str | None = None
    PORT: int | None = None
    USER: str | None = None
    PASSWORD: str | None = None
    PATH: str | None = None

    ECHO: bool = False

    @model_validator(mode="after")
    def build_or_validate_uri(self) -> Self:
        if self.URI is not None:
            return self

        components = {
            "HOST": self.HOST,
            "PORT": self.PORT,
            "USER": self.USER,
            "PASSWORD": self.PASSWORD,
            "PATH": self.PATH,
        }
        missing = [name for name, value in components.items() if value is None]
        if missing:
            raise ValueError(
                f"DATABASE_URI not provided. The following component fields are required: {', '.join(missing)}"
            )

        self.URI = str(
            PostgresDsn.build(
                scheme="postgresql+asyncpg",
                host=self.HOST,
                port=self.PORT,
                username=self.USER,
                password=self.PASSWORD,
                path=self.PATH,
            )
        )
        return self


database_settings = DatabaseSettings()
