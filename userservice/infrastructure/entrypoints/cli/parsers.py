from typing import Annotated
from typing import get_args

from pydantic import TypeAdapter
from pydantic import ValidationError

import typer

from userservice.domain.schemas.user import UserCreate
from userservice.infrastructure.types import LogHandler
from userservice.infrastructure.types import LogLevel


def _field_adapter(name: str) -> TypeAdapter[str]:
    field_info = UserCreate.model_fields[name]
    return TypeAdapter(Annotated[field_info.annotation, field_info])


UsernameAdapter: TypeAdapter[str] = _field_adapter("username")
EmailAdapter: TypeAdapter[str] = _field_adapter("email")
FullNameAdapter: TypeAdapter[str] = _field_adapter("full_name")


def _validate(adapter: TypeAdapter[str], value: str) -> str:
    try:
        return adapter.validate_python(value)
    except ValidationError as e:
        raise typer.BadParameter(e.errors()[0]["msg"]) from e


def parse_username(value: str) -> str:
    return _validate(UsernameAdapter, value)


def parse_email(value: str) -> str:
    return _validate(EmailAdapter, value)


def parse_full_name(value: str) -> str:
    return _validate(FullNameAdapter, value)


def validate_log_level(value: str) -> str:
    choices = get_args(LogLevel)
    if value not in choices:
        raise typer.BadParameter(f"Must be one of: {', '.join(choices)}")
    return value


def validate_log_handlers(values: list[str]) -> list[str]:
    choices = get_args(LogHandler)
    for value in values:
        if value not in choices:
            raise typer.BadParameter(f"Must be one of: {', '.join(choices)}")
    return values
