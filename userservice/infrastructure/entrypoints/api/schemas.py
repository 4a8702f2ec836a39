from pydantic import BaseModel

from userservice.domain.types import UserField


class HealthCheckResponse(BaseModel):
    status: str
    database: str


class ErrorResponse(BaseModel):
    detail: str


class ConflictResponse(ErrorResponse):
    field: UserField
