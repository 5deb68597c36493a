"""Pydantic request/response schemas for the Identity API."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    name: str
    email: str
    password: str

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {"name": "Default User", "email": "user@example.com", "password": "password123"},
            ]
        },
    )


class LoginRequest(CamelModel):
    email: str
    password: str


class UpdateProfileRequest(CamelModel):
    name: str | None = None
    address: str | None = None


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    role: str
    address: str | None = None
    profile_image: str | None = None


class UserEnvelope(CamelModel):
    message: str | None = None
    user: UserResponse


class StatusResponse(CamelModel):
    status: str = "ok"
    message: str | None = None
