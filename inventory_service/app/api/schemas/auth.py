from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    logged_in: bool = Field(alias="loggedIn")
    user_id: str | None = None


class MessageResponse(BaseModel):
    message: str
