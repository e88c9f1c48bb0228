from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ProviderTag = Literal["github", "email"]


class UserProfile(BaseModel):
    """Snapshot of a signed-in user taken at login time."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    login: str
    name: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    html_url: str | None = None
    bio: str | None = None
    public_repos: int | None = None
    followers: int | None = None
    following: int | None = None
    created_at: str | None = None
    provider: ProviderTag = "github"


class ExchangeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: Literal[True] = True
    user: UserProfile
    access_token: str = Field(min_length=1)
    token_type: Literal["bearer"] = "bearer"


class CallbackRequest(BaseModel):
    code: str | None = None
    state: str | None = None


class UserResponse(BaseModel):
    success: Literal[True] = True
    user: UserProfile


class MessageResponse(BaseModel):
    success: bool
    message: str


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["ok"] = "ok"
    timestamp: str
    service: str
    python_version: str = Field(alias="pythonVersion")
