import logging
from typing import Any, Literal
from urllib.parse import urlencode, urlparse, urlunparse

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from octogate.core.exceptions import ProviderError
from octogate.core.settings import GitHubProviderSettings
from octogate.models import UserProfile
from octogate.providers.protocols import ProviderIdentity
from octogate.utils.scopes import format_scopes

logger = logging.getLogger(__name__)

AUTHORIZATION_URL = "https://github.com/login/oauth/authorize"


class GitHubUserInfo(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    id: int
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


class GitHubEmail(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    email: str
    primary: bool = False
    verified: bool = False
    visibility: str | None = None


def build_authorization_url(
    client_id: str,
    redirect_uri: str,
    scope: str,
    state: str,
    *,
    allow_signup: bool = True,
) -> str:
    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "scope": scope,
        "state": state,
        "allow_signup": "true" if allow_signup else "false",
    }
    parsed = urlparse(AUTHORIZATION_URL)
    return urlunparse(
        (
            parsed.scheme,
            parsed.netloc,
            parsed.path,
            "",
            urlencode(params),
            "",
        ),
    )


def select_email(user_info: GitHubUserInfo, emails: list[GitHubEmail]) -> str | None:
    """Prefer the primary address from the emails endpoint over the public profile email."""
    for entry in emails:
        if entry.primary:
            return entry.email
    return user_info.email


class GitHubOAuthProvider:
    """GitHub OAuth provider talking to the live GitHub endpoints."""

    TOKEN_URL = "https://github.com/login/oauth/access_token"  # noqa: S105
    USER_INFO_URL = "https://api.github.com/user"
    USER_EMAILS_URL = "https://api.github.com/user/emails"
    API_ACCEPT = "application/vnd.github.v3+json"

    def __init__(self, settings: GitHubProviderSettings) -> None:
        self.settings = settings

    @property
    def provider_id(self) -> Literal["github"]:
        return "github"

    @property
    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.settings.timeout)

    def generate_authorization_url(self, state: str) -> str:
        """Generate GitHub OAuth authorization URL."""
        return build_authorization_url(
            self.settings.client_id,
            self.settings.redirect_uri,
            format_scopes(self.settings.scopes),
            state,
            allow_signup=self.settings.allow_signup,
        )

    async def exchange_code_for_token(self, code: str, state: str | None = None) -> str:
        """Exchange an authorization code for a GitHub access token."""
        payload: dict[str, Any] = {
            "client_id": self.settings.client_id,
            "client_secret": self.settings.client_secret.get_secret_value(),
            "code": code,
            "redirect_uri": self.settings.redirect_uri,
        }
        if state is not None:
            payload["state"] = state

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.TOKEN_URL,
                    json=payload,
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
                tokens = response.json()
        except httpx.HTTPStatusError as e:
            msg = f"oauth token exchange failed: {e.response.status_code}"
            raise ProviderError(msg) from e
        except httpx.RequestError as e:
            msg = "oauth token exchange request failed"
            raise ProviderError(msg) from e
        except ValueError as e:
            msg = "oauth token exchange returned malformed json"
            raise ProviderError(msg) from e

        if not isinstance(tokens, dict):
            msg = "oauth token exchange returned unexpected payload"
            raise ProviderError(msg)

        # GitHub reports bad codes with a 200 and an error field
        if error := tokens.get("error"):
            description = tokens.get("error_description")
            msg = f"oauth token exchange rejected: {error}"
            if description:
                msg = f"{msg} ({description})"
            raise ProviderError(msg)

        access_token = tokens.get("access_token")
        if not access_token or not isinstance(access_token, str):
            msg = "missing required field in token response: access_token"
            raise ProviderError(msg)

        return access_token

    async def _get_json(self, url: str, access_token: str, what: str) -> Any:  # noqa: ANN401
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    url,
                    headers={
                        "Authorization": f"Bearer {access_token}",
                        "Accept": self.API_ACCEPT,
                    },
                )
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            msg = f"failed to fetch {what}: {e.response.status_code}"
            raise ProviderError(msg) from e
        except httpx.RequestError as e:
            msg = f"{what} request failed"
            raise ProviderError(msg) from e
        except ValueError as e:
            msg = f"{what} response was not valid json"
            raise ProviderError(msg) from e

    async def get_user_info(self, access_token: str) -> GitHubUserInfo:
        """Fetch the authenticated user's profile."""
        user_data = await self._get_json(self.USER_INFO_URL, access_token, "user info")
        try:
            return GitHubUserInfo.model_validate(user_data)
        except ValidationError as e:
            msg = "user info response was malformed"
            raise ProviderError(msg) from e

    async def get_user_emails(self, access_token: str) -> list[GitHubEmail]:
        """Fetch the authenticated user's email addresses."""
        emails_data = await self._get_json(self.USER_EMAILS_URL, access_token, "user emails")
        if not isinstance(emails_data, list):
            msg = "user emails response was malformed"
            raise ProviderError(msg)
        try:
            return [GitHubEmail.model_validate(entry) for entry in emails_data]
        except ValidationError as e:
            msg = "user emails response was malformed"
            raise ProviderError(msg) from e

    async def authenticate(self, code: str, state: str | None = None) -> ProviderIdentity:
        access_token = await self.exchange_code_for_token(code, state)
        user_info = await self.get_user_info(access_token)
        emails = await self.get_user_emails(access_token)

        user = UserProfile(
            id=str(user_info.id),
            login=user_info.login,
            name=user_info.name,
            email=select_email(user_info, emails),
            avatar_url=user_info.avatar_url,
            html_url=user_info.html_url,
            bio=user_info.bio,
            public_repos=user_info.public_repos,
            followers=user_info.followers,
            following=user_info.following,
            created_at=user_info.created_at,
            provider=self.provider_id,
        )
        logger.debug("Resolved GitHub identity for %s", user.login)
        return ProviderIdentity(user=user, access_token=access_token)
