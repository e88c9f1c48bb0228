import time
from typing import Literal

from octogate.models import UserProfile
from octogate.providers.protocols import ProviderIdentity

DEMO_AVATAR_URL = "https://avatars.githubusercontent.com/u/9919?s=200&v=4"


def build_demo_user(now_ms: int | None = None) -> UserProfile:
    """Fixed demo identity used when no live GitHub login is available."""
    stamp = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    return UserProfile(
        id=f"github_user_{stamp}",
        login="demo-user",
        name="Demo User",
        email="demo@example.com",
        avatar_url=DEMO_AVATAR_URL,
        html_url="https://github.com/demo-user",
        bio="This is a demo user for testing purposes",
        public_repos=42,
        followers=100,
        following=50,
        created_at="2023-01-01T00:00:00Z",
        provider="github",
    )


class DemoProvider:
    """Provider that signs everyone in as the demo user without any network call."""

    @property
    def provider_id(self) -> Literal["github"]:
        return "github"

    async def authenticate(self, code: str, state: str | None = None) -> ProviderIdentity:  # noqa: ARG002
        return ProviderIdentity(user=build_demo_user(), access_token=None)
