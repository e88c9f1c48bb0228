from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from octogate.models import UserProfile


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderIdentity:
    """Profile resolved by a provider plus the credential it was resolved with."""

    user: UserProfile
    access_token: str | None = None


class AuthProviderProtocol(Protocol):
    """Protocol that live and demo identity providers implement."""

    @property
    def provider_id(self) -> str: ...

    async def authenticate(self, code: str, state: str | None = None) -> ProviderIdentity: ...
