from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from octogate.models import UserProfile

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionRecord:
    token: str
    user: UserProfile
    expires_at: datetime
    provider_access_token: str | None = None
    created_at: datetime = field(default_factory=_utcnow)

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expires_at <= (now or _utcnow())


class SessionStoreProtocol(Protocol):
    """Mapping from issued session tokens to signed-in users."""

    def create(
        self,
        token: str,
        user: UserProfile,
        provider_access_token: str | None,
        ttl: int,
    ) -> SessionRecord: ...

    def get(self, token: str) -> UserProfile | None: ...

    def get_record(self, token: str) -> SessionRecord | None: ...

    def delete(self, token: str) -> bool: ...

    def delete_expired(self) -> int: ...


class InMemorySessionStore(SessionStoreProtocol):
    def __init__(self) -> None:
        self._sessions: dict[str, SessionRecord] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, token: object) -> bool:
        return token in self._sessions

    def create(
        self,
        token: str,
        user: UserProfile,
        provider_access_token: str | None,
        ttl: int,
    ) -> SessionRecord:
        now = _utcnow()
        record = SessionRecord(
            token=token,
            user=user,
            provider_access_token=provider_access_token,
            created_at=now,
            expires_at=now + timedelta(seconds=ttl),
        )
        self._sessions[token] = record
        return record

    def get_record(self, token: str) -> SessionRecord | None:
        record = self._sessions.get(token)
        if record is None:
            return None

        if record.is_expired():
            logger.info("Session for %s expired, evicting", record.user.login)
            del self._sessions[token]
            return None

        return record

    def get(self, token: str) -> UserProfile | None:
        if record := self.get_record(token):
            return record.user
        return None

    def delete(self, token: str) -> bool:
        return self._sessions.pop(token, None) is not None

    def delete_expired(self) -> int:
        now = _utcnow()
        expired = [token for token, record in self._sessions.items() if record.is_expired(now)]
        for token in expired:
            del self._sessions[token]
        return len(expired)
