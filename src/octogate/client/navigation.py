from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from urllib.parse import parse_qs, urlparse, urlunparse


@dataclass(frozen=True, slots=True, kw_only=True)
class CallbackParams:
    code: str | None = None
    state: str | None = None
    error: str | None = None
    error_description: str | None = None

    @property
    def has_params(self) -> bool:
        return any((self.code, self.state, self.error, self.error_description))


def _first(query: dict[str, list[str]], name: str) -> str | None:
    values = query.get(name)
    if not values:
        return None
    return values[0] or None


def resume_from_url(url: str) -> CallbackParams:
    """Read the OAuth callback parameters a page was loaded with."""
    query = parse_qs(urlparse(url).query)
    return CallbackParams(
        code=_first(query, "code"),
        state=_first(query, "state"),
        error=_first(query, "error"),
        error_description=_first(query, "error_description"),
    )


def strip_query(url: str) -> str:
    parsed = urlparse(url)
    return urlunparse(parsed._replace(query="", fragment=""))


@dataclass(slots=True, kw_only=True)
class NavigationCommand:
    """Full-page redirect the host is asked to perform.

    The login resumes on the next page load via ``AuthFacade.initialize``;
    nothing awaits the redirect itself.
    """

    url: str
    on_cancel: Callable[[], None] | None = field(default=None, repr=False)
    cancelled: bool = False

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        if self.on_cancel is not None:
            self.on_cancel()
