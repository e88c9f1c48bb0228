import logging
import time
from enum import StrEnum
from urllib.parse import quote

from pydantic import ValidationError

from octogate.client.api import BackendClient
from octogate.client.navigation import CallbackParams, NavigationCommand, resume_from_url, strip_query
from octogate.client.state import StateManager
from octogate.client.storage import TOKEN_KEY, USER_KEY, MemoryStorage, StorageProtocol
from octogate.core.exceptions import BackendError, CsrfMismatchError
from octogate.models import UserProfile
from octogate.utils.scopes import format_scopes

logger = logging.getLogger(__name__)

AVATAR_SERVICE_URL = "https://ui-avatars.com/api/"


class AuthStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    ERROR = "error"


def build_email_user(email: str, now_ms: int | None = None) -> UserProfile:
    """Local-only profile for the email sign-in path."""
    local_part = email.split("@", 1)[0]
    stamp = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    return UserProfile(
        id=f"email_user_{stamp}",
        login=local_part,
        name=local_part,
        email=email,
        avatar_url=f"{AVATAR_SERVICE_URL}?name={quote(local_part)}&background=6366f1&color=fff",
        provider="email",
    )


class AuthFacade:
    """Client-side login orchestration.

    Drives the login state machine (idle, loading, authenticated, error) on
    top of the login API. Durable storage keeps the session token and user
    profile between page loads, ephemeral storage keeps the pending OAuth
    state.

    Attributes:
        api: Client for the login API
        durable: Storage for ``github_token`` and ``user_info``
        state_manager: Single-use CSRF state helper on the ephemeral storage
        status: Current state of the login state machine
        user: Signed-in profile, if any
        error: Message describing the last failure, if any

    Example:
        >>> facade = AuthFacade(BackendClient(settings))
        >>> cleaned_url = await facade.initialize(current_url)
        >>> if not facade.is_authenticated:
        ...     command = facade.login_with_github()
        ...     redirect(command.url)
    """

    def __init__(
        self,
        api: BackendClient,
        *,
        durable: StorageProtocol | None = None,
        ephemeral: StorageProtocol | None = None,
    ) -> None:
        self.api = api
        self.durable = durable if durable is not None else MemoryStorage()
        self.state_manager = StateManager(ephemeral if ephemeral is not None else MemoryStorage())
        self.status = AuthStatus.IDLE
        self.user: UserProfile | None = None
        self.error: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_github_user(self) -> bool:
        return self.user is not None and self.user.provider != "email"

    @property
    def loading(self) -> bool:
        return self.status is AuthStatus.LOADING

    def _fail(self, message: str) -> None:
        logger.error("Login failed: %s", message)
        self.status = AuthStatus.ERROR
        self.error = message

    def _sign_in(self, user: UserProfile, token: str | None = None) -> None:
        if token is not None:
            self.durable.set_item(TOKEN_KEY, token)
        self.durable.set_item(USER_KEY, user.model_dump_json())
        self.user = user
        self.error = None
        self.status = AuthStatus.AUTHENTICATED

    async def initialize(self, url: str) -> str | None:
        """Resume authentication on page load.

        Args:
            url: Full URL the page was loaded with

        Returns:
            The URL with OAuth query parameters removed when there were any,
            otherwise None. Hosts replace the visible URL with it.
        """
        self.status = AuthStatus.LOADING
        self.error = None
        params = resume_from_url(url)

        if params.error:
            self.state_manager.clear()
            self._fail(f"GitHub authorization failed: {params.error}")
            return strip_query(url)

        if params.code:
            await self._complete_callback(params)
            return strip_query(url)

        if user := self.get_current_user():
            self.user = user
            self.status = AuthStatus.AUTHENTICATED
        else:
            self.status = AuthStatus.IDLE

        return strip_query(url) if params.has_params else None

    async def _complete_callback(self, params: CallbackParams) -> None:
        try:
            if not self.state_manager.validate_state(params.state):
                msg = "Invalid state parameter - possible CSRF attack"
                raise CsrfMismatchError(msg)
            result = await self.api.exchange_code(params.code or "", params.state)
        except CsrfMismatchError as e:
            self._fail(str(e))
            return
        except BackendError as e:
            self._fail(f"Login failed: {e.message}")
            return

        self._sign_in(result.user, result.access_token)
        logger.info("Signed in as %s", result.user.login)

    def authorize_url(self) -> str:
        settings = self.api.settings
        return self.state_manager.build_authorize_url(
            settings.github_client_id,
            settings.redirect_uri,
            format_scopes(settings.scopes),
        )

    def login_with_github(self) -> NavigationCommand:
        """Start the GitHub login and return the redirect for the host to perform."""
        self.status = AuthStatus.LOADING
        self.error = None

        def _cancel() -> None:
            self.state_manager.clear()
            if self.status is AuthStatus.LOADING:
                self.status = AuthStatus.IDLE

        return NavigationCommand(url=self.authorize_url(), on_cancel=_cancel)

    def login_with_email(self, email: str) -> UserProfile | None:
        self.status = AuthStatus.LOADING
        self.error = None

        email = email.strip()
        local_part, sep, domain = email.partition("@")
        if not (local_part and sep and domain):
            self._fail(f"Email login failed: invalid email address {email!r}")
            return None

        user = build_email_user(email)
        self._sign_in(user)
        return user

    async def logout(self) -> None:
        if token := self.get_stored_token():
            try:
                await self.api.logout(token)
            except BackendError as e:
                logger.warning("Backend logout failed: %s", e.message)

        self.durable.remove_item(TOKEN_KEY)
        self.durable.remove_item(USER_KEY)
        self.state_manager.clear()
        self.user = None
        self.error = None
        self.status = AuthStatus.IDLE

    def get_current_user(self) -> UserProfile | None:
        raw = self.durable.get_item(USER_KEY)
        if not raw:
            return None
        try:
            return UserProfile.model_validate_json(raw)
        except ValidationError as e:
            logger.error("Failed to parse stored user info: %s", e)  # noqa: TRY400
            return None

    def get_stored_token(self) -> str | None:
        return self.durable.get_item(TOKEN_KEY)

    def clear_error(self) -> None:
        self.error = None
        if self.status is AuthStatus.ERROR:
            self.status = AuthStatus.IDLE

    async def check_api_health(self) -> bool:
        return await self.api.check_health()
