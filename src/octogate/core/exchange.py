import logging

from octogate.core.exceptions import ConfigurationError, MissingInputError, ProviderError
from octogate.core.settings import OctogateSettings
from octogate.models import ExchangeResult
from octogate.providers.demo import DemoProvider
from octogate.providers.github import GitHubOAuthProvider
from octogate.providers.protocols import AuthProviderProtocol, ProviderIdentity
from octogate.session.store import SessionStoreProtocol
from octogate.utils.crypto import generate_session_token

logger = logging.getLogger(__name__)


class TokenExchangeClient:
    """Turns an authorization code into a signed-in session.

    The primary provider resolves the identity. When it raises ``ProviderError``
    and a fallback provider is configured, the fallback identity is issued
    instead and the caller still receives a success-shaped result.

    Attributes:
        provider: Provider consulted first for every exchange
        store: Session store receiving the issued sessions
        session_ttl: Lifetime of issued sessions in seconds
        fallback: Provider used when the primary provider fails, or None to propagate
    """

    def __init__(
        self,
        provider: AuthProviderProtocol,
        store: SessionStoreProtocol,
        *,
        session_ttl: int,
        fallback: AuthProviderProtocol | None = None,
    ) -> None:
        self.provider = provider
        self.store = store
        self.session_ttl = session_ttl
        self.fallback = fallback

    async def exchange_code(self, code: str | None, state: str | None = None) -> ExchangeResult:
        if not code or not code.strip():
            msg = "missing authorization code"
            raise MissingInputError(msg)

        try:
            identity = await self.provider.authenticate(code, state)
        except ProviderError as e:
            if self.fallback is None:
                logger.error("GitHub login failed: %s", e)  # noqa: TRY400
                raise
            logger.warning("GitHub API call failed, falling back to demo identity: %s", e)
            identity = await self.fallback.authenticate(code, state)
        else:
            logger.info("GitHub login succeeded for %s", identity.user.login)

        return self._issue_session(identity)

    def _issue_session(self, identity: ProviderIdentity) -> ExchangeResult:
        session_token = generate_session_token()
        self.store.create(
            session_token,
            identity.user,
            identity.access_token,
            self.session_ttl,
        )
        return ExchangeResult(user=identity.user, access_token=session_token)


def build_provider(settings: OctogateSettings) -> AuthProviderProtocol:
    if settings.provider_mode == "demo":
        return DemoProvider()

    if not settings.github.configured and not settings.fallback_to_demo:
        msg = "github client_id and client_secret are required when demo fallback is disabled"
        raise ConfigurationError(msg)

    return GitHubOAuthProvider(settings=settings.github)


def build_exchange_client(settings: OctogateSettings, store: SessionStoreProtocol) -> TokenExchangeClient:
    provider = build_provider(settings)
    fallback = DemoProvider() if settings.fallback_to_demo and not isinstance(provider, DemoProvider) else None
    return TokenExchangeClient(
        provider,
        store,
        session_ttl=settings.session.ttl,
        fallback=fallback,
    )
