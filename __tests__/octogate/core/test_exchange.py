import httpx
import pytest
import respx
from pydantic import SecretStr

from octogate.core.exceptions import ConfigurationError, MissingInputError, ProviderError
from octogate.core.exchange import TokenExchangeClient, build_exchange_client, build_provider
from octogate.core.settings import GitHubProviderSettings, OctogateSettings
from octogate.providers.demo import DemoProvider
from octogate.providers.github import GitHubOAuthProvider
from octogate.providers.protocols import ProviderIdentity
from octogate.session.store import InMemorySessionStore


class FailingProvider:
    def __init__(self) -> None:
        self.calls = 0

    @property
    def provider_id(self) -> str:
        return "github"

    async def authenticate(self, code: str, state: str | None = None) -> ProviderIdentity:  # noqa: ARG002
        self.calls += 1
        msg = "oauth token exchange rejected: bad_verification_code"
        raise ProviderError(msg)


@pytest.fixture
def mock_github(github_user_payload: dict, github_emails_payload: list[dict]) -> respx.MockRouter:
    with respx.mock(assert_all_called=False) as router:
        router.post(GitHubOAuthProvider.TOKEN_URL).mock(
            return_value=httpx.Response(200, json={"access_token": "gho_live"}),
        )
        router.get(GitHubOAuthProvider.USER_INFO_URL).mock(
            return_value=httpx.Response(200, json=github_user_payload),
        )
        router.get(GitHubOAuthProvider.USER_EMAILS_URL).mock(
            return_value=httpx.Response(200, json=github_emails_payload),
        )
        yield router


@pytest.mark.asyncio
async def test_exchange_code_live_path(
    exchange_client: TokenExchangeClient,
    store: InMemorySessionStore,
    mock_github: respx.MockRouter,  # noqa: ARG001
) -> None:
    result = await exchange_client.exchange_code("abc123", "state-1")

    assert result.success is True
    assert result.token_type == "bearer"  # noqa: S105
    assert result.access_token.startswith("access_")
    assert result.user.login == "octocat"

    record = store.get_record(result.access_token)
    assert record is not None
    assert record.provider_access_token == "gho_live"  # noqa: S105
    assert record.user == result.user


@pytest.mark.asyncio
async def test_exchange_code_never_returns_provider_token(
    exchange_client: TokenExchangeClient,
    mock_github: respx.MockRouter,  # noqa: ARG001
) -> None:
    result = await exchange_client.exchange_code("abc123")
    assert "gho_live" not in result.model_dump_json()


@pytest.mark.asyncio
@respx.mock
async def test_exchange_code_falls_back_to_demo_on_provider_error(
    exchange_client: TokenExchangeClient,
    store: InMemorySessionStore,
) -> None:
    respx.post(GitHubOAuthProvider.TOKEN_URL).mock(
        return_value=httpx.Response(200, json={"error": "bad_verification_code"}),
    )

    result = await exchange_client.exchange_code("abc123", "state-1")

    assert result.success is True
    assert result.access_token
    assert result.user.login == "demo-user"
    assert result.user.provider == "github"
    assert store.get(result.access_token) == result.user


@pytest.mark.asyncio
@respx.mock
async def test_exchange_code_falls_back_on_network_error(exchange_client: TokenExchangeClient) -> None:
    respx.post(GitHubOAuthProvider.TOKEN_URL).mock(side_effect=httpx.ConnectError("unreachable"))

    result = await exchange_client.exchange_code("abc123")

    assert result.user.login == "demo-user"


@pytest.mark.asyncio
async def test_exchange_code_issues_fresh_tokens(store: InMemorySessionStore) -> None:
    exchange_client = TokenExchangeClient(DemoProvider(), store, session_ttl=60)

    first = await exchange_client.exchange_code("abc123")
    second = await exchange_client.exchange_code("abc123")

    assert first.access_token != second.access_token
    assert len(store) == 2


@pytest.mark.asyncio
async def test_exchange_code_without_fallback_propagates(store: InMemorySessionStore) -> None:
    provider = FailingProvider()
    exchange_client = TokenExchangeClient(provider, store, session_ttl=60)

    with pytest.raises(ProviderError, match="bad_verification_code"):
        await exchange_client.exchange_code("abc123")

    assert provider.calls == 1
    assert len(store) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("code", [None, "", "   "])
async def test_exchange_code_requires_code(
    code: str | None,
    exchange_client: TokenExchangeClient,
    store: InMemorySessionStore,
) -> None:
    with pytest.raises(MissingInputError):
        await exchange_client.exchange_code(code, "state-1")

    assert len(store) == 0


def test_build_provider_demo_mode(settings: OctogateSettings) -> None:
    settings = settings.model_copy(update={"provider_mode": "demo"})
    assert isinstance(build_provider(settings), DemoProvider)


def test_build_provider_live_mode(settings: OctogateSettings) -> None:
    assert isinstance(build_provider(settings), GitHubOAuthProvider)


def test_build_provider_requires_credentials_without_fallback() -> None:
    settings = OctogateSettings(
        fallback_to_demo=False,
        github=GitHubProviderSettings(client_id="", client_secret=SecretStr("")),
    )

    with pytest.raises(ConfigurationError):
        build_provider(settings)


def test_build_exchange_client_fallback_toggle(settings: OctogateSettings, store: InMemorySessionStore) -> None:
    with_fallback = build_exchange_client(settings, store)
    without_fallback = build_exchange_client(settings.model_copy(update={"fallback_to_demo": False}), store)
    demo_only = build_exchange_client(settings.model_copy(update={"provider_mode": "demo"}), store)

    assert isinstance(with_fallback.fallback, DemoProvider)
    assert without_fallback.fallback is None
    assert isinstance(demo_only.provider, DemoProvider)
    assert demo_only.fallback is None
    assert with_fallback.session_ttl == 3600
