import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import SecretStr

from octogate.core.app import create_app
from octogate.core.exchange import TokenExchangeClient, build_exchange_client
from octogate.core.settings import GitHubProviderSettings, OctogateSettings, SessionSettings
from octogate.providers.github import GitHubOAuthProvider
from octogate.session.store import InMemorySessionStore


@pytest.fixture
def github_settings() -> GitHubProviderSettings:
    return GitHubProviderSettings(
        client_id="test-client-id",
        client_secret=SecretStr("test-client-secret"),
        redirect_uri="http://localhost:5173/auth/callback",
        scopes=["user:email", "read:user"],
    )


@pytest.fixture
def settings(github_settings: GitHubProviderSettings) -> OctogateSettings:
    return OctogateSettings(
        service_name="Octogate Test API",
        frontend_url="http://localhost:5173",
        provider_mode="live",
        fallback_to_demo=True,
        github=github_settings,
        session=SessionSettings(ttl=3600),
    )


@pytest.fixture
def github_provider(github_settings: GitHubProviderSettings) -> GitHubOAuthProvider:
    return GitHubOAuthProvider(settings=github_settings)


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def exchange_client(settings: OctogateSettings, store: InMemorySessionStore) -> TokenExchangeClient:
    return build_exchange_client(settings, store)


@pytest.fixture
def app(settings: OctogateSettings, store: InMemorySessionStore, exchange_client: TokenExchangeClient) -> FastAPI:
    return create_app(settings, session_store=store, exchange_client=exchange_client)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    with TestClient(app) as client:
        yield client


@pytest.fixture
def github_user_payload() -> dict:
    return {
        "id": 583231,
        "login": "octocat",
        "name": "The Octocat",
        "email": "octocat@public.example.com",
        "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4",
        "html_url": "https://github.com/octocat",
        "bio": None,
        "public_repos": 8,
        "followers": 9000,
        "following": 9,
        "created_at": "2011-01-25T18:44:36Z",
        "site_admin": False,
    }


@pytest.fixture
def github_emails_payload() -> list[dict]:
    return [
        {"email": "octocat@secondary.example.com", "primary": False, "verified": True, "visibility": None},
        {"email": "octocat@primary.example.com", "primary": True, "verified": True, "visibility": "public"},
    ]
