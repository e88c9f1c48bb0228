"""Octogate - GitHub OAuth login API and client-side login orchestration."""

from octogate.client import (
    AuthFacade,
    AuthStatus,
    BackendClient,
    FileStorage,
    MemoryStorage,
    NavigationCommand,
    StateManager,
    resume_from_url,
)
from octogate.core import (
    ClientSettings,
    GitHubProviderSettings,
    OctogateSettings,
    SessionSettings,
    TokenExchangeClient,
    create_app,
)
from octogate.core.exceptions import (
    BackendError,
    ConfigurationError,
    CsrfMismatchError,
    InvalidStateError,
    MissingInputError,
    OAuthError,
    OctogateError,
    ProviderError,
    UnauthorizedError,
)
from octogate.models import ExchangeResult, UserProfile
from octogate.providers import AuthProviderProtocol, DemoProvider, GitHubOAuthProvider
from octogate.session import InMemorySessionStore, SessionStoreProtocol

__version__ = "0.1.0"

__all__ = [  # noqa: RUF022
    "__version__",
    # Core
    "create_app",
    "TokenExchangeClient",
    # Settings
    "OctogateSettings",
    "GitHubProviderSettings",
    "SessionSettings",
    "ClientSettings",
    # Models
    "UserProfile",
    "ExchangeResult",
    # Providers
    "AuthProviderProtocol",
    "GitHubOAuthProvider",
    "DemoProvider",
    # Session
    "SessionStoreProtocol",
    "InMemorySessionStore",
    # Client
    "AuthFacade",
    "AuthStatus",
    "BackendClient",
    "StateManager",
    "NavigationCommand",
    "MemoryStorage",
    "FileStorage",
    "resume_from_url",
    # Exceptions
    "OctogateError",
    "MissingInputError",
    "UnauthorizedError",
    "InvalidStateError",
    "CsrfMismatchError",
    "OAuthError",
    "ProviderError",
    "BackendError",
    "ConfigurationError",
]
