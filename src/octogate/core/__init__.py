from octogate.core.app import configure_logging, create_app
from octogate.core.exchange import TokenExchangeClient, build_exchange_client, build_provider
from octogate.core.settings import ClientSettings, GitHubProviderSettings, OctogateSettings, SessionSettings

__all__ = [
    "ClientSettings",
    "GitHubProviderSettings",
    "OctogateSettings",
    "SessionSettings",
    "TokenExchangeClient",
    "build_exchange_client",
    "build_provider",
    "configure_logging",
    "create_app",
]
