from octogate.providers.demo import DemoProvider, build_demo_user
from octogate.providers.github import (
    GitHubEmail,
    GitHubOAuthProvider,
    GitHubUserInfo,
    build_authorization_url,
    select_email,
)
from octogate.providers.protocols import AuthProviderProtocol, ProviderIdentity

__all__ = [
    "AuthProviderProtocol",
    "DemoProvider",
    "GitHubEmail",
    "GitHubOAuthProvider",
    "GitHubUserInfo",
    "ProviderIdentity",
    "build_authorization_url",
    "build_demo_user",
    "select_email",
]
