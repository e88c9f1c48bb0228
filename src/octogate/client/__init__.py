from octogate.client.api import BackendClient
from octogate.client.auth import AuthFacade, AuthStatus, build_email_user
from octogate.client.navigation import CallbackParams, NavigationCommand, resume_from_url, strip_query
from octogate.client.state import StateManager
from octogate.client.storage import FileStorage, MemoryStorage, StorageProtocol

__all__ = [
    "AuthFacade",
    "AuthStatus",
    "BackendClient",
    "CallbackParams",
    "FileStorage",
    "MemoryStorage",
    "NavigationCommand",
    "StateManager",
    "StorageProtocol",
    "build_email_user",
    "resume_from_url",
    "strip_query",
]
