from octogate.client.storage import STATE_KEY, StorageProtocol
from octogate.providers.github import build_authorization_url
from octogate.utils.crypto import generate_state_token, tokens_match


class StateManager:
    """Single-use anti-CSRF state kept in ephemeral storage."""

    def __init__(self, storage: StorageProtocol, key: str = STATE_KEY) -> None:
        self.storage = storage
        self.key = key

    def generate_state(self) -> str:
        state = generate_state_token()
        self.storage.set_item(self.key, state)
        return state

    def validate_state(self, received_state: str | None) -> bool:
        """Consume the stored state and compare it with the one echoed by the callback.

        The stored value is removed before comparing, so a replayed callback
        always fails the second time.
        """
        stored_state = self.storage.get_item(self.key)
        self.storage.remove_item(self.key)

        if not stored_state or not received_state:
            return False
        return tokens_match(received_state, stored_state)

    def clear(self) -> None:
        self.storage.remove_item(self.key)

    def build_authorize_url(self, client_id: str, redirect_uri: str, scope: str, *, allow_signup: bool = True) -> str:
        return build_authorization_url(
            client_id,
            redirect_uri,
            scope,
            self.generate_state(),
            allow_signup=allow_signup,
        )
