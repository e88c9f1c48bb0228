from octogate.utils.crypto import generate_session_token, generate_state_token, tokens_match
from octogate.utils.scopes import format_scopes, parse_scopes

__all__ = [
    "format_scopes",
    "generate_session_token",
    "generate_state_token",
    "parse_scopes",
    "tokens_match",
]
