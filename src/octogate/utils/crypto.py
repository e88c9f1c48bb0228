import secrets

SESSION_TOKEN_PREFIX = "access_"


def generate_state_token() -> str:
    return secrets.token_urlsafe(32)


def generate_session_token() -> str:
    return f"{SESSION_TOKEN_PREFIX}{secrets.token_urlsafe(32)}"


def tokens_match(received: str, expected: str) -> bool:
    return secrets.compare_digest(received.encode(), expected.encode())
