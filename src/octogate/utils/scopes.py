import json


def parse_scopes(scopes_str: str) -> list[str]:
    scopes_str = scopes_str.strip()

    if not scopes_str:
        return []

    if scopes_str.startswith("["):
        try:
            parsed = json.loads(scopes_str)
            if isinstance(parsed, list):
                return [str(scope) for scope in parsed]
        except json.JSONDecodeError:
            pass

    # GitHub accepts space separated scopes, env files tend to use commas
    return [scope for scope in scopes_str.replace(",", " ").split() if scope]


def format_scopes(scopes: list[str]) -> str:
    return " ".join(scope.strip() for scope in scopes if scope.strip())
