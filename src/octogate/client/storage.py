from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

STATE_KEY = "github_oauth_state"
TOKEN_KEY = "github_token"  # noqa: S105
USER_KEY = "user_info"


class StorageProtocol(Protocol):
    """String key/value storage in the shape of the browser Web Storage API."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage(StorageProtocol):
    """Process-local storage, the equivalent of ``sessionStorage``."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._items)

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileStorage(StorageProtocol):
    """JSON file backed storage that survives restarts, the equivalent of ``localStorage``."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key): str(value) for key, value in data.items()}

    def _save(self, items: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Atomic: write a sibling temp file, then rename it over the target.
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            json.dump(items, tmp, indent=2, sort_keys=True)
        tmp_path = Path(tmp.name)
        try:
            tmp_path.replace(self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._save(items)

    def remove_item(self, key: str) -> None:
        items = self._load()
        if items.pop(key, None) is not None:
            self._save(items)
