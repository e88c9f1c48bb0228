from pathlib import Path

import pytest

from octogate.client.storage import FileStorage, MemoryStorage


def test_memory_storage_roundtrip() -> None:
    storage = MemoryStorage()

    storage.set_item("user_info", "{}")
    assert storage.get_item("user_info") == "{}"

    storage.remove_item("user_info")
    assert storage.get_item("user_info") is None
    assert len(storage) == 0


def test_memory_storage_remove_missing_key() -> None:
    MemoryStorage().remove_item("missing")


def test_file_storage_survives_new_instance(tmp_path: Path) -> None:
    path = tmp_path / "state" / "storage.json"
    FileStorage(path).set_item("github_token", "access_abc")

    assert FileStorage(path).get_item("github_token") == "access_abc"


def test_file_storage_remove(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path / "storage.json")
    storage.set_item("a", "1")
    storage.set_item("b", "2")

    storage.remove_item("a")

    assert storage.get_item("a") is None
    assert storage.get_item("b") == "2"


def test_file_storage_ignores_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{not json", encoding="utf-8")
    storage = FileStorage(path)

    assert storage.get_item("user_info") is None

    storage.set_item("user_info", "{}")
    assert storage.get_item("user_info") == "{}"


def test_file_storage_write_leaves_no_temp_files(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    storage = FileStorage(path)

    storage.set_item("a", "1")
    storage.set_item("b", "2")
    storage.remove_item("a")

    assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]
    assert FileStorage(path).get_item("b") == "2"


def test_file_storage_failed_write_keeps_previous_contents(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "storage.json"
    storage = FileStorage(path)
    storage.set_item("github_token", "access_abc")

    def fail_replace(self: Path, target: Path) -> Path:  # noqa: ARG001
        msg = "disk full"
        raise OSError(msg)

    monkeypatch.setattr(Path, "replace", fail_replace)
    with pytest.raises(OSError, match="disk full"):
        storage.set_item("github_token", "access_new")
    monkeypatch.undo()

    assert storage.get_item("github_token") == "access_abc"
    assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]
