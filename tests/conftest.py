from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# Imports like `import persistence...` and `import json_store` live at the root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def memory_store():
    from persistence import InMemoryKVStore

    return InMemoryKVStore()


@pytest.fixture
def memory_adapter(memory_store):
    from persistence import StorageAdapter

    return StorageAdapter(memory_store)


@pytest.fixture
def disk_store(tmp_path: Path):
    from persistence import DiskKVStore

    return DiskKVStore(tmp_path / "data" / "localstore.json")


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Point the disk backend at a temp directory so tests never touch real ./data.
    """
    monkeypatch.setenv("LOCALSTORE_BACKEND", "disk")
    monkeypatch.setenv("LOCALSTORE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("LOCALSTORE_FILE", "localstore.json")
    return tmp_path
