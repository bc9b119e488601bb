from __future__ import annotations

import shutil
import sys
import uuid
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rawdb.collection import CollectionStore
from rawdb_contracts.models import STORE_CONFIG


@pytest.fixture
def tmp_path() -> Path:
    base = ROOT / "scratch" / "pytest_tmp"
    base.mkdir(parents=True, exist_ok=True)
    path = base / f"case-{uuid.uuid4().hex}"
    path.mkdir(parents=True, exist_ok=True)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def make_store(tmp_path: Path):
    def _make(name: str = "notes", *, file_extension: str = ".jsonl") -> CollectionStore:
        config = STORE_CONFIG(base_dir=tmp_path / "data", file_extension=file_extension)
        return CollectionStore(name, config)

    return _make


@pytest.fixture(autouse=True)
def _clear_store_env(monkeypatch) -> None:
    monkeypatch.delenv("RAWDB_BASE_DIR", raising=False)
    monkeypatch.delenv("RAWDB_FILE_EXTENSION", raising=False)
