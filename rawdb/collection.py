from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from rawdb.codec import Record, coerce, dumps_record, matches_term, parse_all, serialize_all, with_id
from rawdb.paths import CollectionPaths, resolve_paths
from rawdb.storage import FileStorage
from rawdb_contracts.models import PAGE, PAGE_REQUEST, STORE_CONFIG

logger = logging.getLogger("rawdb.collection")

_locks_guard = threading.Lock()
# Entries disappear once no operation holds the lock.
_path_locks: weakref.WeakValueDictionary[Path, threading.Lock] = weakref.WeakValueDictionary()


@contextmanager
def _exclusive(file_path: Path) -> Iterator[None]:
    # In-process only; other processes writing the same file can still race.
    key = file_path.resolve()
    with _locks_guard:
        lock = _path_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _path_locks[key] = lock
    with lock:
        yield


class CollectionStore:
    """CRUD and lookup operations over one collection file.

    Every call re-reads the whole file. Mutations rewrite the whole file,
    except ``create`` which appends a single line.
    """

    def __init__(
        self,
        name: str,
        config: STORE_CONFIG | None = None,
        *,
        storage: FileStorage | None = None,
    ) -> None:
        self.name = name
        self.config = config or STORE_CONFIG()
        self.storage = storage or FileStorage()

    @property
    def paths(self) -> CollectionPaths:
        return resolve_paths(self.name, self.config.base_dir, self.config.file_extension)

    def _ensure(self, paths: CollectionPaths) -> None:
        self.storage.ensure_file(paths.file_path, paths.dir_path)

    def _load(self, file_path: Path) -> list[Record]:
        if not self.storage.exists(file_path):
            return []
        return parse_all(self.storage.read_text(file_path))

    def _rewrite(self, file_path: Path, rows: list[Record]) -> None:
        self.storage.write_text(file_path, serialize_all(rows))
        logger.debug("%s: rewrote %d rows", self.name, len(rows))

    def read_all(self) -> list[Record]:
        return self._load(self.paths.file_path)

    def create(self, raw: Any) -> Record:
        paths = self.paths
        with _exclusive(paths.file_path):
            self._ensure(paths)
            rows = self._load(paths.file_path)
            # Follows the last stored row, not the largest id.
            next_id = rows[-1]["id"] + 1 if rows else 1
            record = with_id(coerce(raw).body, next_id)
            self.storage.append_text(paths.file_path, dumps_record(record) + "\n")
        logger.debug("%s: created id=%s", self.name, next_id)
        return record

    def paginate(
        self,
        request: PAGE_REQUEST | None = None,
        *,
        quantity: int | None = None,
        ascending: bool | None = None,
        page: int | None = None,
    ) -> PAGE:
        req = request or PAGE_REQUEST()
        overrides = {
            key: value
            for key, value in {"quantity": quantity, "ascending": ascending, "page": page}.items()
            if value is not None
        }
        if overrides:
            req = req.model_copy(update=overrides)

        rows = self.read_all()
        ordered = rows if req.ascending else rows[::-1]
        start = (req.page - 1) * req.quantity
        end = start + req.quantity
        window = ordered[max(start, 0) : max(end, 0)]
        return PAGE(rows=window, total=len(rows))

    def get_by_index(self, index: int) -> Record | None:
        rows = self.read_all()
        if index < 1 or index > len(rows):
            return None
        return rows[index - 1]

    def get_by_id(self, record_id: int) -> Record | None:
        for row in self.read_all():
            if _has_id(row, record_id):
                return row
        return None

    def find_by_term(self, term: str) -> Record | None:
        for row in self.read_all():
            if matches_term(row, term):
                return row
        return None

    def _delete_where(self, predicate: Callable[[Record], bool]) -> bool:
        paths = self.paths
        with _exclusive(paths.file_path):
            self._ensure(paths)
            rows = self._load(paths.file_path)
            survivors = [row for row in rows if not predicate(row)]
            if len(survivors) == len(rows):
                return False
            self._rewrite(paths.file_path, survivors)
        return True

    def delete_by_term(self, term: str) -> bool:
        return self._delete_where(lambda row: matches_term(row, term))

    def delete_by_id(self, record_id: int) -> bool:
        return self._delete_where(lambda row: _has_id(row, record_id))

    def delete_by_index(self, index: int) -> bool:
        paths = self.paths
        with _exclusive(paths.file_path):
            self._ensure(paths)
            rows = self._load(paths.file_path)
            if index < 1 or index > len(rows):
                return False
            del rows[index - 1]
            self._rewrite(paths.file_path, rows)
        return True

    def _update_first(self, locate: Callable[[list[Record]], int | None], raw: Any) -> bool:
        paths = self.paths
        with _exclusive(paths.file_path):
            self._ensure(paths)
            rows = self._load(paths.file_path)
            position = locate(rows)
            if position is None:
                return False
            rows[position] = with_id(coerce(raw).body, rows[position]["id"])
            self._rewrite(paths.file_path, rows)
        return True

    def update_by_index(self, index: int, raw: Any) -> bool:
        return self._update_first(lambda rows: index - 1 if 1 <= index <= len(rows) else None, raw)

    def update_by_term(self, term: str, raw: Any) -> bool:
        return self._update_first(lambda rows: _first_position(rows, lambda row: matches_term(row, term)), raw)

    def update_by_id(self, record_id: int, raw: Any) -> bool:
        return self._update_first(lambda rows: _first_position(rows, lambda row: _has_id(row, record_id)), raw)


def _has_id(row: Record, record_id: int) -> bool:
    value = row.get("id")
    return type(value) is int and value == record_id


def _first_position(rows: list[Record], predicate: Callable[[Record], bool]) -> int | None:
    for position, row in enumerate(rows):
        if predicate(row):
            return position
    return None
