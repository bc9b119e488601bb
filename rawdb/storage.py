from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from tempfile import NamedTemporaryFile

logger = logging.getLogger("rawdb.storage")


class FileStorage:
    """UTF-8 text file primitives used by collection stores.

    Failures surface as ``OSError`` from the underlying calls.
    """

    def mkdir_recursive(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def exists(self, path: Path) -> bool:
        return path.exists()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, text: str) -> None:
        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile("w", encoding="utf-8", newline="", dir=path.parent, delete=False) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(text)
            if path.exists():
                # Temp files are created 0600; keep the collection file's mode.
                os.chmod(tmp_path, stat.S_IMODE(path.stat().st_mode))
            tmp_path.replace(path)
        except Exception:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise
        logger.debug("rewrote %s (%d bytes)", path, len(text))

    def append_text(self, path: Path, text: str) -> None:
        with path.open("a", encoding="utf-8", newline="") as f:
            f.write(text)

    def ensure_file(self, file_path: Path, dir_path: Path) -> None:
        self.mkdir_recursive(dir_path)
        if not self.exists(file_path):
            file_path.write_text("", encoding="utf-8")
            logger.debug("created %s", file_path)
