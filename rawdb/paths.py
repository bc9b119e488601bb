from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

SEGMENT_SEPARATOR = "-"


@dataclass(frozen=True, slots=True)
class CollectionPaths:
    dir_path: Path
    file_path: Path


def resolve_paths(name: str, base_dir: str | Path, file_extension: str) -> CollectionPaths:
    """Map a dash-delimited collection name onto ``base_dir``.

    ``"shop-orders-2024"`` becomes ``<base_dir>/shop/orders/2024<ext>``. Segments
    are used as-is; a name without a dash lands directly under ``base_dir``.
    """
    *dir_parts, leaf = name.split(SEGMENT_SEPARATOR)
    dir_path = Path(base_dir).joinpath(*dir_parts)
    return CollectionPaths(dir_path=dir_path, file_path=dir_path / f"{leaf}{file_extension}")
