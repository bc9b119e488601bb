from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SCHEMAS_DIR = Path(__file__).resolve().parent / "schemas"

DEFAULT_BASE_DIR = "./data"
DEFAULT_FILE_EXTENSION = ".jsonl"


class ContractBaseModel(BaseModel):
    """Base class with common serialization helpers for rawdb contracts."""

    model_config = ConfigDict(extra="forbid")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class STORE_CONFIG(ContractBaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_dir: Path = Path(DEFAULT_BASE_DIR)
    file_extension: str = DEFAULT_FILE_EXTENSION


class PAGE_REQUEST(ContractBaseModel):
    # Not range-checked: out-of-range pages yield an empty window.
    quantity: int = 10
    ascending: bool = True
    page: int = 1


class PAGE(ContractBaseModel):
    rows: list[dict[str, Any]] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)


SCHEMA_NAMES = ("RECORD", "STORE_CONFIG")


def schema_path(contract_name: str) -> Path:
    return SCHEMAS_DIR / f"{contract_name}.schema.json"


def load_schema(contract_name: str) -> dict[str, Any]:
    path = schema_path(contract_name)
    return json.loads(path.read_text(encoding="utf-8"))
