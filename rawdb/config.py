from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft7Validator

from rawdb_contracts.models import STORE_CONFIG, load_schema

logger = logging.getLogger("rawdb.config")

ENV_BASE_DIR = "RAWDB_BASE_DIR"
ENV_FILE_EXTENSION = "RAWDB_FILE_EXTENSION"


def _read_config_file(path: Path) -> dict[str, Any]:
    payload = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    Draft7Validator(schema=load_schema("STORE_CONFIG")).validate(payload)
    return payload


def load_config(
    path: str | Path | None = None,
    *,
    base_dir: str | Path | None = None,
    file_extension: str | None = None,
) -> STORE_CONFIG:
    """Resolve store settings.

    Precedence, highest first: explicit arguments, ``RAWDB_BASE_DIR`` /
    ``RAWDB_FILE_EXTENSION``, the YAML file at ``path``, built-in defaults.
    """
    settings: dict[str, Any] = {}
    if path is not None:
        settings.update(_read_config_file(Path(path)))
        logger.debug("loaded config from %s", path)

    env_base_dir = os.getenv(ENV_BASE_DIR)
    if env_base_dir:
        settings["base_dir"] = env_base_dir
    env_extension = os.getenv(ENV_FILE_EXTENSION)
    if env_extension is not None:
        settings["file_extension"] = env_extension

    if base_dir is not None:
        settings["base_dir"] = base_dir
    if file_extension is not None:
        settings["file_extension"] = file_extension

    return STORE_CONFIG.model_validate(settings)
