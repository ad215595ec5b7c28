from __future__ import annotations

"""Utilities for working with JSON frames and structured files."""

import json
from pathlib import Path
from typing import Any

import yaml

_YAML_SUFFIXES = {".yaml", ".yml"}


def dumps_frame(payload: Any) -> str:
    """Serialize *payload* as compact, newline-free JSON text."""

    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def read_structured(path: Path) -> Any:
    """Read a YAML or JSON document, chosen by file suffix."""

    if path.suffix.lower() in _YAML_SUFFIXES:
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    return read_json(path)
