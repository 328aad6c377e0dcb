from __future__ import annotations

import math
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml


def load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a dict at root of YAML: {path}")
    return data


def resolve_path(path: str, base_dir: Optional[str] = None) -> str:
    p = Path(path)
    if p.is_absolute():
        return str(p)
    if base_dir is None:
        base_dir = os.getcwd()
    return str((Path(base_dir) / p).resolve())


def section(d: Mapping[str, Any], key: str) -> Dict[str, Any]:
    value = d.get(key, {}) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a dict")
    return dict(value)


def positive_float(d: Mapping[str, Any], key: str, default: float) -> float:
    value = float(d.get(key, default))
    if not math.isfinite(value) or value <= 0.0:
        raise ValueError(f"{key} must be a positive number, got {value}")
    return value
