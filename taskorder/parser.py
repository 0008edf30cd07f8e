"""Configuration and task-set loading.

Config files are YAML (``.yml`` / ``.yaml``) or JSON, chosen by extension::

    workers: 3
    model: index_offset
    log_level: INFO
    tasks:
      - {duration: 2, depends: []}
      - {duration: 3, depends: [0]}
    charts:
      dir: charts
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from taskorder.evaluation import DEFAULT_MODEL
from taskorder.models import Task


@dataclass(slots=True)
class SearchConfig:
    """Everything the entry point needs for one search run."""

    tasks: list[Task] = field(default_factory=list)
    workers: int = 1
    model: str = DEFAULT_MODEL
    eager: bool = False
    detect_cycles: bool = True
    time_limit_ms: Optional[int] = None
    log_level: str = "INFO"
    charts_dir: Optional[str] = None


def load_config(path: str) -> Dict[str, Any]:
    """Read a YAML or JSON config file into a dict (empty file -> ``{}``)."""
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    if path.endswith((".yml", ".yaml")):
        cfg = yaml.safe_load(text) or {}
    else:
        cfg = json.loads(text) if text.strip() else {}
    if not isinstance(cfg, dict):
        raise ValueError(f"Config root must be a mapping, got {type(cfg).__name__}")
    return cfg


def parse_tasks(raw: Any) -> list[Task]:
    """Turn a list of ``{duration, depends}`` mappings into tasks."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError("'tasks' must be a list of {duration, depends} entries")
    tasks = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ValueError(f"Task entry {i} must be a mapping, got {entry!r}")
        tasks.append(Task.from_mapping(entry))
    return tasks


def parse_search_config(cfg: Dict[str, Any]) -> SearchConfig:
    charts_cfg = cfg.get("charts", {}) if isinstance(cfg.get("charts"), dict) else {}
    workers = cfg.get("workers", 1)
    if isinstance(workers, bool) or not isinstance(workers, int):
        raise ValueError(f"'workers' must be an integer, got {workers!r}")
    time_limit_ms = cfg.get("time_limit_ms")
    if time_limit_ms is not None and (
        isinstance(time_limit_ms, bool) or not isinstance(time_limit_ms, int)
    ):
        raise ValueError(f"'time_limit_ms' must be an integer, got {time_limit_ms!r}")
    return SearchConfig(
        tasks=parse_tasks(cfg.get("tasks")),
        workers=workers,
        model=str(cfg.get("model", DEFAULT_MODEL)),
        eager=bool(cfg.get("eager", False)),
        detect_cycles=bool(cfg.get("detect_cycles", True)),
        time_limit_ms=time_limit_ms,
        log_level=str(cfg.get("log_level", "INFO")),
        charts_dir=charts_cfg.get("dir"),
    )


def load_search_config(path: str) -> SearchConfig:
    return parse_search_config(load_config(path))
