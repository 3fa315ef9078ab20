from __future__ import annotations

from pathlib import Path

import yaml

from .strategies import SOLVERS

DEFAULTS = {
    "toggle_solver": "exhaustive",
    "joltage_solver": "halving",
    "cross_check": [],
    "batch_size": 20,
    "workers": None,
    "output": "results/machines.csv",
}


def parse_run_config(raw: dict | None) -> dict:
    """Merge a ``run:`` mapping over the defaults and check solver names."""
    cfg = dict(DEFAULTS)
    if raw:
        unknown = set(raw) - set(DEFAULTS)
        if unknown:
            raise ValueError(f"Unknown run config keys: {sorted(unknown)}")
        cfg.update(raw)

    for key, question in (
        ("toggle_solver", "lights"),
        ("joltage_solver", "joltage"),
    ):
        name = str(cfg[key]).lower()
        if name not in SOLVERS or SOLVERS[name].question != question:
            raise ValueError(f"Invalid {key}: {cfg[key]!r}")
        cfg[key] = name

    checks = cfg["cross_check"] or []
    if isinstance(checks, str):
        checks = [checks]
    cfg["cross_check"] = [str(c).lower() for c in checks]
    for name in cfg["cross_check"]:
        if name not in SOLVERS:
            raise ValueError(f"Unknown cross_check solver: {name!r}")

    cfg["batch_size"] = int(cfg["batch_size"])
    if cfg["batch_size"] < 1:
        raise ValueError("batch_size must be at least 1")
    if cfg["workers"] is not None:
        cfg["workers"] = int(cfg["workers"])
    return cfg


def load_run_config(path: str | Path | None) -> dict:
    if path is None:
        return parse_run_config(None)
    with open(path, "r", encoding="utf-8") as f:
        doc = yaml.safe_load(f) or {}
    return parse_run_config(doc.get("run"))
