from __future__ import annotations

import os
import random
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

from flask import current_app, has_app_context


@dataclass(frozen=True)
class MazeConfig:
    cell_size: float = 3.0
    collectible_max_count: int = 5
    collectible_min_distance: int = 5
    room_ratio: float = 0.7
    partition_depth: int = 4
    min_partition_size: int = 6
    corridor_stub_chance: float = 0.6
    widen_chance: float = 0.3
    dead_end_open_chance: float = 0.3
    strategic_opening_ratio: float = 0.03
    branch_chance: float = 0.4
    branch_depth: int = 2
    random_placement_attempts: int = 1000
    seed: Optional[int] = None
    enable_metrics: bool = True

    # Environment / app config key -> field name
    OVERRIDE_KEYS = {
        "MAZE_CELL_SIZE": "cell_size",
        "MAZE_COLLECTIBLE_MAX": "collectible_max_count",
        "MAZE_COLLECTIBLE_MIN_DISTANCE": "collectible_min_distance",
        "MAZE_ROOM_RATIO": "room_ratio",
        "MAZE_SEED": "seed",
        "MAZE_ENABLE_METRICS": "enable_metrics",
    }

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> "MazeConfig":
        """Build a config from ``MAZE_*`` variables.

        Precedence (lowest to highest): dataclass defaults, environment,
        ``MAZE_*`` keys of the active Flask app config, explicit keyword
        overrides.
        """
        environ = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for key, attr in cls.OVERRIDE_KEYS.items():
            if key in environ:
                values[attr] = _coerce(attr, environ[key])
        if has_app_context():
            app_cfg = current_app.config
            for key, attr in cls.OVERRIDE_KEYS.items():
                if key in app_cfg and app_cfg[key] is not None:
                    values[attr] = _coerce(attr, app_cfg[key])
        values.update(overrides)
        return cls(**values)

    def with_seed(self, seed: Optional[int]) -> "MazeConfig":
        return replace(self, seed=seed)

    def make_rng(self) -> random.Random:
        # Local RNG so module-level random usage elsewhere does not perturb generation
        return random.Random(self.seed)


_FIELD_TYPES = {f.name: f.type for f in fields(MazeConfig)}


def _coerce(attr: str, raw: Any) -> Any:
    if not isinstance(raw, str):
        return raw
    kind = _FIELD_TYPES[attr]
    if kind == "bool":
        return raw.strip().lower() not in {"0", "false", "no", "off", ""}
    if kind == "float":
        return float(raw)
    if kind == "int":
        return int(raw)
    # Optional[int] seed: empty string means "random"
    raw = raw.strip()
    return int(raw) if raw else None


DEFAULT_CONFIG = MazeConfig()


def resolve(config: MazeConfig | None, rng: random.Random | None):
    """Return ``(config, rng)`` with defaults filled in."""
    config = config or DEFAULT_CONFIG
    return config, (rng if rng is not None else config.make_rng())


__all__ = ["MazeConfig", "DEFAULT_CONFIG", "resolve"]
