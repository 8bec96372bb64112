from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        "dead_ends_opened": 0,
        "strategic_openings": 0,
        "branches_carved": 0,
        "regions_found": 0,
        "regions_merged": 0,
        "corridors_widened": 0,
        "forced_paths": 0,
        "collectibles_requested": 0,
        "collectibles_placed": 0,
        "runtime_ms": 0.0,
        "phase_ms": {},
    }


def bump(grid, key: str, amount: int = 1) -> None:
    """Increment a counter on ``grid.metrics`` when metrics are enabled."""
    if key in grid.metrics:
        grid.metrics[key] += amount
