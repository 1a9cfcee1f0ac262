from typing import Dict


def init_metrics() -> Dict[str, int | float]:
    return {
        'attempts': 0,
        'levels_rejected': 0,
        'regions_connected': 0,
        'corridors_dug': 0,
        'max_dig_radius': 0,
        'wall_regions_removed': 0,
        'floor_regions_removed': 0,
        'lakes_formed': 0,
        'lakes_rejected': 0,
        'camps_placed': 0,
        'nests_placed': 0,
        'placements_skipped': 0,
        'walls_hidden': 0,
        'runtime_ms': 0.0,
    }


def bump(metrics: Dict, key: str, amount: int = 1) -> None:
    """Increment ``key`` if metrics are being collected (empty dict = disabled)."""
    if metrics:
        metrics[key] = metrics.get(key, 0) + amount
