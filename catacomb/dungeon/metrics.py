from typing import Any, Dict, Optional


def init_metrics() -> Dict[str, int | float | bool]:
    return {
        'attempts': 0,
        'rooms_attempted': 0,
        'rooms_placed': 0,
        'doors_created': 0,
        'doors_reverted_local': 0,
        'corridors_carved': 0,
        'corridor_cells': 0,
        'branch_stubs': 0,
        'portal_cells': 0,
        'halls_pruned': 0,
        'halls_dangling': 0,
        'halls_isolated': 0,
        'doors_completed': 0,
        'doors_downgraded': 0,
        'doors_side_capped': 0,
        'rooms_dropped': 0,
        'settle_rounds': 0,
        'runtime_ms': 0.0,
    }


def bump(metrics: Optional[Dict[str, Any]], key: str, n: int) -> None:
    """Add ``n`` to a counter; missing keys start at zero, ``None`` is ignored."""
    if metrics is not None and n:
        metrics[key] = metrics.get(key, 0) + n
