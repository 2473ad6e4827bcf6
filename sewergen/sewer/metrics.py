from typing import Any, Dict


def init_metrics() -> Dict[str, Any]:
    return {
        'attempts': 0,
        'contradictions': 0,
        'rejected_empty': 0,
        'rejected_no_spawn': 0,
        'rejected_no_goal': 0,
        'rejected_no_pool': 0,
        'pools_carved': 0,
        'cells_pruned': 0,
        'bridge_candidates': 0,
        'door_candidates': 0,
        'bridges_placed': 0,
        'doors_placed': 0,
        'runtime_ms': 0,
        'phase_ms': {},
    }
