"""
FitFlow — Weight goal progress

Pure functions of (weight_history, target_weight). Start is the earliest
recorded weight, current the latest.
"""


def goal_progress(weight_history: list[dict], target_weight: float) -> dict:
    """
    Direction-aware progress toward the target weight.

    Returns {progress_pct, is_complete, start_weight}:
    - no history: 0%, start reported as the target itself
    - start == target: 100% and complete
    - moving away from the target: 0% no matter how far
    - past the target in the goal direction: complete, 100%
    - otherwise covered / total distance, clamped to 0..100
    """
    if not weight_history:
        return {"progress_pct": 0, "is_complete": False, "start_weight": target_weight}

    start = weight_history[0]["weight"]
    current = weight_history[-1]["weight"]

    total_distance = abs(target_weight - start)
    if total_distance == 0:
        return {"progress_pct": 100, "is_complete": True, "start_weight": start}

    losing = target_weight < start
    if losing:
        moving_correctly = current <= start
        is_complete = current <= target_weight
    else:
        moving_correctly = current >= start
        is_complete = current >= target_weight

    if is_complete:
        progress = 100
    elif moving_correctly:
        progress = abs(current - start) / total_distance * 100
    else:
        progress = 0

    return {
        "progress_pct": max(0, min(100, progress)),
        "is_complete": is_complete,
        "start_weight": start,
    }


def goal_reached(prev_pct: float, new_pct: float) -> bool:
    """True only on the update that takes progress from below 100% to 100%."""
    return new_pct >= 100 and prev_pct < 100
