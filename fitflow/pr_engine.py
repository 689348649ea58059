"""
FitFlow — Personal Record Engine

PR identity is the exercise name, trimmed and lower-cased, so "Squat",
" squat " and "SQUAT" share one history. Stored `isPR` flags on sets are
presentation hints only; everything here is recomputed from the logs.

Two cutoffs coexist:
- compute_pr_days replays every log in date order and lets a set compete
  against earlier sets of the same day.
- is_pr only looks at logs strictly before the date being edited.
"""
import copy

import pandas as pd


def normalize_exercise_name(name: str) -> str:
    return (name or "").strip().lower()


def _new_stats() -> dict:
    return {"max_weight": 0, "reps_by_weight": {}}


def _beats(stats: dict, weight: float, reps: int) -> bool:
    """Weight PR, or rep PR at exactly a weight seen before."""
    if weight > stats["max_weight"]:
        return True
    best_reps = stats["reps_by_weight"].get(weight)
    return best_reps is not None and reps > best_reps


def _record(stats: dict, weight: float, reps: int) -> None:
    if weight > stats["max_weight"]:
        stats["max_weight"] = weight
    if reps > stats["reps_by_weight"].get(weight, 0):
        stats["reps_by_weight"][weight] = reps


def _sorted_logs(workout_logs: dict) -> list[dict]:
    return [workout_logs[d] for d in sorted(workout_logs)]


def compute_pr_days(workout_logs: dict) -> set[str]:
    """
    Dates on which at least one set was a PR.

    Logs are replayed in ascending date order; each set is checked against
    everything before it (earlier days and earlier sets of the same day),
    then folded into the running stats.
    """
    stats: dict[str, dict] = {}
    pr_days = set()

    for log in _sorted_logs(workout_logs):
        day_has_pr = False
        for ex in log.get("exercises", []):
            ex_stats = stats.setdefault(normalize_exercise_name(ex["name"]), _new_stats())
            for s in ex.get("sets", []):
                weight, reps = s.get("weight", 0) or 0, s.get("reps", 0) or 0
                if _beats(ex_stats, weight, reps):
                    day_has_pr = True
                _record(ex_stats, weight, reps)
        if day_has_pr:
            pr_days.add(log["date"])

    return pr_days


def build_exercise_stats(workout_logs: dict, before_date: str) -> dict[str, dict]:
    """Running max weight and best reps-per-weight from logs dated < before_date."""
    stats: dict[str, dict] = {}
    for log in _sorted_logs(workout_logs):
        if log["date"] >= before_date:
            continue
        for ex in log.get("exercises", []):
            ex_stats = stats.setdefault(normalize_exercise_name(ex["name"]), _new_stats())
            for s in ex.get("sets", []):
                _record(ex_stats, s.get("weight", 0) or 0, s.get("reps", 0) or 0)
    return stats


def is_pr(
    exercise_name: str,
    weight: float,
    reps: int,
    as_of_date: str,
    workout_logs: dict,
    stats: dict | None = None,
) -> bool:
    """
    Live check for one set being edited on `as_of_date`.

    Same-day sets are ignored entirely. An exercise with no earlier history
    is never flagged. Pass precomputed `stats` to avoid rebuilding them for
    every set of a log.
    """
    if stats is None:
        stats = build_exercise_stats(workout_logs, as_of_date)
    history = stats.get(normalize_exercise_name(exercise_name))
    if history is None:
        return False
    return _beats(history, weight, reps)


def annotate_pr_sets(log: dict, workout_logs: dict) -> dict:
    """Copy of `log` with the isPR hint filled in on every set."""
    stats = build_exercise_stats(workout_logs, log["date"])
    annotated = copy.deepcopy(log)
    for ex in annotated.get("exercises", []):
        for s in ex.get("sets", []):
            s["isPR"] = is_pr(
                ex["name"], s.get("weight", 0) or 0, s.get("reps", 0) or 0,
                log["date"], workout_logs, stats=stats,
            )
    return annotated


# ═══════════════════════════════════════════════════════════════════════
# TABULAR VIEWS
# ═══════════════════════════════════════════════════════════════════════

def workouts_to_dataframe(workout_logs: dict) -> pd.DataFrame:
    """
    Flatten workout logs to a pandas DataFrame.
    One row per set, in date then logging order.
    """
    rows = []
    for log in _sorted_logs(workout_logs):
        for ex_idx, ex in enumerate(log.get("exercises", [])):
            for set_idx, s in enumerate(ex.get("sets", [])):
                weight = s.get("weight", 0) or 0
                reps = s.get("reps", 0) or 0
                rows.append(
                    {
                        "date": log["date"],
                        "workout_id": log.get("id", ""),
                        "workout_name": log.get("name", ""),
                        "exercise": ex["name"],
                        "exercise_key": normalize_exercise_name(ex["name"]),
                        "exercise_order": ex_idx,
                        "set_number": set_idx + 1,
                        "weight": weight,
                        "reps": reps,
                        "tonnage": weight * reps,
                    }
                )
    return pd.DataFrame(rows)


def pr_table(workout_logs: dict) -> pd.DataFrame:
    """Best set per exercise identity: heaviest weight, then most reps at it."""
    df = workouts_to_dataframe(workout_logs)
    if df.empty:
        return pd.DataFrame()
    weighted = df[df["weight"] > 0]
    if weighted.empty:
        return pd.DataFrame()
    best = (
        weighted.sort_values(["weight", "reps", "date"], ascending=[False, False, True])
        .drop_duplicates("exercise_key")
        [["exercise", "exercise_key", "weight", "reps", "date"]]
        .sort_values("weight", ascending=False)
        .reset_index(drop=True)
    )
    best.index = best.index + 1
    return best
