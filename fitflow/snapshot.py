"""
FitFlow — Snapshot import/export

The whole AppState travels as one indented JSON document
(fitflow_backup_YYYY-MM-DD.json). Import is all-or-nothing.
"""
import copy
import json
from pathlib import Path

from fitflow.chronology import today_iso
from fitflow.config import DEFAULT_GOALS

REQUIRED_FIELDS = ("userProfile", "foodLogs")


class SnapshotFormatError(ValueError):
    """Imported document is not a FitFlow snapshot."""


def validate_snapshot(data) -> dict:
    """
    Check an already-decoded snapshot and return a normalized deep copy.

    `userProfile` and `foodLogs` must be present; the remaining top-level
    fields fall back to empty/default values. Raises SnapshotFormatError.
    """
    if not isinstance(data, dict):
        raise SnapshotFormatError("Snapshot must be a JSON object")
    missing = [f for f in REQUIRED_FIELDS if data.get(f) is None]
    if missing:
        raise SnapshotFormatError(f"Snapshot is missing required fields: {', '.join(missing)}")
    if not isinstance(data["userProfile"], dict) or not isinstance(data["foodLogs"], dict):
        raise SnapshotFormatError("userProfile and foodLogs must be objects")

    state = copy.deepcopy(data)
    state.setdefault("userGoals", dict(DEFAULT_GOALS))
    state.setdefault("weightHistory", [])
    state.setdefault("workoutLogs", {})
    state.setdefault("selectedDate", today_iso())

    if not isinstance(state["weightHistory"], list) or not isinstance(state["workoutLogs"], dict):
        raise SnapshotFormatError("weightHistory must be a list and workoutLogs an object")

    state["weightHistory"] = _normalize_weight_history(state["weightHistory"])
    return state


def _normalize_weight_history(entries: list) -> list[dict]:
    """One entry per date (the later one wins), sorted by date."""
    by_date = {}
    for w in entries:
        if not isinstance(w, dict) or not isinstance(w.get("date"), str):
            raise SnapshotFormatError(f"weightHistory entry without a date: {w!r}")
        weight = w.get("weight")
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            raise SnapshotFormatError(f"weightHistory entry without a numeric weight: {w!r}")
        by_date[w["date"]] = w
    return [by_date[d] for d in sorted(by_date)]


def parse_snapshot(text: str) -> dict:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotFormatError(f"Snapshot is not valid JSON: {e}") from e
    return validate_snapshot(data)


def dumps(state: dict) -> str:
    return json.dumps(state, indent=2, ensure_ascii=False)


def load_snapshot(path: str | Path) -> dict:
    return parse_snapshot(Path(path).read_text(encoding="utf-8"))


def backup_filename(today: str | None = None) -> str:
    return f"fitflow_backup_{today or today_iso()}.json"


def save_snapshot(state: dict, directory: str | Path = ".", today: str | None = None) -> Path:
    """Write the state as fitflow_backup_<date>.json inside `directory`."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / backup_filename(today)
    path.write_text(dumps(state), encoding="utf-8")
    return path
