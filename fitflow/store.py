"""
FitFlow — State store

AppState is a plain JSON-shaped dict (the snapshot format). Every mutation
here takes the current state and returns a new one; the input is never
modified and untouched branches are shared, so identity of a branch tells
whether it changed. Callers hold the state and pass it explicitly.

Mutations aimed at a date/item that doesn't exist return the state as is.
"""
import copy
import uuid

from fitflow.chronology import today_iso
from fitflow.config import DEFAULT_GOALS, DEFAULT_PROFILE, DEFAULT_WORKOUT_NAME, WORKOUT_COLORS
from fitflow.pr_engine import compute_pr_days
from fitflow.snapshot import validate_snapshot


def new_id() -> str:
    return uuid.uuid4().hex


def initial_state(today: str | None = None) -> dict:
    return {
        "userProfile": dict(DEFAULT_PROFILE),
        "userGoals": dict(DEFAULT_GOALS),
        "weightHistory": [],
        "foodLogs": {},
        "workoutLogs": {},
        "selectedDate": today or today_iso(),
    }


def set_date(state: dict, date: str) -> dict:
    return {**state, "selectedDate": date}


def update_user_profile(state: dict, profile: dict) -> dict:
    return {**state, "userProfile": dict(profile)}


def update_user_goals(state: dict, goals: dict) -> dict:
    return {**state, "userGoals": dict(goals)}


def import_data(data) -> dict:
    """Validated replacement state. Raises SnapshotFormatError, so a bad file changes nothing."""
    return validate_snapshot(data)


def get_all_data(state: dict) -> dict:
    return copy.deepcopy(state)


# ═══════════════════════════════════════════════════════════════════════
# 1. WEIGHT
# ═══════════════════════════════════════════════════════════════════════

def add_weight_entry(state: dict, date: str, weight: float) -> dict:
    """Insert or replace the entry for `date`, keeping history sorted by date."""
    history = [w for w in state["weightHistory"] if w["date"] != date]
    history.append({"date": date, "weight": weight})
    history.sort(key=lambda w: w["date"])
    return {**state, "weightHistory": history}


# ═══════════════════════════════════════════════════════════════════════
# 2. FOOD
# ═══════════════════════════════════════════════════════════════════════

def _with_food_log(state: dict, date: str, log: dict) -> dict:
    return {**state, "foodLogs": {**state["foodLogs"], date: log}}


def _empty_food_log(date: str) -> dict:
    return {"id": new_id(), "date": date, "items": []}


def add_food_item(state: dict, date: str, item: dict) -> dict:
    """Append a copy of `item` with a fresh id, creating the day's log if needed."""
    log = state["foodLogs"].get(date) or _empty_food_log(date)
    new_item = {**item, "id": new_id()}
    return _with_food_log(state, date, {**log, "items": [*log["items"], new_item]})


def edit_food_item(state: dict, date: str, item: dict) -> dict:
    log = state["foodLogs"].get(date)
    if not log:
        return state
    items = [item if i["id"] == item["id"] else i for i in log["items"]]
    return _with_food_log(state, date, {**log, "items": items})


def delete_food_item(state: dict, date: str, item_id: str) -> dict:
    """Remove one item. The day's log stays, even when it ends up empty."""
    log = state["foodLogs"].get(date)
    if not log:
        return state
    items = [i for i in log["items"] if i["id"] != item_id]
    return _with_food_log(state, date, {**log, "items": items})


def update_food_log(state: dict, date: str, log: dict) -> dict:
    return _with_food_log(state, date, {**log, "date": date})


def clone_food_log(log: dict, date: str) -> dict:
    """Deep copy for another date with fresh ids on the log and every item."""
    clone = copy.deepcopy(log)
    clone["id"] = new_id()
    clone["date"] = date
    for item in clone["items"]:
        item["id"] = new_id()
    return clone


def copy_food_day(state: dict, source_date: str, target_date: str) -> dict:
    """Replace the target day's food log with a clone of the source day."""
    source = state["foodLogs"].get(source_date)
    if not source:
        return state
    return _with_food_log(state, target_date, clone_food_log(source, target_date))


def copy_meal_group(state: dict, source_date: str, target_date: str, meal_type: str) -> dict:
    """Append clones of one meal's items from the source day to the target day."""
    source = state["foodLogs"].get(source_date)
    if not source:
        return state
    to_copy = [i for i in source["items"] if i.get("mealType") == meal_type]
    if not to_copy:
        return state
    target = state["foodLogs"].get(target_date) or _empty_food_log(target_date)
    clones = [{**copy.deepcopy(i), "id": new_id()} for i in to_copy]
    return _with_food_log(state, target_date, {**target, "items": [*target["items"], *clones]})


# ═══════════════════════════════════════════════════════════════════════
# 3. WORKOUTS
# ═══════════════════════════════════════════════════════════════════════

def _with_workout(state: dict, date: str, workout: dict) -> dict:
    return {**state, "workoutLogs": {**state["workoutLogs"], date: workout}}


def new_set(weight: float = 0, reps: int = 0) -> dict:
    return {"id": new_id(), "weight": weight, "reps": reps, "isPR": False}


def current_workout(state: dict, date: str) -> dict:
    """The stored log for `date`, or an unsaved blank one."""
    return state["workoutLogs"].get(date) or {
        "id": new_id(),
        "date": date,
        "name": DEFAULT_WORKOUT_NAME,
        "exercises": [],
    }


def update_workout(state: dict, date: str, workout: dict) -> dict:
    return _with_workout(state, date, {**workout, "date": date})


def delete_workout_day(state: dict, date: str) -> dict:
    """The only operation that removes a day's workout log."""
    if date not in state["workoutLogs"]:
        return state
    logs = {d: log for d, log in state["workoutLogs"].items() if d != date}
    return {**state, "workoutLogs": logs}


def rename_workout(state: dict, date: str, name: str) -> dict:
    return update_workout(state, date, {**current_workout(state, date), "name": name})


def set_workout_color(state: dict, date: str, color: str) -> dict:
    """`color` is a WORKOUT_COLORS token or a CSS colour stored as given."""
    color = WORKOUT_COLORS.get(color, color)
    return update_workout(state, date, {**current_workout(state, date), "color": color})


def _map_exercises(state: dict, date: str, fn) -> dict:
    log = state["workoutLogs"].get(date)
    if not log:
        return state
    return _with_workout(state, date, {**log, "exercises": fn(log["exercises"])})


def add_exercise(state: dict, date: str, name: str) -> dict:
    """New exercise with one blank set. Blank names are ignored."""
    if not name:
        return state
    workout = current_workout(state, date)
    exercise = {"id": new_id(), "name": name, "sets": [new_set()]}
    return update_workout(state, date, {**workout, "exercises": [*workout["exercises"], exercise]})


def add_set(state: dict, date: str, exercise_id: str) -> dict:
    """Append a set pre-filled with the previous set's weight and reps."""
    def _add(exercises):
        out = []
        for ex in exercises:
            if ex["id"] == exercise_id:
                last = ex["sets"][-1] if ex["sets"] else None
                added = new_set(last["weight"], last["reps"]) if last else new_set()
                ex = {**ex, "sets": [*ex["sets"], added]}
            out.append(ex)
        return out
    return _map_exercises(state, date, _add)


def update_set(state: dict, date: str, exercise_id: str, set_id: str, **fields) -> dict:
    def _update(exercises):
        return [
            {**ex, "sets": [{**s, **fields} if s["id"] == set_id else s for s in ex["sets"]]}
            if ex["id"] == exercise_id else ex
            for ex in exercises
        ]
    return _map_exercises(state, date, _update)


def delete_set(state: dict, date: str, exercise_id: str, set_id: str) -> dict:
    """
    Remove one set. An exercise left without sets is dropped; a workout left
    without exercises stays in place as an empty log.
    """
    def _delete(exercises):
        out = []
        for ex in exercises:
            if ex["id"] == exercise_id:
                ex = {**ex, "sets": [s for s in ex["sets"] if s["id"] != set_id]}
            if ex["sets"]:
                out.append(ex)
        return out
    return _map_exercises(state, date, _delete)


def update_exercise_notes(state: dict, date: str, exercise_id: str, notes: str) -> dict:
    def _notes(exercises):
        return [{**ex, "notes": notes} if ex["id"] == exercise_id else ex for ex in exercises]
    return _map_exercises(state, date, _notes)


def move_exercise(state: dict, date: str, from_index: int, to_index: int) -> dict:
    """Drag-and-drop reorder inside one workout."""
    if from_index == to_index:
        return state

    def _move(exercises):
        reordered = list(exercises)
        reordered.insert(to_index, reordered.pop(from_index))
        return reordered
    return _map_exercises(state, date, _move)


def clone_workout_log(log: dict, date: str) -> dict:
    """
    Deep copy for another date: fresh ids on the log, its exercises and sets.
    PR hints are stripped since PR status is always recomputed.
    """
    clone = copy.deepcopy(log)
    clone["id"] = new_id()
    clone["date"] = date
    for ex in clone["exercises"]:
        ex["id"] = new_id()
        for s in ex["sets"]:
            s["id"] = new_id()
            s.pop("isPR", None)
    return clone


def copy_workout_day(state: dict, source_date: str, target_date: str) -> dict:
    source = state["workoutLogs"].get(source_date)
    if not source:
        return state
    return _with_workout(state, target_date, clone_workout_log(source, target_date))


# ═══════════════════════════════════════════════════════════════════════
# 4. DERIVED VIEWS
# ═══════════════════════════════════════════════════════════════════════

def new_pr_days_cache() -> dict:
    return {"logs": None, "days": frozenset()}


_pr_days_cache = new_pr_days_cache()


def pr_days(state: dict, cache: dict | None = None) -> frozenset[str]:
    """
    Dates with a PR, recomputed only when workoutLogs changed.

    Change is detected by identity of the workoutLogs dict, so the state must
    only be changed through the functions above, never in place. Pass your
    own `cache` (from new_pr_days_cache) to keep the memo next to a state
    instead of in this module.
    """
    if cache is None:
        cache = _pr_days_cache
    logs = state["workoutLogs"]
    if cache["logs"] is not logs:
        cache["days"] = frozenset(compute_pr_days(logs))
        cache["logs"] = logs
    return cache["days"]
