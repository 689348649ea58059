"""
Tests for state mutations — immutability, id handling, cascades and clones.
"""
import copy

import pytest


def _make_state() -> dict:
    from fitflow.store import initial_state
    state = initial_state("2024-03-10")
    state["workoutLogs"] = {
        "2024-03-01": {
            "id": "w1",
            "date": "2024-03-01",
            "name": "Грудь",
            "exercises": [
                {"id": "e1", "name": "Bench", "sets": [
                    {"id": "s1", "weight": 100, "reps": 5, "isPR": True},
                    {"id": "s2", "weight": 100, "reps": 4},
                ]},
                {"id": "e2", "name": "Fly", "sets": [{"id": "s3", "weight": 20, "reps": 12}]},
            ],
        },
    }
    state["foodLogs"] = {
        "2024-03-01": {"id": "f1", "date": "2024-03-01", "items": [
            {"id": "i1", "name": "Овсянка", "calories": 300, "protein": 10, "fat": 6,
             "carbs": 50, "mealType": "breakfast"},
            {"id": "i2", "name": "Суп", "calories": 250, "protein": 12, "fat": 8,
             "carbs": 20, "mealType": "lunch"},
        ]},
    }
    return state


class TestWeightEntries:

    def test_replace_same_date_and_sort(self):
        from fitflow.store import add_weight_entry, initial_state
        state = initial_state("2024-03-10")
        state = add_weight_entry(state, "2024-03-05", 80.0)
        state = add_weight_entry(state, "2024-03-01", 81.0)
        state = add_weight_entry(state, "2024-03-05", 79.5)
        assert state["weightHistory"] == [
            {"date": "2024-03-01", "weight": 81.0},
            {"date": "2024-03-05", "weight": 79.5},
        ]

    def test_input_not_mutated(self):
        from fitflow.store import add_weight_entry, initial_state
        state = initial_state("2024-03-10")
        add_weight_entry(state, "2024-03-05", 80.0)
        assert state["weightHistory"] == []


class TestFoodMutations:

    def test_add_assigns_fresh_id_and_creates_log(self):
        from fitflow.store import add_food_item
        state = _make_state()
        item = {"id": "client", "name": "Яблоко", "calories": 50, "protein": 0,
                "fat": 0, "carbs": 12, "mealType": "snack"}
        new = add_food_item(state, "2024-03-02", item)
        added = new["foodLogs"]["2024-03-02"]["items"][0]
        assert added["id"] != "client"
        assert added["name"] == "Яблоко"
        assert "2024-03-02" not in state["foodLogs"]

    def test_edit_and_delete(self):
        from fitflow.store import delete_food_item, edit_food_item
        state = _make_state()
        edited = edit_food_item(state, "2024-03-01", {
            **state["foodLogs"]["2024-03-01"]["items"][0], "calories": 350})
        assert edited["foodLogs"]["2024-03-01"]["items"][0]["calories"] == 350
        assert state["foodLogs"]["2024-03-01"]["items"][0]["calories"] == 300

        deleted = delete_food_item(edited, "2024-03-01", "i1")
        deleted = delete_food_item(deleted, "2024-03-01", "i2")
        assert deleted["foodLogs"]["2024-03-01"]["items"] == []

    def test_missing_log_is_noop(self):
        from fitflow.store import delete_food_item, edit_food_item
        state = _make_state()
        assert delete_food_item(state, "2024-01-01", "i1") is state
        assert edit_food_item(state, "2024-01-01", {"id": "i1"}) is state

    def test_copy_meal_group(self):
        from fitflow.store import copy_meal_group
        state = _make_state()
        new = copy_meal_group(state, "2024-03-01", "2024-03-02", "breakfast")
        items = new["foodLogs"]["2024-03-02"]["items"]
        assert [i["name"] for i in items] == ["Овсянка"]
        assert items[0]["id"] != "i1"
        assert copy_meal_group(state, "2024-03-01", "2024-03-02", "dinner") is state

    def test_copy_food_day(self):
        from fitflow.store import copy_food_day
        state = _make_state()
        new = copy_food_day(state, "2024-03-01", "2024-03-04")
        log = new["foodLogs"]["2024-03-04"]
        assert log["date"] == "2024-03-04"
        assert log["id"] != "f1"
        assert {i["id"] for i in log["items"]}.isdisjoint({"i1", "i2"})
        assert [i["name"] for i in log["items"]] == ["Овсянка", "Суп"]


class TestWorkoutMutations:

    def test_delete_set_keeps_exercise_with_sets(self):
        from fitflow.store import delete_set
        new = delete_set(_make_state(), "2024-03-01", "e1", "s2")
        sets = new["workoutLogs"]["2024-03-01"]["exercises"][0]["sets"]
        assert [s["id"] for s in sets] == ["s1"]

    def test_delete_last_set_removes_exercise(self):
        from fitflow.store import delete_set
        new = delete_set(_make_state(), "2024-03-01", "e2", "s3")
        assert [e["id"] for e in new["workoutLogs"]["2024-03-01"]["exercises"]] == ["e1"]

    def test_empty_workout_log_survives(self):
        from fitflow.store import delete_set
        state = _make_state()
        for ex_id, set_id in [("e1", "s1"), ("e1", "s2"), ("e2", "s3")]:
            state = delete_set(state, "2024-03-01", ex_id, set_id)
        assert state["workoutLogs"]["2024-03-01"]["exercises"] == []

    def test_delete_workout_day(self):
        from fitflow.store import delete_workout_day
        state = _make_state()
        new = delete_workout_day(state, "2024-03-01")
        assert new["workoutLogs"] == {}
        assert "2024-03-01" in state["workoutLogs"]

    def test_add_exercise_creates_log(self):
        from fitflow.store import add_exercise
        from fitflow.config import DEFAULT_WORKOUT_NAME
        new = add_exercise(_make_state(), "2024-03-03", "Squat")
        log = new["workoutLogs"]["2024-03-03"]
        assert log["name"] == DEFAULT_WORKOUT_NAME
        assert log["exercises"][0]["name"] == "Squat"
        assert log["exercises"][0]["sets"][0]["weight"] == 0

    def test_add_exercise_blank_name(self):
        from fitflow.store import add_exercise
        state = _make_state()
        assert add_exercise(state, "2024-03-03", "") is state

    def test_add_set_copies_previous(self):
        from fitflow.store import add_set
        new = add_set(_make_state(), "2024-03-01", "e2")
        sets = new["workoutLogs"]["2024-03-01"]["exercises"][1]["sets"]
        assert len(sets) == 2
        assert (sets[1]["weight"], sets[1]["reps"]) == (20, 12)
        assert sets[1]["id"] != "s3"

    def test_update_set_and_notes(self):
        from fitflow.store import update_exercise_notes, update_set
        state = update_set(_make_state(), "2024-03-01", "e1", "s2", weight=102.5, reps=3)
        state = update_exercise_notes(state, "2024-03-01", "e1", "узкий хват")
        ex = state["workoutLogs"]["2024-03-01"]["exercises"][0]
        assert ex["sets"][1] == {"id": "s2", "weight": 102.5, "reps": 3}
        assert ex["notes"] == "узкий хват"

    def test_move_exercise(self):
        from fitflow.store import move_exercise
        new = move_exercise(_make_state(), "2024-03-01", 1, 0)
        assert [e["id"] for e in new["workoutLogs"]["2024-03-01"]["exercises"]] == ["e2", "e1"]

    def test_rename_and_color(self):
        from fitflow.store import rename_workout, set_workout_color
        state = rename_workout(_make_state(), "2024-03-01", "Грудь и трицепс")
        state = set_workout_color(state, "2024-03-05", "blue")
        assert state["workoutLogs"]["2024-03-01"]["name"] == "Грудь и трицепс"
        assert state["workoutLogs"]["2024-03-05"]["color"] == "#3b82f6"
        assert state["workoutLogs"]["2024-03-05"]["exercises"] == []

    def test_copy_workout_day_fresh_ids_no_pr_hints(self):
        from fitflow.store import copy_workout_day
        state = _make_state()
        new = copy_workout_day(state, "2024-03-01", "2024-03-08")
        clone = new["workoutLogs"]["2024-03-08"]
        source = state["workoutLogs"]["2024-03-01"]
        assert clone["date"] == "2024-03-08"
        assert clone["id"] != source["id"]
        old_ids = {e["id"] for e in source["exercises"]} | {
            s["id"] for e in source["exercises"] for s in e["sets"]}
        new_ids = {e["id"] for e in clone["exercises"]} | {
            s["id"] for e in clone["exercises"] for s in e["sets"]}
        assert old_ids.isdisjoint(new_ids)
        assert all("isPR" not in s for e in clone["exercises"] for s in e["sets"])
        assert source["exercises"][0]["sets"][0]["isPR"] is True


class TestProfileAndDate:

    def test_set_date_and_profile(self):
        from fitflow.store import set_date, update_user_goals, update_user_profile
        state = _make_state()
        new = set_date(state, "2024-03-01")
        new = update_user_profile(new, {"name": "Ира", "targetWeight": 58, "targetDate": "2024-06-01"})
        new = update_user_goals(new, {"calories": 1800, "protein": 120, "fat": 60, "carbs": 190})
        assert new["selectedDate"] == "2024-03-01"
        assert new["userProfile"]["name"] == "Ира"
        assert new["userGoals"]["calories"] == 1800
        assert state["selectedDate"] == "2024-03-10"
        assert new["workoutLogs"] is state["workoutLogs"]

    def test_update_food_log_pins_date(self):
        from fitflow.store import update_food_log
        log = {"id": "x", "date": "1999-01-01", "items": []}
        new = update_food_log(_make_state(), "2024-03-05", log)
        assert new["foodLogs"]["2024-03-05"]["date"] == "2024-03-05"
        assert log["date"] == "1999-01-01"


class TestImportAndViews:

    def test_rejected_import_leaves_state(self):
        from fitflow.snapshot import SnapshotFormatError
        from fitflow.store import import_data
        state = _make_state()
        before = copy.deepcopy(state)
        with pytest.raises(SnapshotFormatError):
            state = import_data({"userProfile": {"name": "x"}, "workoutLogs": {}})
        assert state == before

    def test_import_replaces_wholesale(self):
        from fitflow.store import get_all_data, import_data
        exported = get_all_data(_make_state())
        imported = import_data(exported)
        assert imported == exported
        assert imported is not exported

    def test_pr_days_recomputed_on_change(self):
        from fitflow.store import pr_days, update_set
        state = _make_state()
        first = pr_days(state)
        assert first == {"2024-03-01"}
        assert pr_days({**state, "selectedDate": "2024-03-02"}) is first

        state = update_set(state, "2024-03-01", "e1", "s1", weight=0, reps=0)
        state = update_set(state, "2024-03-01", "e1", "s2", weight=0, reps=0)
        state = update_set(state, "2024-03-01", "e2", "s3", weight=0, reps=0)
        assert pr_days(state) == frozenset()

    def test_pr_days_with_own_cache(self):
        from fitflow.store import new_pr_days_cache, pr_days, update_set
        cache = new_pr_days_cache()
        state = _make_state()
        assert pr_days(state, cache) == {"2024-03-01"}
        assert cache["logs"] is state["workoutLogs"]

        other = update_set(state, "2024-03-01", "e2", "s3", weight=0)
        pr_days(other)
        assert cache["logs"] is state["workoutLogs"]
        assert pr_days(state, cache) is cache["days"]
