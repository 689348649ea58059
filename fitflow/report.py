"""
FitFlow — Progress report
Run: python -m fitflow.report fitflow_backup_2026-10-19.json [--today YYYY-MM-DD]
     python -m fitflow.report --analyze "гречка с курицей 300 г"
"""
import sys

import pandas as pd

from fitflow.chronology import days_until, today_iso
from fitflow.config import MEAL_LABELS, STATS_WINDOW_DAYS, VOLUME_SESSIONS
from fitflow.gemini_client import FoodAnalysisError, analyze_food_text
from fitflow.nutrition import daily_totals, group_by_meal, item_from_analysis, macro_progress
from fitflow.pr_engine import pr_table
from fitflow.progress import goal_progress
from fitflow.sampler import calendar_series, session_tonnage
from fitflow.snapshot import SnapshotFormatError, load_snapshot
from fitflow.store import pr_days


def build_report(state: dict, today: str, pr_cache: dict | None = None) -> dict:
    """All derived views for one snapshot, as plain data."""
    profile = state["userProfile"]
    goals = state["userGoals"]
    consumed = daily_totals(state["foodLogs"].get(today))
    return {
        "goal": goal_progress(state["weightHistory"], profile["targetWeight"]),
        "days_left": days_until(profile["targetDate"], today),
        "consumed": consumed,
        "macro_pct": {f: macro_progress(consumed[f], goals.get(f, 0))["pct"] for f in consumed},
        "meals": group_by_meal(state["foodLogs"].get(today)),
        "calendar": calendar_series(state["weightHistory"], state["foodLogs"], today),
        "tonnage": session_tonnage(state["workoutLogs"]),
        "pr_days": sorted(pr_days(state, pr_cache)),
        "prs": pr_table(state["workoutLogs"]),
    }


def print_report(state: dict, today: str) -> dict:
    report = build_report(state, today)
    profile = state["userProfile"]
    goal = report["goal"]

    print(f"📊 FitFlow — {profile['name']} — {today}")
    print(f"\n🎯 Goal: {goal['start_weight']} → {profile['targetWeight']} kg")
    status = "✅ reached" if goal["is_complete"] else f"{round(goal['progress_pct'])}%"
    print(f"   Progress: {status}")
    print(f"   {report['days_left']['days']} {report['days_left']['noun']} left")

    print("\n🍽️ Today:")
    for f, value in report["consumed"].items():
        print(f"   {f}: {round(value, 1)} / {state['userGoals'].get(f, 0)} ({round(report['macro_pct'][f])}%)")
    for meal, items in report["meals"].items():
        if items:
            print(f"   {MEAL_LABELS[meal]}: {', '.join(i['name'] for i in items)}")

    cal = report["calendar"]
    print(f"\n⚖️ Last {STATS_WINDOW_DAYS} days (avg {cal['avg_calories']} kcal/day, "
          f"weight {cal['weight_trend']['diff']:+.1f} kg):")
    for _, row in cal["series"].iterrows():
        weight = "—" if pd.isna(row["weight"]) else f"{row['weight']:.1f}"
        print(f"   📅 {row['date']} | {weight} kg | {int(row['calories'])} kcal")

    tonnage = report["tonnage"]
    print(f"\n🏋️ Tonnage, last {VOLUME_SESSIONS} sessions: {tonnage['total_tonnage'] / 1000:.1f} t")
    for _, row in tonnage["series"].iterrows():
        print(f"   📅 {row['date']} | {row['tonnage']:,.0f} kg")

    if report["pr_days"]:
        print(f"\n🏆 PR days: {', '.join(report['pr_days'])}")
    if not report["prs"].empty:
        print("🏆 Top PRs:")
        for _, row in report["prs"].head(5).iterrows():
            print(f"   {row['exercise']}: {row['weight']}kg x{row['reps']} ({row['date']})")
    return report


def print_analysis(description: str) -> dict | None:
    print(f"🔍 Analyzing: {description}")
    try:
        result = analyze_food_text(description)
    except FoodAnalysisError as e:
        print(f"❌ Could not analyze: {e}")
        return None
    form, rates = item_from_analysis(result)
    print(f"   {form['name']} — {form['grams']} g")
    print(f"   {form['calories']} kcal | P {form['protein']} | F {form['fat']} | C {form['carbs']}")
    if rates:
        print(f"   per 100 g: {round(rates['calories'])} kcal")
    return form


def _arg_value(args: list[str], flag: str) -> str | None:
    if flag in args:
        idx = args.index(flag)
        if idx + 1 < len(args):
            return args[idx + 1]
    return None


if __name__ == "__main__":
    args = sys.argv[1:]

    description = _arg_value(args, "--analyze")
    if description:
        sys.exit(0 if print_analysis(description) else 1)

    paths = [a for a in args if not a.startswith("--") and a != _arg_value(args, "--today")]
    if not paths:
        print(__doc__)
        sys.exit(2)

    try:
        snapshot = load_snapshot(paths[0])
    except (OSError, SnapshotFormatError) as e:
        print(f"❌ Could not load snapshot: {e}")
        sys.exit(1)

    print_report(snapshot, _arg_value(args, "--today") or today_iso())
