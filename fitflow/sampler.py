"""
FitFlow — Time-series sampler for the statistics views

Two alignments:
- calendar: a fixed window of consecutive dates ending today, weight
  forward-filled from the latest earlier entry, calories 0 when unlogged
- sessions: the last N workouts that moved any weight, by tonnage
"""
import pandas as pd

from fitflow.chronology import last_n_days
from fitflow.config import STATS_WINDOW_DAYS, VOLUME_SESSIONS
from fitflow.nutrition import daily_calories, range_average
from fitflow.pr_engine import workouts_to_dataframe


def _weights_on(weight_history: list[dict], dates: list[str]) -> pd.Series:
    """Weight per date: exact entry, else the most recent strictly earlier one (NaN if none)."""
    weights = pd.Series(
        {w["date"]: w["weight"] for w in weight_history}, dtype=float
    )
    # ISO date strings sort chronologically
    timeline = sorted(set(weights.index) | set(dates))
    return weights.reindex(timeline).ffill().reindex(dates)


def weight_trend(weight_history: list[dict], dates: list[str]) -> dict:
    """First/last weight actually recorded inside the window, and their difference."""
    window = set(dates)
    in_window = sorted((w for w in weight_history if w["date"] in window), key=lambda w: w["date"])
    if not in_window:
        return {"start": 0, "current": 0, "diff": 0}
    start, current = in_window[0]["weight"], in_window[-1]["weight"]
    return {"start": start, "current": current, "diff": round(current - start, 1)}


def calendar_series(
    weight_history: list[dict],
    food_logs: dict,
    today: str,
    days: int = STATS_WINDOW_DAYS,
) -> dict:
    """
    Calendar-aligned window of `days` dates ending with `today`.

    Returns {"series": DataFrame[date, weight, calories], "avg_calories",
    "weight_trend"}.
    """
    dates = last_n_days(today, days)
    series = pd.DataFrame(
        {
            "date": dates,
            "weight": _weights_on(weight_history, dates).to_numpy(),
            "calories": daily_calories(food_logs, dates).to_numpy(),
        }
    )
    return {
        "series": series,
        "avg_calories": range_average(food_logs, dates)["avg_calories"],
        "weight_trend": weight_trend(weight_history, dates),
    }


def session_tonnage(workout_logs: dict, sessions: int = VOLUME_SESSIONS) -> dict:
    """
    Tonnage (sum of weight x reps) of the last `sessions` workouts.

    Dates with zero tonnage are skipped before taking the tail, so rest days
    logged as empty workouts never push real sessions out of the window.
    """
    df = workouts_to_dataframe(workout_logs)
    if df.empty:
        return {"series": pd.DataFrame(columns=["date", "tonnage"]), "total_tonnage": 0}
    per_day = df.groupby("date")["tonnage"].sum().sort_index()
    per_day = per_day[per_day > 0].tail(sessions)
    series = per_day.reset_index()
    return {"series": series, "total_tonnage": float(per_day.sum())}
