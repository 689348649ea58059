"""
FitFlow — Nutrition Aggregator

Daily macro totals, ranged calorie averages, per-100g normalization of a
food item and the helpers behind the food entry form.
"""
import numpy as np
import pandas as pd

from fitflow.config import (
    DEFAULT_PORTION_GRAMS,
    MACRO_FIELDS,
    MEAL_TYPES,
    UNKNOWN_DISH_NAME,
)


def round_half_up(value: float) -> int:
    """Integer rounding with .5 going up (round() would go to even)."""
    return int(np.floor(value + 0.5))


def round_half_up_1(value: float) -> float:
    """One decimal place, .x5 going up."""
    return float(np.floor(value * 10 + 0.5) / 10)


def _zeros() -> dict:
    return {f: 0 for f in MACRO_FIELDS}


# ═══════════════════════════════════════════════════════════════════════
# 1. TOTALS & AVERAGES
# ═══════════════════════════════════════════════════════════════════════

def daily_totals(food_log: dict | None) -> dict:
    """Sum calories/protein/fat/carbs over a day's items. Missing log -> zeros."""
    totals = _zeros()
    if not food_log:
        return totals
    for item in food_log.get("items", []):
        for f in MACRO_FIELDS:
            totals[f] += item.get(f, 0) or 0
    return totals


def food_logs_to_dataframe(food_logs: dict) -> pd.DataFrame:
    """
    Flatten food logs to a pandas DataFrame.
    One row per food item.
    """
    rows = []
    for date in sorted(food_logs):
        for item in food_logs[date].get("items", []):
            rows.append(
                {
                    "date": date,
                    "item_id": item.get("id", ""),
                    "name": item.get("name", ""),
                    "meal_type": item.get("mealType", "breakfast"),
                    "grams": item.get("grams"),
                    **{f: item.get(f, 0) or 0 for f in MACRO_FIELDS},
                }
            )
    return pd.DataFrame(rows, columns=["date", "item_id", "name", "meal_type", "grams", *MACRO_FIELDS])


def daily_calories(food_logs: dict, dates: list[str]) -> pd.Series:
    """Calorie total per date in `dates`, 0 where nothing was logged."""
    df = food_logs_to_dataframe({d: food_logs[d] for d in dates if d in food_logs})
    per_day = df.groupby("date")["calories"].sum() if not df.empty else pd.Series(dtype=float)
    return per_day.reindex(dates, fill_value=0)


def range_average(food_logs: dict, dates: list[str]) -> dict:
    """
    Average daily calories across `dates`.

    Days with a zero total are left out of both sum and count, so an empty
    log counts the same as no log at all.
    """
    per_day = daily_calories(food_logs, dates)
    eaten = per_day[per_day > 0]
    if eaten.empty:
        return {"avg_calories": 0, "days_counted": 0}
    return {
        "avg_calories": round_half_up(eaten.sum() / len(eaten)),
        "days_counted": int(len(eaten)),
    }


def macro_progress(consumed: float, goal: float) -> dict:
    """Fill level of a macro goal bar. A zero goal reads as 0%."""
    pct = consumed / goal * 100 if goal > 0 else 0
    return {
        "pct": pct,
        "bar_pct": min(100, max(0, pct)),
        "is_completed": pct >= 100,
        "is_exceeded": pct > 100,
    }


def group_by_meal(food_log: dict | None) -> dict[str, list[dict]]:
    items = food_log.get("items", []) if food_log else []
    return {meal: [i for i in items if i.get("mealType") == meal] for meal in MEAL_TYPES}


# ═══════════════════════════════════════════════════════════════════════
# 2. PER-100G NORMALIZATION
# ═══════════════════════════════════════════════════════════════════════

def per_100g(item: dict) -> dict | None:
    """Per-100g rates of an item, or None when its portion weight is unusable."""
    grams = item.get("grams")
    if grams is None or grams <= 0:
        return None
    factor = 100 / grams
    return {f: (item.get(f, 0) or 0) * factor for f in MACRO_FIELDS}


def scale_per_100g(rates: dict, grams: float) -> dict:
    """
    Absolute values for a new portion weight.
    Calories round to an integer, macros to one decimal, both half up.
    """
    ratio = grams / 100
    return {
        "grams": grams,
        "calories": round_half_up(rates["calories"] * ratio),
        "protein": round_half_up_1(rates["protein"] * ratio),
        "fat": round_half_up_1(rates["fat"] * ratio),
        "carbs": round_half_up_1(rates["carbs"] * ratio),
    }


def update_metric(form: dict, rates: dict | None, field: str, value: float) -> tuple[dict, dict | None]:
    """
    User typed a new absolute value for one macro.
    Returns the updated form and the per-100g rates with that field rescaled;
    rates stay as they were when the portion weight is unusable.
    """
    form = {**form, field: value}
    grams = form.get("grams")
    if not grams or grams <= 0:
        return form, rates
    factor = 100 / grams
    base = rates or _zeros()
    new_rates = {f: (value * factor if f == field else base.get(f, 0)) for f in MACRO_FIELDS}
    return form, new_rates


def item_from_analysis(result: dict, form: dict | None = None, image: str | None = None) -> tuple[dict, dict | None]:
    """
    Merge an AI estimate into the food form.

    Image and text analysis results are consumed identically. Values the
    model left empty fall back to 0 (macros), the unknown-dish name and a
    100 g portion. Returns (form, per-100g rates).
    """
    merged = {
        **(form or {}),
        "name": result.get("foodName") or UNKNOWN_DISH_NAME,
        "grams": result.get("estimatedWeightGrams") or DEFAULT_PORTION_GRAMS,
        **{f: result.get(f) or 0 for f in MACRO_FIELDS},
    }
    if image is not None:
        merged["image"] = image
    return merged, per_100g(merged)


def food_suggestions(food_logs: dict, term: str) -> list[dict]:
    """
    Previously logged items whose name contains `term` (case-insensitive).
    Items are unique by lower-cased name; the latest logged one wins.
    """
    if not term:
        return []
    unique: dict[str, dict] = {}
    for date in sorted(food_logs):
        for item in food_logs[date].get("items", []):
            if item.get("name"):
                unique[item["name"].lower()] = item
    needle = term.lower()
    return [item for key, item in unique.items() if needle in key]
