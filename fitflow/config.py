"""
FitFlow — Configuration

Defaults for a fresh state, window sizes for the statistics views and the
credential lookup for the Gemini nutrition analysis. The core engines never
read the credential; only gemini_client does.
"""
import os
from pathlib import Path

# ── API Keys ─────────────────────────────────────────────────────────
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "") or os.environ.get("API_KEY", "")
KEY_FILE = Path(
    os.environ.get("FITFLOW_KEY_FILE", str(Path.home() / ".fitflow" / "gemini_api_key"))
)

GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_IMAGE_MODEL = os.environ.get("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image")
GEMINI_TIMEOUT = 30  # seconds

_cached_api_key: str | None = None


def get_api_key() -> str:
    """
    Get the Gemini API key: environment first, then the key file.

    Returns "" when nothing is configured. Caches result for the process
    lifetime; update_api_key() resets it.
    """
    global _cached_api_key
    if _cached_api_key is not None:
        return _cached_api_key

    key = GEMINI_API_KEY
    if not key and KEY_FILE.exists():
        key = KEY_FILE.read_text(encoding="utf-8").strip()

    _cached_api_key = key
    return key


def update_api_key(key: str) -> None:
    """Persist a new key to KEY_FILE so the next analysis call picks it up."""
    global _cached_api_key
    KEY_FILE.parent.mkdir(parents=True, exist_ok=True)
    KEY_FILE.write_text(key.strip(), encoding="utf-8")
    _cached_api_key = None


# ── Defaults for a fresh state ───────────────────────────────────────
DEFAULT_PROFILE = {
    "name": "Атлет",
    "targetWeight": 80,
    "targetDate": "2024-12-31",
}
DEFAULT_GOALS = {"calories": 2500, "protein": 180, "fat": 80, "carbs": 265}

DEFAULT_WORKOUT_NAME = "Новая тренировка"
UNKNOWN_DISH_NAME = "Неизвестное блюдо"

# ── Nutrition ────────────────────────────────────────────────────────
MACRO_FIELDS = ("calories", "protein", "fat", "carbs")
MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")
MEAL_LABELS = {
    "breakfast": "Завтрак",
    "lunch": "Обед",
    "dinner": "Ужин",
    "snack": "Перекус",
}
DEFAULT_PORTION_GRAMS = 100

# ── Statistics windows ───────────────────────────────────────────────
STATS_WINDOW_DAYS = 10   # calendar days ending today
VOLUME_SESSIONS = 10     # most recent non-empty workouts

# ── Workout day color tokens ─────────────────────────────────────────
WORKOUT_COLORS = {
    "red": "#ef4444",
    "orange": "#f97316",
    "yellow": "#eab308",
    "green": "#22c55e",
    "blue": "#3b82f6",
    "purple": "#a855f7",
    "pink": "#ec4899",
}
