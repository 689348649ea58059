"""
FitFlow — Date helpers

The whole app is date-only: every date is a canonical "YYYY-MM-DD" string
and all arithmetic runs on datetime.date, so nothing depends on the local
timezone except today_iso().
"""
import calendar
from datetime import date, datetime, timedelta


def parse_date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def to_iso(value: date) -> str:
    return value.isoformat()


def today_iso() -> str:
    """Local calendar date of the machine, as YYYY-MM-DD."""
    return datetime.now().date().isoformat()


def shift_date(value: str, days: int) -> str:
    """Previous/next day navigation."""
    return to_iso(parse_date(value) + timedelta(days=days))


def week_of(value: str) -> list[str]:
    """Monday..Sunday of the week containing `value`, Monday first."""
    d = parse_date(value)
    monday = d - timedelta(days=d.weekday())
    return [to_iso(monday + timedelta(days=i)) for i in range(7)]


def calendar_grid(year: int, month: int) -> list[int | None]:
    """
    Month grid for a Monday-first calendar.

    Leading None placeholders push day 1 under its weekday column, then
    day numbers 1..days_in_month follow.
    """
    first_weekday, days_in_month = calendar.monthrange(year, month)  # Monday == 0
    return [None] * first_weekday + list(range(1, days_in_month + 1))


def month_dates(year: int, month: int) -> list[str]:
    _, days_in_month = calendar.monthrange(year, month)
    return [to_iso(date(year, month, day)) for day in range(1, days_in_month + 1)]


def days_noun(n: int) -> str:
    """Russian plural of "day" for n: 1 день, 2 дня, 5 дней, 11 дней, 21 день."""
    n = abs(n) % 100
    n1 = n % 10
    if 10 < n < 20:
        return "дней"
    if 1 < n1 < 5:
        return "дня"
    if n1 == 1:
        return "день"
    return "дней"


def days_until(target: str, today: str) -> dict:
    """Days left until `target`; a date in the past counts as 0."""
    target_d, today_d = parse_date(target), parse_date(today)
    if target_d < today_d:
        return {"days": 0, "noun": days_noun(0)}
    days = (target_d - today_d).days
    return {"days": days, "noun": days_noun(days)}


def last_n_days(today: str, n: int) -> list[str]:
    """n consecutive dates ending with `today`, oldest first."""
    end = parse_date(today)
    return [to_iso(end - timedelta(days=i)) for i in range(n - 1, -1, -1)]
