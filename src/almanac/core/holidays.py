"""Built-in fixed-date holidays."""

from collections.abc import Iterable
from datetime import date

from .events import Holiday

# (month, day, name, kind, category)
FIXED_HOLIDAYS = [
    (1, 1, "New Year's Day", "civil", "Civil"),
    (1, 6, "Epiphany", "religious", "Christian"),
    (2, 14, "Valentine's Day", "civil", "Cultural"),
    (3, 17, "St. Patrick's Day", "civil", "Cultural"),
    (5, 1, "Labour Day", "civil", "Civil"),
    (7, 4, "Independence Day (US)", "civil", "Civil"),
    (10, 31, "Halloween", "civil", "Cultural"),
    (11, 1, "All Saints' Day", "religious", "Christian"),
    (11, 11, "Remembrance Day", "civil", "Civil"),
    (12, 24, "Christmas Eve", "religious", "Christian"),
    (12, 25, "Christmas Day", "religious", "Christian"),
    (12, 31, "New Year's Eve", "civil", "Civil"),
]


def fixed_holidays(
    first_year: int,
    last_year: int,
    categories: Iterable[str] | None = None,
) -> list[Holiday]:
    """Fixed-date holidays for every year in [first_year, last_year], optionally filtered by category."""
    wanted = set(categories) if categories is not None else None
    holidays = []
    for year in range(first_year, last_year + 1):
        for month, day, name, kind, category in FIXED_HOLIDAYS:
            if wanted is not None and category not in wanted:
                continue
            holidays.append(Holiday(name=name, day=date(year, month, day), kind=kind, category=category))
    return holidays
