"""
planting_calendar.py — Planting-window logic and the yearly agenda.

This module implements:
- Window membership: is a month inside a (possibly year-wrapping) window
- Plant now: every (plant, window) pair open in today's month
- Year agenda: events for watched plants, grouped under every month they span

Membership is month resolution only. start_day/end_day are carried through
for display but never narrow the window. "Today" is always a parameter,
never read from the clock here.
"""

from dataclasses import asdict
from datetime import date
from typing import Iterable, List, Tuple

from models import CATEGORIES, WINDOW_TYPES, CalendarEvent, Plant, PlantingWindow
from utils.cyclic import MONTH_ABBR, MONTHS, month_in_range, months_spanned

DEFAULT_START_DAY = 1
DEFAULT_END_DAY = 28

ORDER_BY_CATEGORY = 'category'
ORDER_BY_WINDOW_TYPE = 'window_type'


def is_in_window(window: PlantingWindow, month: int) -> bool:
    """True when *month* falls inside the window; raises InvalidInterval on bad months."""
    return month_in_range(month, window.start_month, window.end_month)


def _rank(value, order) -> int:
    """Position of *value* in a fixed ordering; unknown values rank last."""
    try:
        return order.index(value)
    except ValueError:
        return len(order)


def _category_key(plant: Plant):
    rank = _rank(plant.category, CATEGORIES)
    # Unknown categories keep their input order (stable sort), no name sort
    return (rank, plant.name if rank < len(CATEGORIES) else '')


def _window_type_key(item):
    plant, window = item
    rank = _rank(window.window_type, WINDOW_TYPES)
    if rank == len(WINDOW_TYPES):
        return (rank, 0, '')
    return (rank,) + _category_key(plant)


def plantable_now(rows: Iterable[Tuple[Plant, PlantingWindow]], today: date,
                  order: str = ORDER_BY_CATEGORY) -> List[dict]:
    """
    List every (plant, window) pair whose window is open in today's month.

    A plant with two open windows (say transplant and direct_sow) appears
    once per window. Only exact repeats of (plant id, window type) are
    dropped.

    Args:
        rows: (Plant, PlantingWindow) pairs.
        today: The date to check; only its month is used.
        order: 'category' sorts by category then name, 'window_type' sorts
               by window type, then category and name.

    Returns:
        List of plant dicts extended with window_type, start/end month and day.
    """
    seen = set()
    matches = []
    for plant, window in rows:
        if not is_in_window(window, today.month):
            continue
        key = (plant.id, window.window_type)
        if key in seen:
            continue
        seen.add(key)
        matches.append((plant, window))

    if order == ORDER_BY_WINDOW_TYPE:
        matches.sort(key=_window_type_key)
    else:
        matches.sort(key=lambda item: _category_key(item[0]))

    result = []
    for plant, window in matches:
        entry = asdict(plant)
        entry.update({
            'window_type': window.window_type,
            'start_month': window.start_month,
            'start_day': window.start_day,
            'end_month': window.end_month,
            'end_day': window.end_day,
        })
        result.append(entry)
    return result


def make_event(plant: Plant, window: PlantingWindow) -> CalendarEvent:
    name = plant.display_name
    return CalendarEvent(
        plant_id=plant.id,
        plant_name=name,
        category=plant.category,
        window_type=window.window_type,
        start_month=window.start_month,
        start_day=window.start_day or DEFAULT_START_DAY,
        end_month=window.end_month,
        end_day=window.end_day or DEFAULT_END_DAY,
        wraps_year=window.wraps_year,
        days_to_maturity=plant.days_to_maturity,
        label=f"{name} - {window.window_type.replace('_', ' ')}",
    )


def build_year_agenda(watched_plants: Iterable[Tuple[Plant, List[PlantingWindow]]],
                      year: int) -> dict:
    """
    Build the yearly planting calendar for watched plants.

    Every (plant, window) pair becomes one event. The agenda has an entry for
    each month 1-12 listing all events whose window spans that month, so a
    window from November to January shows up under 11, 12 and 1.

    Returns:
        {'year', 'events', 'agenda': {month: {'name', 'events'}}, 'watched_count'}
        where watched_count counts distinct plants, not windows.
    """
    events = []
    contributing = set()
    for plant, windows in watched_plants:
        if not plant.watched:
            continue
        for window in windows:
            # Validate before the event is emitted
            is_in_window(window, window.start_month)
            events.append(make_event(plant, window))
            contributing.add(plant.id)

    events.sort(key=lambda e: (e.start_month, e.start_day, e.plant_name))

    agenda = {month: {'name': MONTH_ABBR[month], 'events': []} for month in MONTHS}
    for event in events:
        for month in months_spanned(event.start_month, event.end_month):
            agenda[month]['events'].append(asdict(event))

    return {
        'year': year,
        'events': [asdict(e) for e in events],
        'agenda': agenda,
        'watched_count': len(contributing),
    }
