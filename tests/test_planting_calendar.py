"""
tests/test_planting_calendar.py — Unit tests for planting windows and the yearly agenda.
"""

from datetime import date

import pytest

from errors import InvalidInterval
from models import Plant, PlantingWindow
from planting_calendar import (
    ORDER_BY_WINDOW_TYPE,
    build_year_agenda,
    is_in_window,
    make_event,
    plantable_now,
)
from utils.cyclic import month_in_range, months_spanned, wraps_year


def window(start, end, window_type='direct_sow', plant_id=1, start_day=1, end_day=28):
    return PlantingWindow(plant_id=plant_id, window_type=window_type,
                          start_month=start, start_day=start_day,
                          end_month=end, end_day=end_day)


def plant(pid, name, category='vegetable', variety=None, watched=True, days=None):
    return Plant(id=pid, name=name, variety=variety, category=category,
                 watched=watched, days_to_maturity=days)


# ========================================
# Window Membership
# ========================================

class TestIsInWindow:

    def test_plain_window(self):
        w = window(4, 7)
        assert [m for m in range(1, 13) if is_in_window(w, m)] == [4, 5, 6, 7]
        assert not is_in_window(w, 3)
        assert not is_in_window(w, 8)

    def test_wrapping_window(self):
        w = window(10, 2)
        assert [m for m in range(1, 13) if is_in_window(w, m)] == [1, 2, 10, 11, 12]

    def test_single_month(self):
        assert [m for m in range(1, 13) if is_in_window(window(6, 6), m)] == [6]

    def test_days_do_not_narrow_membership(self):
        w = window(4, 4, start_day=20, end_day=5)
        assert is_in_window(w, 4)

    @pytest.mark.parametrize('start, end, month', [(0, 5, 3), (4, 13, 5), (4, 7, 0), (4, 7, 13)])
    def test_invalid_month_refused(self, start, end, month):
        with pytest.raises(InvalidInterval):
            is_in_window(window(start, end), month)

    def test_non_integer_month_refused(self):
        with pytest.raises(InvalidInterval):
            month_in_range('4', 1, 12)


class TestCyclicHelpers:

    def test_months_spanned_in_wheel_order(self):
        assert months_spanned(11, 1) == [11, 12, 1]
        assert months_spanned(3, 5) == [3, 4, 5]

    def test_wraps_year(self):
        assert wraps_year(11, 2)
        assert not wraps_year(2, 11)
        assert not wraps_year(5, 5)


# ========================================
# Plant Now
# ========================================

class TestPlantableNow:

    def test_one_entry_per_open_window(self):
        tomato = plant(1, 'Tomato')
        rows = [
            (tomato, window(3, 6, 'transplant')),
            (tomato, window(4, 6, 'direct_sow')),
            (tomato, window(1, 2, 'indoor_start')),
        ]
        result = plantable_now(rows, date(2026, 5, 10))
        assert sorted(r['window_type'] for r in result) == ['direct_sow', 'transplant']

    def test_exact_repeats_are_dropped(self):
        tomato = plant(1, 'Tomato')
        rows = [(tomato, window(3, 6, 'transplant')), (tomato, window(3, 6, 'transplant'))]
        assert len(plantable_now(rows, date(2026, 4, 1))) == 1

    def test_wrapping_window_open_in_january(self):
        garlic = plant(1, 'Garlic')
        result = plantable_now([(garlic, window(10, 2))], date(2027, 1, 15))
        assert result[0]['name'] == 'Garlic'
        assert result[0]['start_month'] == 10
        assert result[0]['end_month'] == 2

    def test_category_order(self):
        rows = [
            (plant(1, 'Marigold', 'flower'), window(1, 12)),
            (plant(2, 'Basil', 'herb'), window(1, 12)),
            (plant(3, 'Zucchini', 'vegetable'), window(1, 12)),
            (plant(4, 'Beet', 'vegetable'), window(1, 12)),
            (plant(5, 'Clover', 'cover_crop'), window(1, 12)),
            (plant(6, 'Strawberry', 'fruit'), window(1, 12)),
        ]
        names = [r['name'] for r in plantable_now(rows, date(2026, 6, 1))]
        assert names == ['Beet', 'Zucchini', 'Basil', 'Strawberry', 'Marigold', 'Clover']

    def test_unknown_categories_last_in_input_order(self):
        rows = [
            (plant(1, 'Zinnia', 'mystery'), window(1, 12)),
            (plant(2, 'Aloe', 'succulent'), window(1, 12)),
            (plant(3, 'Kale', 'vegetable'), window(1, 12)),
            (plant(4, 'Agave', None), window(1, 12)),
        ]
        names = [r['name'] for r in plantable_now(rows, date(2026, 6, 1))]
        assert names == ['Kale', 'Zinnia', 'Aloe', 'Agave']

    def test_window_type_order(self):
        rows = [
            (plant(1, 'Bean', 'vegetable'), window(1, 12, 'direct_sow')),
            (plant(2, 'Basil', 'herb'), window(1, 12, 'transplant')),
            (plant(3, 'Tomato', 'vegetable'), window(1, 12, 'transplant')),
            (plant(4, 'Pepper', 'vegetable'), window(1, 12, 'indoor_start')),
        ]
        result = plantable_now(rows, date(2026, 3, 1), order=ORDER_BY_WINDOW_TYPE)
        assert [(r['window_type'], r['name']) for r in result] == [
            ('indoor_start', 'Pepper'),
            ('transplant', 'Tomato'),
            ('transplant', 'Basil'),
            ('direct_sow', 'Bean'),
        ]

    def test_nothing_open(self):
        assert plantable_now([(plant(1, 'Pea'), window(2, 4))], date(2026, 8, 1)) == []


# ========================================
# Year Agenda
# ========================================

class TestYearAgenda:

    def test_wrapping_event_in_every_spanned_month(self):
        garlic = plant(1, 'Garlic')
        calendar = build_year_agenda([(garlic, [window(11, 1)])], 2026)
        months = [m for m, entry in calendar['agenda'].items() if entry['events']]
        assert months == [1, 11, 12]
        assert calendar['events'][0]['wraps_year'] is True

    def test_agenda_has_twelve_named_months(self):
        calendar = build_year_agenda([], 2026)
        assert list(calendar['agenda']) == list(range(1, 13))
        assert calendar['agenda'][1]['name'] == 'Jan'
        assert calendar['agenda'][12]['name'] == 'Dec'
        assert calendar['watched_count'] == 0
        assert calendar['year'] == 2026

    def test_watched_count_counts_plants_not_windows(self):
        tomato = plant(1, 'Tomato')
        basil = plant(2, 'Basil', 'herb')
        calendar = build_year_agenda([
            (tomato, [window(2, 3, 'indoor_start'), window(5, 6, 'transplant'),
                      window(5, 5, 'direct_sow')]),
            (basil, [window(4, 6, 'transplant')]),
        ], 2026)
        assert len(calendar['events']) == 4
        assert calendar['watched_count'] == 2

    def test_unwatched_and_windowless_plants_do_not_count(self):
        calendar = build_year_agenda([
            (plant(1, 'Tomato', watched=False), [window(5, 6)]),
            (plant(2, 'Basil'), []),
            (plant(3, 'Kale'), [window(3, 4)]),
        ], 2026)
        assert calendar['watched_count'] == 1
        assert [e['plant_name'] for e in calendar['events']] == ['Kale']

    def test_events_sorted_by_start(self):
        calendar = build_year_agenda([
            (plant(1, 'Squash'), [window(5, 6)]),
            (plant(2, 'Pea'), [window(2, 4)]),
            (plant(3, 'Bean'), [window(5, 7)]),
        ], 2026)
        assert [e['plant_name'] for e in calendar['events']] == ['Pea', 'Bean', 'Squash']

    def test_invalid_window_is_refused(self):
        with pytest.raises(InvalidInterval):
            build_year_agenda([(plant(1, 'Tomato'), [window(13, 2)])], 2026)

    def test_event_fields(self):
        event = make_event(plant(1, 'Tomato', variety='Roma', days=75),
                           window(3, 5, 'transplant', start_day=15, end_day=10))
        assert event.plant_name == 'Tomato (Roma)'
        assert event.label == 'Tomato (Roma) - transplant'
        assert event.start_day == 15
        assert event.end_day == 10
        assert event.days_to_maturity == 75
        assert event.wraps_year is False
