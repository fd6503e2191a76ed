"""
tests/test_utils.py — Tests for grid geometry, task dates and input validators.
"""

from datetime import date

import pytest

from errors import InvalidInterval, ValidationError
from utils.dates import next_due_date, parse_iso_date
from utils.grid import chebyshev_distance, in_bounds, is_adjacent, neighbor_cells
from utils.validators import (
    require_int,
    validate_bed_dimensions,
    validate_plant_fields,
    validate_recurrence,
    validate_window,
)


class TestGrid:

    def test_chebyshev_distance(self):
        assert chebyshev_distance((0, 0), (1, 1)) == 1
        assert chebyshev_distance((0, 0), (2, 1)) == 2
        assert chebyshev_distance((3, 3), (3, 3)) == 0

    def test_adjacency_excludes_same_cell(self):
        assert is_adjacent((1, 1), (0, 0))
        assert is_adjacent((1, 1), (1, 2))
        assert not is_adjacent((1, 1), (1, 1))
        assert not is_adjacent((0, 0), (2, 2))

    def test_neighbour_cells(self):
        assert len(neighbor_cells(1, 1, 3, 3)) == 8
        assert neighbor_cells(0, 0, 3, 3) == [(0, 1), (1, 0), (1, 1)]
        assert neighbor_cells(0, 0, 1, 1) == []

    def test_in_bounds(self):
        assert in_bounds(0, 0, 1, 1)
        assert not in_bounds(1, 0, 1, 1)
        assert not in_bounds(0, -1, 1, 1)


class TestTaskDates:

    @pytest.mark.parametrize('recurring, expected', [
        ('daily', date(2026, 3, 11)),
        ('weekly', date(2026, 3, 17)),
        ('biweekly', date(2026, 3, 24)),
        ('monthly', date(2026, 4, 10)),
        ('yearly', date(2027, 3, 10)),
    ])
    def test_next_due_date(self, recurring, expected):
        assert next_due_date(date(2026, 3, 10), recurring) == expected

    def test_month_end_is_clamped(self):
        assert next_due_date(date(2026, 1, 31), 'monthly') == date(2026, 2, 28)
        assert next_due_date(date(2026, 12, 31), 'monthly') == date(2027, 1, 31)
        assert next_due_date(date(2024, 2, 29), 'yearly') == date(2025, 2, 28)

    def test_unknown_recurrence(self):
        with pytest.raises(ValueError):
            next_due_date(date(2026, 1, 1), 'hourly')

    def test_parse_iso_date(self):
        assert parse_iso_date('2026-05-01') == date(2026, 5, 1)
        assert parse_iso_date('2026-05-01T08:30:00') == date(2026, 5, 1)
        assert parse_iso_date('') is None
        with pytest.raises(ValidationError):
            parse_iso_date('05/01/2026', 'due_date')


class TestValidators:

    def test_require_int(self):
        assert require_int('4', 'rows') == 4
        assert require_int(3.0, 'rows') == 3
        for bad in (None, '', 'x', 2.5, True):
            with pytest.raises(ValidationError):
                require_int(bad, 'rows')

    def test_bed_dimensions_must_be_positive(self):
        assert validate_bed_dimensions(4, 8) == (4, 8)
        with pytest.raises(ValidationError):
            validate_bed_dimensions(0, 8)

    def test_window_defaults(self):
        cleaned = validate_window({'window_type': 'transplant', 'start_month': 4, 'end_month': '6'})
        assert cleaned == {'window_type': 'transplant', 'start_month': 4, 'start_day': 1,
                           'end_month': 6, 'end_day': 28}

    def test_window_month_out_of_range(self):
        with pytest.raises(InvalidInterval):
            validate_window({'window_type': 'transplant', 'start_month': 4, 'end_month': 13})

    def test_window_type_required(self):
        with pytest.raises(ValidationError):
            validate_window({'window_type': 'harvest', 'start_month': 4, 'end_month': 6})

    def test_window_day_range(self):
        with pytest.raises(ValidationError):
            validate_window({'window_type': 'direct_sow', 'start_month': 4,
                             'end_month': 6, 'end_day': 32})

    def test_plant_enumerations(self):
        assert validate_plant_fields({'category': 'herb', 'water_needs': 'low'}) == {
            'category': 'herb', 'water_needs': 'low'}
        with pytest.raises(ValidationError):
            validate_plant_fields({'water_needs': 'lots'})

    def test_recurrence(self):
        assert validate_recurrence(None) is None
        assert validate_recurrence('weekly') == 'weekly'
        with pytest.raises(ValidationError):
            validate_recurrence('hourly')
