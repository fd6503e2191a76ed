"""
plant_database.py — Plant catalogue, planting windows and the watchlist.

This module manages the plant side of the garden database:
- Plants (generic name + optional variety, unique as a pair)
- Planting windows (one per plant and window type)
- Watched flag (the user's personal planting calendar)
- Read models for "plant now" and the yearly calendar

Deleting a plant cascades to its planting windows and bed placements.
"""

import logging
import sqlite3
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from database import get_db
from errors import NotFound, ValidationError
from models import Plant, PlantingWindow, from_row
from utils.validators import (
    optional_text, require_text, validate_choice, validate_plant_fields, validate_window,
)

logger = logging.getLogger(__name__)

PLANT_FIELDS = (
    'name', 'variety', 'category', 'days_to_maturity', 'spacing_inches',
    'sun_requirement', 'water_needs', 'frost_tolerant', 'notes',
)


def _plant(row) -> Optional[Plant]:
    plant = from_row(Plant, row)
    if plant is not None:
        plant.frost_tolerant = bool(plant.frost_tolerant)
        plant.watched = bool(plant.watched)
    return plant


def _fetch_plant(conn, plant_id) -> Plant:
    plant = _plant(conn.execute("SELECT * FROM plants WHERE id = ?", (plant_id,)).fetchone())
    if plant is None:
        raise NotFound("Plant not found")
    return plant


def _fetch_windows(conn, plant_id) -> List[PlantingWindow]:
    rows = conn.execute(
        "SELECT * FROM planting_windows WHERE plant_id = ? ORDER BY start_month, start_day",
        (plant_id,)
    ).fetchall()
    return [from_row(PlantingWindow, r) for r in rows]


# ========================================
# Plant CRUD Operations
# ========================================

def get_plants(category: Optional[str] = None, search: Optional[str] = None) -> List[Plant]:
    """All plants, optionally filtered by category and a name/variety substring."""
    query = "SELECT * FROM plants WHERE 1=1"
    params: List[Any] = []

    if category:
        query += " AND category = ?"
        params.append(category)

    if search:
        query += " AND (name LIKE ? OR variety LIKE ?)"
        params.extend([f"%{search}%", f"%{search}%"])

    query += " ORDER BY category, name, variety"

    conn = get_db()
    try:
        return [_plant(r) for r in conn.execute(query, params).fetchall()]
    finally:
        conn.close()


def get_plant(plant_id: int) -> Plant:
    """Get a plant by ID; raises NotFound."""
    conn = get_db()
    try:
        return _fetch_plant(conn, plant_id)
    finally:
        conn.close()


def get_plant_with_windows(plant_id: int) -> Tuple[Plant, List[PlantingWindow]]:
    conn = get_db()
    try:
        return _fetch_plant(conn, plant_id), _fetch_windows(conn, plant_id)
    finally:
        conn.close()


def get_windows_for_plant(plant_id: int) -> List[PlantingWindow]:
    conn = get_db()
    try:
        _fetch_plant(conn, plant_id)
        return _fetch_windows(conn, plant_id)
    finally:
        conn.close()


def create_plant(name: str, variety: Optional[str] = None,
                 planting_windows: Optional[List[Dict[str, Any]]] = None,
                 **fields) -> Plant:
    """
    Create a plant and, optionally, its planting windows in one transaction.

    Args:
        name: Generic species name (required), e.g. "Tomato"
        variety: Cultivar, e.g. "Cherokee Purple"; None means no variety
        planting_windows: List of window dicts (window_type, start/end month/day)
        **fields: category, days_to_maturity, spacing_inches, sun_requirement,
                  water_needs, frost_tolerant, notes

    Raises:
        ValidationError: missing name, bad enumeration, duplicate (name, variety)
            or two windows of the same type.
    """
    name = require_text(name, 'Plant name')
    variety = optional_text(variety)
    cleaned = validate_plant_fields(fields)
    windows = [validate_window(w) for w in (planting_windows or [])]

    conn = get_db()
    try:
        cursor = conn.execute(
            """INSERT INTO plants (name, variety, category, days_to_maturity, spacing_inches,
                                   sun_requirement, water_needs, frost_tolerant, notes)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (name, variety, cleaned.get('category'), cleaned.get('days_to_maturity'),
             cleaned.get('spacing_inches'), cleaned.get('sun_requirement'),
             cleaned.get('water_needs'), 1 if fields.get('frost_tolerant') else 0,
             fields.get('notes'))
        )
        plant_id = cursor.lastrowid

        for w in windows:
            conn.execute(
                """INSERT INTO planting_windows
                   (plant_id, window_type, start_month, start_day, end_month, end_day)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (plant_id, w['window_type'], w['start_month'], w['start_day'],
                 w['end_month'], w['end_day'])
            )

        conn.commit()
        return _fetch_plant(conn, plant_id)

    except sqlite3.IntegrityError as e:
        conn.rollback()
        if 'planting_windows' in str(e):
            raise ValidationError("Only one planting window per window type is allowed")
        raise ValidationError(f"Plant already exists: {name}" + (f" ({variety})" if variety else ""))
    finally:
        conn.close()


def update_plant(plant_id: int, **fields) -> Plant:
    """
    Update a plant's basic information. Only keys present in *fields* change;
    None values leave the column untouched.
    """
    conn = get_db()
    try:
        _fetch_plant(conn, plant_id)
        cleaned = validate_plant_fields({k: v for k, v in fields.items() if v is not None})

        updates = {}
        if fields.get('name') is not None:
            updates['name'] = require_text(fields['name'], 'Plant name')
        if fields.get('variety') is not None:
            updates['variety'] = optional_text(fields['variety'])
        updates.update(cleaned)
        if fields.get('frost_tolerant') is not None:
            updates['frost_tolerant'] = 1 if fields['frost_tolerant'] else 0
        if fields.get('notes') is not None:
            updates['notes'] = fields['notes']

        if updates:
            assignments = ', '.join(f"{key} = ?" for key in updates)
            try:
                conn.execute(
                    f"UPDATE plants SET {assignments} WHERE id = ?",
                    list(updates.values()) + [plant_id]
                )
            except sqlite3.IntegrityError:
                conn.rollback()
                raise ValidationError("Another plant with this name and variety already exists")
            conn.commit()

        return _fetch_plant(conn, plant_id)
    finally:
        conn.close()


def delete_plant(plant_id: int):
    """Delete a plant; windows and bed placements cascade."""
    conn = get_db()
    try:
        _fetch_plant(conn, plant_id)
        conn.execute("DELETE FROM plants WHERE id = ?", (plant_id,))
        conn.commit()
    finally:
        conn.close()


def toggle_watch(plant_id: int) -> Plant:
    """Flip the watched flag."""
    conn = get_db()
    try:
        plant = _fetch_plant(conn, plant_id)
        conn.execute(
            "UPDATE plants SET watched = ? WHERE id = ?",
            (0 if plant.watched else 1, plant_id)
        )
        conn.commit()
        return _fetch_plant(conn, plant_id)
    finally:
        conn.close()


# ========================================
# Planting Windows
# ========================================

def set_planting_window(plant_id: int, window: Dict[str, Any]) -> PlantingWindow:
    """Create or replace the plant's window of the given window_type."""
    w = validate_window(window)
    conn = get_db()
    try:
        _fetch_plant(conn, plant_id)
        conn.execute(
            """INSERT INTO planting_windows
               (plant_id, window_type, start_month, start_day, end_month, end_day)
               VALUES (?, ?, ?, ?, ?, ?)
               ON CONFLICT(plant_id, window_type) DO UPDATE SET
                   start_month = excluded.start_month,
                   start_day = excluded.start_day,
                   end_month = excluded.end_month,
                   end_day = excluded.end_day""",
            (plant_id, w['window_type'], w['start_month'], w['start_day'],
             w['end_month'], w['end_day'])
        )
        conn.commit()
        return from_row(PlantingWindow, conn.execute(
            "SELECT * FROM planting_windows WHERE plant_id = ? AND window_type = ?",
            (plant_id, w['window_type'])
        ).fetchone())
    finally:
        conn.close()


def delete_planting_window(plant_id: int, window_type: str):
    conn = get_db()
    try:
        cursor = conn.execute(
            "DELETE FROM planting_windows WHERE plant_id = ? AND window_type = ?",
            (plant_id, window_type)
        )
        if cursor.rowcount == 0:
            raise NotFound("Planting window not found")
        conn.commit()
    finally:
        conn.close()


# ========================================
# Calendar Read Models
# ========================================

def get_all_plants_with_windows() -> List[Tuple[Plant, PlantingWindow]]:
    """Every (plant, window) pair, the input of planting_calendar.plantable_now()."""
    conn = get_db()
    try:
        rows = conn.execute(
            """SELECT p.*, pw.id AS window_id, pw.window_type, pw.start_month, pw.start_day,
                      pw.end_month, pw.end_day
               FROM plants p
               JOIN planting_windows pw ON p.id = pw.plant_id
               ORDER BY p.category, p.name, p.variety"""
        ).fetchall()
    finally:
        conn.close()

    return [
        (_plant(r), PlantingWindow(
            id=r['window_id'], plant_id=r['id'], window_type=r['window_type'],
            start_month=r['start_month'], start_day=r['start_day'],
            end_month=r['end_month'], end_day=r['end_day'],
        ))
        for r in rows
    ]


def get_watched_plants_with_windows() -> List[Tuple[Plant, List[PlantingWindow]]]:
    """Watched plants with their windows, ordered by name and variety."""
    conn = get_db()
    try:
        plants = [
            _plant(r) for r in conn.execute(
                "SELECT * FROM plants WHERE watched = 1 ORDER BY name, variety"
            ).fetchall()
        ]
        return [(p, _fetch_windows(conn, p.id)) for p in plants]
    finally:
        conn.close()


# ========================================
# Plantings
# ========================================

def get_active_plantings():
    conn = get_db()
    try:
        rows = conn.execute(
            """SELECT pl.*, p.name AS plant_name, p.variety AS plant_variety,
                      p.category AS plant_category, p.days_to_maturity
               FROM plantings pl
               JOIN plants p ON pl.plant_id = p.id
               WHERE pl.status = 'active'
               ORDER BY pl.planted_date DESC, pl.id DESC"""
        ).fetchall()
        return [dict(r) for r in rows]
    finally:
        conn.close()


def create_planting(plant_id: int, location=None, sensor_id=None,
                    planted_date: Optional[date] = None, notes=None) -> Dict[str, Any]:
    """
    Record a planting in the ground. The expected harvest date is
    planted_date + days_to_maturity when the plant has one.
    """
    planted_date = planted_date or date.today()
    conn = get_db()
    try:
        plant = _fetch_plant(conn, plant_id)
        expected = (planted_date + timedelta(days=plant.days_to_maturity)
                    if plant.days_to_maturity else None)
        cursor = conn.execute(
            """INSERT INTO plantings (plant_id, location, sensor_id, planted_date,
                                      expected_harvest_date, notes)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (plant_id, location, sensor_id, planted_date.isoformat(),
             expected.isoformat() if expected else None, notes)
        )
        conn.commit()
        return dict(conn.execute(
            """SELECT pl.*, p.name AS plant_name, p.variety AS plant_variety
               FROM plantings pl JOIN plants p ON pl.plant_id = p.id
               WHERE pl.id = ?""",
            (cursor.lastrowid,)
        ).fetchone())
    finally:
        conn.close()


PLANTING_STATUSES = ('active', 'harvested', 'removed')


def update_planting(planting_id: int, status=None, location=None, sensor_id=None,
                    notes=None) -> Dict[str, Any]:
    """Update a planting; fields left as None keep their stored value."""
    status = validate_choice(status, PLANTING_STATUSES, 'status')
    conn = get_db()
    try:
        cursor = conn.execute(
            """UPDATE plantings SET
                   status = COALESCE(?, status),
                   location = COALESCE(?, location),
                   sensor_id = COALESCE(?, sensor_id),
                   notes = COALESCE(?, notes)
               WHERE id = ?""",
            (status, optional_text(location), optional_text(sensor_id),
             optional_text(notes), planting_id)
        )
        if cursor.rowcount == 0:
            raise NotFound("Planting not found")
        conn.commit()
        if status and status != 'active':
            logger.info("Planting %s marked %s", planting_id, status)
        return dict(conn.execute(
            """SELECT pl.*, p.name AS plant_name, p.variety AS plant_variety
               FROM plantings pl JOIN plants p ON pl.plant_id = p.id
               WHERE pl.id = ?""",
            (planting_id,)
        ).fetchone())
    finally:
        conn.close()
