"""
database.py — SQLite schema creation, seed defaults, and database operations.

Owns every table of the garden dashboard. Plant and planting-window CRUD
lives in plant_database.py but shares this connection helper.

Placement writes run inside a BEGIN IMMEDIATE transaction, and the
UNIQUE(bed_id, row, col) index turns a losing concurrent insert into
CellOccupied instead of a silent overwrite.
"""

import json
import logging
import os
import sqlite3
from datetime import date, datetime, timedelta

from flask import current_app, has_app_context

from bed_analyzer import CompanionIndex, validate_target_cell
from errors import CellOccupied, NotFound, ValidationError
from models import (
    Bed, BedPlacement, CompanionRelationship, SensorReading, Task, from_row,
)
import seed_catalog as seed_catalog_data
from utils.dates import next_due_date, parse_iso_date
from utils.validators import (
    optional_text, require_text, validate_bed_dimensions, validate_cell,
    validate_recurrence, validate_relationship,
)
from watering import DEFAULT_PROFILE, DEFAULT_PROFILES

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data', 'garden.db')

DEFAULT_ALERT_COOLDOWN_MINUTES = 60


def get_db_path():
    """Database path: app config 'DATABASE', then GARDEN_DB_PATH, then data/garden.db."""
    if has_app_context() and current_app.config.get('DATABASE'):
        return current_app.config['DATABASE']
    return os.environ.get('GARDEN_DB_PATH', DEFAULT_DB_PATH)


def get_db():
    """Get a database connection with WAL mode and foreign keys enabled."""
    db_path = get_db_path()
    os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.row_factory = sqlite3.Row
    return conn


def init_db():
    """Create all tables and indexes if they don't exist."""
    conn = get_db()
    cursor = conn.cursor()

    # Table: settings (alert profiles, default profile)
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
    """)

    # Table: sensor_readings (Ecowitt webhook)
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS sensor_readings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            sensor_id TEXT NOT NULL,
            sensor_name TEXT,
            sensor_type TEXT DEFAULT 'moisture',
            moisture_percent REAL,
            temperature_f REAL,
            battery_status TEXT,
            timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    cursor.execute("""
        CREATE INDEX IF NOT EXISTS idx_sensor_readings_sensor_id
        ON sensor_readings(sensor_id)
    """)

    # Table: alert_history (cooldown between repeated alerts)
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS alert_history (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            sensor_id TEXT NOT NULL,
            alert_type TEXT NOT NULL,
            message TEXT,
            sent_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    cursor.execute("""
        CREATE INDEX IF NOT EXISTS idx_alert_history_sensor
        ON alert_history(sensor_id, alert_type, sent_at)
    """)

    # Table: plants
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS plants (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            variety TEXT,
            category TEXT,
            days_to_maturity INTEGER,
            spacing_inches INTEGER,
            sun_requirement TEXT,
            water_needs TEXT,
            frost_tolerant BOOLEAN DEFAULT 0,
            watched BOOLEAN DEFAULT 0,
            notes TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    # A NULL variety is its own "no variety" value
    cursor.execute("""
        CREATE UNIQUE INDEX IF NOT EXISTS idx_plants_name_variety
        ON plants(name, COALESCE(variety, ''))
    """)

    # Table: planting_windows
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS planting_windows (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            plant_id INTEGER NOT NULL REFERENCES plants(id) ON DELETE CASCADE,
            window_type TEXT NOT NULL,
            start_month INTEGER NOT NULL CHECK (start_month BETWEEN 1 AND 12),
            start_day INTEGER DEFAULT 1,
            end_month INTEGER NOT NULL CHECK (end_month BETWEEN 1 AND 12),
            end_day INTEGER DEFAULT 28,
            UNIQUE(plant_id, window_type)
        )
    """)

    # Table: plantings (what's in the ground outside the bed grid)
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS plantings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            plant_id INTEGER NOT NULL REFERENCES plants(id) ON DELETE CASCADE,
            location TEXT,
            sensor_id TEXT,
            planted_date DATE,
            expected_harvest_date DATE,
            status TEXT DEFAULT 'active',
            notes TEXT
        )
    """)

    # Table: tasks
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS tasks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT,
            task_type TEXT,
            due_date DATE,
            recurring TEXT,
            completed_at TIMESTAMP,
            plant_id INTEGER REFERENCES plants(id) ON DELETE SET NULL,
            planting_id INTEGER REFERENCES plantings(id) ON DELETE SET NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_tasks_due_date ON tasks(due_date)")

    # Table: beds
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS beds (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            rows INTEGER NOT NULL DEFAULT 4 CHECK (rows >= 1),
            cols INTEGER NOT NULL DEFAULT 8 CHECK (cols >= 1),
            sensor_id TEXT,
            temp_sensor_id TEXT,
            profile TEXT,
            notes TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    # Table: bed_placements
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS bed_placements (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            bed_id INTEGER NOT NULL REFERENCES beds(id) ON DELETE CASCADE,
            plant_id INTEGER NOT NULL REFERENCES plants(id) ON DELETE CASCADE,
            row INTEGER NOT NULL,
            col INTEGER NOT NULL,
            planted_date DATE DEFAULT CURRENT_DATE,
            notes TEXT,
            UNIQUE(bed_id, row, col)
        )
    """)
    cursor.execute("""
        CREATE INDEX IF NOT EXISTS idx_bed_placements_bed
        ON bed_placements(bed_id)
    """)

    # Table: companion_relationships
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS companion_relationships (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            plant_name_a TEXT NOT NULL,
            plant_name_b TEXT NOT NULL,
            relationship TEXT NOT NULL CHECK (relationship IN ('good','bad','neutral')),
            notes TEXT,
            UNIQUE(plant_name_a, plant_name_b)
        )
    """)

    conn.commit()
    conn.close()


def seed_defaults():
    """Populate default settings if missing. Idempotent — skips existing keys."""
    conn = get_db()
    try:
        for name, profile in DEFAULT_PROFILES.items():
            conn.execute(
                "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?)",
                (f'profile_{name}', json.dumps(profile))
            )
        conn.execute(
            "INSERT OR IGNORE INTO settings (key, value) VALUES ('default_profile', ?)",
            (DEFAULT_PROFILE,)
        )
        conn.execute(
            "INSERT OR IGNORE INTO settings (key, value) VALUES ('alert_cooldown_minutes', ?)",
            (str(DEFAULT_ALERT_COOLDOWN_MINUTES),)
        )
        conn.commit()
    finally:
        conn.close()


def seed_catalog():
    """Load the starter plant catalogue and companion table. Idempotent."""
    conn = get_db()
    try:
        conn.executemany(
            """INSERT OR IGNORE INTO plants (name, variety, category, days_to_maturity,
                   spacing_inches, sun_requirement, water_needs, frost_tolerant)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            seed_catalog_data.PLANTS
        )
        for name, variety, window_type, start_month, end_month in seed_catalog_data.WINDOWS:
            conn.execute(
                """INSERT OR IGNORE INTO planting_windows (plant_id, window_type, start_month, end_month)
                   SELECT id, ?, ?, ? FROM plants
                   WHERE name = ? AND COALESCE(variety, '') = COALESCE(?, '')""",
                (window_type, start_month, end_month, name, variety)
            )
        conn.executemany(
            """INSERT OR IGNORE INTO companion_relationships
                   (plant_name_a, plant_name_b, relationship, notes)
               VALUES (?, ?, ?, ?)""",
            seed_catalog_data.COMPANIONS
        )
        conn.commit()
        logger.info("Seeded %d plants and %d companion relationships",
                    len(seed_catalog_data.PLANTS), len(seed_catalog_data.COMPANIONS))
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


# ========================================
# Settings
# ========================================

def get_setting(key, default=None):
    """Get a setting value by key."""
    conn = get_db()
    row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    if row:
        return row['value']
    return default


def update_setting(key, value):
    conn = get_db()
    try:
        conn.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, value)
        )
        conn.commit()
    finally:
        conn.close()


def get_profile(profile_name):
    """Alert threshold profile stored as JSON under 'profile_<name>', or None."""
    value = get_setting(f'profile_{profile_name}')
    return json.loads(value) if value else None


def list_profiles():
    """All stored alert profiles as {name: thresholds}."""
    conn = get_db()
    try:
        rows = conn.execute(
            "SELECT key, value FROM settings WHERE key LIKE 'profile\\_%' ESCAPE '\\' ORDER BY key"
        ).fetchall()
    finally:
        conn.close()
    return {row['key'][len('profile_'):]: json.loads(row['value']) for row in rows}


def get_profile_for_sensor(sensor_id, kind='moisture'):
    """
    Resolve the alert profile for a sensor.

    The bed linked to the sensor (sensor_id for moisture, temp_sensor_id for
    temperature) names the profile; otherwise the default_profile setting.
    """
    column = 'temp_sensor_id' if kind == 'temperature' else 'sensor_id'
    conn = get_db()
    try:
        bed = conn.execute(
            f"SELECT profile FROM beds WHERE {column} = ?", (sensor_id,)
        ).fetchone()
    finally:
        conn.close()
    profile_name = (bed['profile'] if bed else None) or get_setting('default_profile', DEFAULT_PROFILE)
    profile = get_profile(profile_name)
    if profile is None:
        logger.error("Alert profile %s not found", profile_name)
    return profile


# ========================================
# Beds
# ========================================

BED_SELECT = """
    SELECT b.*,
        (SELECT moisture_percent FROM sensor_readings
         WHERE sensor_id = b.sensor_id ORDER BY id DESC LIMIT 1) AS current_moisture,
        (SELECT timestamp FROM sensor_readings
         WHERE sensor_id = b.sensor_id ORDER BY id DESC LIMIT 1) AS moisture_updated_at
    FROM beds b
"""

PLACEMENT_SELECT = """
    SELECT bp.*,
        p.name AS plant_name,
        p.variety AS plant_variety,
        p.category AS plant_category,
        p.water_needs,
        p.days_to_maturity,
        p.spacing_inches
    FROM bed_placements bp
    JOIN plants p ON bp.plant_id = p.id
"""


def _bed_dict(row):
    bed = dict(row)
    bed['total_cells'] = bed['rows'] * bed['cols']
    return bed


def get_beds():
    """All beds with current moisture, placement count and total cells."""
    conn = get_db()
    try:
        beds = conn.execute(BED_SELECT + " ORDER BY b.name").fetchall()
        counts = {
            r['bed_id']: r['count']
            for r in conn.execute(
                "SELECT bed_id, COUNT(*) AS count FROM bed_placements GROUP BY bed_id"
            ).fetchall()
        }
    finally:
        conn.close()

    result = []
    for row in beds:
        bed = _bed_dict(row)
        bed['placement_count'] = counts.get(bed['id'], 0)
        result.append(bed)
    return result


def _fetch_bed(conn, bed_id):
    bed = from_row(Bed, conn.execute("SELECT * FROM beds WHERE id = ?", (bed_id,)).fetchone())
    if bed is None:
        raise NotFound("Bed not found")
    return bed


def get_bed(bed_id) -> Bed:
    """Retrieve a bed by ID; raises NotFound."""
    conn = get_db()
    try:
        return _fetch_bed(conn, bed_id)
    finally:
        conn.close()


def get_bed_details(bed_id):
    """Bed row (with current moisture) as a dict; raises NotFound."""
    conn = get_db()
    try:
        row = conn.execute(BED_SELECT + " WHERE b.id = ?", (bed_id,)).fetchone()
    finally:
        conn.close()
    if not row:
        raise NotFound("Bed not found")
    return _bed_dict(row)


def create_bed(name, rows=4, cols=8, sensor_id=None, temp_sensor_id=None,
               profile=None, notes=None) -> Bed:
    name = require_text(name, 'Bed name')
    rows, cols = validate_bed_dimensions(rows, cols)

    conn = get_db()
    try:
        cursor = conn.execute(
            """INSERT INTO beds (name, rows, cols, sensor_id, temp_sensor_id, profile, notes)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (name, rows, cols, optional_text(sensor_id), optional_text(temp_sensor_id),
             optional_text(profile), notes)
        )
        conn.commit()
        return _fetch_bed(conn, cursor.lastrowid)
    finally:
        conn.close()


def update_bed(bed_id, **fields) -> Bed:
    """
    Update a bed. Only keys present in *fields* change.

    Shrinking the grid is refused while placements sit outside the new bounds.
    """
    conn = get_db()
    try:
        bed = _fetch_bed(conn, bed_id)
        updates = {}

        if 'name' in fields and fields['name'] is not None:
            updates['name'] = require_text(fields['name'], 'Bed name')
        rows = fields.get('rows') if fields.get('rows') is not None else bed.rows
        cols = fields.get('cols') if fields.get('cols') is not None else bed.cols
        rows, cols = validate_bed_dimensions(rows, cols)
        if (rows, cols) != (bed.rows, bed.cols):
            outside = conn.execute(
                "SELECT COUNT(*) FROM bed_placements WHERE bed_id = ? AND (row >= ? OR col >= ?)",
                (bed_id, rows, cols)
            ).fetchone()[0]
            if outside:
                raise ValidationError(
                    f"{outside} placement(s) would fall outside a {rows}x{cols} grid"
                )
            updates['rows'] = rows
            updates['cols'] = cols
        for key in ('sensor_id', 'temp_sensor_id', 'profile'):
            if key in fields:
                updates[key] = optional_text(fields[key])
        if 'notes' in fields:
            updates['notes'] = fields['notes']

        if updates:
            assignments = ', '.join(f"{key} = ?" for key in updates)
            conn.execute(
                f"UPDATE beds SET {assignments} WHERE id = ?",
                list(updates.values()) + [bed_id]
            )
            conn.commit()
        return _fetch_bed(conn, bed_id)
    finally:
        conn.close()


def delete_bed(bed_id):
    """Delete a bed; its placements cascade."""
    conn = get_db()
    try:
        _fetch_bed(conn, bed_id)
        conn.execute("DELETE FROM beds WHERE id = ?", (bed_id,))
        conn.commit()
    finally:
        conn.close()


# ========================================
# Placements
# ========================================

def _fetch_placements(conn, bed_id):
    rows = conn.execute(
        PLACEMENT_SELECT + " WHERE bp.bed_id = ? ORDER BY bp.row, bp.col", (bed_id,)
    ).fetchall()
    return [from_row(BedPlacement, r) for r in rows]


def _fetch_placement(conn, placement_id):
    return from_row(BedPlacement, conn.execute(
        PLACEMENT_SELECT + " WHERE bp.id = ?", (placement_id,)
    ).fetchone())


def list_placements(bed_id):
    """Placements of a bed with joined plant fields, row-major order."""
    conn = get_db()
    try:
        return _fetch_placements(conn, bed_id)
    finally:
        conn.close()


def _is_cell_conflict(error):
    return 'UNIQUE constraint failed' in str(error)


def insert_placement(bed_id, plant_id, row, col, planted_date=None, notes=None) -> BedPlacement:
    """
    Place a plant into an empty bed cell.

    Raises:
        NotFound: bed or plant missing.
        OutOfBounds: cell outside the grid.
        CellOccupied: cell already used, including by a concurrent writer.
    """
    row, col = validate_cell(row, col)
    planted_date = parse_iso_date(planted_date) or date.today()

    conn = get_db()
    try:
        conn.execute("BEGIN IMMEDIATE")
        bed = _fetch_bed(conn, bed_id)
        if not conn.execute("SELECT 1 FROM plants WHERE id = ?", (plant_id,)).fetchone():
            raise NotFound("Plant not found")

        validate_target_cell(bed, _fetch_placements(conn, bed_id), row, col)

        try:
            cursor = conn.execute(
                """INSERT INTO bed_placements (bed_id, plant_id, row, col, planted_date, notes)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (bed_id, plant_id, row, col, planted_date.isoformat(), notes)
            )
        except sqlite3.IntegrityError as e:
            if _is_cell_conflict(e):
                raise CellOccupied(row, col)
            raise
        conn.commit()
        return _fetch_placement(conn, cursor.lastrowid)
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def update_placement(bed_id, placement_id, row=None, col=None, notes=None) -> BedPlacement:
    """
    Move a placement and/or change its notes.

    The target cell is checked for bounds and occupancy, ignoring the
    placement's own current cell. Companion compatibility is not re-checked.
    """
    conn = get_db()
    try:
        conn.execute("BEGIN IMMEDIATE")
        bed = _fetch_bed(conn, bed_id)
        placement = conn.execute(
            "SELECT * FROM bed_placements WHERE id = ? AND bed_id = ?", (placement_id, bed_id)
        ).fetchone()
        if not placement:
            raise NotFound("Placement not found")

        if row is not None or col is not None:
            row, col = validate_cell(
                placement['row'] if row is None else row,
                placement['col'] if col is None else col,
            )
            validate_target_cell(bed, _fetch_placements(conn, bed_id), row, col,
                                 exclude_id=placement_id)

        try:
            conn.execute(
                """UPDATE bed_placements SET
                       row = COALESCE(?, row),
                       col = COALESCE(?, col),
                       notes = COALESCE(?, notes)
                   WHERE id = ?""",
                (row, col, notes, placement_id)
            )
        except sqlite3.IntegrityError as e:
            if _is_cell_conflict(e):
                raise CellOccupied(row, col)
            raise
        conn.commit()
        return _fetch_placement(conn, placement_id)
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def delete_placement(bed_id, placement_id):
    """Remove a placement; raises NotFound if it is not in that bed."""
    conn = get_db()
    try:
        cursor = conn.execute(
            "DELETE FROM bed_placements WHERE id = ? AND bed_id = ?", (placement_id, bed_id)
        )
        if cursor.rowcount == 0:
            raise NotFound("Placement not found")
        conn.commit()
    finally:
        conn.close()


# ========================================
# Companion Relationships
# ========================================

def get_companion_relationships():
    """All stored relationships, in insertion order."""
    conn = get_db()
    try:
        rows = conn.execute("SELECT * FROM companion_relationships ORDER BY id").fetchall()
        return [from_row(CompanionRelationship, r) for r in rows]
    finally:
        conn.close()


def get_companion_index() -> CompanionIndex:
    return CompanionIndex(get_companion_relationships())


def lookup_companion_relationship(name_a, name_b):
    """Relationship between two generic names in either stored order, or None."""
    return get_companion_index().lookup(name_a, name_b)


def create_companion_relationship(name_a, name_b, relationship, notes=None) -> CompanionRelationship:
    name_a = require_text(name_a, 'plant_name_a')
    name_b = require_text(name_b, 'plant_name_b')
    relationship = validate_relationship(relationship)

    if lookup_companion_relationship(name_a, name_b):
        raise ValidationError(f"A relationship between {name_a} and {name_b} already exists")

    conn = get_db()
    try:
        cursor = conn.execute(
            """INSERT INTO companion_relationships (plant_name_a, plant_name_b, relationship, notes)
               VALUES (?, ?, ?, ?)""",
            (name_a, name_b, relationship, notes)
        )
        conn.commit()
        return from_row(CompanionRelationship, conn.execute(
            "SELECT * FROM companion_relationships WHERE id = ?", (cursor.lastrowid,)
        ).fetchone())
    finally:
        conn.close()


def delete_companion_relationship(relationship_id):
    conn = get_db()
    try:
        cursor = conn.execute(
            "DELETE FROM companion_relationships WHERE id = ?", (relationship_id,)
        )
        if cursor.rowcount == 0:
            raise NotFound("Relationship not found")
        conn.commit()
    finally:
        conn.close()


# ========================================
# Tasks
# ========================================

TASK_SELECT = """
    SELECT t.*,
        p.name AS plant_name,
        p.variety AS plant_variety,
        pl.location AS planting_location
    FROM tasks t
    LEFT JOIN plants p ON t.plant_id = p.id
    LEFT JOIN plantings pl ON t.planting_id = pl.id
"""


def get_tasks(status=None, task_type=None, upcoming_days=None, today=None):
    """
    List tasks, optionally filtered.

    Args:
        status: 'pending' or 'completed'
        task_type: exact task_type match
        upcoming_days: pending tasks due within this many days of *today*
    """
    today = today or date.today()
    query = TASK_SELECT + " WHERE 1=1"
    params = []

    if status == 'pending':
        query += " AND t.completed_at IS NULL"
    elif status == 'completed':
        query += " AND t.completed_at IS NOT NULL"

    if task_type:
        query += " AND t.task_type = ?"
        params.append(task_type)

    if upcoming_days is not None:
        query += " AND t.due_date <= ? AND t.completed_at IS NULL"
        params.append((today + timedelta(days=int(upcoming_days))).isoformat())

    query += " ORDER BY t.due_date ASC, t.created_at ASC, t.id ASC"

    conn = get_db()
    try:
        return [dict(r) for r in conn.execute(query, params).fetchall()]
    finally:
        conn.close()


def get_due_tasks(today=None):
    """Pending tasks due today or overdue."""
    today = today or date.today()
    conn = get_db()
    try:
        rows = conn.execute(
            TASK_SELECT + """ WHERE t.completed_at IS NULL AND t.due_date <= ?
                              ORDER BY t.due_date ASC, t.id ASC""",
            (today.isoformat(),)
        ).fetchall()
        return [dict(r) for r in rows]
    finally:
        conn.close()


def _fetch_task(conn, task_id) -> Task:
    task = from_row(Task, conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone())
    if task is None:
        raise NotFound("Task not found")
    return task


def get_task(task_id):
    conn = get_db()
    try:
        row = conn.execute(TASK_SELECT + " WHERE t.id = ?", (task_id,)).fetchone()
    finally:
        conn.close()
    if not row:
        raise NotFound("Task not found")
    return dict(row)


def create_task(title, description=None, task_type=None, due_date=None,
                recurring=None, plant_id=None, planting_id=None) -> Task:
    title = require_text(title, 'Task title')
    recurring = validate_recurrence(recurring)
    due = parse_iso_date(due_date)

    conn = get_db()
    try:
        cursor = conn.execute(
            """INSERT INTO tasks (title, description, task_type, due_date, recurring, plant_id, planting_id)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (title, description, task_type, due.isoformat() if due else None,
             recurring, plant_id, planting_id)
        )
        conn.commit()
        return _fetch_task(conn, cursor.lastrowid)
    finally:
        conn.close()


def update_task(task_id, **fields) -> Task:
    conn = get_db()
    try:
        _fetch_task(conn, task_id)
        updates = {}
        if fields.get('title') is not None:
            updates['title'] = require_text(fields['title'], 'Task title')
        if 'recurring' in fields:
            updates['recurring'] = validate_recurrence(fields['recurring'])
        if 'due_date' in fields:
            due = parse_iso_date(fields['due_date'])
            updates['due_date'] = due.isoformat() if due else None
        for key in ('description', 'task_type', 'plant_id', 'planting_id'):
            if key in fields:
                updates[key] = fields[key]

        if updates:
            assignments = ', '.join(f"{key} = ?" for key in updates)
            conn.execute(
                f"UPDATE tasks SET {assignments} WHERE id = ?",
                list(updates.values()) + [task_id]
            )
            conn.commit()
        return _fetch_task(conn, task_id)
    finally:
        conn.close()


def complete_task(task_id, now=None) -> Task:
    """
    Mark a task completed. A recurring task with a due date spawns its next
    occurrence in the same transaction. Completing an already completed task
    changes nothing.
    """
    now = now or datetime.now()
    conn = get_db()
    try:
        task = _fetch_task(conn, task_id)
        if task.completed_at:
            return task
        conn.execute(
            "UPDATE tasks SET completed_at = ? WHERE id = ?",
            (now.isoformat(sep=' ', timespec='seconds'), task_id)
        )

        if task.recurring and task.due_date:
            next_date = next_due_date(parse_iso_date(task.due_date), task.recurring)
            conn.execute(
                """INSERT INTO tasks (title, description, task_type, due_date, recurring, plant_id, planting_id)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (task.title, task.description, task.task_type, next_date.isoformat(),
                 task.recurring, task.plant_id, task.planting_id)
            )
            logger.info("Task %s completed, next occurrence due %s", task_id, next_date)

        conn.commit()
        return _fetch_task(conn, task_id)
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def uncomplete_task(task_id) -> Task:
    conn = get_db()
    try:
        _fetch_task(conn, task_id)
        conn.execute("UPDATE tasks SET completed_at = NULL WHERE id = ?", (task_id,))
        conn.commit()
        return _fetch_task(conn, task_id)
    finally:
        conn.close()


def delete_task(task_id):
    conn = get_db()
    try:
        _fetch_task(conn, task_id)
        conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        conn.commit()
    finally:
        conn.close()


# ========================================
# Sensor Readings
# ========================================

def insert_readings(readings):
    """Insert a batch of SensorReading records in one transaction."""
    conn = get_db()
    try:
        conn.executemany(
            """INSERT INTO sensor_readings
               (sensor_id, sensor_name, sensor_type, moisture_percent, temperature_f, battery_status)
               VALUES (?, ?, ?, ?, ?, ?)""",
            [(r.sensor_id, r.sensor_name, r.sensor_type, r.moisture_percent,
              r.temperature_f, r.battery_status) for r in readings]
        )
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def get_latest_readings(sensor_type=None):
    """Latest reading per sensor, optionally limited to one sensor type."""
    query = """
        SELECT * FROM sensor_readings
        WHERE id IN (SELECT MAX(id) FROM sensor_readings GROUP BY sensor_id)
    """
    params = []
    if sensor_type:
        query += " AND sensor_type = ?"
        params.append(sensor_type)
    query += " ORDER BY sensor_id"

    conn = get_db()
    try:
        return [from_row(SensorReading, r) for r in conn.execute(query, params).fetchall()]
    finally:
        conn.close()


def get_sensor_history(sensor_id, hours=24):
    """Readings of one sensor over the last *hours*, oldest first."""
    conn = get_db()
    try:
        rows = conn.execute(
            """SELECT moisture_percent, temperature_f, timestamp FROM sensor_readings
               WHERE sensor_id = ? AND timestamp > datetime('now', ?)
               ORDER BY timestamp ASC, id ASC""",
            (sensor_id, f'-{int(hours)} hours')
        ).fetchall()
        return [dict(r) for r in rows]
    finally:
        conn.close()


def get_sensors():
    conn = get_db()
    try:
        rows = conn.execute(
            """SELECT sensor_id, MAX(sensor_name) AS sensor_name, MAX(timestamp) AS last_seen
               FROM sensor_readings GROUP BY sensor_id ORDER BY sensor_id"""
        ).fetchall()
        return [dict(r) for r in rows]
    finally:
        conn.close()


# ========================================
# Alert History
# ========================================

def alert_cooldown_minutes():
    """Minutes before the same alert may be raised again for a sensor."""
    try:
        return int(get_setting('alert_cooldown_minutes', DEFAULT_ALERT_COOLDOWN_MINUTES))
    except (TypeError, ValueError):
        return DEFAULT_ALERT_COOLDOWN_MINUTES


def is_in_cooldown(sensor_id, alert_type):
    """True when this alert type was raised for the sensor within the cooldown."""
    conn = get_db()
    try:
        row = conn.execute(
            """SELECT id FROM alert_history
               WHERE sensor_id = ? AND alert_type = ? AND sent_at > datetime('now', ?)
               LIMIT 1""",
            (sensor_id, alert_type, f'-{alert_cooldown_minutes()} minutes')
        ).fetchone()
        return row is not None
    finally:
        conn.close()


def record_alert(sensor_id, alert_type, message):
    conn = get_db()
    try:
        conn.execute(
            "INSERT INTO alert_history (sensor_id, alert_type, message) VALUES (?, ?, ?)",
            (sensor_id, alert_type, message)
        )
        conn.commit()
    finally:
        conn.close()


def get_alert_history(sensor_id=None, limit=50):
    """Most recent raised alerts first."""
    query = "SELECT * FROM alert_history"
    params = []
    if sensor_id:
        query += " WHERE sensor_id = ?"
        params.append(sensor_id)
    query += " ORDER BY sent_at DESC, id DESC LIMIT ?"
    params.append(int(limit))

    conn = get_db()
    try:
        return [dict(r) for r in conn.execute(query, params).fetchall()]
    finally:
        conn.close()
