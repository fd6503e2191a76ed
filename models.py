"""
models.py — Python dataclasses for the garden dashboard.

Maps to the SQLite tables created in database.py, plus the result records
produced by bed_analyzer.py and planting_calendar.py.
"""

from dataclasses import dataclass, field, fields, asdict
from typing import Optional, List, Dict


# Fixed orderings used for sorting and validation
CATEGORIES = ('vegetable', 'herb', 'fruit', 'flower', 'cover_crop')
WINDOW_TYPES = ('indoor_start', 'transplant', 'direct_sow')
WATER_NEEDS = ('low', 'medium', 'high')
RELATIONSHIPS = ('good', 'bad', 'neutral')
SUN_REQUIREMENTS = ('full', 'partial', 'shade')


def from_row(cls, row):
    """Build a dataclass from a sqlite3.Row or dict, ignoring extra columns."""
    if row is None:
        return None
    keys = row.keys()
    return cls(**{f.name: row[f.name] for f in fields(cls) if f.name in keys})


def display_name(name: str, variety: Optional[str]) -> str:
    """'Tomato (Roma)' when a variety is set, plain name otherwise."""
    return f"{name} ({variety})" if variety else name


@dataclass
class Plant:
    """A species/variety the gardener can grow."""
    id: Optional[int] = None
    name: str = ""
    variety: Optional[str] = None
    category: Optional[str] = None
    days_to_maturity: Optional[int] = None
    spacing_inches: Optional[int] = None
    sun_requirement: Optional[str] = None
    water_needs: Optional[str] = None
    frost_tolerant: bool = False
    watched: bool = False
    notes: Optional[str] = None

    @property
    def display_name(self) -> str:
        return display_name(self.name, self.variety)


@dataclass
class PlantingWindow:
    """Month/day range during which a plant is started, transplanted or sown."""
    id: Optional[int] = None
    plant_id: int = 0
    window_type: str = ""
    start_month: int = 1
    start_day: int = 1
    end_month: int = 12
    end_day: int = 28

    @property
    def wraps_year(self) -> bool:
        return self.start_month > self.end_month


@dataclass
class CompanionRelationship:
    """Good/bad/neutral tag between two generic plant names."""
    id: Optional[int] = None
    plant_name_a: str = ""
    plant_name_b: str = ""
    relationship: str = "neutral"
    notes: Optional[str] = None


@dataclass
class Bed:
    """Raised bed laid out as a rows x cols grid."""
    id: Optional[int] = None
    name: str = ""
    rows: int = 4
    cols: int = 8
    sensor_id: Optional[str] = None
    temp_sensor_id: Optional[str] = None
    profile: Optional[str] = None
    notes: Optional[str] = None

    @property
    def total_cells(self) -> int:
        return self.rows * self.cols


@dataclass
class BedPlacement:
    """A plant occupying one bed cell, with the joined plant fields."""
    id: Optional[int] = None
    bed_id: int = 0
    plant_id: int = 0
    row: int = 0
    col: int = 0
    planted_date: Optional[str] = None
    notes: Optional[str] = None
    # Joined fields
    plant_name: str = ""
    plant_variety: Optional[str] = None
    plant_category: Optional[str] = None
    water_needs: Optional[str] = None
    days_to_maturity: Optional[int] = None
    spacing_inches: Optional[int] = None

    @property
    def cell(self):
        return (self.row, self.col)

    @property
    def display_name(self) -> str:
        return display_name(self.plant_name, self.plant_variety)


@dataclass
class BedAnalysis:
    """Water-needs tally and companion conflicts for one bed."""
    water_needs: Dict[str, int] = field(default_factory=dict)
    has_water_conflict: bool = False
    companion_issues: List[dict] = field(default_factory=list)
    total_plants: int = 0
    total_cells: int = 0

    def to_dict(self):
        return asdict(self)


@dataclass
class AdjacentAnalysis:
    """Advisory result of checking a candidate plant against a cell's neighbours."""
    plant: str = ""
    adjacent_analysis: Dict[str, list] = field(default_factory=dict)
    general_companions: Dict[str, list] = field(default_factory=dict)

    def to_dict(self):
        return asdict(self)


@dataclass
class CalendarEvent:
    """One (plant, window) pair on the yearly planting calendar."""
    plant_id: int = 0
    plant_name: str = ""
    category: Optional[str] = None
    window_type: str = ""
    start_month: int = 1
    start_day: int = 1
    end_month: int = 12
    end_day: int = 28
    wraps_year: bool = False
    days_to_maturity: Optional[int] = None
    label: str = ""


@dataclass
class Task:
    """Maintenance task, optionally recurring."""
    id: Optional[int] = None
    title: str = ""
    description: Optional[str] = None
    task_type: Optional[str] = None
    due_date: Optional[str] = None
    recurring: Optional[str] = None
    completed_at: Optional[str] = None
    plant_id: Optional[int] = None
    planting_id: Optional[int] = None
    created_at: Optional[str] = None


@dataclass
class SensorReading:
    """Soil moisture / temperature reading from the Ecowitt gateway."""
    id: Optional[int] = None
    sensor_id: str = ""
    sensor_name: Optional[str] = None
    sensor_type: str = "moisture"
    moisture_percent: Optional[float] = None
    temperature_f: Optional[float] = None
    battery_status: Optional[str] = None
    timestamp: Optional[str] = None
