"""
errors.py — Error kinds raised by the storage layer and the bed/calendar logic.

Each error carries the HTTP status the API layer answers with, so route
handlers never have to map exceptions one by one.
"""


class GardenError(Exception):
    """Base class for all caller-visible garden errors."""
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'success': False, 'error': self.message}


class NotFound(GardenError):
    """Referenced bed, plant, placement, task or relationship does not exist."""
    status_code = 404


class OutOfBounds(GardenError):
    """Placement row/col outside the bed grid."""

    def __init__(self, row, col, rows, cols):
        super().__init__(
            f"Cell ({row}, {col}) is out of bounds for a {rows}x{cols} bed"
        )
        self.row = row
        self.col = col


class CellOccupied(GardenError):
    """Target cell already holds a placement."""
    status_code = 409

    def __init__(self, row, col):
        super().__init__(f"Cell ({row}, {col}) is already occupied")
        self.row = row
        self.col = col


class InvalidInterval(GardenError):
    """Planting window with a month outside 1-12."""


class ValidationError(GardenError):
    """Malformed input (missing name, unknown category, bad dimensions...)."""
