"""
utils/grid.py — Bed grid geometry.

Cells are addressed by 0-indexed (row, col). Two cells are neighbours when
their Chebyshev distance is exactly 1, i.e. the 8 surrounding cells.
"""


def in_bounds(row: int, col: int, rows: int, cols: int) -> bool:
    return 0 <= row < rows and 0 <= col < cols


def chebyshev_distance(a, b) -> int:
    """Distance between two (row, col) cells counting diagonal steps as 1."""
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def is_adjacent(a, b) -> bool:
    """True for distinct cells that touch, diagonals included."""
    return chebyshev_distance(a, b) == 1


def neighbor_cells(row: int, col: int, rows: int, cols: int):
    """Return the in-bounds 8-neighbourhood of (row, col), row-major order."""
    return [
        (r, c)
        for r in range(row - 1, row + 2)
        for c in range(col - 1, col + 2)
        if (r, c) != (row, col) and in_bounds(r, c, rows, cols)
    ]
