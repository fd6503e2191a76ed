"""
utils/export.py — Excel export generation using openpyxl.

Generates .xlsx workbooks with a styled header row:
- Planting calendar: one row per watched (plant, window) event, plus an
  agenda sheet with one column per month.
- Bed layout: the bed grid, one cell per bed cell, with cells involved in
  a companion conflict filled red.
"""

from io import BytesIO

import openpyxl
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from bed_analyzer import analyze
from database import get_bed, get_companion_index, list_placements
from plant_database import get_watched_plants_with_windows
from planting_calendar import build_year_agenda
from utils.cyclic import MONTH_ABBR, MONTHS

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

# Window type colors for the calendar sheet
WINDOW_FILLS = {
    'indoor_start': PatternFill(start_color='7B1FA2', end_color='7B1FA2', fill_type='solid'),
    'transplant': PatternFill(start_color='4CAF50', end_color='4CAF50', fill_type='solid'),
    'direct_sow': PatternFill(start_color='FFB300', end_color='FFB300', fill_type='solid'),
}
CONFLICT_FILL = PatternFill(start_color='D32F2F', end_color='D32F2F', fill_type='solid')

HEADER_FONT = Font(name='Calibri', bold=True, color='FFFFFF', size=11)
HEADER_FILL = PatternFill(start_color='1565C0', end_color='1565C0', fill_type='solid')
HEADER_ALIGNMENT = Alignment(horizontal='center', vertical='center', wrap_text=True)
HEADER_BORDER = Border(
    bottom=Side(style='thin', color='0D47A1'),
    right=Side(style='thin', color='E2E8F0'),
)
CELL_BORDER = Border(
    bottom=Side(style='thin', color='E2E8F0'),
    right=Side(style='thin', color='E2E8F0'),
)

CALENDAR_COLUMNS = ['Plant', 'Category', 'Window', 'Start', 'End', 'Days to maturity']


def _header(ws, columns, row=1):
    for col_idx, col_name in enumerate(columns, 1):
        cell = ws.cell(row=row, column=col_idx, value=col_name)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGNMENT
        cell.border = HEADER_BORDER


def _save(wb):
    buffer = BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer


def _month_day(month, day):
    return f"{MONTH_ABBR[month]} {day}"


def _build_calendar_sheet(ws, events):
    _header(ws, CALENDAR_COLUMNS)
    for row_idx, event in enumerate(events, 2):
        values = [
            event['plant_name'],
            event['category'] or '',
            event['window_type'].replace('_', ' '),
            _month_day(event['start_month'], event['start_day']),
            _month_day(event['end_month'], event['end_day']),
            event['days_to_maturity'],
        ]
        for col_idx, value in enumerate(values, 1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            cell.border = CELL_BORDER
        window_cell = ws.cell(row=row_idx, column=3)
        if event['window_type'] in WINDOW_FILLS:
            window_cell.fill = WINDOW_FILLS[event['window_type']]
            window_cell.font = Font(color='FFFFFF', bold=True)

    for col_idx, width in enumerate((24, 14, 14, 10, 10, 16), 1):
        ws.column_dimensions[get_column_letter(col_idx)].width = width
    ws.freeze_panes = 'A2'


def _build_agenda_sheet(ws, agenda):
    """One column per month, listing the labels of events open that month."""
    _header(ws, [MONTH_ABBR[m] for m in MONTHS])
    for month in MONTHS:
        for row_idx, event in enumerate(agenda[month]['events'], 2):
            cell = ws.cell(row=row_idx, column=month, value=event['label'])
            cell.border = CELL_BORDER
            if event['window_type'] in WINDOW_FILLS:
                cell.fill = WINDOW_FILLS[event['window_type']]
        ws.column_dimensions[get_column_letter(month)].width = 22
    ws.freeze_panes = 'A2'


def generate_calendar_excel(year):
    """Generate the yearly planting calendar of watched plants.

    Returns:
        (BytesIO buffer, filename)
    """
    calendar = build_year_agenda(get_watched_plants_with_windows(), year)

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = 'Calendar'
    _build_calendar_sheet(ws, calendar['events'])
    _build_agenda_sheet(wb.create_sheet('Agenda'), calendar['agenda'])

    return _save(wb), f"planting_calendar_{year}.xlsx"


def _conflict_cells(analysis):
    cells = set()
    for issue in analysis.companion_issues:
        for side in ('plant1', 'plant2'):
            cells.add((issue[side]['row'], issue[side]['col']))
    return cells


def generate_bed_excel(bed_id):
    """Generate a workbook with the bed grid and a placement list.

    Raises NotFound when the bed does not exist.

    Returns:
        (BytesIO buffer, filename)
    """
    bed = get_bed(bed_id)
    placements = list_placements(bed_id)
    analysis = analyze(bed, placements, get_companion_index())
    conflicts = _conflict_cells(analysis)

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = 'Layout'

    # Grid: header row holds column numbers, first column holds row numbers
    _header(ws, [''] + [f"C{c}" for c in range(bed.cols)])
    for r in range(bed.rows):
        label = ws.cell(row=r + 2, column=1, value=f"R{r}")
        label.font = HEADER_FONT
        label.fill = HEADER_FILL
        for c in range(bed.cols):
            ws.cell(row=r + 2, column=c + 2).border = CELL_BORDER
    for p in placements:
        cell = ws.cell(row=p.row + 2, column=p.col + 2, value=p.display_name)
        cell.alignment = Alignment(wrap_text=True, vertical='center')
        if p.cell in conflicts:
            cell.fill = CONFLICT_FILL
            cell.font = Font(color='FFFFFF', bold=True)
    for col_idx in range(2, bed.cols + 2):
        ws.column_dimensions[get_column_letter(col_idx)].width = 18

    # Placement list
    ws_list = wb.create_sheet('Placements')
    _header(ws_list, ['Row', 'Col', 'Plant', 'Water', 'Planted', 'Notes'])
    for row_idx, p in enumerate(placements, 2):
        values = [p.row, p.col, p.display_name, p.water_needs or '', p.planted_date or '', p.notes or '']
        for col_idx, value in enumerate(values, 1):
            ws_list.cell(row=row_idx, column=col_idx, value=value).border = CELL_BORDER
    ws_list.column_dimensions['C'].width = 24
    ws_list.column_dimensions['F'].width = 30
    ws_list.freeze_panes = 'A2'

    safe_name = ''.join(ch if ch.isalnum() else '_' for ch in bed.name)
    return _save(wb), f"bed_{bed.id}_{safe_name}.xlsx"
