"""
routes/export.py — Excel export routes.

Provides:
- GET /export/calendar/<year>.xlsx  — Planting calendar of watched plants
- GET /export/bed/<bed_id>.xlsx     — Bed layout with companion conflicts highlighted
"""

from flask import Blueprint, send_file

from utils.export import XLSX_MIMETYPE, generate_bed_excel, generate_calendar_excel

export_bp = Blueprint('export', __name__, url_prefix='/export')


@export_bp.route('/calendar/<int:year>.xlsx')
def export_calendar(year):
    """Export the yearly planting calendar as Excel."""
    buffer, filename = generate_calendar_excel(year)
    return send_file(buffer, as_attachment=True, download_name=filename, mimetype=XLSX_MIMETYPE)


@export_bp.route('/bed/<int:bed_id>.xlsx')
def export_bed(bed_id):
    """Export one bed's layout as Excel."""
    buffer, filename = generate_bed_excel(bed_id)
    return send_file(buffer, as_attachment=True, download_name=filename, mimetype=XLSX_MIMETYPE)
