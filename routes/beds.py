"""
routes/beds.py — Raised bed layout API routes.

Provides:
- GET    /api/beds/                              — List beds with placement counts
- GET    /api/beds/<id>                          — Bed, placements and analysis
- POST   /api/beds/                              — Create a bed
- PUT    /api/beds/<id>                          — Update a bed
- DELETE /api/beds/<id>                          — Delete a bed (placements cascade)
- POST   /api/beds/<id>/placements               — Place a plant in a cell
- PATCH  /api/beds/<id>/placements/<pid>         — Move a placement / edit notes
- DELETE /api/beds/<id>/placements/<pid>         — Remove a placement
- GET    /api/beds/<id>/companion-check          — Companion check for a candidate cell

Errors raised by the storage layer (NotFound, OutOfBounds, CellOccupied...)
are turned into JSON by the handler registered in app.py.
"""

from dataclasses import asdict

from flask import Blueprint, jsonify, request

from bed_analyzer import analyze, check_companions_at, placement_companion_info
from database import (
    create_bed, delete_bed, delete_placement, get_bed, get_bed_details, get_beds,
    get_companion_index, insert_placement, list_placements, update_bed, update_placement,
)
from errors import ValidationError
from plant_database import get_plant
from utils.validators import validate_cell

beds_bp = Blueprint('beds', __name__, url_prefix='/api/beds')

BED_FIELDS = ('name', 'rows', 'cols', 'sensor_id', 'temp_sensor_id', 'profile', 'notes')


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object body")
    return data


# ========================================
# Beds
# ========================================

@beds_bp.route('/')
def list_beds():
    """All beds with current moisture and placement counts."""
    return jsonify({'success': True, 'beds': get_beds()})


@beds_bp.route('/<int:bed_id>')
def bed_detail(bed_id):
    """A bed with all placements and its layout analysis."""
    bed = get_bed_details(bed_id)
    placements = list_placements(bed_id)
    analysis = analyze(get_bed(bed_id), placements, get_companion_index())

    bed['placements'] = [asdict(p) for p in placements]
    bed['analysis'] = analysis.to_dict()
    return jsonify({'success': True, 'bed': bed})


@beds_bp.route('/', methods=['POST'])
def add_bed():
    data = _json_body()
    bed = create_bed(
        data.get('name'),
        rows=data.get('rows', 4),
        cols=data.get('cols', 8),
        sensor_id=data.get('sensor_id'),
        temp_sensor_id=data.get('temp_sensor_id'),
        profile=data.get('profile'),
        notes=data.get('notes'),
    )
    return jsonify({'success': True, 'bed': asdict(bed)}), 201


@beds_bp.route('/<int:bed_id>', methods=['PUT'])
def edit_bed(bed_id):
    data = _json_body()
    fields = {key: data[key] for key in BED_FIELDS if key in data}
    bed = update_bed(bed_id, **fields)
    return jsonify({'success': True, 'bed': asdict(bed)})


@beds_bp.route('/<int:bed_id>', methods=['DELETE'])
def remove_bed(bed_id):
    delete_bed(bed_id)
    return '', 204


# ========================================
# Placements
# ========================================

@beds_bp.route('/<int:bed_id>/placements', methods=['POST'])
def add_placement(bed_id):
    """
    Place a plant into an empty cell.

    The placement is created even next to a bad companion; companion_info
    lists the good/bad neighbours so the UI can warn the user.
    """
    data = _json_body()
    plant_id = data.get('plant_id')
    if not plant_id:
        raise ValidationError("plant_id is required")

    placement = insert_placement(
        bed_id, plant_id, data.get('row'), data.get('col'),
        planted_date=data.get('planted_date'), notes=data.get('notes'),
    )
    companion_info = placement_companion_info(
        get_bed(bed_id), list_placements(bed_id), placement, get_companion_index()
    )
    return jsonify({
        'success': True,
        'placement': asdict(placement),
        'companion_info': companion_info,
    }), 201


@beds_bp.route('/<int:bed_id>/placements/<int:placement_id>', methods=['PATCH'])
def move_placement(bed_id, placement_id):
    data = _json_body()
    placement = update_placement(
        bed_id, placement_id,
        row=data.get('row'), col=data.get('col'), notes=data.get('notes'),
    )
    return jsonify({'success': True, 'placement': asdict(placement)})


@beds_bp.route('/<int:bed_id>/placements/<int:placement_id>', methods=['DELETE'])
def remove_placement(bed_id, placement_id):
    delete_placement(bed_id, placement_id)
    return '', 204


@beds_bp.route('/<int:bed_id>/companion-check')
def companion_check(bed_id):
    """Advisory check: what do the neighbours of (row, col) think of plant_id?"""
    bed = get_bed(bed_id)
    plant_id = request.args.get('plant_id', type=int)
    if plant_id is None:
        raise ValidationError("plant_id is required")
    plant = get_plant(plant_id)
    row, col = validate_cell(request.args.get('row'), request.args.get('col'))

    result = check_companions_at(
        bed, list_placements(bed_id), plant.name, row, col,
        get_companion_index(), candidate_variety=plant.variety,
    )
    return jsonify({'success': True, **result.to_dict()})
