"""
routes/plants.py — Plant catalogue, watchlist and planting calendar API routes.

Provides:
- GET    /api/plants/                    — List plants (?category=, ?search=)
- GET    /api/plants/plant-now           — Plants whose window is open this month
- GET    /api/plants/watched/list        — Watched plants with their windows
- GET    /api/plants/calendar/year       — Yearly calendar of watched plants (?year=)
- GET    /api/plants/<id>                — Plant with planting windows
- POST   /api/plants/                    — Create a plant (with planting_windows)
- PUT    /api/plants/<id>                — Update a plant
- DELETE /api/plants/<id>                — Delete a plant
- POST   /api/plants/<id>/watch          — Toggle the watched flag
- GET    /api/plants/<id>/windows        — Planting windows of a plant
- PUT    /api/plants/<id>/windows        — Create/replace one planting window
- DELETE /api/plants/<id>/windows/<type> — Delete one planting window
- GET    /api/plants/<id>/companions     — Good/bad companions of a plant
- GET    /api/plants/plantings/active    — Active plantings
- POST   /api/plants/plantings           — Record a planting
- PATCH  /api/plants/plantings/<id>      — Update status, location, sensor or notes
"""

from dataclasses import asdict
from datetime import date

from flask import Blueprint, jsonify, request

from database import get_companion_index
from errors import ValidationError
from plant_database import (
    PLANT_FIELDS, create_plant, create_planting, delete_plant, delete_planting_window,
    get_active_plantings, get_all_plants_with_windows, get_plant, get_plant_with_windows,
    get_plants, get_watched_plants_with_windows, get_windows_for_plant, set_planting_window,
    toggle_watch, update_plant, update_planting,
)
from planting_calendar import ORDER_BY_CATEGORY, ORDER_BY_WINDOW_TYPE, build_year_agenda, plantable_now
from utils.dates import parse_iso_date

plants_bp = Blueprint('plants', __name__, url_prefix='/api/plants')


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object body")
    return data


def _today():
    """Today's date, overridable with ?date=YYYY-MM-DD."""
    return parse_iso_date(request.args.get('date')) or date.today()


def _plant_with_windows(plant, windows):
    data = asdict(plant)
    data['display_name'] = plant.display_name
    data['planting_windows'] = [asdict(w) for w in windows]
    return data


# ========================================
# Plant List and Calendar
# ========================================

@plants_bp.route('/')
def list_plants():
    plants = get_plants(request.args.get('category'), request.args.get('search'))
    return jsonify({'success': True, 'plants': [asdict(p) for p in plants]})


@plants_bp.route('/plant-now')
def plant_now():
    """
    Plants with a planting window open in the current month.

    ?order=window_type groups by indoor_start/transplant/direct_sow first,
    the default groups by category.
    """
    order = request.args.get('order', ORDER_BY_CATEGORY)
    if order not in (ORDER_BY_CATEGORY, ORDER_BY_WINDOW_TYPE):
        raise ValidationError("order must be 'category' or 'window_type'")
    today = _today()
    plants = plantable_now(get_all_plants_with_windows(), today, order=order)
    return jsonify({'success': True, 'month': today.month, 'plants': plants})


@plants_bp.route('/watched/list')
def watched_list():
    watched = get_watched_plants_with_windows()
    return jsonify({
        'success': True,
        'plants': [_plant_with_windows(p, w) for p, w in watched],
    })


@plants_bp.route('/calendar/year')
def calendar_year():
    """Yearly planting calendar of watched plants, events grouped per month."""
    year = request.args.get('year', type=int) or date.today().year
    calendar = build_year_agenda(get_watched_plants_with_windows(), year)
    return jsonify({'success': True, **calendar})


# ========================================
# Plant CRUD
# ========================================

@plants_bp.route('/<int:plant_id>')
def plant_detail(plant_id):
    plant, windows = get_plant_with_windows(plant_id)
    return jsonify({'success': True, 'plant': _plant_with_windows(plant, windows)})


@plants_bp.route('/', methods=['POST'])
def add_plant():
    data = _json_body()
    fields = {key: data[key] for key in PLANT_FIELDS if key in data and key not in ('name', 'variety')}
    plant = create_plant(
        data.get('name'), data.get('variety'),
        planting_windows=data.get('planting_windows'),
        **fields,
    )
    plant, windows = get_plant_with_windows(plant.id)
    return jsonify({'success': True, 'plant': _plant_with_windows(plant, windows)}), 201


@plants_bp.route('/<int:plant_id>', methods=['PUT'])
def edit_plant(plant_id):
    data = _json_body()
    fields = {key: data[key] for key in PLANT_FIELDS if key in data}
    plant = update_plant(plant_id, **fields)
    return jsonify({'success': True, 'plant': asdict(plant)})


@plants_bp.route('/<int:plant_id>', methods=['DELETE'])
def remove_plant(plant_id):
    delete_plant(plant_id)
    return '', 204


@plants_bp.route('/<int:plant_id>/watch', methods=['POST'])
def watch(plant_id):
    plant = toggle_watch(plant_id)
    return jsonify({'success': True, 'plant': asdict(plant)})


@plants_bp.route('/<int:plant_id>/windows')
def list_windows(plant_id):
    windows = get_windows_for_plant(plant_id)
    return jsonify({'success': True, 'windows': [asdict(w) for w in windows]})


@plants_bp.route('/<int:plant_id>/windows', methods=['PUT'])
def put_window(plant_id):
    window = set_planting_window(plant_id, _json_body())
    return jsonify({'success': True, 'window': asdict(window)})


@plants_bp.route('/<int:plant_id>/windows/<window_type>', methods=['DELETE'])
def remove_window(plant_id, window_type):
    delete_planting_window(plant_id, window_type)
    return '', 204


@plants_bp.route('/<int:plant_id>/companions')
def companions(plant_id):
    """Good and bad companions of a plant, matched on its generic name."""
    plant = get_plant(plant_id)
    index = get_companion_index()
    return jsonify({
        'success': True,
        'plant_id': plant.id,
        'plant_name': plant.name,
        'good_companions': index.companions_of(plant.name, 'good'),
        'bad_companions': index.companions_of(plant.name, 'bad'),
    })


# ========================================
# Plantings
# ========================================

@plants_bp.route('/plantings/active')
def active_plantings():
    return jsonify({'success': True, 'plantings': get_active_plantings()})


@plants_bp.route('/plantings', methods=['POST'])
def add_planting():
    data = _json_body()
    if not data.get('plant_id'):
        raise ValidationError("plant_id is required")
    planted_date = parse_iso_date(data.get('planted_date'), 'planted_date')
    planting = create_planting(
        data['plant_id'], location=data.get('location'), sensor_id=data.get('sensor_id'),
        planted_date=planted_date, notes=data.get('notes'),
    )
    return jsonify({'success': True, 'planting': planting}), 201


@plants_bp.route('/plantings/<int:planting_id>', methods=['PATCH'])
def edit_planting(planting_id):
    data = _json_body()
    planting = update_planting(
        planting_id, status=data.get('status'), location=data.get('location'),
        sensor_id=data.get('sensor_id'), notes=data.get('notes'),
    )
    return jsonify({'success': True, 'planting': planting})
