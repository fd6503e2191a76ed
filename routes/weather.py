"""
routes/weather.py — Forecast cache and watering advice API routes.

Provides:
- PUT /api/weather/forecast         — Store a daily forecast in the cache
- GET /api/weather/forecast         — Cached forecast (404 when missing or stale)
- GET /api/weather/watering-advice  — Latest moisture readings + 3-day forecast advice

The forecast is pushed by whatever fetches it from the weather service;
this module never calls the network.
"""

from dataclasses import asdict

from flask import Blueprint, current_app, jsonify, request

from database import get_latest_readings
from errors import NotFound, ValidationError
from watering import forecast_days_from_cache, watering_advice

weather_bp = Blueprint('weather', __name__, url_prefix='/api/weather')

DAY_FIELDS = ('date', 'precipitation', 'precipitation_probability', 'temp_high', 'temp_low')


def _cache():
    return current_app.extensions['weather_cache']


@weather_bp.route('/forecast', methods=['PUT'])
def put_forecast():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get('forecast'), list):
        raise ValidationError("Expected {'forecast': [...]} with one entry per day")
    days = [
        {key: day.get(key) for key in DAY_FIELDS if key in day}
        for day in data['forecast'] if isinstance(day, dict)
    ]
    payload = {
        'forecast': days,
        'timezone': data.get('timezone'),
        'latitude': current_app.config.get('GARDEN_LAT'),
        'longitude': current_app.config.get('GARDEN_LON'),
    }
    _cache().put('forecast', payload)
    return jsonify({'success': True, 'days': len(days)})


@weather_bp.route('/forecast')
def get_forecast():
    payload = _cache().get('forecast')
    if payload is None:
        raise NotFound("No current forecast cached")
    return jsonify({'success': True, **payload})


@weather_bp.route('/watering-advice')
def advice():
    """Per-sensor moisture advice plus the forecast-driven overall advice."""
    readings = [asdict(r) for r in get_latest_readings('moisture')]
    result = watering_advice(readings, forecast_days_from_cache(_cache()))
    return jsonify({'success': True, **result})
