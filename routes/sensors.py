"""
routes/sensors.py — Soil sensor ingestion and reading API routes.

Provides:
- POST /api/sensors/ecowitt              — Ecowitt gateway webhook (form-encoded)
- GET  /api/sensors/latest               — Latest reading per sensor
- GET  /api/sensors/history/<sensor_id>  — Readings over the last ?hours= (default 24)
- GET  /api/sensors/                     — Known sensors with last-seen time
- GET  /api/sensors/alerts               — Recently raised alerts (?sensor_id=, ?limit=)

The gateway posts soilmoistureN / soilbattN for moisture channels and
tf_chN / tf_battN for soil temperature channels (°F), N = 1..8. Each
reading is classified against its bed's alert profile; raised alerts are
logged and recorded, and repeats wait out the alert cooldown.
"""

import logging
from dataclasses import asdict

from flask import Blueprint, jsonify, request

from database import (
    get_alert_history, get_latest_readings, get_profile_for_sensor, get_sensor_history,
    get_sensors, insert_readings, is_in_cooldown, record_alert,
)
from models import SensorReading
from watering import classify_moisture_alert, classify_temperature_alert

logger = logging.getLogger(__name__)

sensors_bp = Blueprint('sensors', __name__, url_prefix='/api/sensors')

MAX_CHANNELS = 8


def _float_or_none(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_ecowitt_payload(data) -> list:
    """Turn an Ecowitt form payload into SensorReading records."""
    readings = []
    for i in range(1, MAX_CHANNELS + 1):
        moisture = _float_or_none(data.get(f'soilmoisture{i}'))
        if moisture is not None:
            readings.append(SensorReading(
                sensor_id=f'soil_{i}',
                sensor_name=f'Soil Sensor {i}',
                sensor_type='moisture',
                moisture_percent=moisture,
                battery_status=data.get(f'soilbatt{i}') or 'unknown',
            ))
        temperature = _float_or_none(data.get(f'tf_ch{i}'))
        if temperature is not None:
            readings.append(SensorReading(
                sensor_id=f'temp_{i}',
                sensor_name=f'Soil Temp {i}',
                sensor_type='temperature',
                temperature_f=temperature,
                battery_status=data.get(f'tf_batt{i}') or 'unknown',
            ))
    return readings


def check_alerts(readings) -> list:
    """
    Classify readings against their alert profiles; returns raised alerts.

    An alert type already raised for a sensor within the cooldown
    ('alert_cooldown_minutes' setting) is suppressed; raised alerts are
    recorded in alert_history.
    """
    alerts = []
    for reading in readings:
        if reading.sensor_type == 'temperature':
            profile = get_profile_for_sensor(reading.sensor_id, 'temperature')
            alert = profile and classify_temperature_alert(
                reading.sensor_name, reading.temperature_f, profile)
        else:
            profile = get_profile_for_sensor(reading.sensor_id, 'moisture')
            alert = profile and classify_moisture_alert(
                reading.sensor_name, reading.moisture_percent, profile)
        if not alert:
            continue
        if is_in_cooldown(reading.sensor_id, alert['alert_type']):
            logger.debug("Alert %s for %s in cooldown", alert['alert_type'], reading.sensor_id)
            continue
        alert['sensor_id'] = reading.sensor_id
        logger.warning("Alert %s: %s. %s", alert['alert_type'], alert['title'], alert['message'])
        record_alert(reading.sensor_id, alert['alert_type'], alert['message'])
        alerts.append(alert)
    return alerts


@sensors_bp.route('/ecowitt', methods=['POST'])
def ecowitt():
    """Ecowitt gateway webhook."""
    data = request.form if request.form else (request.get_json(silent=True) or {})
    readings = parse_ecowitt_payload(data)
    if readings:
        insert_readings(readings)
        check_alerts(readings)
    logger.debug("Ecowitt payload stored %d readings", len(readings))
    return 'OK', 200


@sensors_bp.route('/latest')
def latest():
    readings = get_latest_readings(request.args.get('type'))
    return jsonify({'success': True, 'readings': [asdict(r) for r in readings]})


@sensors_bp.route('/history/<sensor_id>')
def history(sensor_id):
    hours = request.args.get('hours', 24, type=int)
    return jsonify({'success': True, 'readings': get_sensor_history(sensor_id, hours)})


@sensors_bp.route('/')
def list_sensors():
    return jsonify({'success': True, 'sensors': get_sensors()})


@sensors_bp.route('/alerts')
def alert_history():
    limit = request.args.get('limit', 50, type=int)
    return jsonify({
        'success': True,
        'alerts': get_alert_history(request.args.get('sensor_id'), limit),
    })
