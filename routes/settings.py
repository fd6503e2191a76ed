"""
routes/settings.py — Alert profile settings routes.

Provides:
- GET /api/settings/profiles                — All alert profiles and the default profile name
- PUT /api/settings/profiles/<name>         — Create/replace an alert threshold profile
- PUT /api/settings/default-profile         — Choose the profile used by beds without one
- PUT /api/settings/alert-cooldown          — Minutes between repeats of the same alert

A profile holds moisture_low, moisture_critical, moisture_high and the
temp_* thresholds used when classifying sensor readings.
"""

import json

from flask import Blueprint, jsonify, request

from database import alert_cooldown_minutes, get_profile, get_setting, list_profiles, update_setting
from errors import NotFound, ValidationError
from utils.validators import require_int
from watering import DEFAULT_PROFILE, PROFILE_KEYS

settings_bp = Blueprint('settings', __name__, url_prefix='/api/settings')


@settings_bp.route('/profiles')
def profiles():
    return jsonify({
        'success': True,
        'profiles': list_profiles(),
        'default_profile': get_setting('default_profile', DEFAULT_PROFILE),
        'alert_cooldown_minutes': alert_cooldown_minutes(),
    })


@settings_bp.route('/profiles/<name>', methods=['PUT'])
def save_profile(name):
    """Store a threshold profile; every threshold must be a number."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object body")
    profile = {}
    for key in PROFILE_KEYS:
        value = data.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"{key} must be a number")
        profile[key] = value
    if not profile['moisture_critical'] <= profile['moisture_low'] < profile['moisture_high']:
        raise ValidationError("Expected moisture_critical <= moisture_low < moisture_high")
    update_setting(f'profile_{name}', json.dumps(profile))
    return jsonify({'success': True, 'name': name, 'profile': profile})


@settings_bp.route('/default-profile', methods=['PUT'])
def set_default_profile():
    data = request.get_json(silent=True) or {}
    name = data.get('name')
    if not name or get_profile(name) is None:
        raise NotFound(f"Alert profile {name!r} not found")
    update_setting('default_profile', name)
    return jsonify({'success': True, 'default_profile': name})


@settings_bp.route('/alert-cooldown', methods=['PUT'])
def set_alert_cooldown():
    """Minutes before the same alert may be raised again for a sensor."""
    data = request.get_json(silent=True) or {}
    minutes = require_int(data.get('minutes'), 'minutes', minimum=0)
    update_setting('alert_cooldown_minutes', str(minutes))
    return jsonify({'success': True, 'alert_cooldown_minutes': minutes})
