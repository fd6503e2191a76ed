"""
app.py — Flask entry point for the garden dashboard.

Initializes the Flask app, registers all route blueprints, calls
init_db() and seed_defaults() on startup, and turns GardenError
exceptions into the JSON error envelope.

Run: python app.py → localhost:5000
"""

import logging
import os
import sqlite3

from flask import Flask, jsonify
from flask_wtf.csrf import CSRFProtect

from database import init_db, seed_catalog, seed_defaults
from errors import GardenError
from routes.beds import beds_bp
from routes.companions import companions_bp
from routes.export import export_bp
from routes.plants import plants_bp
from routes.sensors import sensors_bp
from routes.settings import settings_bp
from routes.tasks import tasks_bp
from routes.weather import weather_bp
from watering import CACHE_DURATION_MINUTES, WeatherCache

logger = logging.getLogger(__name__)

# JSON APIs (and the Ecowitt gateway webhook) carry no CSRF token
API_BLUEPRINTS = (beds_bp, plants_bp, companions_bp, tasks_bp, sensors_bp, weather_bp, settings_bp)


def _float_env(name):
    value = os.environ.get(name)
    return float(value) if value else None


def create_app(test_config=None):
    """Create and configure the Flask application."""
    logging.basicConfig(
        level=os.environ.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    app = Flask(__name__)
    app.secret_key = os.environ.get('SECRET_KEY', 'garden-dashboard-local-app-secret-key')
    app.config['WTF_CSRF_CHECK_DEFAULT'] = True
    app.config['GARDEN_LAT'] = _float_env('GARDEN_LAT')
    app.config['GARDEN_LON'] = _float_env('GARDEN_LON')
    app.config['WEATHER_CACHE_MINUTES'] = float(
        os.environ.get('WEATHER_CACHE_MINUTES', CACHE_DURATION_MINUTES))
    app.config['SEED_CATALOG'] = os.environ.get('GARDEN_SEED_CATALOG', '1') != '0'

    if test_config:
        app.config.update(test_config)

    csrf = CSRFProtect(app)
    for bp in API_BLUEPRINTS:
        csrf.exempt(bp)

    app.extensions['weather_cache'] = WeatherCache(ttl_minutes=app.config['WEATHER_CACHE_MINUTES'])

    # Initialize database and seed defaults
    with app.app_context():
        init_db()
        seed_defaults()
        if app.config['SEED_CATALOG']:
            seed_catalog()

    # Register blueprints
    for bp in API_BLUEPRINTS:
        app.register_blueprint(bp)
    app.register_blueprint(export_bp)

    @app.errorhandler(GardenError)
    def handle_garden_error(e):
        """Typed domain errors become {'success': False, 'error': ...} with their status."""
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(sqlite3.Error)
    def handle_storage_error(e):
        logger.exception("Storage error")
        return jsonify({'success': False, 'error': 'Storage error'}), 500

    return app


if __name__ == '__main__':
    app = create_app()
    # Debug mode: enabled by default for development (auto-reload on file changes)
    # Set FLASK_DEBUG=0 to disable for production
    debug = os.environ.get('FLASK_DEBUG', '1') != '0'
    app.run(host='localhost', port=5000, debug=debug)
