"""
watering.py — Watering advice, alert classification and the weather cache.

Watering advice blends the latest soil-moisture readings with a 3-day
forecast summary. Alert classification compares a single moisture or
temperature reading against a named threshold profile. Neither function
talks to the network; forecasts reach this module through WeatherCache,
filled by whatever fetches them.
"""

import logging
import time
from typing import Callable, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

FORECAST_DAYS = 3
CACHE_DURATION_MINUTES = 15

# Moisture thresholds (percent) for per-sensor advice
MOISTURE_CRITICAL = 20
MOISTURE_LOW = 35
MOISTURE_SATURATED = 70

# Forecast thresholds
RAIN_INCHES_DELAY = 0.5
RAIN_PROBABILITY_DELAY = 60
TEMP_EXTRA_WATER_F = 95
TEMP_MONITOR_F = 85

DEFAULT_PROFILE = 'warm_season'

PROFILE_KEYS = ('moisture_critical', 'moisture_low', 'moisture_high',
                'temp_critical_low', 'temp_low', 'temp_high', 'temp_critical_high')

# Default alert threshold profiles, stored as settings by seed_defaults()
DEFAULT_PROFILES = {
    'warm_season': {
        'moisture_critical': 15, 'moisture_low': 25, 'moisture_high': 80,
        'temp_critical_low': 40, 'temp_low': 55, 'temp_high': 90, 'temp_critical_high': 100,
    },
    'cool_season': {
        'moisture_critical': 20, 'moisture_low': 30, 'moisture_high': 85,
        'temp_critical_low': 32, 'temp_low': 40, 'temp_high': 80, 'temp_critical_high': 90,
    },
    'succulents': {
        'moisture_critical': 5, 'moisture_low': 10, 'moisture_high': 50,
        'temp_critical_low': 35, 'temp_low': 45, 'temp_high': 100, 'temp_critical_high': 110,
    },
}


# ========================================
# Watering Advice
# ========================================

def classify_moisture(moisture_percent):
    """
    Classify a soil moisture reading.

    Returns:
        (status, advice) where status is critical, low, saturated or good.
    """
    if moisture_percent < MOISTURE_CRITICAL:
        return 'critical', 'Water immediately - soil is very dry'
    if moisture_percent < MOISTURE_LOW:
        return 'low', 'Consider watering soon'
    if moisture_percent > MOISTURE_SATURATED:
        return 'saturated', 'Soil is very wet - no watering needed'
    return 'good', 'Moisture levels are adequate'


def summarize_forecast(days: Iterable[dict], limit: int = FORECAST_DAYS) -> Dict[str, float]:
    """
    Reduce daily forecast entries to the summary the advice works from.

    Each day may carry precipitation (inches), precipitation_probability (%)
    and temp_high (°F); missing values count as 0.
    """
    days = list(days)[:limit]
    total_rain = sum(d.get('precipitation') or 0 for d in days)
    max_probability = max((d.get('precipitation_probability') or 0 for d in days), default=0)
    max_temp = max((d.get('temp_high') or 0 for d in days), default=0)
    return {
        'days_checked': len(days),
        'total_expected_rain': total_rain,
        'max_rain_probability': max_probability,
        'max_temperature': max_temp,
    }


def forecast_advice(summary: Dict[str, float]) -> str:
    """Overall advice: rain first, then heat, then the moderate default."""
    rain = summary['total_expected_rain']
    probability = summary['max_rain_probability']
    max_temp = summary['max_temperature']

    if rain > RAIN_INCHES_DELAY or probability > RAIN_PROBABILITY_DELAY:
        return (f'Rain expected in the next {summary.get("days_checked", FORECAST_DAYS)} days '
                f'({rain:.2f}" total, {probability}% chance). '
                f'Consider delaying manual watering.')
    if max_temp > TEMP_EXTRA_WATER_F:
        return (f'High temperatures expected ({max_temp}°F). Plants may need extra water, '
                f'especially in containers.')
    if max_temp > TEMP_MONITOR_F:
        return 'Warm weather ahead. Monitor soil moisture and water in the morning if needed.'
    return 'Weather conditions are moderate. Water based on soil moisture readings.'


def watering_advice(readings: Iterable[dict], forecast_days: Iterable[dict]) -> dict:
    """
    Build the watering recommendation.

    Args:
        readings: Latest moisture reading per sensor, dicts with sensor_id,
                  sensor_name and moisture_percent.
        forecast_days: Daily forecast entries, the first 3 are used.

    Returns:
        {'sensors': [...], 'forecast_summary': {...}, 'overall_advice': str}
    """
    sensors = []
    for reading in readings:
        moisture = reading.get('moisture_percent')
        if moisture is None:
            continue
        status, advice = classify_moisture(moisture)
        sensors.append({
            'sensor_id': reading.get('sensor_id'),
            'sensor_name': reading.get('sensor_name'),
            'moisture_percent': moisture,
            'status': status,
            'advice': advice,
        })

    summary = summarize_forecast(forecast_days)
    return {
        'sensors': sensors,
        'forecast_summary': summary,
        'overall_advice': forecast_advice(summary),
    }


# ========================================
# Alert Classification
# ========================================

def classify_moisture_alert(sensor_name: str, moisture_percent: float,
                            profile: dict) -> Optional[dict]:
    """
    Compare a moisture reading with a profile's thresholds.

    Returns:
        Alert dict (alert_type, title, message, priority, tags) or None.
    """
    if moisture_percent <= profile['moisture_critical']:
        return {
            'alert_type': 'moisture_critical_low',
            'title': f'{sensor_name}: Critical - Needs Water!',
            'message': (f'Soil moisture is critically low at {moisture_percent}% '
                        f'(threshold: {profile["moisture_critical"]}%)'),
            'priority': 'urgent',
            'tags': ['warning', 'droplet'],
        }
    if moisture_percent <= profile['moisture_low']:
        return {
            'alert_type': 'moisture_low',
            'title': f'{sensor_name}: Low Moisture',
            'message': (f'Soil moisture is low at {moisture_percent}% '
                        f'(threshold: {profile["moisture_low"]}%)'),
            'priority': 'high',
            'tags': ['droplet'],
        }
    if moisture_percent >= profile['moisture_high']:
        return {
            'alert_type': 'moisture_high',
            'title': f'{sensor_name}: Over-Saturated',
            'message': (f'Soil moisture is very high at {moisture_percent}% '
                        f'(threshold: {profile["moisture_high"]}%). Risk of root rot.'),
            'priority': 'high',
            'tags': ['warning', 'sweat_drops'],
        }
    return None


def classify_temperature_alert(sensor_name: str, temp_f: float,
                               profile: dict) -> Optional[dict]:
    """Compare a soil temperature reading (°F) with a profile's thresholds."""
    if temp_f <= profile['temp_critical_low']:
        return {
            'alert_type': 'temp_critical_low',
            'title': f'{sensor_name}: Freezing Risk!',
            'message': (f'Soil temperature is {temp_f}F - risk of frost damage! '
                        f'(threshold: {profile["temp_critical_low"]}F)'),
            'priority': 'urgent',
            'tags': ['warning', 'cold_face'],
        }
    if temp_f <= profile['temp_low']:
        return {
            'alert_type': 'temp_low',
            'title': f'{sensor_name}: Cold Soil',
            'message': f'Soil temperature is low at {temp_f}F (threshold: {profile["temp_low"]}F)',
            'priority': 'high',
            'tags': ['snowflake'],
        }
    if temp_f >= profile['temp_critical_high']:
        return {
            'alert_type': 'temp_critical_high',
            'title': f'{sensor_name}: Extreme Heat!',
            'message': (f'Soil temperature is dangerously high at {temp_f}F! '
                        f'(threshold: {profile["temp_critical_high"]}F)'),
            'priority': 'urgent',
            'tags': ['warning', 'fire'],
        }
    if temp_f >= profile['temp_high']:
        return {
            'alert_type': 'temp_high',
            'title': f'{sensor_name}: Hot Soil',
            'message': f'Soil temperature is high at {temp_f}F (threshold: {profile["temp_high"]}F)',
            'priority': 'high',
            'tags': ['thermometer'],
        }
    return None


# ========================================
# Weather Cache
# ========================================

class WeatherCache:
    """
    In-memory TTL cache for weather payloads, keyed by data type
    ('current', 'forecast', ...).

    The clock is injectable so staleness can be tested without sleeping.
    """

    def __init__(self, ttl_minutes: float = CACHE_DURATION_MINUTES,
                 clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_minutes * 60
        self._clock = clock
        self._entries: Dict[str, tuple] = {}

    def get(self, data_type: str):
        """Return the cached payload, or None when missing or stale."""
        entry = self._entries.get(data_type)
        if entry is None:
            return None
        fetched_at, data = entry
        if self._clock() - fetched_at >= self.ttl_seconds:
            logger.debug("Weather cache entry %r is stale", data_type)
            del self._entries[data_type]
            return None
        return data

    def put(self, data_type: str, data) -> None:
        """Replace the cached payload for *data_type*."""
        self._entries[data_type] = (self._clock(), data)

    def clear(self) -> None:
        self._entries.clear()


def forecast_days_from_cache(cache: WeatherCache) -> List[dict]:
    """Daily forecast entries from the cache, or an empty list."""
    payload = cache.get('forecast')
    if not payload:
        return []
    return list(payload.get('forecast', []))
