"""
tests/test_smoke.py — App factory, error envelope and Excel export smoke tests.
"""

from io import BytesIO

import openpyxl


def test_app_uses_configured_database(app):
    from database import get_db_path
    with app.app_context():
        assert get_db_path() == app.config['DATABASE']


def test_db_path_from_environment(monkeypatch, tmp_path):
    from database import get_db_path
    db_path = str(tmp_path / 'garden.db')
    monkeypatch.setenv('GARDEN_DB_PATH', db_path)
    assert get_db_path() == db_path


def test_weather_cache_minutes_from_config(monkeypatch, tmp_path):
    from app import create_app
    monkeypatch.setenv('WEATHER_CACHE_MINUTES', '30')
    app = create_app({'TESTING': True, 'DATABASE': str(tmp_path / 'g.db')})
    assert app.extensions['weather_cache'].ttl_seconds == 30 * 60


def test_json_error_envelope(client):
    rv = client.get('/api/plants/12345')
    assert rv.status_code == 404
    assert rv.get_json() == {'success': False, 'error': 'Plant not found'}


def test_non_object_body_rejected(client):
    rv = client.post('/api/beds/', json=['not', 'an', 'object'])
    assert rv.status_code == 400


def test_export_calendar(client, make_plant):
    garlic = make_plant('Garlic', category='vegetable', planting_windows=[
        {'window_type': 'direct_sow', 'start_month': 11, 'end_month': 1}])
    client.post(f"/api/plants/{garlic['id']}/watch")

    rv = client.get('/export/calendar/2026.xlsx')
    assert rv.status_code == 200
    assert 'planting_calendar_2026.xlsx' in rv.headers['Content-Disposition']

    wb = openpyxl.load_workbook(BytesIO(rv.data))
    assert wb.sheetnames == ['Calendar', 'Agenda']
    assert wb['Calendar']['A2'].value == 'Garlic'
    agenda = wb['Agenda']
    # Columns are months: Jan, Nov and Dec hold the event
    assert agenda.cell(row=2, column=1).value == 'Garlic - direct sow'
    assert agenda.cell(row=2, column=11).value == 'Garlic - direct sow'
    assert agenda.cell(row=2, column=12).value == 'Garlic - direct sow'
    assert agenda.cell(row=2, column=2).value is None


def test_export_bed(client, make_plant, make_bed):
    tomato = make_plant('Tomato')
    fennel = make_plant('Fennel')
    client.post('/api/companions/', json={
        'plant_name_a': 'Tomato', 'plant_name_b': 'Fennel', 'relationship': 'bad'})
    bed = make_bed('Bed A', rows=2, cols=3)
    client.post(f"/api/beds/{bed['id']}/placements", json={'plant_id': tomato['id'], 'row': 0, 'col': 0})
    client.post(f"/api/beds/{bed['id']}/placements", json={'plant_id': fennel['id'], 'row': 1, 'col': 1})

    rv = client.get(f"/export/bed/{bed['id']}.xlsx")
    assert rv.status_code == 200

    wb = openpyxl.load_workbook(BytesIO(rv.data))
    layout = wb['Layout']
    assert layout.cell(row=2, column=2).value == 'Tomato'
    assert layout.cell(row=3, column=3).value == 'Fennel'
    assert layout.cell(row=2, column=2).fill.fgColor.rgb.endswith('D32F2F')
    assert wb['Placements'].max_row == 3


def test_export_missing_bed(client):
    assert client.get('/export/bed/99.xlsx').status_code == 404


def test_seed_catalog_is_idempotent(tmp_path):
    from app import create_app
    from database import get_companion_index, get_db, seed_catalog
    import seed_catalog as data

    app = create_app({'TESTING': True, 'DATABASE': str(tmp_path / 'seeded.db'), 'SEED_CATALOG': True})
    with app.app_context():
        seed_catalog()
        conn = get_db()
        plants = conn.execute("SELECT COUNT(*) FROM plants").fetchone()[0]
        windows = conn.execute("SELECT COUNT(*) FROM planting_windows").fetchone()[0]
        conn.close()
        index = get_companion_index()

    assert plants == len(data.PLANTS)
    assert windows == len(data.WINDOWS)
    assert index.lookup('fennel', 'Tomato').relationship == 'bad'


def test_seed_windows_reference_seed_plants():
    import seed_catalog as data
    known = {(p[0], p[1]) for p in data.PLANTS}
    assert all((w[0], w[1]) in known for w in data.WINDOWS)
