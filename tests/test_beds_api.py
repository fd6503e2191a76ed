"""
tests/test_beds_api.py — Bed, placement and companion-check API tests.

Tests cover:
- Bed CRUD and grid validation
- Placing, moving and removing plants (bounds, occupancy, not found)
- Bed analysis returned with the bed detail
- Companion check for a candidate cell
- Storage-level uniqueness of a bed cell
"""

import sqlite3

import pytest

from database import get_db, insert_placement
from errors import CellOccupied


@pytest.fixture
def garden(client, make_plant, make_bed):
    """A 4x4 bed, tomato/basil/fennel plants and their companion relationships."""
    tomato = make_plant('Tomato', variety='Cherokee Purple', water_needs='high', category='vegetable')
    basil = make_plant('Basil', water_needs='medium', category='herb')
    fennel = make_plant('Fennel', water_needs='low', category='herb')
    client.post('/api/companions/', json={
        'plant_name_a': 'Tomato', 'plant_name_b': 'Basil', 'relationship': 'good',
        'notes': 'Basil improves flavor'})
    client.post('/api/companions/', json={
        'plant_name_a': 'Fennel', 'plant_name_b': 'Tomato', 'relationship': 'bad',
        'notes': 'Fennel inhibits most plants'})
    bed = make_bed()
    return {'bed': bed, 'tomato': tomato, 'basil': basil, 'fennel': fennel}


def place(client, bed_id, plant_id, row, col):
    return client.post(f'/api/beds/{bed_id}/placements',
                       json={'plant_id': plant_id, 'row': row, 'col': col})


class TestBeds:

    def test_create_and_list(self, client, make_bed):
        make_bed('North', rows=2, cols=3)
        beds = client.get('/api/beds/').get_json()['beds']
        assert len(beds) == 1
        assert beds[0]['total_cells'] == 6
        assert beds[0]['placement_count'] == 0

    @pytest.mark.parametrize('rows, cols', [(0, 4), (4, -1), ('x', 4)])
    def test_invalid_dimensions(self, client, rows, cols):
        rv = client.post('/api/beds/', json={'name': 'Bad', 'rows': rows, 'cols': cols})
        assert rv.status_code == 400
        assert rv.get_json()['success'] is False

    def test_name_required(self, client):
        rv = client.post('/api/beds/', json={'rows': 2, 'cols': 2})
        assert rv.status_code == 400

    def test_missing_bed(self, client):
        rv = client.get('/api/beds/999')
        assert rv.status_code == 404
        assert rv.get_json() == {'success': False, 'error': 'Bed not found'}

    def test_cannot_shrink_below_placements(self, client, garden):
        bed_id = garden['bed']['id']
        place(client, bed_id, garden['basil']['id'], 3, 3)
        rv = client.put(f'/api/beds/{bed_id}', json={'rows': 2})
        assert rv.status_code == 400
        rv = client.put(f'/api/beds/{bed_id}', json={'cols': 6, 'name': 'Wider'})
        assert rv.status_code == 200
        assert rv.get_json()['bed']['cols'] == 6

    def test_delete_cascades_placements(self, client, app, garden):
        bed_id = garden['bed']['id']
        place(client, bed_id, garden['basil']['id'], 0, 0)
        assert client.delete(f'/api/beds/{bed_id}').status_code == 204
        assert client.get(f'/api/beds/{bed_id}').status_code == 404
        with app.app_context():
            conn = get_db()
            count = conn.execute("SELECT COUNT(*) FROM bed_placements").fetchone()[0]
            conn.close()
        assert count == 0


class TestPlacements:

    def test_place_returns_companion_info(self, client, garden):
        bed_id = garden['bed']['id']
        assert place(client, bed_id, garden['basil']['id'], 1, 2).status_code == 201
        assert place(client, bed_id, garden['fennel']['id'], 2, 2).status_code == 201

        rv = place(client, bed_id, garden['tomato']['id'], 1, 1)
        assert rv.status_code == 201
        data = rv.get_json()
        assert data['placement']['plant_name'] == 'Tomato'
        assert data['placement']['plant_variety'] == 'Cherokee Purple'
        types = sorted(i['type'] for i in data['companion_info'])
        assert types == ['bad_companion', 'good_companion']

    def test_occupied_cell(self, client, garden):
        bed_id = garden['bed']['id']
        place(client, bed_id, garden['basil']['id'], 0, 0)
        rv = place(client, bed_id, garden['tomato']['id'], 0, 0)
        assert rv.status_code == 409
        assert rv.get_json()['success'] is False

    @pytest.mark.parametrize('row, col', [(4, 0), (0, 4), (-1, 0)])
    def test_out_of_bounds(self, client, garden, row, col):
        rv = place(client, garden['bed']['id'], garden['basil']['id'], row, col)
        assert rv.status_code == 400
        assert 'out of bounds' in rv.get_json()['error']

    def test_unknown_plant(self, client, garden):
        assert place(client, garden['bed']['id'], 999, 0, 0).status_code == 404

    def test_move(self, client, garden):
        bed_id = garden['bed']['id']
        pid = place(client, bed_id, garden['basil']['id'], 0, 0).get_json()['placement']['id']
        place(client, bed_id, garden['fennel']['id'], 3, 3)

        rv = client.patch(f'/api/beds/{bed_id}/placements/{pid}', json={'row': 2, 'col': 1})
        assert rv.status_code == 200
        assert (rv.get_json()['placement']['row'], rv.get_json()['placement']['col']) == (2, 1)

        # Staying put is not a conflict with itself
        rv = client.patch(f'/api/beds/{bed_id}/placements/{pid}', json={'row': 2, 'col': 1})
        assert rv.status_code == 200

        rv = client.patch(f'/api/beds/{bed_id}/placements/{pid}', json={'row': 3, 'col': 3})
        assert rv.status_code == 409
        rv = client.patch(f'/api/beds/{bed_id}/placements/{pid}', json={'row': 9})
        assert rv.status_code == 400

    def test_remove(self, client, garden):
        bed_id = garden['bed']['id']
        pid = place(client, bed_id, garden['basil']['id'], 0, 0).get_json()['placement']['id']
        assert client.delete(f'/api/beds/{bed_id}/placements/{pid}').status_code == 204
        assert client.delete(f'/api/beds/{bed_id}/placements/{pid}').status_code == 404

    def test_storage_rejects_second_plant_in_cell(self, app, garden):
        bed_id = garden['bed']['id']
        with app.app_context():
            insert_placement(bed_id, garden['basil']['id'], 2, 2)
            with pytest.raises(CellOccupied):
                insert_placement(bed_id, garden['tomato']['id'], 2, 2)

    def test_unique_index_backs_occupancy(self, app, garden):
        bed_id = garden['bed']['id']
        with app.app_context():
            insert_placement(bed_id, garden['basil']['id'], 1, 1)
            conn = get_db()
            try:
                with pytest.raises(sqlite3.IntegrityError):
                    conn.execute(
                        "INSERT INTO bed_placements (bed_id, plant_id, row, col) VALUES (?, ?, 1, 1)",
                        (bed_id, garden['tomato']['id'])
                    )
            finally:
                conn.close()


class TestBedAnalysis:

    def test_bed_detail_includes_analysis(self, client, garden):
        bed_id = garden['bed']['id']
        place(client, bed_id, garden['tomato']['id'], 1, 1)
        place(client, bed_id, garden['basil']['id'], 1, 2)
        place(client, bed_id, garden['fennel']['id'], 2, 2)

        bed = client.get(f'/api/beds/{bed_id}').get_json()['bed']
        analysis = bed['analysis']
        assert len(bed['placements']) == 3
        assert analysis['water_needs'] == {'low': 1, 'medium': 1, 'high': 1}
        assert analysis['has_water_conflict'] is True
        assert analysis['total_plants'] == 3
        assert analysis['total_cells'] == 16
        assert len(analysis['companion_issues']) == 1
        issue = analysis['companion_issues'][0]
        assert {issue['plant1']['name'], issue['plant2']['name']} == {'Tomato', 'Fennel'}

    def test_companion_check(self, client, garden):
        bed_id = garden['bed']['id']
        place(client, bed_id, garden['basil']['id'], 0, 0)
        place(client, bed_id, garden['fennel']['id'], 0, 1)

        rv = client.get(f'/api/beds/{bed_id}/companion-check',
                        query_string={'plant_id': garden['tomato']['id'], 'row': 1, 'col': 1})
        assert rv.status_code == 200
        data = rv.get_json()
        assert data['plant'] == 'Tomato (Cherokee Purple)'
        assert [n['plant'] for n in data['adjacent_analysis']['good']] == ['Basil']
        assert [n['plant'] for n in data['adjacent_analysis']['bad']] == ['Fennel']
        assert data['general_companions']['good'][0]['companion'] == 'Basil'

    def test_companion_check_on_occupied_cell(self, client, garden):
        bed_id = garden['bed']['id']
        place(client, bed_id, garden['basil']['id'], 0, 0)
        rv = client.get(f'/api/beds/{bed_id}/companion-check',
                        query_string={'plant_id': garden['tomato']['id'], 'row': 0, 'col': 0})
        assert rv.status_code == 409
