"""
tests/test_tasks_api.py — Maintenance task API and recurrence tests.
"""

from datetime import date, datetime

from database import complete_task, create_task, get_due_tasks, get_tasks


class TestTasksApi:

    def test_create_and_get(self, client):
        rv = client.post('/api/tasks/', json={
            'title': 'Fertilize tomatoes', 'task_type': 'fertilize', 'due_date': '2026-06-01'})
        assert rv.status_code == 201
        task = rv.get_json()['task']
        assert task['due_date'] == '2026-06-01'

        detail = client.get(f"/api/tasks/{task['id']}").get_json()['task']
        assert detail['title'] == 'Fertilize tomatoes'

    def test_validation(self, client):
        assert client.post('/api/tasks/', json={'title': ''}).status_code == 400
        assert client.post('/api/tasks/', json={'title': 'X', 'recurring': 'hourly'}).status_code == 400
        assert client.post('/api/tasks/', json={'title': 'X', 'due_date': 'soon'}).status_code == 400
        assert client.post('/api/tasks/', data='not json').status_code == 400

    def test_complete_recurring_spawns_next(self, client):
        task = client.post('/api/tasks/', json={
            'title': 'Water seedlings', 'due_date': '2026-04-10', 'recurring': 'weekly'}).get_json()['task']

        rv = client.post(f"/api/tasks/{task['id']}/complete")
        assert rv.status_code == 200
        assert rv.get_json()['task']['completed_at'] is not None

        pending = client.get('/api/tasks/?status=pending').get_json()['tasks']
        assert [(t['title'], t['due_date'], t['recurring']) for t in pending] == [
            ('Water seedlings', '2026-04-17', 'weekly')]

    def test_completing_twice_spawns_once(self, client):
        task = client.post('/api/tasks/', json={
            'title': 'Water seedlings', 'due_date': '2026-04-10', 'recurring': 'weekly'}).get_json()['task']
        first = client.post(f"/api/tasks/{task['id']}/complete").get_json()['task']
        second = client.post(f"/api/tasks/{task['id']}/complete").get_json()['task']
        assert second['completed_at'] == first['completed_at']
        assert len(client.get('/api/tasks/?status=pending').get_json()['tasks']) == 1

    def test_reminder_from_template(self, client):
        rv = client.post('/api/tasks/bulk/reminders', json={'task_type': 'water'})
        assert rv.status_code == 201
        task = rv.get_json()['task']
        assert (task['title'], task['task_type'], task['recurring']) == ('Water plants', 'water', 'weekly')
        assert task['due_date'] == date.today().isoformat()

        rv = client.post('/api/tasks/bulk/reminders', json={
            'task_type': 'fertilize', 'start_date': '2026-05-01', 'recurring': 'monthly'})
        task = rv.get_json()['task']
        assert (task['title'], task['due_date'], task['recurring']) == (
            'Apply fertilizer', '2026-05-01', 'monthly')

    def test_reminder_rejects_unknown_type(self, client):
        rv = client.post('/api/tasks/bulk/reminders', json={'task_type': 'prune'})
        assert rv.status_code == 400
        assert 'water, fertilize, harvest, maintenance' in rv.get_json()['error']
        assert client.get('/api/tasks/').get_json()['tasks'] == []

    def test_complete_one_off(self, client):
        task = client.post('/api/tasks/', json={'title': 'Build trellis'}).get_json()['task']
        client.post(f"/api/tasks/{task['id']}/complete")
        assert client.get('/api/tasks/?status=pending').get_json()['tasks'] == []
        assert len(client.get('/api/tasks/?status=completed').get_json()['tasks']) == 1

        rv = client.post(f"/api/tasks/{task['id']}/uncomplete")
        assert rv.get_json()['task']['completed_at'] is None

    def test_update_and_delete(self, client):
        task = client.post('/api/tasks/', json={'title': 'Mulch'}).get_json()['task']
        rv = client.put(f"/api/tasks/{task['id']}", json={'due_date': '2026-07-01', 'recurring': 'monthly'})
        assert rv.get_json()['task']['recurring'] == 'monthly'
        assert client.delete(f"/api/tasks/{task['id']}").status_code == 204
        assert client.get(f"/api/tasks/{task['id']}").status_code == 404
        assert client.post(f"/api/tasks/{task['id']}/complete").status_code == 404


class TestTaskStorage:

    def test_monthly_recurrence_clamps_day(self, app):
        with app.app_context():
            task = create_task('Prune', due_date='2026-01-31', recurring='monthly')
            complete_task(task.id, now=datetime(2026, 1, 31, 9, 0))
            pending = get_tasks(status='pending')
        assert [t['due_date'] for t in pending] == ['2026-02-28']

    def test_due_and_upcoming(self, app):
        with app.app_context():
            create_task('Overdue', due_date='2026-05-01')
            create_task('Today', due_date='2026-05-10')
            create_task('Next week', due_date='2026-05-16')
            create_task('Later', due_date='2026-07-01')
            today = date(2026, 5, 10)
            due = [t['title'] for t in get_due_tasks(today)]
            upcoming = [t['title'] for t in get_tasks(upcoming_days=7, today=today)]
        assert due == ['Overdue', 'Today']
        assert upcoming == ['Overdue', 'Today', 'Next week']
