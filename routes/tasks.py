"""
routes/tasks.py — Maintenance task API routes.

Provides:
- GET    /api/tasks/                 — List tasks (?status=pending|completed, ?type=, ?upcoming_days=)
- GET    /api/tasks/due              — Pending tasks due today or overdue
- GET    /api/tasks/<id>             — Single task
- POST   /api/tasks/                 — Create a task
- PUT    /api/tasks/<id>             — Update a task
- POST   /api/tasks/<id>/complete    — Complete (recurring tasks spawn the next one)
- POST   /api/tasks/<id>/uncomplete  — Revert completion
- DELETE /api/tasks/<id>             — Delete a task
- POST   /api/tasks/bulk/reminders   — Create a recurring reminder from a template
"""

from dataclasses import asdict
from datetime import date

from flask import Blueprint, jsonify, request

from database import (
    complete_task, create_task, delete_task, get_due_tasks, get_task, get_tasks,
    uncomplete_task, update_task,
)
from errors import ValidationError

tasks_bp = Blueprint('tasks', __name__, url_prefix='/api/tasks')

TASK_FIELDS = ('title', 'description', 'task_type', 'due_date', 'recurring',
               'plant_id', 'planting_id')


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object body")
    return data


@tasks_bp.route('/')
def list_tasks():
    upcoming_days = request.args.get('upcoming_days', type=int)
    tasks = get_tasks(
        status=request.args.get('status'),
        task_type=request.args.get('type'),
        upcoming_days=upcoming_days,
    )
    return jsonify({'success': True, 'tasks': tasks})


@tasks_bp.route('/due')
def due_tasks():
    return jsonify({'success': True, 'tasks': get_due_tasks()})


@tasks_bp.route('/<int:task_id>')
def task_detail(task_id):
    return jsonify({'success': True, 'task': get_task(task_id)})


@tasks_bp.route('/', methods=['POST'])
def add_task():
    data = _json_body()
    task = create_task(**{key: data.get(key) for key in TASK_FIELDS})
    return jsonify({'success': True, 'task': asdict(task)}), 201


@tasks_bp.route('/<int:task_id>', methods=['PUT'])
def edit_task(task_id):
    data = _json_body()
    task = update_task(task_id, **{key: data[key] for key in TASK_FIELDS if key in data})
    return jsonify({'success': True, 'task': asdict(task)})


@tasks_bp.route('/<int:task_id>/complete', methods=['POST'])
def complete(task_id):
    return jsonify({'success': True, 'task': asdict(complete_task(task_id))})


@tasks_bp.route('/<int:task_id>/uncomplete', methods=['POST'])
def uncomplete(task_id):
    return jsonify({'success': True, 'task': asdict(uncomplete_task(task_id))})


@tasks_bp.route('/<int:task_id>', methods=['DELETE'])
def remove_task(task_id):
    delete_task(task_id)
    return '', 204


# ========================================
# Reminders
# ========================================

REMINDER_TEMPLATES = {
    'water': {'title': 'Water plants', 'description': 'Check soil moisture and water as needed'},
    'fertilize': {'title': 'Apply fertilizer', 'description': 'Apply balanced fertilizer or compost tea'},
    'harvest': {'title': 'Check for harvest', 'description': 'Inspect plants and harvest ripe produce'},
    'maintenance': {'title': 'Garden maintenance', 'description': 'Weed, prune, and general upkeep'},
}


@tasks_bp.route('/bulk/reminders', methods=['POST'])
def add_reminder():
    """
    Create a recurring reminder from a template.

    start_date defaults to today and recurring to 'weekly'.
    """
    data = _json_body()
    task_type = data.get('task_type')
    template = REMINDER_TEMPLATES.get(task_type)
    if template is None:
        raise ValidationError(f"Invalid task_type. Use: {', '.join(REMINDER_TEMPLATES)}")
    task = create_task(
        title=template['title'],
        description=template['description'],
        task_type=task_type,
        due_date=data.get('start_date') or date.today().isoformat(),
        recurring=data.get('recurring') or 'weekly',
        plant_id=data.get('plant_id'),
        planting_id=data.get('planting_id'),
    )
    return jsonify({'success': True, 'task': asdict(task)}), 201
