"""
routes/companions.py — Companion planting relationship API routes.

Provides:
- GET    /api/companions/       — List relationships (?name= filters on either side)
- POST   /api/companions/       — Create a relationship
- DELETE /api/companions/<id>   — Delete a relationship
"""

from dataclasses import asdict

from flask import Blueprint, jsonify, request

from bed_analyzer import normalize_companion_name
from database import (
    create_companion_relationship, delete_companion_relationship, get_companion_relationships,
)
from errors import ValidationError

companions_bp = Blueprint('companions', __name__, url_prefix='/api/companions')


@companions_bp.route('/')
def list_relationships():
    relationships = get_companion_relationships()
    name = normalize_companion_name(request.args.get('name'))
    if name:
        relationships = [
            r for r in relationships
            if name in (normalize_companion_name(r.plant_name_a),
                        normalize_companion_name(r.plant_name_b))
        ]
    return jsonify({'success': True, 'relationships': [asdict(r) for r in relationships]})


@companions_bp.route('/', methods=['POST'])
def add_relationship():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object body")
    relationship = create_companion_relationship(
        data.get('plant_name_a'), data.get('plant_name_b'),
        data.get('relationship'), data.get('notes'),
    )
    return jsonify({'success': True, 'relationship': asdict(relationship)}), 201


@companions_bp.route('/<int:relationship_id>', methods=['DELETE'])
def remove_relationship(relationship_id):
    delete_companion_relationship(relationship_id)
    return '', 204
