"""
API Routes - JSON endpoints for the owner's entities and the public portfolio
"""

from flask import request, jsonify
from utils.access import RESOURCES, profiles
from utils.decorators import current_owner_id
from utils.errors import AccessError, UnauthorizedError, ValidationError, NOT_FOUND
from utils.public import load_public_portfolio, list_published_posts
from . import api_bp


@api_bp.errorhandler(AccessError)
def handle_access_error(e):
    return jsonify(e.to_dict()), e.status


def require_owner():
    owner_id = current_owner_id()
    if not owner_id:
        raise UnauthorizedError()
    return owner_id


def json_body():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    return payload


def register_resource(name, access):
    """Collection and item routes for one entity type"""
    endpoint = name.replace('-', '_')

    def list_items():
        owner_id = require_owner()
        return jsonify([access.serialize(row) for row in access.list_own(owner_id)])

    def create_item():
        owner_id = require_owner()
        row = access.create(owner_id, json_body())
        return jsonify(access.serialize(row)), 201

    def get_item(item_id):
        owner_id = require_owner()
        return jsonify(access.serialize(access.get_own(owner_id, item_id)))

    def update_item(item_id):
        owner_id = require_owner()
        row = access.update(owner_id, item_id, json_body())
        return jsonify(access.serialize(row))

    def delete_item(item_id):
        owner_id = require_owner()
        if access.delete(owner_id, item_id):
            return jsonify({'success': True})
        return jsonify({
            'success': False,
            'error': f'{access.label.capitalize()} not found',
            'kind': NOT_FOUND,
        }), 404

    api_bp.add_url_rule(f'/{name}', f'list_{endpoint}', list_items, methods=['GET'])
    api_bp.add_url_rule(f'/{name}', f'create_{endpoint}', create_item, methods=['POST'])
    api_bp.add_url_rule(f'/{name}/<item_id>', f'get_{endpoint}', get_item, methods=['GET'])
    api_bp.add_url_rule(f'/{name}/<item_id>', f'update_{endpoint}', update_item, methods=['PUT'])
    api_bp.add_url_rule(f'/{name}/<item_id>', f'delete_{endpoint}', delete_item, methods=['DELETE'])


for resource_name, resource_access in RESOURCES.items():
    register_resource(resource_name, resource_access)


@api_bp.route('/profile', methods=['GET'])
def get_profile():
    """Signed-in account's profile"""
    owner_id = require_owner()
    return jsonify(profiles.serialize(profiles.get(owner_id)))


@api_bp.route('/profile', methods=['PUT'])
def update_profile():
    """Update display fields; the username cannot change"""
    owner_id = require_owner()
    return jsonify(profiles.serialize(profiles.update(owner_id, json_body())))


@api_bp.route('/public/<username>', methods=['GET'])
def public_portfolio(username):
    """Public portfolio of one developer, no session needed"""
    return jsonify(load_public_portfolio(username))


@api_bp.route('/blog/published', methods=['GET'])
def published_posts():
    """Published posts from all public authors"""
    limit = request.args.get('limit', type=int)
    return jsonify(list_published_posts(limit=limit))
