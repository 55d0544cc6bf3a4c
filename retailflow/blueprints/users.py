"""
Users blueprint: user management, login and role lookup.

Login issues a bearer token; the other user endpoints require one.
"""
from flask import Blueprint, jsonify, current_app
from retailflow.database import get_session
from retailflow.exceptions import NotFoundError
from retailflow.middleware import json_body, require_login
from retailflow.models import User
from retailflow.services import auth_service
from retailflow.services.session_store import get_session_store

users_bp = Blueprint('users', __name__)


@users_bp.route('/api/create-user', methods=['POST'])
@require_login
def create_user():
    data = json_body()
    session = get_session()

    user_id = auth_service.create_user(
        session,
        username=data.get('username'),
        password=data.get('password'),
        email=data.get('email'),
        role=data.get('role'),
    )
    return jsonify({'message': 'User created successfully', 'id': user_id}), 201


@users_bp.route('/api/update-user/<int:user_id>', methods=['PUT'])
@require_login
def update_user(user_id):
    data = json_body()
    session = get_session()

    auth_service.update_user(
        session,
        user_id,
        username=data.get('username'),
        email=data.get('email'),
        role=data.get('role'),
        password=data.get('password') or None,
    )
    return jsonify({'message': 'User updated successfully.'}), 200


@users_bp.route('/api/delete-user/<int:user_id>', methods=['DELETE'])
@require_login
def delete_user(user_id):
    auth_service.delete_user(get_session(), user_id)
    return jsonify({'message': 'User deleted successfully.'}), 200


@users_bp.route('/api/update-user-status/<int:user_id>', methods=['PUT'])
@require_login
def update_user_status(user_id):
    data = json_body()
    auth_service.update_user_status(get_session(), user_id, data.get('status'))
    return jsonify({'message': 'User status updated successfully.'}), 200


@users_bp.route('/api/get-users', methods=['GET'])
@require_login
def list_users():
    session = get_session()
    users = session.query(User).order_by(User.id).all()
    return jsonify({'users': [user.to_dict() for user in users]}), 200


@users_bp.route('/api/login', methods=['POST'])
def login():
    """
    Exchange username and password for a bearer token.

    The user's role is kept in the session store for /get-the-role.
    """
    data = json_body()
    session = get_session()

    user = auth_service.authenticate(session, data.get('username'), data.get('password'))
    get_session_store().save('role', user.role)

    token = auth_service.issue_token(
        user,
        current_app.config['JWT_SECRET'],
        current_app.config.get('JWT_EXPIRES_SECONDS', 3600),
    )
    current_app.logger.info(f"User {user.username} logged in")
    return jsonify({'message': 'Login successful', 'token': token}), 200


@users_bp.route('/get-the-role', methods=['GET'])
def get_the_role():
    role = get_session_store().get('role')
    if not role:
        raise NotFoundError('Role not found')
    return jsonify({'role': role}), 200
