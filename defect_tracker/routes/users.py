"""
Users blueprint
Account administration, restricted to Managers
"""
import logging

from flask import Blueprint, request

from defect_tracker import db
from defect_tracker.errors import Conflict, NotFound, ValidationError
from defect_tracker.models import Member, User
from defect_tracker.routes.auth import create_account
from defect_tracker.utils import (
    current_session,
    get_json_body,
    require_auth,
    require_fields,
    require_role,
    success,
)
from defect_tracker.utils.auth import ROLE_MANAGER, ROLES
from defect_tracker.utils.validators import is_blank

logger = logging.getLogger(__name__)

users_bp = Blueprint('users', __name__)


def _get_user_or_404(user_id):
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound('User not found')
    return user


@users_bp.route('', methods=['GET'])
@require_auth
@require_role(ROLE_MANAGER)
def list_users():
    users = User.query.order_by(User.created_at.desc()).all()
    return success([user.to_dict() for user in users])


@users_bp.route('/<user_id>', methods=['GET'])
@require_auth
@require_role(ROLE_MANAGER)
def get_user(user_id):
    return success(_get_user_or_404(user_id).to_dict())


@users_bp.route('', methods=['POST'])
@require_auth
@require_role(ROLE_MANAGER)
def create_user():
    """
    Create an account with any role

    POST /api/users
    Body: {"username": "...", "password": "...", "role": "Manager"}
    """
    data = get_json_body(request)
    require_fields(data, ('username', 'password'), 'Username and password are required')
    user = create_account(data['username'], data['password'], data.get('role') or 'Staff')
    return success(user.to_dict(), message='User created', status=201)


@users_bp.route('/<user_id>', methods=['PUT'])
@require_auth
@require_role(ROLE_MANAGER)
def update_user(user_id):
    """
    Rename an account or change its role; absent fields are kept

    PUT /api/users/<user_id>
    Body: {"username": "...", "role": "Staff"}
    """
    data = get_json_body(request)
    user = _get_user_or_404(user_id)

    username = data.get('username')
    if username is not None:
        if is_blank(username):
            raise ValidationError('Username cannot be blank')
        taken = User.query.filter(User.username == username, User.id != user.id).first()
        if taken:
            raise Conflict('Username already taken')
        user.username = username

    role = data.get('role')
    if role is not None:
        if role not in ROLES:
            raise ValidationError(f'Invalid role. Must be one of: {", ".join(ROLES)}')
        user.role = role

    db.session.commit()
    return success(user.to_dict(), message='User updated')


@users_bp.route('/<user_id>', methods=['DELETE'])
@require_auth
@require_role(ROLE_MANAGER)
def delete_user(user_id):
    user = _get_user_or_404(user_id)
    if user.id == current_session().user_id:
        raise ValidationError('You cannot delete your own account')

    Member.query.filter_by(user_id=user.id).delete()
    db.session.delete(user)
    db.session.commit()
    logger.info("Account %s deleted by %s", user.username, current_session().username)
    return success(message='User deleted')
