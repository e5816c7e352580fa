"""
Authentication blueprint
Handles login, account registration and the current-user lookup
"""
import logging

from flask import Blueprint, current_app, request

from defect_tracker import db
from defect_tracker.errors import AuthenticationError, Conflict, NotFound, ValidationError
from defect_tracker.extensions import limiter
from defect_tracker.models import User
from defect_tracker.utils import (
    current_session,
    generate_token,
    get_json_body,
    hash_password,
    require_auth,
    require_fields,
    success,
    verify_password,
)
from defect_tracker.utils.auth import ROLE_STAFF, ROLES

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


def create_account(username, password, role=ROLE_STAFF):
    """
    Create a user account

    Raises:
        ValidationError: unknown role
        Conflict: username already taken
    """
    if role not in ROLES:
        raise ValidationError(f'Invalid role. Must be one of: {", ".join(ROLES)}')
    if User.query.filter_by(username=username).first():
        raise Conflict('Username already taken')

    user = User(username=username, password_hash=hash_password(password), role=role)
    db.session.add(user)
    db.session.commit()
    logger.info("Account %s created with role %s", username, role)
    return user


@auth_bp.route('/login', methods=['POST'])
@limiter.limit(lambda: current_app.config['LOGIN_RATE_LIMIT'])
def login():
    """
    Exchange credentials for a bearer token

    POST /api/auth/login
    Body: {"username": "site.lead", "password": "..."}
    """
    data = get_json_body(request)
    require_fields(data, ('username', 'password'), 'Username and password are required')

    user = User.query.filter_by(username=data['username']).first()
    if not user or not verify_password(data['password'], user.password_hash):
        logger.warning("Failed login for %s", data['username'])
        raise AuthenticationError('Invalid username or password')

    token = generate_token(user)
    return success(
        {
            'token': token,
            'user': {'id': user.id, 'username': user.username, 'role': user.role},
        },
        message='Login successful',
    )


@auth_bp.route('/register', methods=['POST'])
def register():
    """
    Register a new account

    POST /api/auth/register
    Body: {"username": "...", "password": "...", "role": "Staff"}

    Only Staff accounts can be self-registered; Manager accounts are made
    through /api/users or the create-manager command.
    """
    data = get_json_body(request)
    require_fields(data, ('username', 'password'), 'Username and password are required')

    role = data.get('role') or ROLE_STAFF
    if role != ROLE_STAFF:
        raise ValidationError('Only Staff accounts can be self-registered')

    user = create_account(data['username'], data['password'], role)
    return success(user.to_dict(), message='User created', status=201)


@auth_bp.route('/me', methods=['GET'])
@require_auth
def me():
    session = current_session()
    user = db.session.get(User, session.user_id)
    if not user:
        raise NotFound('User not found')
    return success(user.to_dict())
