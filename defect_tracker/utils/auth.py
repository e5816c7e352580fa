import logging
from dataclasses import dataclass
from functools import wraps

import bcrypt
import jwt
from flask import current_app, g, request

from defect_tracker.errors import AuthenticationError, PermissionDenied
from defect_tracker.utils.helpers import utcnow

logger = logging.getLogger(__name__)

ROLE_STAFF = 'Staff'
ROLE_MANAGER = 'Manager'
ROLES = (ROLE_STAFF, ROLE_MANAGER)


@dataclass(frozen=True)
class AuthSession:
    """Identity of the caller for the duration of one request"""
    user_id: str
    username: str
    role: str

    @property
    def is_manager(self) -> bool:
        return self.role == ROLE_MANAGER


def hash_password(password: str) -> str:
    """Hash a password using bcrypt"""
    rounds = current_app.config.get('BCRYPT_LOG_ROUNDS', 12)
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds)).decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash"""
    return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))


def generate_token(user) -> str:
    """Generate JWT token carrying the user's id, username and role"""
    now = utcnow()
    payload = {
        'user_id': user.id,
        'username': user.username,
        'role': user.role,
        'exp': now + current_app.config['JWT_ACCESS_TOKEN_EXPIRES'],
        'iat': now
    }
    return jwt.encode(
        payload,
        current_app.config['JWT_SECRET_KEY'],
        algorithm=current_app.config['JWT_ALGORITHM']
    )


def decode_token(token: str) -> dict:
    """Decode and verify JWT token"""
    try:
        return jwt.decode(
            token,
            current_app.config['JWT_SECRET_KEY'],
            algorithms=[current_app.config['JWT_ALGORITHM']]
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError('Token has expired')
    except jwt.InvalidTokenError:
        raise AuthenticationError('Invalid token')


def current_session() -> AuthSession:
    """Return the AuthSession attached by require_auth"""
    session = g.get('auth_session')
    if session is None:
        raise AuthenticationError()
    return session


def require_auth(f):
    """Decorator to require authentication for routes"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get('Authorization')

        if not auth_header:
            raise AuthenticationError('Access token required')

        # Extract token from "Bearer <token>"
        parts = auth_header.split(' ')
        token = parts[1] if len(parts) == 2 else auth_header
        payload = decode_token(token)

        try:
            g.auth_session = AuthSession(
                user_id=payload['user_id'],
                username=payload['username'],
                role=payload['role'],
            )
        except KeyError:
            raise AuthenticationError('Invalid token')

        return f(*args, **kwargs)

    return decorated_function


def require_role(*roles):
    """Decorator to require specific role(s) for routes"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            session = current_session()
            if session.role not in roles:
                logger.warning("User %s (%s) denied access to %s", session.username, session.role, request.path)
                raise PermissionDenied(f'Access denied. {" or ".join(roles)} role required.')
            return f(*args, **kwargs)

        return decorated_function
    return decorator
