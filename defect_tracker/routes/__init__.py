"""API blueprints"""
from .health import health_bp
from .auth import auth_bp
from .defects import defects_bp
from .members import members_bp
from .users import users_bp

__all__ = ['health_bp', 'auth_bp', 'defects_bp', 'members_bp', 'users_bp']
