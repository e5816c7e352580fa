"""
Pytest configuration and fixtures for defect tracker tests
"""
import pytest
from datetime import datetime, timedelta

from defect_tracker import create_app, db
from defect_tracker import lifecycle
from defect_tracker.models import User
from defect_tracker.utils import generate_token, hash_password

PHOTO = 'data:image/jpeg;base64,/9j/4AAQSkZJRgABAQAAAQABAAD'
AFTER_PHOTO = 'data:image/jpeg;base64,/9j/4AAQSkZJRgABAgAAAQABAAD'

T0 = datetime(2026, 3, 2, 8, 0, 0)


class FrozenClock:
    """Stand-in for utcnow() that only moves when told to"""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def app():
    """Create application instance for testing with a fresh in-memory database"""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


def _make_user(username, role, password='SitePass123!'):
    user = User(username=username, password_hash=hash_password(password), role=role)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def staff_user(app):
    return _make_user('site.staff', 'Staff')


@pytest.fixture
def manager_user(app):
    return _make_user('site.manager', 'Manager')


@pytest.fixture
def user_factory(app):
    """Factory for creating extra accounts"""
    def _create_user(username, role='Staff', password='SitePass123!'):
        return _make_user(username, role, password)

    return _create_user


def _headers_for(user):
    return {
        'Authorization': f'Bearer {generate_token(user)}',
        'Content-Type': 'application/json'
    }


@pytest.fixture
def auth_headers(staff_user):
    """Auth headers with a JWT for a Staff user"""
    return _headers_for(staff_user)


@pytest.fixture
def manager_headers(manager_user):
    """Auth headers with a JWT for a Manager"""
    return _headers_for(manager_user)


@pytest.fixture
def clock(monkeypatch):
    """Freeze the clock the defect routes read"""
    frozen = FrozenClock(T0)
    monkeypatch.setattr('defect_tracker.routes.defects.utcnow', frozen)
    return frozen


@pytest.fixture
def defect_factory(app, staff_user):
    """Factory for logging defects directly through the lifecycle controller"""
    def _create_defect(delay_seconds=None, now=T0, **attrs):
        defaults = {
            'name': 'Cracked column',
            'defect_type': 'Structural',
            'floor': '3',
            'axis_location': 'B-4',
        }
        defaults.update(attrs)
        return lifecycle.create_defect(
            defaults,
            before_photo=PHOTO,
            delay_seconds=delay_seconds,
            now=now,
            created_by=staff_user.id,
        )

    return _create_defect
