"""User model"""
from defect_tracker import db
from defect_tracker.utils.auth import ROLE_MANAGER, ROLE_STAFF
from .base import BaseModel


class User(BaseModel):
    """
    User model - an account that can log and work on defects
    """
    __tablename__ = 'users'

    username = db.Column(db.String(100), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(50), nullable=False, default=ROLE_STAFF)  # Staff, Manager

    def __repr__(self):
        return f'<User {self.username} - {self.role}>'

    def is_manager(self):
        return self.role == ROLE_MANAGER

    def to_dict(self):
        return super().to_dict(exclude=['password_hash'])
