"""Member model"""
from defect_tracker import db
from .base import BaseModel


class Member(BaseModel):
    """
    Member model - a user invited onto the site team
    """
    __tablename__ = 'members'

    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), unique=True, nullable=False)
    invited_by = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'))

    user = db.relationship('User', foreign_keys=[user_id])
    inviter = db.relationship('User', foreign_keys=[invited_by])

    def __repr__(self):
        return f'<Member user={self.user_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'username': self.user.username if self.user else None,
            'role': self.user.role if self.user else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'invited_by_username': self.inviter.username if self.inviter else None,
        }
