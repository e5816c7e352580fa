"""Defect model"""
from defect_tracker import db
from .base import BaseModel


class DefectStatus:
    """Lifecycle states, stored and sent over the wire as these strings"""
    ON_PROGRESS = 'On Progress'
    FINISH = 'Finish'

    ALL = (ON_PROGRESS, FINISH)


class Defect(BaseModel):
    """
    Defect model - a structural defect logged on site

    Reminder scheduling lives on the row itself: ``notification_due_at`` is
    derived once at creation from ``notification_delay_seconds`` and due-ness
    is evaluated on demand against it.
    """
    __tablename__ = 'defects'

    # Descriptive attributes
    name = db.Column(db.String(255), nullable=False)
    defect_type = db.Column(db.String(100), nullable=False)
    floor = db.Column(db.String(50), nullable=False)
    axis_location = db.Column(db.String(100), nullable=False)

    status = db.Column(db.String(50), nullable=False, default=DefectStatus.ON_PROGRESS)

    # Opaque photo payloads (base64 data URLs)
    before_photo = db.Column(db.Text, nullable=False)
    after_photo = db.Column(db.Text)

    # Reminder scheduling
    notification_delay_seconds = db.Column(db.Integer)
    notification_due_at = db.Column(db.DateTime)
    is_notified = db.Column(db.Boolean, nullable=False, default=False)

    created_by = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'))

    __table_args__ = (
        db.Index('idx_defects_created_at', 'created_at'),
        db.Index('idx_defects_notification_due', 'notification_due_at', 'is_notified'),
    )

    author = db.relationship('User', foreign_keys=[created_by])

    def __repr__(self):
        return f'<Defect {self.name} - {self.status}>'

    @property
    def is_finished(self):
        return self.status == DefectStatus.FINISH

    def to_dict(self, exclude=None):
        data = super().to_dict(exclude=exclude)
        data['created_by_username'] = self.author.username if self.author else None
        return data
