"""SQLAlchemy models package"""
from .user import User
from .member import Member
from .defect import Defect, DefectStatus

__all__ = [
    'User',
    'Member',
    'Defect',
    'DefectStatus',
]
