"""
Defect record store

Thin persistence layer over the ``defects`` table. Every mutating call is
a single statement followed by a commit, so each logical action is one
atomic row write. SQLAlchemy errors roll the session back and surface as
StoreFailure; nothing is retried here.
"""
import logging
from contextlib import contextmanager

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from defect_tracker import db
from defect_tracker.errors import NotFound, StoreFailure
from defect_tracker.models.defect import Defect, DefectStatus

logger = logging.getLogger(__name__)


class DefectStore:
    """Query/update contract for defect records"""

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    @contextmanager
    def _guard(self, action):
        try:
            yield
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Store failure during %s", action)
            raise StoreFailure(f'Failed to {action}')

    def insert(self, defect):
        """Persist a new record and return its id"""
        with self._guard('insert defect'):
            self.session.add(defect)
            self.session.commit()
        return defect.id

    def get_all(self):
        """All records, newest first"""
        with self._guard('list defects'):
            return (
                self.session.query(Defect)
                .order_by(Defect.created_at.desc(), Defect.id.desc())
                .all()
            )

    def get_by_id(self, defect_id):
        with self._guard('load defect'):
            defect = self.session.get(Defect, defect_id)
        if defect is None:
            raise NotFound('Defect not found')
        return defect

    def update(self, defect_id, fields):
        """
        Partial update with coalesce semantics

        Keys whose value is None are left unchanged.

        Raises:
            NotFound: no record with this id
        """
        values = {key: value for key, value in fields.items() if value is not None}
        if not values:
            return self.get_by_id(defect_id)
        if not self.update_where(defect_id, values):
            raise NotFound('Defect not found')
        return self.get_by_id(defect_id)

    def update_where(self, defect_id, values, *criteria):
        """
        Apply ``values`` to the record only if ``criteria`` hold

        Returns:
            bool: True if a row was written
        """
        stmt = (
            update(Defect)
            .where(Defect.id == defect_id, *criteria)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        with self._guard('update defect'):
            result = self.session.execute(stmt)
            self.session.commit()
        return result.rowcount > 0

    def delete(self, defect_id):
        """Hard delete. Returns False when nothing was removed."""
        with self._guard('delete defect'):
            removed = self.session.query(Defect).filter_by(id=defect_id).delete(synchronize_session=False)
            self.session.commit()
        return removed > 0

    def find_due(self, now):
        """
        Records whose reminder is due at ``now``: due time reached, not yet
        acknowledged and not finished. Earliest due first.
        """
        with self._guard('query due notifications'):
            return (
                self.session.query(Defect)
                .filter(
                    Defect.notification_due_at.isnot(None),
                    Defect.notification_due_at <= now,
                    Defect.is_notified.is_(False),
                    Defect.status != DefectStatus.FINISH,
                )
                .order_by(Defect.notification_due_at.asc(), Defect.id.asc())
                .all()
            )
