"""
Defect store tests
Tests ordering, coalesce updates, deletion and failure propagation
"""
import pytest
from datetime import timedelta
from sqlalchemy.exc import OperationalError

from conftest import PHOTO, T0
from defect_tracker import db
from defect_tracker.errors import NotFound, StoreFailure
from defect_tracker.models import Defect, DefectStatus
from defect_tracker.store import DefectStore


def _defect(name, created_at, **kwargs):
    return Defect(
        name=name,
        defect_type='Finishing',
        floor='1',
        axis_location='A-1',
        before_photo=PHOTO,
        created_at=created_at,
        updated_at=created_at,
        **kwargs
    )


class TestReads:

    def test_get_all_newest_first(self, app):
        store = DefectStore()
        first = store.insert(_defect('first', T0))
        second = store.insert(_defect('second', T0 + timedelta(minutes=1)))
        third = store.insert(_defect('third', T0 + timedelta(minutes=2)))

        assert [d.id for d in store.get_all()] == [third, second, first]

    def test_get_by_id_missing(self, app):
        with pytest.raises(NotFound):
            DefectStore().get_by_id('missing')

    def test_find_due_filters(self, app):
        store = DefectStore()
        due = store.insert(_defect('due', T0, notification_due_at=T0))
        store.insert(_defect('future', T0, notification_due_at=T0 + timedelta(days=1)))
        store.insert(_defect('acked', T0, notification_due_at=T0, is_notified=True))
        store.insert(_defect('finished', T0, notification_due_at=T0, status=DefectStatus.FINISH))
        store.insert(_defect('no reminder', T0))

        assert [d.id for d in store.find_due(T0 + timedelta(seconds=1))] == [due]


class TestWrites:

    def test_update_coalesces_none(self, app):
        store = DefectStore()
        defect_id = store.insert(_defect('original', T0))

        updated = store.update(defect_id, {'name': None, 'floor': '9'})

        assert updated.name == 'original'
        assert updated.floor == '9'

    def test_update_missing(self, app):
        with pytest.raises(NotFound):
            DefectStore().update('missing', {'name': 'x'})

    def test_update_where_respects_criteria(self, app):
        store = DefectStore()
        defect_id = store.insert(_defect('original', T0))

        written = store.update_where(defect_id, {'name': 'changed'}, Defect.status == DefectStatus.FINISH)

        assert written is False
        assert store.get_by_id(defect_id).name == 'original'

    def test_delete_returns_bool(self, app):
        store = DefectStore()
        defect_id = store.insert(_defect('doomed', T0))

        assert store.delete(defect_id) is True
        assert store.delete(defect_id) is False


class TestFailures:

    def test_store_failure_rolls_back(self, app, monkeypatch):
        store = DefectStore()
        defect_id = store.insert(_defect('original', T0))

        def broken_execute(*args, **kwargs):
            raise OperationalError('UPDATE defects', {}, Exception('database is locked'))

        monkeypatch.setattr(db.session, 'execute', broken_execute)

        with pytest.raises(StoreFailure):
            store.update(defect_id, {'name': 'changed'})

        monkeypatch.undo()
        assert store.get_by_id(defect_id).name == 'original'
