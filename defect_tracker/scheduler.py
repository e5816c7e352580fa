"""
Notification scheduling for defect reminders.

Reminders are derived rather than timed: a due time is computed once when
the defect is created, and due-ness is a predicate evaluated against "now"
whenever a client polls. Nothing fires in the background, so a restart
loses no state.
"""
import logging
from datetime import timedelta

from defect_tracker.models.defect import Defect, DefectStatus
from defect_tracker.store import DefectStore

logger = logging.getLogger(__name__)


def schedule_on_create(delay_seconds, now):
    """
    Compute the reminder due time for a new defect

    Args:
        delay_seconds (int | None): requested delay
        now (datetime): creation time

    Returns:
        datetime | None: ``now + delay_seconds``, or None when no positive
        delay was requested
    """
    if delay_seconds is None or delay_seconds <= 0:
        return None
    return now + timedelta(seconds=delay_seconds)


def is_due(defect, now):
    """Due-ness predicate for a single record"""
    return (
        defect.notification_due_at is not None
        and defect.notification_due_at <= now
        and not defect.is_notified
        and defect.status != DefectStatus.FINISH
    )


def query_due(now, store=None):
    """Unacknowledged, unfinished defects whose reminder is due, earliest first"""
    store = store or DefectStore()
    return store.find_due(now)


def acknowledge(defect_id, now, store=None):
    """
    Mark a defect's reminder as seen

    Idempotent: an already acknowledged or finished defect is returned
    unchanged.

    Raises:
        NotFound: no defect with this id
    """
    store = store or DefectStore()
    written = store.update_where(
        defect_id,
        {'is_notified': True, 'updated_at': now},
        Defect.is_notified.is_(False),
        Defect.status != DefectStatus.FINISH,
    )
    defect = store.get_by_id(defect_id)
    if written:
        logger.info("Reminder for defect %s acknowledged", defect_id)
    return defect
