"""
Defect status lifecycle.

    On Progress --(after photo present)--> Finish

Finish is terminal; there is no reopen. Requesting the state a defect is
already in is a no-op success, so concurrent finish requests settle on the
same terminal state.
"""
import logging

from defect_tracker.errors import InvalidTransition, NotFound, ValidationError
from defect_tracker.models.defect import Defect, DefectStatus
from defect_tracker.scheduler import schedule_on_create
from defect_tracker.store import DefectStore
from defect_tracker.utils.validators import is_blank, require_fields

logger = logging.getLogger(__name__)

DESCRIPTIVE_FIELDS = ('name', 'defect_type', 'floor', 'axis_location')

TRANSITIONS = {
    DefectStatus.ON_PROGRESS: {DefectStatus.FINISH},
    DefectStatus.FINISH: set(),
}


def can_transition(current, new):
    return new == current or new in TRANSITIONS.get(current, set())


def create_defect(attrs, before_photo, delay_seconds, now, created_by=None, store=None):
    """
    Log a new defect in the On Progress state

    Args:
        attrs (dict): name, defect_type, floor, axis_location
        before_photo (str): mandatory photo payload
        delay_seconds (int | None): reminder delay; None or <= 0 for none
        now (datetime): creation time, also the reminder base time
        created_by (str | None): authoring user id

    Raises:
        ValidationError: a descriptive field or the before photo is missing
    """
    store = store or DefectStore()
    require_fields(attrs, DESCRIPTIVE_FIELDS)
    if is_blank(before_photo):
        raise ValidationError('A before photo is required')

    due_at = schedule_on_create(delay_seconds, now)
    defect = Defect(
        name=attrs['name'],
        defect_type=attrs['defect_type'],
        floor=str(attrs['floor']),
        axis_location=attrs['axis_location'],
        status=DefectStatus.ON_PROGRESS,
        before_photo=before_photo,
        notification_delay_seconds=delay_seconds if due_at is not None else None,
        notification_due_at=due_at,
        is_notified=False,
        created_by=created_by,
        created_at=now,
        updated_at=now,
    )
    store.insert(defect)
    logger.info("Defect %s created (reminder due %s)", defect.id, due_at or 'never')
    return defect


def edit_defect(defect_id, fields, now, store=None):
    """
    Apply a full edit (details, photos and status) as one row write

    Everything is validated before anything is written, so a rejected
    status change leaves the record untouched. Absent (None) fields are
    left unchanged.

    Raises:
        ValidationError: blank field or unknown status value
        NotFound: no defect with this id
        InvalidTransition: reopen attempt, or finish without an after photo
    """
    store = store or DefectStore()
    editable = DESCRIPTIVE_FIELDS + ('before_photo', 'after_photo')
    values = {key: fields.get(key) for key in editable if fields.get(key) is not None}
    blank = [key for key, value in values.items() if is_blank(value)]
    if blank:
        raise ValidationError(f'Fields cannot be blank: {", ".join(blank)}')
    if 'floor' in values:
        values['floor'] = str(values['floor'])

    new_status = fields.get('status')
    if new_status is not None and new_status not in DefectStatus.ALL:
        raise ValidationError(f'Invalid status. Must be one of: {", ".join(DefectStatus.ALL)}')

    defect = store.get_by_id(defect_id)
    criteria = []
    if new_status is not None and new_status != defect.status:
        if not can_transition(defect.status, new_status):
            logger.warning("Rejected transition %s -> %s for defect %s", defect.status, new_status, defect_id)
            raise InvalidTransition(f'Cannot change status from {defect.status} to {new_status}')
        if 'after_photo' not in values:
            if not defect.after_photo:
                logger.warning("Rejected finish without after photo for defect %s", defect_id)
                raise InvalidTransition('An after photo is required before a defect can be finished')
            criteria.append(Defect.after_photo.isnot(None))
        criteria.append(Defect.status == DefectStatus.ON_PROGRESS)
        values['status'] = DefectStatus.FINISH

    if not values:
        return defect
    values['updated_at'] = now

    if not store.update_where(defect_id, values, *criteria):
        # Deleted (NotFound) or changed by someone else between the read and the write
        current = store.get_by_id(defect_id)
        logger.warning("Edit of defect %s lost a race (status now %s)", defect_id, current.status)
        raise InvalidTransition(f'Defect changed while being edited; status is now {current.status}')
    logger.info("Defect %s edited (%s)", defect_id, ", ".join(sorted(values)))
    return store.get_by_id(defect_id)


def attach_after_photo(defect_id, photo, now, store=None):
    """
    Record the "after" capture for a defect. Does not change status.

    Raises:
        ValidationError: photo missing
        NotFound: no defect with this id
    """
    store = store or DefectStore()
    if is_blank(photo):
        raise ValidationError('An after photo is required')
    defect = store.update(defect_id, {'after_photo': photo, 'updated_at': now})
    logger.info("After photo attached to defect %s", defect_id)
    return defect


def set_status(defect_id, new_status, now, store=None):
    """
    Move a defect through its lifecycle

    Finishing requires an after photo; the check and the write happen in
    one conditional update.

    Raises:
        ValidationError: unknown status value
        NotFound: no defect with this id
        InvalidTransition: reopen attempt, or finish without an after photo
    """
    store = store or DefectStore()
    if new_status not in DefectStatus.ALL:
        raise ValidationError(f'Invalid status. Must be one of: {", ".join(DefectStatus.ALL)}')

    defect = store.get_by_id(defect_id)
    if new_status == defect.status:
        return defect

    if not can_transition(defect.status, new_status):
        logger.warning("Rejected transition %s -> %s for defect %s", defect.status, new_status, defect_id)
        raise InvalidTransition(f'Cannot change status from {defect.status} to {new_status}')

    if not defect.after_photo:
        logger.warning("Rejected finish without after photo for defect %s", defect_id)
        raise InvalidTransition('An after photo is required before a defect can be finished')

    written = store.update_where(
        defect_id,
        {'status': DefectStatus.FINISH, 'updated_at': now},
        Defect.status == DefectStatus.ON_PROGRESS,
        Defect.after_photo.isnot(None),
    )
    defect = store.get_by_id(defect_id)
    if written:
        logger.info("Defect %s finished", defect_id)
    elif defect.status != DefectStatus.FINISH:
        raise InvalidTransition('An after photo is required before a defect can be finished')
    return defect


def delete_defect(defect_id, store=None):
    """
    Hard delete in any status

    Raises:
        NotFound: no defect with this id
    """
    store = store or DefectStore()
    if not store.delete(defect_id):
        raise NotFound('Defect not found')
    logger.info("Defect %s deleted", defect_id)
