"""
Defects blueprint
Handles defect logging, photo capture, status changes and reminders
"""
from flask import Blueprint, request

from defect_tracker import lifecycle, scheduler
from defect_tracker.errors import ValidationError
from defect_tracker.store import DefectStore
from defect_tracker.utils import (
    current_session,
    get_json_body,
    parse_delay_seconds,
    require_auth,
    success,
)
from defect_tracker.utils.helpers import utcnow

defects_bp = Blueprint('defects', __name__)


@defects_bp.route('', methods=['GET'])
@require_auth
def list_defects():
    """
    List all defects, newest first

    GET /api/defects
    """
    defects = DefectStore().get_all()
    return success([defect.to_dict() for defect in defects])


@defects_bp.route('/<defect_id>', methods=['GET'])
@require_auth
def get_defect(defect_id):
    """
    Get defect details

    GET /api/defects/<defect_id>
    """
    return success(DefectStore().get_by_id(defect_id).to_dict())


@defects_bp.route('', methods=['POST'])
@require_auth
def create_defect():
    """
    Log a new defect

    POST /api/defects
    Body: {
        "name": "Cracked column",
        "defect_type": "Structural",
        "floor": "3",
        "axis_location": "B-4",
        "before_photo": "data:image/jpeg;base64,...",
        "notification_delay_seconds": 86400
    }
    """
    data = get_json_body(request)
    delay = parse_delay_seconds(data.get('notification_delay_seconds'))

    defect = lifecycle.create_defect(
        attrs=data,
        before_photo=data.get('before_photo'),
        delay_seconds=delay,
        now=utcnow(),
        created_by=current_session().user_id,
    )
    return success(defect.to_dict(), message='Defect created', status=201)


@defects_bp.route('/<defect_id>', methods=['PUT'])
@require_auth
def update_defect(defect_id):
    """
    Edit a defect

    PUT /api/defects/<defect_id>
    Body: any of name, defect_type, floor, axis_location, before_photo,
    after_photo, status. Absent fields are left unchanged.
    """
    data = get_json_body(request)
    defect = lifecycle.edit_defect(defect_id, data, utcnow())

    return success(defect.to_dict(), message='Defect updated')


@defects_bp.route('/<defect_id>/status', methods=['PATCH'])
@require_auth
def update_status(defect_id):
    """
    Change lifecycle status

    PATCH /api/defects/<defect_id>/status
    Body: {"status": "Finish"}
    """
    data = get_json_body(request)
    if not data.get('status'):
        raise ValidationError('Status is required')

    defect = lifecycle.set_status(defect_id, data['status'], utcnow())
    return success(defect.to_dict(), message='Status updated')


@defects_bp.route('/<defect_id>/after-photo', methods=['PATCH'])
@require_auth
def upload_after_photo(defect_id):
    """
    Attach the after photo

    PATCH /api/defects/<defect_id>/after-photo
    Body: {"after_photo": "data:image/jpeg;base64,..."}
    """
    data = get_json_body(request)
    defect = lifecycle.attach_after_photo(defect_id, data.get('after_photo'), utcnow())
    return success(defect.to_dict(), message='After photo uploaded')


@defects_bp.route('/<defect_id>', methods=['DELETE'])
@require_auth
def delete_defect(defect_id):
    lifecycle.delete_defect(defect_id)
    return success(message='Defect deleted')


@defects_bp.route('/notifications/pending', methods=['GET'])
@require_auth
def pending_notifications():
    """
    Reminders due now, earliest first

    GET /api/defects/notifications/pending
    """
    defects = scheduler.query_due(utcnow())
    return success([defect.to_dict() for defect in defects])


@defects_bp.route('/<defect_id>/mark-notified', methods=['PATCH'])
@require_auth
def mark_notified(defect_id):
    """
    Acknowledge a reminder

    PATCH /api/defects/<defect_id>/mark-notified
    """
    defect = scheduler.acknowledge(defect_id, utcnow())
    return success(defect.to_dict(), message='Notification acknowledged')
