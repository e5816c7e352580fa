"""
Members blueprint
Site team membership; Managers invite and remove members
"""
import logging

from flask import Blueprint, request

from defect_tracker import db
from defect_tracker.errors import Conflict, NotFound
from defect_tracker.models import Member, User
from defect_tracker.utils import (
    current_session,
    get_json_body,
    require_auth,
    require_fields,
    require_role,
    success,
)
from defect_tracker.utils.auth import ROLE_MANAGER

logger = logging.getLogger(__name__)

members_bp = Blueprint('members', __name__)


@members_bp.route('', methods=['GET'])
@require_auth
def list_members():
    members = Member.query.order_by(Member.created_at.desc()).all()
    return success([member.to_dict() for member in members])


@members_bp.route('/invite', methods=['POST'])
@require_auth
@require_role(ROLE_MANAGER)
def invite_member():
    """
    Add an existing user to the team

    POST /api/members/invite
    Body: {"username": "site.worker"}
    """
    data = get_json_body(request)
    require_fields(data, ('username',), 'Username is required')

    user = User.query.filter_by(username=data['username']).first()
    if not user:
        raise NotFound('No user with that username')

    if Member.query.filter_by(user_id=user.id).first():
        raise Conflict('User is already a member')

    member = Member(user_id=user.id, invited_by=current_session().user_id)
    db.session.add(member)
    db.session.commit()
    logger.info("%s added to the team by %s", user.username, current_session().username)

    return success(member.to_dict(), message=f'{user.username} added as a member', status=201)


@members_bp.route('/<member_id>', methods=['DELETE'])
@require_auth
@require_role(ROLE_MANAGER)
def remove_member(member_id):
    member = db.session.get(Member, member_id)
    if not member:
        raise NotFound('Member not found')

    db.session.delete(member)
    db.session.commit()
    return success(message='Member removed')
