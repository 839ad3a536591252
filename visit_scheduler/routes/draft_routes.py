import logging
from datetime import datetime

from flask import Blueprint, current_app, jsonify, request
from visit_scheduler.errors import SchedulingConflictError, SchedulingError
from visit_scheduler.extensions import db
from visit_scheduler.models import Client, Speciality, Team
from visit_scheduler.services.batch_ledger import BatchLedger
from visit_scheduler.services.conflict_checker import group_errors
from visit_scheduler.services.copy_week_planner import CopyWeekPlanner
from visit_scheduler.services.draft_publisher import DraftPublisher
from visit_scheduler.services.draft_validator import DraftValidator
from visit_scheduler.services import draft_store
from visit_scheduler.utils.qualification import get_qualified_teams
from visit_scheduler.utils.weeks import parse_date, start_of_week

logger = logging.getLogger(__name__)

draft_bp = Blueprint('draft_appointments', __name__, url_prefix='/api/draft-appointments')


@draft_bp.app_errorhandler(SchedulingError)
def handle_scheduling_error(e):
    db.session.rollback()
    body = {'success': False, 'error': e.code, 'message': e.message}
    if isinstance(e, SchedulingConflictError):
        body['conflicts'] = e.verdict.to_list()
    return jsonify(body), e.status_code


def serialize_draft(draft):
    client = db.session.get(Client, draft.client_id)
    team = db.session.get(Team, draft.team_id) if draft.team_id else None
    speciality = db.session.get(Speciality, draft.speciality_id) if draft.speciality_id else None

    return {
        'draft_id': draft.draft_id,
        'client_id': draft.client_id,
        'client_name': client.client_name if client else None,
        'team_id': draft.team_id,
        'team_name': team.team_name if team else None,
        'speciality_id': draft.speciality_id,
        'speciality_name': speciality.speciality_name if speciality else None,
        'start_time': draft.start_time.isoformat(),
        'end_time': draft.end_time.isoformat(),
        'title': draft.title,
        'notes': draft.notes,
        'validation_status': draft.validation_status,
        'validation_errors': draft.validation_errors,
        'grouped_errors': group_errors(draft.validation_errors),
        'batch_id': draft.batch_id,
        'source_appointment_id': draft.source_appointment_id,
        'published_at': draft.published_at.isoformat() if draft.published_at else None,
        'published_appointment_id': draft.published_appointment_id,
        'created_at': draft.created_at.strftime('%Y-%m-%d %H:%M:%S'),
        'updated_at': draft.updated_at.strftime('%Y-%m-%d %H:%M:%S')
    }


def parse_week(value):
    return start_of_week(parse_date(value), current_app.config['WEEK_STARTS_ON'])


def parse_target(data):
    """Read ``draft_ids`` or ``week_start`` from a request body; ids win when both are sent."""
    draft_ids = data.get('draft_ids')
    week_start = data.get('week_start')

    if draft_ids is not None:
        if not isinstance(draft_ids, list) or not all(isinstance(i, int) for i in draft_ids):
            raise ValueError('draft_ids must be a list of integers')
        return draft_ids, None

    if week_start:
        return None, parse_week(week_start)

    raise ValueError('draft_ids or week_start is required')


@draft_bp.route('', methods=['GET'])
def get_drafts():
    week_start = request.args.get('week_start')
    if not week_start:
        return jsonify({'error': 'week_start is required'}), 400

    try:
        week = parse_week(week_start)
    except ValueError:
        return jsonify({'error': 'week_start must be YYYY-MM-DD'}), 400

    include_published = request.args.get('include_published', 'false').lower() == 'true'
    drafts = draft_store.list_drafts(week, include_published=include_published)

    return jsonify({
        'success': True,
        'data': {
            'week_start': week.isoformat(),
            'drafts': [serialize_draft(d) for d in drafts],
            'total': len(drafts),
            'valid_count': sum(1 for d in drafts if d.validation_status == 'valid'),
            'invalid_count': sum(1 for d in drafts if d.validation_status == 'invalid'),
            'pending_count': sum(1 for d in drafts if d.validation_status == 'pending')
        }
    }), 200


@draft_bp.route('', methods=['POST'])
def post_draft():
    data = request.get_json(silent=True) or {}

    if not data.get('client_id') or not data.get('start_time') or not data.get('end_time'):
        return jsonify({'error': 'client_id, start_time and end_time are required'}), 400

    try:
        start_time = datetime.fromisoformat(data['start_time'])
        end_time = datetime.fromisoformat(data['end_time'])
    except ValueError:
        return jsonify({'error': 'start_time and end_time must be ISO datetimes'}), 400

    if end_time <= start_time:
        return jsonify({'error': 'end_time must be after start_time'}), 400

    draft = draft_store.create_draft(
        client_id=data['client_id'],
        start_time=start_time,
        end_time=end_time,
        team_id=data.get('team_id'),
        speciality_id=data.get('speciality_id'),
        title=data.get('title'),
        notes=data.get('notes')
    )
    draft = DraftValidator().validate_one(draft) or draft

    return jsonify({
        'success': True,
        'message': 'Draft created',
        'data': serialize_draft(draft)
    }), 201


@draft_bp.route('', methods=['DELETE'])
def delete_drafts():
    data = request.get_json(silent=True) or {}

    try:
        draft_ids, week_start = parse_target(data)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    deleted_count = draft_store.delete_drafts(draft_ids=draft_ids, week_start=week_start)

    return jsonify({
        'success': True,
        'message': f'Deleted {deleted_count} draft appointments',
        'deleted_count': deleted_count
    }), 200


@draft_bp.route('/copy-week', methods=['POST'])
def copy_week():
    data = request.get_json(silent=True) or {}

    source_week = data.get('source_week')
    target_week = data.get('target_week')

    if not source_week or not target_week:
        return jsonify({'error': 'source_week and target_week are required'}), 400

    try:
        source = parse_week(source_week)
        target = parse_week(target_week)
    except ValueError:
        return jsonify({'error': 'source_week and target_week must be YYYY-MM-DD'}), 400

    created_by = data.get('created_by') or current_app.config['DEFAULT_BATCH_CREATOR']

    try:
        result = CopyWeekPlanner().copy_week(source, target, created_by)
    except SchedulingError:
        raise
    except Exception as e:
        db.session.rollback()
        logger.error("Copy week failed", exc_info=True)
        return jsonify({'success': False, 'error': f'Copy week failed: {str(e)}'}), 500

    # initial validation pass, decoupled from creation
    drafts = DraftValidator().validate(draft_ids=result.draft_ids)

    return jsonify({
        'success': True,
        'message': f'Copied {len(result.draft_ids)} appointments as drafts '
                   f'({len(result.skipped)} skipped)',
        'data': dict(
            result.to_dict(),
            valid_count=sum(1 for d in drafts if d.validation_status == 'valid'),
            invalid_count=sum(1 for d in drafts if d.validation_status == 'invalid')
        )
    }), 201


@draft_bp.route('/copy-week-batches', methods=['GET'])
def get_copy_week_batches():
    batches = BatchLedger().list_batches()

    return jsonify({
        'success': True,
        'data': {
            'batches': [b.to_dict() for b in batches],
            'total_batches': len(batches)
        }
    }), 200


@draft_bp.route('/revert-copy-week', methods=['POST'])
def revert_copy_week():
    data = request.get_json(silent=True) or {}

    batch_id = data.get('batch_id')
    if not batch_id:
        return jsonify({'error': 'batch_id is required'}), 400

    result = BatchLedger().revert(batch_id)

    return jsonify({
        'success': True,
        'message': f'Reverted batch: deleted {result.deleted_draft_count} draft appointments',
        'data': result.to_dict()
    }), 200


@draft_bp.route('/publish', methods=['POST'])
def publish_drafts():
    data = request.get_json(silent=True) or {}

    try:
        draft_ids, week_start = parse_target(data)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    result = DraftPublisher().publish(draft_ids=draft_ids, week_start=week_start)

    return jsonify({
        'success': True,
        'message': f'Published {result.published_count} draft appointments',
        'data': result.to_dict()
    }), 200


@draft_bp.route('/revalidate', methods=['POST'])
def revalidate_drafts():
    data = request.get_json(silent=True) or {}

    try:
        draft_ids, week_start = parse_target(data)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    drafts = DraftValidator().validate(draft_ids=draft_ids, week_start=week_start)

    return jsonify({
        'success': True,
        'message': f'Revalidated {len(drafts)} draft appointments',
        'revalidated_count': len(drafts),
        'data': {
            'drafts': [serialize_draft(d) for d in drafts]
        }
    }), 200


@draft_bp.route('/<int:draft_id>/remove', methods=['POST'])
def remove_draft(draft_id):
    draft_store.remove_draft(draft_id)

    return jsonify({
        'success': True,
        'message': f'Draft {draft_id} removed'
    }), 200


@draft_bp.route('/<int:draft_id>/unassign', methods=['POST'])
def unassign_draft(draft_id):
    draft = draft_store.unassign_draft(draft_id)

    return jsonify({
        'success': True,
        'message': f'Team member unassigned from draft {draft_id}',
        'data': serialize_draft(draft)
    }), 200


@draft_bp.route('/<int:draft_id>/reassign', methods=['POST'])
def reassign_draft(draft_id):
    data = request.get_json(silent=True) or {}

    team_id = data.get('team_id')
    if not isinstance(team_id, int):
        return jsonify({'error': 'team_id is required'}), 400

    if not db.session.get(Team, team_id):
        return jsonify({'error': f'Team member {team_id} not found'}), 404

    draft = draft_store.reassign_draft(draft_id, team_id)

    return jsonify({
        'success': True,
        'message': f'Draft {draft_id} reassigned',
        'data': serialize_draft(draft)
    }), 200


@draft_bp.route('/<int:draft_id>/qualified-teams', methods=['GET'])
def get_qualified_teams_for_draft(draft_id):
    """Reassignment candidates for a draft's speciality."""
    draft = draft_store.get_draft(draft_id)
    teams = get_qualified_teams(draft.speciality_id, Team.query.order_by(Team.team_name).all())

    return jsonify({
        'draft_id': draft_id,
        'teams': [{'team_id': t.team_id, 'team_name': t.team_name} for t in teams],
        'total': len(teams)
    }), 200


@draft_bp.route('/bulk-remove', methods=['POST'])
def bulk_remove_drafts():
    data = request.get_json(silent=True) or {}

    draft_ids = data.get('draft_ids')
    if not isinstance(draft_ids, list) or not draft_ids:
        return jsonify({'error': 'draft_ids array is required'}), 400

    removed_count, errors = draft_store.remove_drafts(draft_ids)

    return jsonify({
        'success': True,
        'message': f'Removed {removed_count} draft appointments',
        'removed_count': removed_count,
        'errors': errors if errors else None
    }), 200


@draft_bp.route('/bulk-unassign', methods=['POST'])
def bulk_unassign_drafts():
    data = request.get_json(silent=True) or {}

    draft_ids = data.get('draft_ids')
    if not isinstance(draft_ids, list) or not draft_ids:
        return jsonify({'error': 'draft_ids array is required'}), 400

    unassigned_count, errors = draft_store.unassign_drafts(draft_ids)

    return jsonify({
        'success': True,
        'message': f'Unassigned {unassigned_count} draft appointments',
        'unassigned_count': unassigned_count,
        'errors': errors if errors else None
    }), 200
