import logging
from datetime import datetime

from visit_scheduler.errors import DraftNotFoundError, DraftPublishedError
from visit_scheduler.extensions import db
from visit_scheduler.models import DraftAppointment
from visit_scheduler.services.draft_query import select_drafts, week_filter
from visit_scheduler.services.draft_validator import DraftValidator

logger = logging.getLogger(__name__)


def _unpublished(query):
    return query.filter(DraftAppointment.published_at.is_(None))


def get_draft(draft_id):
    draft = db.session.get(DraftAppointment, draft_id)
    if not draft:
        raise DraftNotFoundError(f'Draft {draft_id} not found')
    return draft


def list_drafts(week_start, include_published=False):
    query = DraftAppointment.query.filter(week_filter(DraftAppointment, week_start))
    if not include_published:
        query = _unpublished(query)
    return query.order_by(DraftAppointment.start_time, DraftAppointment.draft_id).all()


def create_draft(client_id, start_time, end_time, team_id=None, speciality_id=None,
                 title=None, notes=None):
    draft = DraftAppointment(
        client_id=client_id,
        team_id=team_id,
        speciality_id=speciality_id,
        start_time=start_time,
        end_time=end_time,
        title=title,
        notes=notes,
        validation_status='pending'
    )
    db.session.add(draft)
    db.session.commit()

    logger.info(f"Created manual draft {draft.draft_id} for client {client_id}")
    return draft


def _mutable_draft(draft_id):
    draft = get_draft(draft_id)
    if draft.is_published:
        raise DraftPublishedError(f'Draft {draft_id} is already published')
    return draft


def remove_draft(draft_id):
    _mutable_draft(draft_id)

    deleted = _unpublished(
        DraftAppointment.query.filter(DraftAppointment.draft_id == draft_id)
    ).delete(synchronize_session=False)
    db.session.commit()

    if not deleted:
        raise DraftPublishedError(f'Draft {draft_id} was published before it could be removed')
    return deleted


def remove_drafts(draft_ids):
    removed_count = 0
    errors = []

    for draft_id in draft_ids:
        try:
            removed_count += remove_draft(draft_id)
        except (DraftNotFoundError, DraftPublishedError) as e:
            errors.append({'draft_id': draft_id, 'message': e.message})

    logger.info(f"Removed {removed_count} of {len(draft_ids)} drafts")
    return removed_count, errors


def unassign_draft(draft_id):
    _mutable_draft(draft_id)

    updated = _unpublished(
        DraftAppointment.query.filter(DraftAppointment.draft_id == draft_id)
    ).update({
        'team_id': None,
        'validation_status': 'pending',
        'validation_errors': None,
        'updated_at': datetime.utcnow()
    }, synchronize_session=False)
    db.session.commit()

    if not updated:
        raise DraftPublishedError(f'Draft {draft_id} was published before it could be unassigned')
    return get_draft(draft_id)


def unassign_drafts(draft_ids):
    unassigned_count = 0
    errors = []

    for draft_id in draft_ids:
        try:
            unassign_draft(draft_id)
            unassigned_count += 1
        except (DraftNotFoundError, DraftPublishedError) as e:
            errors.append({'draft_id': draft_id, 'message': e.message})

    logger.info(f"Unassigned {unassigned_count} of {len(draft_ids)} drafts")
    return unassigned_count, errors


def reassign_draft(draft_id, team_id, validator=None):
    """Move a draft to another team member and revalidate it straight away."""
    _mutable_draft(draft_id)

    updated = _unpublished(
        DraftAppointment.query.filter(DraftAppointment.draft_id == draft_id)
    ).update({
        'team_id': team_id,
        'validation_status': 'pending',
        'validation_errors': None,
        'updated_at': datetime.utcnow()
    }, synchronize_session=False)
    db.session.commit()

    if not updated:
        raise DraftPublishedError(f'Draft {draft_id} was published before it could be reassigned')

    validator = validator or DraftValidator()
    validator.validate(draft_ids=[draft_id])
    return get_draft(draft_id)


def delete_drafts(draft_ids=None, week_start=None):
    """Bulk maintenance delete. Ignores batch boundaries and never touches published drafts."""
    if draft_ids is None and week_start is None:
        return 0

    target_ids = [d.draft_id for d in select_drafts(draft_ids=draft_ids, week_start=week_start)]
    if not target_ids:
        return 0

    deleted = _unpublished(
        DraftAppointment.query.filter(DraftAppointment.draft_id.in_(target_ids))
    ).delete(synchronize_session=False)
    db.session.commit()

    logger.info(f"Deleted {deleted} drafts")
    return deleted
