"""
Draft publisher.

Promotes valid drafts into committed appointments. Conflicts are checked
again at publish time because the schedule may have moved since the last
validation. Each draft is published in its own transaction; the draft row
is flipped with a compare-and-set on ``published_at IS NULL`` so two
publishers racing for the same draft produce one appointment.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError

from visit_scheduler.errors import SchedulingConflictError
from visit_scheduler.extensions import db
from visit_scheduler.models import DraftAppointment
from visit_scheduler.services.appointment_service import create_appointment
from visit_scheduler.services.conflict_checker import ConflictChecker
from visit_scheduler.services.draft_query import select_drafts

logger = logging.getLogger(__name__)


@dataclass
class PublishResult:
    published_count: int = 0
    published_ids: List[int] = field(default_factory=list)
    errors: List[Dict[str, Any]] = field(default_factory=list)

    def add_error(self, draft_id, message):
        self.errors.append({'draft_id': draft_id, 'message': message})

    def to_dict(self) -> Dict[str, Any]:
        return {
            'published_count': self.published_count,
            'published_ids': self.published_ids,
            'errors': self.errors
        }


class DraftPublisher:

    def __init__(self, checker=None):
        self.checker = checker or ConflictChecker()

    def publish(self, draft_ids=None, week_start=None):
        result = PublishResult()

        if draft_ids is not None:
            drafts = select_drafts(draft_ids=draft_ids)
            found_ids = {d.draft_id for d in drafts}
            for draft_id in draft_ids:
                if draft_id not in found_ids:
                    result.add_error(draft_id, f'Draft {draft_id} not found')
        else:
            # whole week: only what is currently valid
            drafts = [
                d for d in select_drafts(week_start=week_start)
                if d.validation_status == 'valid'
            ]

        snapshots = [self._snapshot(d) for d in drafts if not d.is_published]

        for snapshot in snapshots:
            self._publish_one(snapshot, result)

        logger.info(
            f"Published {result.published_count} of {len(snapshots)} drafts "
            f"({len(result.errors)} errors)"
        )

        return result

    def _publish_one(self, snapshot, result):
        draft_id = snapshot['draft_id']

        if snapshot['validation_status'] != 'valid':
            status = snapshot['validation_status']
            if status == 'pending':
                result.add_error(draft_id, 'Draft has not been validated yet')
            else:
                result.add_error(draft_id, 'Draft is invalid and cannot be published')
            return

        try:
            appointment = create_appointment(
                client_id=snapshot['client_id'],
                start_time=snapshot['start_time'],
                end_time=snapshot['end_time'],
                team_id=snapshot['team_id'],
                speciality_id=snapshot['speciality_id'],
                title=snapshot['title'],
                notes=snapshot['notes'],
                checker=self.checker,
                commit=False
            )

            now = datetime.utcnow()
            updated = DraftAppointment.query.filter(
                DraftAppointment.draft_id == draft_id,
                DraftAppointment.published_at.is_(None),
                DraftAppointment.validation_status == 'valid'
            ).update({
                'published_at': now,
                'published_appointment_id': appointment.appointment_id,
                'updated_at': now
            }, synchronize_session=False)

            if updated != 1:
                # published or changed by someone else meanwhile
                db.session.rollback()
                logger.info(f"Draft {draft_id} was changed concurrently, skipping")
                return

            db.session.commit()
            result.published_count += 1
            result.published_ids.append(draft_id)

        except SchedulingConflictError as e:
            db.session.rollback()
            if self._already_published(draft_id):
                logger.info(f"Draft {draft_id} was published concurrently, skipping")
                return
            logger.warning(f"Draft {draft_id} not published: {e.message}")
            result.add_error(draft_id, e.message)

        except SQLAlchemyError:
            db.session.rollback()
            logger.error(f"Publishing draft {draft_id} failed", exc_info=True)
            result.add_error(draft_id, 'Could not publish draft due to a database error')

    def _already_published(self, draft_id):
        return db.session.query(DraftAppointment.published_at).filter(
            DraftAppointment.draft_id == draft_id
        ).scalar() is not None

    def _snapshot(self, draft):
        return {
            'draft_id': draft.draft_id,
            'client_id': draft.client_id,
            'team_id': draft.team_id,
            'speciality_id': draft.speciality_id,
            'start_time': draft.start_time,
            'end_time': draft.end_time,
            'title': draft.title,
            'notes': draft.notes,
            'validation_status': draft.validation_status
        }
