"""
Copy-week batch ledger.

Batch counts are never stored: every summary is aggregated from the
member drafts at read time, so ``can_revert`` cannot go stale.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import case, exists, func
from sqlalchemy.orm import aliased

from visit_scheduler.errors import BatchNotFoundError, NotRevertibleError
from visit_scheduler.extensions import db
from visit_scheduler.models import CopyWeekBatch, DraftAppointment
from visit_scheduler.utils.weeks import format_week

logger = logging.getLogger(__name__)


@dataclass
class BatchSummary:
    batch_id: str
    source_week_start: Any
    target_week_start: Any
    created_by: str
    created_at: datetime
    total_drafts: int = 0
    valid_drafts: int = 0
    invalid_drafts: int = 0
    published_drafts: int = 0

    @property
    def unpublished_drafts(self) -> int:
        return self.total_drafts - self.published_drafts

    @property
    def can_revert(self) -> bool:
        return self.published_drafts == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'batch_id': self.batch_id,
            'source_week': format_week(self.source_week_start),
            'target_week': format_week(self.target_week_start),
            'source_week_date': self.source_week_start.isoformat(),
            'target_week_date': self.target_week_start.isoformat(),
            'created_by': self.created_by,
            'created_at': self.created_at.strftime('%Y-%m-%d %H:%M:%S'),
            'total_drafts': self.total_drafts,
            'valid_drafts': self.valid_drafts,
            'invalid_drafts': self.invalid_drafts,
            'published_drafts': self.published_drafts,
            'unpublished_drafts': self.unpublished_drafts,
            'can_revert': self.can_revert
        }


@dataclass
class RevertResult:
    batch_id: str
    deleted_draft_count: int
    source_week_start: Any
    target_week_start: Any
    # stays 0 while revert is limited to fully unpublished batches
    deleted_appointment_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'batch_id': self.batch_id,
            'deleted_draft_count': self.deleted_draft_count,
            'deleted_appointment_count': self.deleted_appointment_count,
            'source_week': format_week(self.source_week_start),
            'target_week': format_week(self.target_week_start)
        }


class BatchLedger:

    def _counts_query(self):
        return db.session.query(
            DraftAppointment.batch_id.label('batch_id'),
            func.count(DraftAppointment.draft_id).label('total'),
            func.sum(case((DraftAppointment.validation_status == 'valid', 1), else_=0)).label('valid'),
            func.sum(case((DraftAppointment.validation_status == 'invalid', 1), else_=0)).label('invalid'),
            func.sum(case((DraftAppointment.published_at.isnot(None), 1), else_=0)).label('published')
        ).filter(
            DraftAppointment.batch_id.isnot(None)
        ).group_by(DraftAppointment.batch_id)

    def _summary(self, batch, counts):
        summary = BatchSummary(
            batch_id=batch.batch_id,
            source_week_start=batch.source_week_start,
            target_week_start=batch.target_week_start,
            created_by=batch.created_by,
            created_at=batch.created_at
        )
        if counts is not None:
            summary.total_drafts = counts.total or 0
            summary.valid_drafts = counts.valid or 0
            summary.invalid_drafts = counts.invalid or 0
            summary.published_drafts = counts.published or 0
        return summary

    def list_batches(self):
        """Batches that still have member drafts, newest first."""
        counts = self._counts_query().subquery()

        rows = db.session.query(
            CopyWeekBatch,
            counts.c.total,
            counts.c.valid,
            counts.c.invalid,
            counts.c.published
        ).join(
            counts, counts.c.batch_id == CopyWeekBatch.batch_id
        ).order_by(CopyWeekBatch.created_at.desc()).all()

        return [self._summary(row[0], row) for row in rows]

    def get_summary(self, batch_id):
        batch = db.session.get(CopyWeekBatch, batch_id)
        if not batch:
            raise BatchNotFoundError(f'Batch {batch_id} not found')

        counts = self._counts_query().filter(DraftAppointment.batch_id == batch_id).first()
        return self._summary(batch, counts)

    def _refuse(self, summary):
        logger.warning(
            f"Refused to revert batch {summary.batch_id}: {summary.published_drafts} drafts already published"
        )
        raise NotRevertibleError(
            f'Batch {summary.batch_id} has {summary.published_drafts} published drafts and cannot be reverted'
        )

    def revert(self, batch_id):
        summary = self.get_summary(batch_id)
        if not summary.can_revert:
            self._refuse(summary)

        # the delete itself re-checks that no member has been published
        published_member = aliased(DraftAppointment)
        deleted = DraftAppointment.query.filter(
            DraftAppointment.batch_id == batch_id,
            DraftAppointment.published_at.is_(None),
            ~exists().where(
                published_member.batch_id == batch_id,
                published_member.published_at.isnot(None)
            )
        ).delete(synchronize_session=False)
        db.session.commit()

        if not deleted:
            current = self.get_summary(batch_id)
            if not current.can_revert:
                self._refuse(current)

        logger.info(f"Reverted batch {batch_id}: deleted {deleted} drafts")

        return RevertResult(
            batch_id=batch_id,
            deleted_draft_count=deleted,
            source_week_start=summary.source_week_start,
            target_week_start=summary.target_week_start
        )
