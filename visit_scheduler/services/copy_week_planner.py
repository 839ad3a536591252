"""
Copy-week planner.

Clones every committed appointment of a source week into the target week
as pending drafts sharing one batch id. Occurrences that would conflict
with the target week's committed schedule, or with drafts created earlier
in the same run, are skipped and reported instead. Validation is a
separate pass.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from visit_scheduler.errors import InvalidWeekError
from visit_scheduler.extensions import db
from visit_scheduler.models import Appointment, Client, CopyWeekBatch, DraftAppointment, Team
from visit_scheduler.services.conflict_checker import Candidate, CheckScope, ConflictChecker
from visit_scheduler.services.draft_query import week_filter
from visit_scheduler.utils.weeks import parse_date

logger = logging.getLogger(__name__)


@dataclass
class SkipRecord:
    """Why one source occurrence was not copied."""

    client_name: str
    start_time: datetime
    reason: str
    conflict_type: str
    team_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'client_name': self.client_name,
            'team_name': self.team_name,
            'start_time': self.start_time.isoformat(),
            'reason': self.reason,
            'conflict_type': self.conflict_type
        }


@dataclass
class CopyWeekResult:
    batch_id: str
    draft_ids: List[int] = field(default_factory=list)
    skipped: List[SkipRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'batch_id': self.batch_id,
            'draft_ids': self.draft_ids,
            'total_drafts': len(self.draft_ids),
            'skipped_appointments': [s.to_dict() for s in self.skipped]
        }


class CopyWeekPlanner:
    
    def __init__(self, checker=None):
        self.checker = checker or ConflictChecker()
    
    def copy_week(self, source_week_start, target_week_start, created_by):
        source_week_start = parse_date(source_week_start)
        target_week_start = parse_date(target_week_start)
        
        offset = target_week_start - source_week_start
        if offset.days <= 0 or offset.days % 7 != 0:
            raise InvalidWeekError(
                f'Target week {target_week_start} must be a whole number of weeks '
                f'after source week {source_week_start}'
            )
        
        batch = CopyWeekBatch(
            batch_id=str(uuid.uuid4()),
            source_week_start=source_week_start,
            target_week_start=target_week_start,
            created_by=created_by
        )
        db.session.add(batch)
        
        source_appointments = Appointment.query.filter(
            week_filter(Appointment, source_week_start),
            Appointment.status != 'cancelled'
        ).order_by(Appointment.start_time, Appointment.appointment_id).all()
        
        drafts = []
        staged = []
        skipped = []
        
        # sequential: each occurrence is checked against the ones staged before it
        for appointment in source_appointments:
            candidate = Candidate.from_appointment(appointment, offset=offset)
            verdict = self.checker.check(candidate, scope=CheckScope.COMMITTED, in_flight=staged)
            
            if not verdict.ok:
                skipped.append(self._skip_record(appointment, candidate, verdict.first))
                continue
            
            draft = DraftAppointment(
                client_id=candidate.client_id,
                team_id=candidate.team_id,
                speciality_id=candidate.speciality_id,
                start_time=candidate.start_time,
                end_time=candidate.end_time,
                title=appointment.title,
                notes=appointment.notes,
                batch_id=batch.batch_id,
                source_appointment_id=appointment.appointment_id,
                validation_status='pending'
            )
            drafts.append(draft)
            staged.append(candidate)
        
        db.session.add_all(drafts)
        db.session.commit()
        
        result = CopyWeekResult(
            batch_id=batch.batch_id,
            draft_ids=[d.draft_id for d in drafts],
            skipped=skipped
        )
        
        logger.info(
            f"Copy week {source_week_start} -> {target_week_start} by {created_by}: "
            f"batch {batch.batch_id}, {len(drafts)} drafts, {len(skipped)} skipped"
        )
        
        return result
    
    def _skip_record(self, appointment, candidate, conflict):
        client = db.session.get(Client, appointment.client_id)
        team = db.session.get(Team, appointment.team_id) if appointment.team_id else None
        
        return SkipRecord(
            client_name=client.client_name if client else f'Client {appointment.client_id}',
            team_name=team.team_name if team else None,
            start_time=candidate.start_time,
            reason=conflict.message,
            conflict_type=conflict.kind.value
        )
