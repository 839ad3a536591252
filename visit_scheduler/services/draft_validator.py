import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from visit_scheduler.extensions import db
from visit_scheduler.models import DraftAppointment
from visit_scheduler.services.conflict_checker import Candidate, CheckScope, ConflictChecker
from visit_scheduler.services.draft_query import select_drafts

logger = logging.getLogger(__name__)


class DraftValidator:
    
    def __init__(self, checker=None):
        self.checker = checker or ConflictChecker()
    
    def validate(self, draft_ids=None, week_start=None, drafts=None):
        """Re-run every check for the targeted unpublished drafts against the live schedule."""
        if drafts is None:
            drafts = select_drafts(draft_ids=draft_ids, week_start=week_start)
        
        candidates = [Candidate.from_draft(d) for d in drafts if not d.is_published]
        
        validated_ids = []
        invalid_count = 0
        
        # one at a time so each check sees the statuses written before it
        for candidate in candidates:
            try:
                verdict = self.checker.check(candidate, scope=CheckScope.ALL)
                if self._store_result(candidate.draft_id, verdict):
                    validated_ids.append(candidate.draft_id)
                    if not verdict.ok:
                        invalid_count += 1
            except SQLAlchemyError:
                db.session.rollback()
                logger.error(f"Validation of draft {candidate.draft_id} failed", exc_info=True)
        
        logger.info(
            f"Validated {len(validated_ids)} drafts "
            f"({len(validated_ids) - invalid_count} valid, {invalid_count} invalid)"
        )
        
        return select_drafts(draft_ids=validated_ids)
    
    def validate_one(self, draft):
        validated = self.validate(drafts=[draft])
        return validated[0] if validated else None
    
    def _store_result(self, draft_id, verdict):
        values = {
            'validation_status': 'valid' if verdict.ok else 'invalid',
            'validation_errors': None if verdict.ok else verdict.to_list(),
            'updated_at': datetime.utcnow()
        }
        
        # published drafts are frozen
        updated = DraftAppointment.query.filter(
            DraftAppointment.draft_id == draft_id,
            DraftAppointment.published_at.is_(None)
        ).update(values, synchronize_session=False)
        db.session.commit()
        
        return updated == 1
