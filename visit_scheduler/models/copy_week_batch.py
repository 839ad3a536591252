from visit_scheduler.extensions import db
from datetime import datetime


class CopyWeekBatch(db.Model):
    """Batch metadata only. Counts are derived from member drafts on read."""
    __tablename__ = 'copy_week_batches'
    
    batch_id = db.Column(db.String(36), primary_key=True)
    source_week_start = db.Column(db.Date, nullable=False)
    target_week_start = db.Column(db.Date, nullable=False)
    created_by = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    
    draft_appointments = db.relationship('DraftAppointment', backref='batch', lazy=True)
    
    def __repr__(self):
        return f'<CopyWeekBatch {self.batch_id}: {self.source_week_start} -> {self.target_week_start}>'
