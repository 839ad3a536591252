from visit_scheduler.extensions import db
from datetime import datetime


VALIDATION_STATUSES = ['pending', 'valid', 'invalid']


class DraftAppointment(db.Model):
    __tablename__ = 'draft_appointments'
    
    draft_id = db.Column(db.BigInteger().with_variant(db.Integer, 'sqlite'), primary_key=True, autoincrement=True)
    client_id = db.Column(db.BigInteger, db.ForeignKey('clients.client_id'), nullable=False)
    team_id = db.Column(db.BigInteger, db.ForeignKey('teams.team_id'), nullable=True)
    speciality_id = db.Column(db.Integer, db.ForeignKey('specialities.speciality_id'), nullable=True)
    start_time = db.Column(db.DateTime, nullable=False, index=True)
    end_time = db.Column(db.DateTime, nullable=False)
    title = db.Column(db.String(200), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    
    # no batch -> created by hand
    batch_id = db.Column(db.String(36), db.ForeignKey('copy_week_batches.batch_id'), nullable=True, index=True)
    source_appointment_id = db.Column(db.BigInteger, db.ForeignKey('appointments.appointment_id'), nullable=True)
    
    validation_status = db.Column(db.String(20), nullable=False, default='pending')
    validation_errors = db.Column(db.JSON, nullable=True)  # [{kind, message}]
    
    # terminal once set
    published_at = db.Column(db.DateTime, nullable=True)
    published_appointment_id = db.Column(db.BigInteger, db.ForeignKey('appointments.appointment_id'), nullable=True)
    
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    speciality = db.relationship('Speciality', lazy=True)
    source_appointment = db.relationship('Appointment', foreign_keys=[source_appointment_id], lazy=True)
    published_appointment = db.relationship('Appointment', foreign_keys=[published_appointment_id], lazy=True)
    
    @property
    def is_published(self):
        return self.published_at is not None
    
    def __repr__(self):
        return f'<DraftAppointment {self.draft_id}: Client {self.client_id} {self.start_time} ({self.validation_status})>'
