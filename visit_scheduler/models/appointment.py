from visit_scheduler.extensions import db
from datetime import datetime


class Appointment(db.Model):
    __tablename__ = 'appointments'
    
    appointment_id = db.Column(db.BigInteger().with_variant(db.Integer, 'sqlite'), primary_key=True, autoincrement=True)
    client_id = db.Column(db.BigInteger, db.ForeignKey('clients.client_id'), nullable=False)
    team_id = db.Column(db.BigInteger, db.ForeignKey('teams.team_id'), nullable=True)
    speciality_id = db.Column(db.Integer, db.ForeignKey('specialities.speciality_id'), nullable=True)
    start_time = db.Column(db.DateTime, nullable=False, index=True)
    end_time = db.Column(db.DateTime, nullable=False)
    title = db.Column(db.String(200), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), nullable=False, default='scheduled')  # scheduled, in_progress, completed, cancelled
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    
    speciality = db.relationship('Speciality', lazy=True)
    
    def __repr__(self):
        return f'<Appointment {self.appointment_id}: Client {self.client_id} {self.start_time} ({self.status})>'
