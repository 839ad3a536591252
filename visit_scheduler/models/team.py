from visit_scheduler.extensions import db


class Team(db.Model):
    __tablename__ = 'teams'
    
    team_id = db.Column(db.BigInteger().with_variant(db.Integer, 'sqlite'), primary_key=True, autoincrement=True)
    team_name = db.Column(db.String(100), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='active')  # active, inactive
    
    team_specialities = db.relationship('TeamSpeciality', backref='team', lazy=True)
    working_hours = db.relationship('TeamWorkingHours', backref='team', lazy=True)
    time_off = db.relationship('TeamTimeOff', backref='team', lazy=True)
    appointments = db.relationship('Appointment', backref='team', lazy=True)
    draft_appointments = db.relationship('DraftAppointment', backref='team', lazy=True)
    
    def __repr__(self):
        return f'<Team {self.team_id}: {self.team_name} ({self.status})>'
