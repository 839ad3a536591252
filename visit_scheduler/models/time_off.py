from visit_scheduler.extensions import db
from datetime import datetime


class TeamTimeOff(db.Model):
    __tablename__ = 'team_time_off'
    
    time_off_id = db.Column(db.BigInteger().with_variant(db.Integer, 'sqlite'), primary_key=True, autoincrement=True)
    team_id = db.Column(db.BigInteger, db.ForeignKey('teams.team_id'), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)  # inclusive
    status = db.Column(db.String(20), nullable=False, default='pending')  # pending, approved, denied
    reason = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    
    def __repr__(self):
        return f'<TeamTimeOff Team:{self.team_id} {self.start_date}~{self.end_date} ({self.status})>'
