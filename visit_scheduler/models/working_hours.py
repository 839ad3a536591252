from visit_scheduler.extensions import db


class TeamWorkingHours(db.Model):
    __tablename__ = 'team_working_hours'
    
    working_hours_id = db.Column(db.BigInteger().with_variant(db.Integer, 'sqlite'), primary_key=True, autoincrement=True)
    team_id = db.Column(db.BigInteger, db.ForeignKey('teams.team_id'), nullable=False)
    day_of_week = db.Column(db.SmallInteger, nullable=False)  # 0=Monday ... 6=Sunday
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    
    def __repr__(self):
        return f'<TeamWorkingHours Team:{self.team_id} Day:{self.day_of_week} {self.start_time}-{self.end_time}>'
