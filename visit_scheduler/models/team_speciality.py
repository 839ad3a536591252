from visit_scheduler.extensions import db


class TeamSpeciality(db.Model):
    __tablename__ = 'team_specialities'
    
    team_id = db.Column(db.BigInteger, db.ForeignKey('teams.team_id'), primary_key=True)
    speciality_id = db.Column(db.Integer, db.ForeignKey('specialities.speciality_id'), primary_key=True)
    
    def __repr__(self):
        return f'<TeamSpeciality Team:{self.team_id} Speciality:{self.speciality_id}>'
