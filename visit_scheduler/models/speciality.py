from visit_scheduler.extensions import db


class Speciality(db.Model):
    __tablename__ = 'specialities'
    
    speciality_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    speciality_name = db.Column(db.String(100), nullable=False)
    short_name = db.Column(db.String(10), nullable=True)
    color = db.Column(db.String(7), nullable=True)  # #RRGGBB
    
    team_specialities = db.relationship('TeamSpeciality', backref='speciality', lazy=True)
    
    def __repr__(self):
        return f'<Speciality {self.speciality_id}: {self.speciality_name}>'
