from visit_scheduler.extensions import db


class Facility(db.Model):
    __tablename__ = 'facilities'
    
    facility_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    facility_name = db.Column(db.String(100), nullable=False)
    is_paused = db.Column(db.Boolean, nullable=False, default=False)
    
    clients = db.relationship('Client', backref='facility', lazy=True)
    
    def __repr__(self):
        return f'<Facility {self.facility_id}: {self.facility_name} (paused={self.is_paused})>'
