from visit_scheduler.extensions import db


class Client(db.Model):
    __tablename__ = 'clients'
    
    client_id = db.Column(db.BigInteger().with_variant(db.Integer, 'sqlite'), primary_key=True, autoincrement=True)
    client_name = db.Column(db.String(100), nullable=False)
    facility_id = db.Column(db.Integer, db.ForeignKey('facilities.facility_id'), nullable=True)
    
    appointments = db.relationship('Appointment', backref='client', lazy=True)
    draft_appointments = db.relationship('DraftAppointment', backref='client', lazy=True)
    
    def __repr__(self):
        return f'<Client {self.client_id}: {self.client_name}>'
