import uuid

from medibook.extensions import db
from medibook.domain import Profile

class User(db.Model):
    __tablename__ = "users"

    user_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    role = db.Column(db.String(20), nullable=True)

    appointments = db.relationship("Appointment", back_populates="patient")
    orders = db.relationship("MedicineOrder", back_populates="user")

    def to_profile(self):
        return Profile(id=self.user_id, name=self.name, email=self.email, role=self.role)

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
