import uuid

from medibook.extensions import db
from medibook.domain import Doctor as DoctorRecord

class Doctor(db.Model):
    __tablename__ = "doctors"

    doctor_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(120), nullable=False)
    specialty = db.Column(db.String(120), nullable=False)
    image = db.Column(db.String(255), nullable=False, default="/placeholder.svg")
    bio = db.Column(db.Text, nullable=False, default="")
    # weekday name -> {"start": "HH:MM", "end": "HH:MM", "available": bool}
    availability = db.Column(db.JSON, nullable=False, default=dict)

    appointments = db.relationship("Appointment", back_populates="doctor")

    def to_record(self):
        return DoctorRecord(
            id=self.doctor_id,
            name=self.name,
            specialty=self.specialty,
            image=self.image,
            bio=self.bio,
            availability=DoctorRecord.template_from_dict(self.availability),
        )

    def __repr__(self):
        return f"<Doctor {self.doctor_id}, {self.name}>"
