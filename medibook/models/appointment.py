import uuid

from medibook.extensions import db
from medibook.domain import Appointment as AppointmentRecord
from medibook.models.appointment_status import AppointmentStatus

class Appointment(db.Model):
    __tablename__ = "appointments"
    # one live booking per doctor slot; cancelled rows free the slot again
    __table_args__ = (
        db.Index(
            "uq_appointments_active_slot",
            "doctor_id", "date", "time",
            unique=True,
            sqlite_where=db.text("status != 'cancelled'"),
            postgresql_where=db.text("status != 'cancelled'"),
        ),
    )

    appointment_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    doctor_id = db.Column(db.String(36), db.ForeignKey("doctors.doctor_id"), nullable=False)
    patient_id = db.Column(db.String(36), db.ForeignKey("users.user_id"), nullable=False)
    doctor_name = db.Column(db.String(120), nullable=False)
    patient_name = db.Column(db.String(120), nullable=False)
    date = db.Column(db.Date, nullable=False)
    time = db.Column(db.String(5), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=AppointmentStatus.SCHEDULED.value)

    doctor = db.relationship("Doctor", back_populates="appointments")
    patient = db.relationship("User", back_populates="appointments")

    def to_record(self):
        return AppointmentRecord(
            id=self.appointment_id,
            doctor_id=self.doctor_id,
            patient_id=self.patient_id,
            doctor_name=self.doctor_name,
            patient_name=self.patient_name,
            date=self.date,
            time=self.time,
            status=AppointmentStatus(self.status),
        )

    def __repr__(self):
        return f"<Appointment {self.appointment_id} {self.date} {self.time}>"
