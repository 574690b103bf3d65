from werkzeug.security import generate_password_hash

from medibook.extensions import db
from medibook.logging_config import get_logger
from medibook.models.appointment import Appointment
from medibook.models.doctor import Doctor
from medibook.models.medicine import Medicine
from medibook.models.user import User
from medibook.stores import sample_data

logger = get_logger(__name__)


def seed_sample_data():
    """Load the fixed sample records into an empty database. Returns False if already seeded."""
    if db.session.get(User, sample_data.USERS[0]["id"]) is not None:
        return False

    password_hash = generate_password_hash(sample_data.SAMPLE_PASSWORD)
    db.session.add_all(
        User(user_id=u["id"], email=u["email"], name=u["name"], role=u["role"], password=password_hash)
        for u in sample_data.USERS
    )
    db.session.add_all(
        Doctor(
            doctor_id=d["id"],
            name=d["name"],
            specialty=d["specialty"],
            image=d["image"],
            bio=d["bio"],
            availability=d["availability"],
        )
        for d in sample_data.DOCTORS
    )
    db.session.add_all(
        Appointment(
            appointment_id=a["id"],
            doctor_id=a["doctor_id"],
            patient_id=a["patient_id"],
            doctor_name=a["doctor_name"],
            patient_name=a["patient_name"],
            date=a["date"],
            time=a["time"],
        )
        for a in sample_data.APPOINTMENTS
    )
    db.session.add_all(
        Medicine(medicine_id=m["id"], name=m["name"], description=m["description"],
                 price=m["price"], stock=m["stock"], image=m["image"])
        for m in sample_data.MEDICINES
    )
    db.session.commit()
    logger.info("sample_data_seeded")
    return True
