from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from medibook.extensions import db
from medibook.errors import MediBookError, InsufficientStockError, NotFoundError, SlotUnavailableError, StorageError
from medibook.logging_config import get_logger
from medibook.models.appointment import Appointment
from medibook.models.appointment_status import AppointmentStatus
from medibook.models.doctor import Doctor
from medibook.models.medicine import Medicine
from medibook.models.order import MedicineOrder, MedicineOrderItem
from medibook.models.user import User
from medibook.stores.base import DataStore, scheduled_fields

logger = get_logger(__name__)


@contextmanager
def _reading(what):
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("storage_read_failed", what=what, error=str(e))
        raise StorageError(what) from e


@contextmanager
def _writing(what, on_conflict=None):
    """Commit on exit; `on_conflict` builds the error raised for a constraint violation."""
    try:
        yield
        db.session.commit()
    except MediBookError:
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        if on_conflict is not None and isinstance(e, IntegrityError):
            raise on_conflict() from e
        logger.error("storage_write_failed", what=what, error=str(e))
        raise StorageError(what) from e


class SqlStore(DataStore):
    """Relational store over the Flask-SQLAlchemy models; needs an app context."""

    # region Doctors
    def get_doctors(self):
        with _reading("doctors"):
            return [d.to_record() for d in Doctor.query.order_by(Doctor.name).all()]

    def get_doctor_by_id(self, doctor_id):
        with _reading("doctor"):
            doctor = db.session.get(Doctor, doctor_id)
            return doctor.to_record() if doctor else None

    def add_doctor(self, fields):
        doctor = Doctor(
            name=fields["name"],
            specialty=fields["specialty"],
            image=fields.get("image") or "/placeholder.svg",
            bio=fields.get("bio", ""),
            availability=fields["availability"],
        )
        with _writing("add doctor"):
            db.session.add(doctor)
        logger.info("doctor_added", doctor_id=doctor.doctor_id)
        return doctor.to_record()
    # endregion

    # region Appointments
    def _appointments(self, *criteria):
        with _reading("appointments"):
            rows = Appointment.query.filter(*criteria).order_by(Appointment.date, Appointment.time).all()
            return [a.to_record() for a in rows]

    def get_patient_appointments(self, patient_id):
        return self._appointments(Appointment.patient_id == patient_id)

    def get_doctor_appointments(self, doctor_id):
        return self._appointments(Appointment.doctor_id == doctor_id)

    def get_all_appointments(self):
        return self._appointments()

    def get_appointment_by_id(self, appointment_id):
        with _reading("appointment"):
            appointment = db.session.get(Appointment, appointment_id)
            return appointment.to_record() if appointment else None

    def book_appointment(self, fields):
        data = scheduled_fields(fields)
        appointment = Appointment(
            doctor_id=data["doctor_id"],
            patient_id=data["patient_id"],
            doctor_name=data["doctor_name"],
            patient_name=data["patient_name"],
            date=data["date"],
            time=data["time"],
            status=data["status"].value,
        )
        slot = f"{data['doctor_id']} {data['date']} {data['time']}"
        # partial unique index on (doctor_id, date, time) for live bookings
        with _writing("book appointment", on_conflict=lambda: SlotUnavailableError(slot)):
            db.session.add(appointment)
        logger.info("appointment_booked", appointment_id=appointment.appointment_id, doctor_id=appointment.doctor_id)
        return appointment.to_record()

    def cancel_appointment(self, appointment_id):
        with _writing("cancel appointment"):
            appointment = db.session.get(Appointment, appointment_id)
            if appointment is not None:
                appointment.status = AppointmentStatus.CANCELLED.value
    # endregion

    # region Medicines
    def get_medicines(self):
        with _reading("medicines"):
            return [m.to_record() for m in Medicine.query.order_by(Medicine.name).all()]

    def get_medicine_by_id(self, medicine_id):
        with _reading("medicine"):
            medicine = db.session.get(Medicine, medicine_id)
            return medicine.to_record() if medicine else None

    def create_medicine(self, fields):
        medicine = Medicine(
            name=fields["name"],
            description=fields.get("description"),
            price=fields["price"],
            stock=fields["stock"],
            image=fields.get("image"),
        )
        with _writing("create medicine"):
            db.session.add(medicine)
        return medicine.to_record()

    def update_medicine(self, medicine_id, fields):
        with _writing("update medicine"):
            medicine = db.session.get(Medicine, medicine_id)
            if medicine is None:
                raise NotFoundError(f"medicine {medicine_id}")
            for key in ("name", "description", "price", "stock", "image"):
                if key in fields:
                    setattr(medicine, key, fields[key])
        return medicine.to_record()

    def delete_medicine(self, medicine_id):
        with _writing("delete medicine"):
            Medicine.query.filter_by(medicine_id=medicine_id).delete(synchronize_session=False)

    def decrement_medicine_stock(self, medicine_id, quantity):
        with _writing("decrement stock"):
            updated = (
                Medicine.query
                .filter(Medicine.medicine_id == medicine_id, Medicine.stock >= quantity)
                .update({Medicine.stock: Medicine.stock - quantity}, synchronize_session=False)
            )
            if updated == 0:
                medicine = db.session.get(Medicine, medicine_id)
                if medicine is None:
                    raise NotFoundError(f"medicine {medicine_id}")
                raise InsufficientStockError(
                    f"{medicine.name}: requested {quantity}, {medicine.stock} in stock"
                )
    # endregion

    # region Orders
    def _insert_order(self, user_id, shipping_address, total_amount, lines):
        order = MedicineOrder(
            user_id=user_id,
            shipping_address=shipping_address,
            total_amount=total_amount,
        )
        order.items = [
            MedicineOrderItem(
                medicine_id=line.medicine_id,
                medicine_name=line.medicine_name,
                position=position,
                quantity=line.quantity,
                price_per_unit=line.price_per_unit,
                total_price=line.total_price,
                stock_applied=False,
            )
            for position, line in enumerate(lines)
        ]
        with _writing("create order"):
            db.session.add(order)
        return order.order_id, [item.item_id for item in order.items]

    def _mark_stock_applied(self, item_id):
        with _writing("mark stock applied"):
            item = db.session.get(MedicineOrderItem, item_id)
            if item is not None:
                item.stock_applied = True

    def get_user_orders(self, user_id):
        with _reading("user orders"):
            rows = (
                MedicineOrder.query
                .filter_by(user_id=user_id)
                .order_by(MedicineOrder.created_at.desc())
                .all()
            )
            return [o.to_record() for o in rows]

    def get_all_orders(self):
        with _reading("orders"):
            rows = MedicineOrder.query.order_by(MedicineOrder.created_at.desc()).all()
            return [o.to_record(include_customer=True) for o in rows]

    def _set_order_status(self, order_id, status):
        with _writing("update order status"):
            order = db.session.get(MedicineOrder, order_id)
            if order is None:
                raise NotFoundError(f"order {order_id}")
            order.status = status.value
            order.updated_at = datetime.now(timezone.utc)
    # endregion

    # region Profiles
    def get_profile(self, user_id):
        with _reading("profile"):
            user = db.session.get(User, user_id)
            return user.to_profile() if user else None

    def get_credentials(self, email):
        with _reading("credentials"):
            user = User.query.filter(func.lower(User.email) == (email or "").lower()).first()
            return (user.to_profile(), user.password) if user else None

    def create_user(self, email, name, password_hash, role):
        user = User(email=email, name=name, password=password_hash, role=role)
        with _writing("create user"):
            db.session.add(user)
        return user.to_profile()
    # endregion
