import copy
import threading
import uuid
from datetime import datetime, timezone

from werkzeug.security import generate_password_hash

from medibook.domain import (
    Appointment,
    AppointmentStatus,
    Doctor,
    Medicine,
    Order,
    OrderItem,
    OrderStatus,
    Profile,
)
from medibook.errors import InsufficientStockError, NotFoundError, SlotUnavailableError
from medibook.logging_config import get_logger
from medibook.stores import sample_data
from medibook.stores.base import DataStore, scheduled_fields

logger = get_logger(__name__)


def _new_id():
    return uuid.uuid4().hex[:9]


class MemoryStore(DataStore):
    """
    Process-local store seeded with the fixed sample records.

    Every read hands out copies so callers cannot mutate stored records.
    Mutations run under one lock, which makes the booking check-and-insert a
    compare-and-swap.
    """

    def __init__(self, seed=True):
        self._lock = threading.RLock()
        self._doctors = {}
        self._appointments = {}
        self._medicines = {}
        self._orders = {}
        self._users = {}
        if seed:
            self._seed()

    def _seed(self):
        for d in sample_data.DOCTORS:
            self._doctors[d["id"]] = Doctor(
                id=d["id"],
                name=d["name"],
                specialty=d["specialty"],
                image=d["image"],
                bio=d["bio"],
                availability=Doctor.template_from_dict(d["availability"]),
            )
        for a in sample_data.APPOINTMENTS:
            self._appointments[a["id"]] = Appointment(status=AppointmentStatus.SCHEDULED, **a)
        now = datetime.now(timezone.utc)
        for m in sample_data.MEDICINES:
            self._medicines[m["id"]] = Medicine(created_at=now, **m)
        password_hash = generate_password_hash(sample_data.SAMPLE_PASSWORD)
        for u in sample_data.USERS:
            self._users[u["id"]] = (Profile(**u), password_hash)

    # region Doctors
    def get_doctors(self):
        with self._lock:
            return [copy.deepcopy(d) for d in self._doctors.values()]

    def get_doctor_by_id(self, doctor_id):
        with self._lock:
            doctor = self._doctors.get(doctor_id)
            return copy.deepcopy(doctor) if doctor else None

    def add_doctor(self, fields):
        doctor = Doctor(
            id=_new_id(),
            name=fields["name"],
            specialty=fields["specialty"],
            image=fields.get("image") or "/placeholder.svg",
            bio=fields.get("bio", ""),
            availability=Doctor.template_from_dict(fields["availability"]),
        )
        with self._lock:
            self._doctors[doctor.id] = doctor
        logger.info("doctor_added", doctor_id=doctor.id)
        return copy.deepcopy(doctor)
    # endregion

    # region Appointments
    def _appointments_where(self, predicate):
        with self._lock:
            appointments = [copy.deepcopy(a) for a in self._appointments.values() if predicate(a)]
        return sorted(appointments, key=lambda a: (a.date, a.time))

    def get_patient_appointments(self, patient_id):
        return self._appointments_where(lambda a: a.patient_id == patient_id)

    def get_doctor_appointments(self, doctor_id):
        return self._appointments_where(lambda a: a.doctor_id == doctor_id)

    def get_all_appointments(self):
        return self._appointments_where(lambda a: True)

    def get_appointment_by_id(self, appointment_id):
        with self._lock:
            appointment = self._appointments.get(appointment_id)
            return copy.deepcopy(appointment) if appointment else None

    def book_appointment(self, fields):
        data = scheduled_fields(fields)
        with self._lock:
            clash = any(
                a.doctor_id == data["doctor_id"]
                and a.date == data["date"]
                and a.time == data["time"]
                and a.is_active
                for a in self._appointments.values()
            )
            if clash:
                raise SlotUnavailableError(f"{data['doctor_id']} {data['date']} {data['time']}")
            appointment = Appointment(
                id=_new_id(),
                doctor_id=data["doctor_id"],
                patient_id=data["patient_id"],
                doctor_name=data["doctor_name"],
                patient_name=data["patient_name"],
                date=data["date"],
                time=data["time"],
                status=data["status"],
            )
            self._appointments[appointment.id] = appointment
        logger.info("appointment_booked", appointment_id=appointment.id, doctor_id=appointment.doctor_id)
        return copy.deepcopy(appointment)

    def cancel_appointment(self, appointment_id):
        with self._lock:
            appointment = self._appointments.get(appointment_id)
            if appointment is not None:
                appointment.status = AppointmentStatus.CANCELLED
    # endregion

    # region Medicines
    def get_medicines(self):
        with self._lock:
            medicines = [copy.deepcopy(m) for m in self._medicines.values()]
        return sorted(medicines, key=lambda m: m.name)

    def get_medicine_by_id(self, medicine_id):
        with self._lock:
            medicine = self._medicines.get(medicine_id)
            return copy.deepcopy(medicine) if medicine else None

    def create_medicine(self, fields):
        medicine = Medicine(
            id=_new_id(),
            name=fields["name"],
            description=fields.get("description"),
            price=float(fields["price"]),
            stock=int(fields["stock"]),
            image=fields.get("image"),
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._medicines[medicine.id] = medicine
        return copy.deepcopy(medicine)

    def update_medicine(self, medicine_id, fields):
        with self._lock:
            medicine = self._medicines.get(medicine_id)
            if medicine is None:
                raise NotFoundError(f"medicine {medicine_id}")
            for key in ("name", "description", "price", "stock", "image"):
                if key in fields:
                    setattr(medicine, key, fields[key])
            return copy.deepcopy(medicine)

    def delete_medicine(self, medicine_id):
        with self._lock:
            self._medicines.pop(medicine_id, None)

    def decrement_medicine_stock(self, medicine_id, quantity):
        with self._lock:
            medicine = self._medicines.get(medicine_id)
            if medicine is None:
                raise NotFoundError(f"medicine {medicine_id}")
            if medicine.stock < quantity:
                raise InsufficientStockError(
                    f"{medicine.name}: requested {quantity}, {medicine.stock} in stock"
                )
            medicine.stock -= quantity
    # endregion

    # region Orders
    def _insert_order(self, user_id, shipping_address, total_amount, lines):
        now = datetime.now(timezone.utc)
        order_id = str(uuid.uuid4())
        items = [
            OrderItem(
                id=str(uuid.uuid4()),
                order_id=order_id,
                medicine_id=line.medicine_id,
                medicine_name=line.medicine_name,
                quantity=line.quantity,
                price_per_unit=line.price_per_unit,
                total_price=line.total_price,
                stock_applied=False,
            )
            for line in lines
        ]
        order = Order(
            id=order_id,
            user_id=user_id,
            status=OrderStatus.PENDING,
            total_amount=float(total_amount),
            shipping_address=shipping_address,
            created_at=now,
            updated_at=now,
            items=items,
        )
        with self._lock:
            self._orders[order_id] = order
        return order_id, [item.id for item in items]

    def _mark_stock_applied(self, item_id):
        with self._lock:
            for order in self._orders.values():
                for item in order.items:
                    if item.id == item_id:
                        item.stock_applied = True
                        return

    def _orders_where(self, predicate, include_customer=False):
        with self._lock:
            orders = [copy.deepcopy(o) for o in self._orders.values() if predicate(o)]
            if include_customer:
                for order in orders:
                    entry = self._users.get(order.user_id)
                    order.customer_name = entry[0].name if entry else None
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def get_user_orders(self, user_id):
        return self._orders_where(lambda o: o.user_id == user_id)

    def get_all_orders(self):
        return self._orders_where(lambda o: True, include_customer=True)

    def _set_order_status(self, order_id, status):
        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                raise NotFoundError(f"order {order_id}")
            order.status = status
            order.updated_at = datetime.now(timezone.utc)
    # endregion

    # region Profiles
    def get_profile(self, user_id):
        with self._lock:
            entry = self._users.get(user_id)
            return copy.deepcopy(entry[0]) if entry else None

    def get_credentials(self, email):
        with self._lock:
            for profile, password_hash in self._users.values():
                if profile.email.lower() == (email or "").lower():
                    return copy.deepcopy(profile), password_hash
        return None

    def create_user(self, email, name, password_hash, role):
        profile = Profile(id=str(uuid.uuid4()), name=name, email=email, role=role)
        with self._lock:
            self._users[profile.id] = (profile, password_hash)
        return copy.deepcopy(profile)
    # endregion
