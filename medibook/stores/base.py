from abc import ABC, abstractmethod

from medibook.domain import AppointmentStatus, OrderStatus
from medibook.errors import MediBookError, ValidationError
from medibook.logging_config import get_logger
from medibook.services.slot_service import compute_time_slots, parse_slot_date

logger = get_logger(__name__)


class DataStore(ABC):
    """
    Data-access contract shared by the in-memory and relational stores.

    Lookups return None for a missing record; writes raise a MediBookError
    subclass when they cannot be applied.
    """

    # region Doctors
    @abstractmethod
    def get_doctors(self):
        pass

    @abstractmethod
    def get_doctor_by_id(self, doctor_id):
        pass

    @abstractmethod
    def add_doctor(self, fields):
        pass

    def search_doctors(self, term=""):
        term = (term or "").strip().lower()
        doctors = self.get_doctors()
        if not term:
            return doctors
        return [d for d in doctors if term in d.name.lower() or term in d.specialty.lower()]
    # endregion

    # region Appointments
    @abstractmethod
    def get_patient_appointments(self, patient_id):
        pass

    @abstractmethod
    def get_doctor_appointments(self, doctor_id):
        pass

    @abstractmethod
    def get_all_appointments(self):
        pass

    @abstractmethod
    def get_appointment_by_id(self, appointment_id):
        pass

    @abstractmethod
    def book_appointment(self, fields):
        """Insert a scheduled appointment; SlotUnavailableError if the slot is held."""

    @abstractmethod
    def cancel_appointment(self, appointment_id):
        pass

    def get_available_time_slots(self, doctor_id, day):
        day = parse_slot_date(day)
        doctor = self.get_doctor_by_id(doctor_id)
        if doctor is None:
            return []
        return compute_time_slots(doctor, day, self.get_doctor_appointments(doctor_id))

    def filter_appointments(self, status="all", term=""):
        appointments = self.get_all_appointments()
        if status and status != "all":
            appointments = [a for a in appointments if a.status.value == status]
        term = (term or "").strip().lower()
        if term:
            appointments = [
                a for a in appointments
                if term in a.patient_name.lower() or term in a.doctor_name.lower()
            ]
        return appointments
    # endregion

    # region Medicines
    @abstractmethod
    def get_medicines(self):
        pass

    @abstractmethod
    def get_medicine_by_id(self, medicine_id):
        pass

    @abstractmethod
    def create_medicine(self, fields):
        pass

    @abstractmethod
    def update_medicine(self, medicine_id, fields):
        pass

    @abstractmethod
    def delete_medicine(self, medicine_id):
        pass

    @abstractmethod
    def decrement_medicine_stock(self, medicine_id, quantity):
        """Atomically lower stock; InsufficientStockError if it would go negative."""

    def search_medicines(self, term=""):
        term = (term or "").strip().lower()
        medicines = self.get_medicines()
        if not term:
            return medicines
        return [
            m for m in medicines
            if term in m.name.lower() or (m.description and term in m.description.lower())
        ]
    # endregion

    # region Orders
    @abstractmethod
    def _insert_order(self, user_id, shipping_address, total_amount, lines):
        """Write the order row and its item rows in one unit; return (order_id, item_ids)."""

    @abstractmethod
    def _mark_stock_applied(self, item_id):
        pass

    def create_order(self, user_id, shipping_address, total_amount, lines):
        """
        Persist an order with its line items, then apply stock decrements.

        The order and its items are all-or-nothing. Decrements run afterwards,
        one per item; a failed decrement leaves the item flagged for
        reconciliation instead of undoing the order.
        """
        order_id, item_ids = self._insert_order(user_id, shipping_address, total_amount, lines)
        logger.info("order_created", order_id=order_id, user_id=user_id, items=len(lines))

        for line, item_id in zip(lines, item_ids):
            try:
                self.decrement_medicine_stock(line.medicine_id, line.quantity)
            except MediBookError as e:
                logger.error(
                    "stock_decrement_failed",
                    order_id=order_id,
                    medicine_id=line.medicine_id,
                    quantity=line.quantity,
                    error=str(e),
                )
                continue
            try:
                self._mark_stock_applied(item_id)
            except MediBookError as e:
                # stock already moved; only the item flag is stale
                logger.error(
                    "stock_applied_flag_failed",
                    order_id=order_id,
                    item_id=item_id,
                    medicine_id=line.medicine_id,
                    quantity=line.quantity,
                    error=str(e),
                )
        return order_id

    @abstractmethod
    def get_user_orders(self, user_id):
        pass

    @abstractmethod
    def get_all_orders(self):
        pass

    @abstractmethod
    def _set_order_status(self, order_id, status):
        pass

    def update_order_status(self, order_id, status):
        if status not in OrderStatus.values():
            raise ValidationError(f"Unknown order status: {status}")
        self._set_order_status(order_id, OrderStatus(status))

    def filter_orders(self, term=""):
        orders = self.get_all_orders()
        term = (term or "").strip().lower()
        if not term:
            return orders
        return [
            o for o in orders
            if term in o.id.lower() or (o.customer_name and term in o.customer_name.lower())
        ]
    # endregion

    # region Profiles
    @abstractmethod
    def get_profile(self, user_id):
        pass

    @abstractmethod
    def get_credentials(self, email):
        """Return (profile, password_hash) for an email, or None."""

    @abstractmethod
    def create_user(self, email, name, password_hash, role):
        pass
    # endregion


def scheduled_fields(fields):
    data = dict(fields)
    data["date"] = parse_slot_date(data["date"])
    data["status"] = AppointmentStatus.SCHEDULED
    return data
