"""Data store contract, run against both the in-memory and relational strategies."""
from datetime import date
from unittest.mock import Mock

import pytest

from medibook.domain import AppointmentStatus, OrderLine, OrderStatus
from medibook.errors import InsufficientStockError, NotFoundError, SlotUnavailableError, StorageError, ValidationError
from medibook.services.doctor_service import DEFAULT_AVAILABILITY
from medibook.stores.sql_store import SqlStore

MONDAY = date(2025, 5, 5)
NEXT_MONDAY = date(2025, 5, 12)


def booking(time="11:00", day=MONDAY, doctor_id="1"):
    return {
        "doctor_id": doctor_id,
        "patient_id": "2",
        "doctor_name": "Dr. Jane Smith",
        "patient_name": "Patient User",
        "date": day.isoformat(),
        "time": time,
    }


def line(medicine_id, name, quantity, price):
    return OrderLine(
        medicine_id=medicine_id,
        medicine_name=name,
        quantity=quantity,
        price_per_unit=price,
        total_price=price * quantity,
    )


class TestDoctors:

    def test_sample_doctors(self, store):
        names = {d.name for d in store.get_doctors()}

        assert names == {"Dr. Jane Smith", "Dr. Robert Chen", "Dr. Maria Garcia"}

    def test_unknown_doctor_is_none(self, store):
        assert store.get_doctor_by_id("missing") is None

    def test_add_doctor_assigns_identity(self, store):
        doctor = store.add_doctor({
            "name": "Dr. New",
            "specialty": "Neurologist",
            "bio": "New in town.",
            "image": "",
            "availability": DEFAULT_AVAILABILITY,
        })

        fetched = store.get_doctor_by_id(doctor.id)
        assert fetched.name == "Dr. New"
        assert fetched.image == "/placeholder.svg"
        assert fetched.availability["Monday"].available is True
        assert fetched.availability["Sunday"].available is False

    def test_search_by_specialty_ignores_case(self, store):
        results = store.search_doctors("DERM")

        assert [d.name for d in results] == ["Dr. Robert Chen"]

    def test_blank_search_returns_all(self, store):
        assert len(store.search_doctors("  ")) == 3


class TestAppointments:

    def test_sample_appointment_blocks_slot(self, store):
        slots = {s.time: s.available for s in store.get_available_time_slots("1", MONDAY)}

        assert slots["10:00"] is False
        assert slots["09:00"] is True
        assert len(slots) == 8

    def test_book_then_cancel_round_trip(self, store):
        appointment = store.book_appointment(booking("11:00"))

        assert appointment.status == AppointmentStatus.SCHEDULED
        slots = {s.time: s.available for s in store.get_available_time_slots("1", MONDAY)}
        assert slots["11:00"] is False

        store.cancel_appointment(appointment.id)
        slots = {s.time: s.available for s in store.get_available_time_slots("1", MONDAY)}
        assert slots["11:00"] is True

    def test_cancel_twice_stays_cancelled(self, store):
        appointment = store.book_appointment(booking("12:00"))

        store.cancel_appointment(appointment.id)
        store.cancel_appointment(appointment.id)

        assert store.get_appointment_by_id(appointment.id).status == AppointmentStatus.CANCELLED

    def test_cancel_unknown_is_noop(self, store):
        store.cancel_appointment("missing")

    def test_booking_forces_scheduled_status(self, store):
        fields = booking("13:00")
        fields["status"] = "completed"

        appointment = store.book_appointment(fields)

        assert appointment.status == AppointmentStatus.SCHEDULED

    def test_double_booking_is_rejected(self, store):
        store.book_appointment(booking("14:00"))

        with pytest.raises(SlotUnavailableError):
            store.book_appointment(booking("14:00"))

    def test_slot_can_be_rebooked_after_cancel(self, store):
        first = store.book_appointment(booking("15:00"))
        store.cancel_appointment(first.id)

        second = store.book_appointment(booking("15:00"))

        assert second.id != first.id
        assert len([a for a in store.get_doctor_appointments("1") if a.time == "15:00"]) == 2

    def test_same_time_other_date_is_fine(self, store):
        store.book_appointment(booking("10:00", day=NEXT_MONDAY))

        slots = {s.time: s.available for s in store.get_available_time_slots("1", NEXT_MONDAY)}
        assert slots["10:00"] is False

    def test_appointment_queries(self, store):
        store.book_appointment(booking("09:00", day=NEXT_MONDAY))

        patient = store.get_patient_appointments("2")
        assert [(a.date, a.time) for a in patient] == [(MONDAY, "10:00"), (NEXT_MONDAY, "09:00")]
        assert len(store.get_doctor_appointments("1")) == 2
        assert store.get_doctor_appointments("3") == []
        assert len(store.get_all_appointments()) == 2

    def test_unknown_doctor_has_no_slots(self, store):
        assert store.get_available_time_slots("missing", MONDAY) == []

    def test_filter_by_status_and_name(self, store):
        cancelled = store.book_appointment(booking("16:00"))
        store.cancel_appointment(cancelled.id)

        assert len(store.filter_appointments("cancelled")) == 1
        assert len(store.filter_appointments("scheduled")) == 1
        assert len(store.filter_appointments("all", "patient user")) == 2
        assert store.filter_appointments("all", "garcia") == []


class TestMedicines:

    def test_catalogue_sorted_by_name(self, store):
        names = [m.name for m in store.get_medicines()]

        assert names == sorted(names)
        assert len(names) == 5

    def test_create_update_delete(self, store):
        medicine = store.create_medicine({
            "name": "Zinc 25mg",
            "description": None,
            "price": 6.5,
            "stock": 10,
            "image": None,
        })

        updated = store.update_medicine(medicine.id, {"price": 7.25, "stock": 12})
        assert updated.price == pytest.approx(7.25)
        assert updated.stock == 12
        assert updated.name == "Zinc 25mg"

        store.delete_medicine(medicine.id)
        assert store.get_medicine_by_id(medicine.id) is None

    def test_update_missing_raises(self, store):
        with pytest.raises(NotFoundError):
            store.update_medicine("missing", {"price": 1.0})

    def test_delete_missing_is_noop(self, store):
        store.delete_medicine("missing")

    def test_decrement_stock(self, store):
        store.decrement_medicine_stock("5", 2)

        assert store.get_medicine_by_id("5").stock == 1

    def test_decrement_beyond_stock_leaves_it_untouched(self, store):
        with pytest.raises(InsufficientStockError):
            store.decrement_medicine_stock("5", 4)

        assert store.get_medicine_by_id("5").stock == 3

    def test_decrement_missing_medicine(self, store):
        with pytest.raises(NotFoundError):
            store.decrement_medicine_stock("missing", 1)

    def test_search_matches_description(self, store):
        names = {m.name for m in store.search_medicines("pain relief")}

        assert names == {"Ibuprofen 200mg", "Paracetamol 500mg"}


class TestOrders:

    def test_order_with_price_snapshots(self, store):
        lines = [line("3", "Ibuprofen 200mg", 2, 5.75), line("4", "Paracetamol 500mg", 1, 3.25)]

        order_id = store.create_order("2", "1 Main Street", 14.75, lines)
        store.update_medicine("3", {"price": 99.0})

        [order] = store.get_user_orders("2")
        assert order.id == order_id
        assert order.status == OrderStatus.PENDING
        assert order.total_amount == pytest.approx(14.75)
        assert [(i.medicine_name, i.quantity, i.price_per_unit) for i in order.items] == [
            ("Ibuprofen 200mg", 2, 5.75),
            ("Paracetamol 500mg", 1, 3.25),
        ]
        assert not order.needs_reconciliation
        assert store.get_medicine_by_id("3").stock == 198
        assert store.get_medicine_by_id("4").stock == 149

    def test_failed_decrement_keeps_order_and_flags_item(self, store):
        lines = [line("5", "Vitamin D3 1000 IU", 5, 8.0), line("2", "Cetirizine 10mg", 1, 4.99)]

        order_id = store.create_order("2", "1 Main Street", 44.99, lines)

        [order] = store.get_user_orders("2")
        assert order.id == order_id
        assert order.needs_reconciliation
        assert [i.stock_applied for i in order.items] == [False, True]
        assert store.get_medicine_by_id("5").stock == 3
        assert store.get_medicine_by_id("2").stock == 119

    def test_admin_view_has_customer_name(self, store):
        store.create_order("2", "1 Main Street", 3.25, [line("4", "Paracetamol 500mg", 1, 3.25)])

        [order] = store.get_all_orders()

        assert order.customer_name == "Patient User"

    def test_other_users_orders_are_separate(self, store):
        store.create_order("2", "1 Main Street", 3.25, [line("4", "Paracetamol 500mg", 1, 3.25)])

        assert store.get_user_orders("1") == []

    def test_update_status(self, store):
        order_id = store.create_order("2", "addr", 3.25, [line("4", "Paracetamol 500mg", 1, 3.25)])

        store.update_order_status(order_id, "shipped")

        assert store.get_user_orders("2")[0].status == OrderStatus.SHIPPED

    def test_update_status_rejects_unknown_value(self, store):
        order_id = store.create_order("2", "addr", 3.25, [line("4", "Paracetamol 500mg", 1, 3.25)])

        with pytest.raises(ValidationError):
            store.update_order_status(order_id, "lost")

    def test_update_status_of_missing_order(self, store):
        with pytest.raises(NotFoundError):
            store.update_order_status("missing", "shipped")

    def test_filter_orders(self, store):
        order_id = store.create_order("2", "addr", 3.25, [line("4", "Paracetamol 500mg", 1, 3.25)])

        assert [o.id for o in store.filter_orders("patient")] == [order_id]
        assert [o.id for o in store.filter_orders(order_id[:6])] == [order_id]
        assert store.filter_orders("nobody") == []


class TestProfiles:

    def test_credentials_lookup_ignores_case(self, store):
        profile, password_hash = store.get_credentials("Patient@MediBook.com")

        assert profile.id == "2"
        assert profile.role == "patient"
        assert password_hash

    def test_unknown_email(self, store):
        assert store.get_credentials("nobody@example.com") is None

    def test_create_user(self, store):
        profile = store.create_user("new@example.com", "New Person", "hash", "patient")

        assert store.get_profile(profile.id) == profile
        assert store.get_profile("missing") is None


class TestStockFlagFailure:

    def test_flag_failure_is_logged_apart_from_decrement(self, store, monkeypatch):
        logger = Mock()
        monkeypatch.setattr("medibook.stores.base.logger", logger)
        monkeypatch.setattr(store, "_mark_stock_applied", Mock(side_effect=StorageError("mark stock applied")))

        store.create_order("2", "addr", 3.25, [line("4", "Paracetamol 500mg", 1, 3.25)])

        assert store.get_medicine_by_id("4").stock == 149
        events = [c.args[0] for c in logger.error.call_args_list]
        assert events == ["stock_applied_flag_failed"]


def test_constraint_violation_becomes_storage_error(app):
    store = SqlStore()

    with pytest.raises(StorageError):
        store.update_medicine("3", {"name": None})

    assert store.get_medicine_by_id("3").name == "Ibuprofen 200mg"
