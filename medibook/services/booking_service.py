from datetime import date, timedelta

from medibook.errors import SlotUnavailableError
from medibook.services.slot_service import parse_slot_date


def booking_window(today=None, window_days=30):
    today = today or date.today()
    return today, today + timedelta(days=window_days)


def book_slot(store, session_ctx, doctor_id, date_str, time, today=None, window_days=30):
    """
    Book `time` on `date_str` with a doctor for the signed-in patient.
    Returns (appointment, error_message).
    """
    if not session_ctx.is_authenticated:
        return None, "Please log in to book appointments."

    doctor = store.get_doctor_by_id(doctor_id)
    if doctor is None:
        return None, "The requested doctor could not be found."

    if not date_str or not time:
        return None, "Please select date and time to book an appointment."

    try:
        day = parse_slot_date(date_str)
    except ValueError:
        return None, "Date must be in YYYY-MM-DD format."

    first, last = booking_window(today, window_days)
    if day < first or day > last:
        return None, f"Appointments can be booked from today up to {window_days} days ahead."

    slots = {slot.time: slot for slot in store.get_available_time_slots(doctor_id, day)}
    slot = slots.get(time)
    if slot is None:
        return None, "The doctor is not available at that time."
    if not slot.available:
        return None, SlotUnavailableError.user_message

    try:
        appointment = store.book_appointment({
            "doctor_id": doctor.id,
            "patient_id": session_ctx.identity,
            "doctor_name": doctor.name,
            "patient_name": session_ctx.profile.name,
            "date": day,
            "time": time,
        })
    except SlotUnavailableError:
        return None, SlotUnavailableError.user_message

    return appointment, None
