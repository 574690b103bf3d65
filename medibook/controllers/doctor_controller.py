from datetime import date

from flask import Blueprint, current_app, render_template, request, redirect, url_for, flash, jsonify

from medibook.context.app_state import current_state
from medibook.errors import MediBookError
from medibook.extensions import get_store
from medibook.guards import patient_required
from medibook.logging_config import get_logger
from medibook.services.booking_service import book_slot, booking_window
from medibook.services.slot_service import parse_slot_date

doctor_bp = Blueprint("doctor", __name__, url_prefix="/doctors")
logger = get_logger(__name__)


def _load_doctor_or_redirect(doctor_id):
    doctor = get_store().get_doctor_by_id(doctor_id)
    if doctor is None:
        flash("The requested doctor could not be found.", "danger")
        return None, redirect(url_for("doctor.doctors"))
    return doctor, None


@doctor_bp.route("")
def doctors():
    term = request.args.get("q", "")
    try:
        results = get_store().search_doctors(term)
    except MediBookError as e:
        logger.error("doctors_load_failed", error=str(e))
        flash("Failed to load doctors.", "danger")
        results = []
    return render_template("doctors/list.html", doctors=results, search_term=term)


@doctor_bp.route("/<doctor_id>")
def doctor_details(doctor_id):
    try:
        doctor, response = _load_doctor_or_redirect(doctor_id)
    except MediBookError as e:
        logger.error("doctor_load_failed", doctor_id=doctor_id, error=str(e))
        flash("Failed to load doctor information.", "danger")
        return redirect(url_for("doctor.doctors"))
    if response:
        return response
    return render_template("doctors/detail.html", doctor=doctor)


@doctor_bp.route("/<doctor_id>/slots")
def time_slots(doctor_id):
    date_str = request.args.get("date", "")
    try:
        day = parse_slot_date(date_str)
    except ValueError:
        return jsonify({"error": "date must be in YYYY-MM-DD format"}), 400

    try:
        slots = get_store().get_available_time_slots(doctor_id, day)
    except MediBookError as e:
        logger.error("slots_load_failed", doctor_id=doctor_id, error=str(e))
        return jsonify({"error": "Failed to load available time slots."}), 503

    return jsonify([{"time": s.time, "available": s.available} for s in slots])


@doctor_bp.route("/<doctor_id>/book", methods=["GET", "POST"])
@patient_required
def book_appointment(doctor_id):
    store = get_store()
    window_days = current_app.config["BOOKING_WINDOW_DAYS"]
    try:
        doctor, response = _load_doctor_or_redirect(doctor_id)
    except MediBookError as e:
        logger.error("doctor_load_failed", doctor_id=doctor_id, error=str(e))
        flash("Failed to load doctor information.", "danger")
        return redirect(url_for("doctor.doctors"))
    if response:
        return response

    if request.method == "POST":
        date_str = request.form.get("date", "")
        time = request.form.get("time", "")
        try:
            appointment, error = book_slot(
                store, current_state().session, doctor_id, date_str, time,
                today=date.today(), window_days=window_days,
            )
        except MediBookError as e:
            logger.error("booking_failed", doctor_id=doctor_id, error=str(e))
            appointment, error = None, "Failed to book appointment. Please try again."

        if appointment:
            flash(
                f"Your appointment with {doctor.name} on "
                f"{appointment.date.strftime('%B %d, %Y')} at {appointment.time} has been scheduled.",
                "success",
            )
            return redirect(url_for("patient.my_appointments"))

        flash(error, "danger")
        return redirect(url_for("doctor.book_appointment", doctor_id=doctor_id, date=date_str or None))

    first, last = booking_window(date.today(), window_days)
    selected = request.args.get("date")
    slots = []
    if selected:
        try:
            slots = store.get_available_time_slots(doctor_id, parse_slot_date(selected))
        except ValueError:
            flash("Date must be in YYYY-MM-DD format.", "warning")
            selected = None
        except MediBookError as e:
            logger.error("slots_load_failed", doctor_id=doctor_id, error=str(e))
            flash("Failed to load available time slots.", "danger")

    return render_template(
        "doctors/book.html",
        doctor=doctor,
        selected_date=selected,
        slots=slots,
        min_date=first.isoformat(),
        max_date=last.isoformat(),
    )
