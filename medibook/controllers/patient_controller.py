from flask import Blueprint, render_template, redirect, url_for, flash

from medibook.context.app_state import current_state
from medibook.errors import MediBookError
from medibook.extensions import get_store
from medibook.guards import patient_required
from medibook.logging_config import get_logger

patient_bp = Blueprint("patient", __name__)
logger = get_logger(__name__)

# region Appointments
@patient_bp.route("/my-appointments")
@patient_required
def my_appointments():
    patient_id = current_state().session.identity
    try:
        appointments = get_store().get_patient_appointments(patient_id)
    except MediBookError as e:
        logger.error("appointments_load_failed", patient_id=patient_id, error=str(e))
        flash("Failed to load your appointments.", "danger")
        appointments = []
    return render_template("patient/appointments.html", appointments=appointments)


@patient_bp.route("/appointments/<appointment_id>/cancel", methods=["POST"])
@patient_required
def cancel_appointment(appointment_id):
    store = get_store()
    patient_id = current_state().session.identity
    try:
        appointment = store.get_appointment_by_id(appointment_id)
        if appointment is None or appointment.patient_id != patient_id:
            flash("Appointment not found.", "danger")
            return redirect(url_for("patient.my_appointments"))

        store.cancel_appointment(appointment_id)
    except MediBookError as e:
        logger.error("appointment_cancel_failed", appointment_id=appointment_id, error=str(e))
        flash("Failed to cancel appointment. Please try again.", "danger")
        return redirect(url_for("patient.my_appointments"))

    logger.info("appointment_cancelled", appointment_id=appointment_id, patient_id=patient_id)
    flash("Your appointment has been cancelled.", "success")
    return redirect(url_for("patient.my_appointments"))
# endregion

# region Orders
@patient_bp.route("/my-orders")
@patient_required
def my_orders():
    user_id = current_state().session.identity
    try:
        orders = get_store().get_user_orders(user_id)
    except MediBookError as e:
        logger.error("orders_load_failed", user_id=user_id, error=str(e))
        flash("Failed to load your orders.", "danger")
        orders = []
    return render_template("patient/orders.html", orders=orders)
# endregion
