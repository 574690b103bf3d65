from flask import Blueprint, render_template, request, redirect, url_for, flash

from medibook.domain import WEEKDAYS
from medibook.errors import MediBookError, NotFoundError, ValidationError
from medibook.extensions import get_store
from medibook.guards import admin_required
from medibook.logging_config import get_logger
from medibook.models.appointment_status import AppointmentStatus
from medibook.models.order_status import OrderStatus
from medibook.services.doctor_service import parse_doctor_form, DEFAULT_AVAILABILITY
from medibook.services.medicine_service import parse_medicine_form

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")
logger = get_logger(__name__)

# region Doctors
@admin_bp.route("/doctors")
@admin_required
def manage_doctors():
    term = request.args.get("q", "")
    try:
        doctors = get_store().search_doctors(term)
    except MediBookError as e:
        logger.error("doctors_load_failed", error=str(e))
        flash("Failed to load doctors.", "danger")
        doctors = []
    return render_template("admin/doctors.html", doctors=doctors, search_term=term)


@admin_bp.route("/doctors/add", methods=["GET", "POST"])
@admin_required
def add_doctor():
    if request.method == "POST":
        fields, error = parse_doctor_form(request.form)
        if error:
            flash(error, "danger")
            return render_template(
                "admin/add_doctor.html", form=request.form, weekdays=WEEKDAYS, availability=DEFAULT_AVAILABILITY
            )

        try:
            doctor = get_store().add_doctor(fields)
        except MediBookError as e:
            logger.error("doctor_add_failed", error=str(e))
            flash("Failed to add doctor. Please try again.", "danger")
            return render_template(
                "admin/add_doctor.html", form=request.form, weekdays=WEEKDAYS, availability=DEFAULT_AVAILABILITY
            )

        flash(f"{doctor.name} has been added.", "success")
        return redirect(url_for("admin.manage_doctors"))

    return render_template("admin/add_doctor.html", form={}, weekdays=WEEKDAYS, availability=DEFAULT_AVAILABILITY)
# endregion

# region Appointments
@admin_bp.route("/appointments")
@admin_required
def view_appointments():
    status = request.args.get("status", "all")
    term = request.args.get("q", "")
    try:
        appointments = get_store().filter_appointments(status=status, term=term)
    except MediBookError as e:
        logger.error("appointments_load_failed", error=str(e))
        flash("Failed to load appointments.", "danger")
        appointments = []
    return render_template(
        "admin/appointments.html",
        appointments=appointments,
        statuses=[s.value for s in AppointmentStatus],
        status=status,
        search_term=term,
    )
# endregion

# region Medicines
@admin_bp.route("/medicines")
@admin_required
def manage_medicines():
    term = request.args.get("q", "")
    try:
        medicines = get_store().search_medicines(term)
    except MediBookError as e:
        logger.error("medicines_load_failed", error=str(e))
        flash("Failed to load medicines.", "danger")
        medicines = []
    return render_template("admin/medicines.html", medicines=medicines, search_term=term)


@admin_bp.route("/medicines/add", methods=["GET", "POST"])
@admin_required
def add_medicine():
    if request.method == "POST":
        fields, error = parse_medicine_form(request.form)
        if error:
            flash(error, "danger")
            return render_template("admin/medicine_form.html", medicine=None, form=request.form)

        try:
            medicine = get_store().create_medicine(fields)
        except MediBookError as e:
            logger.error("medicine_create_failed", error=str(e))
            flash("Failed to add medicine. Please try again.", "danger")
            return render_template("admin/medicine_form.html", medicine=None, form=request.form)

        flash(f"{medicine.name} has been added.", "success")
        return redirect(url_for("admin.manage_medicines"))

    return render_template("admin/medicine_form.html", medicine=None, form={})


@admin_bp.route("/medicines/<medicine_id>/edit", methods=["GET", "POST"])
@admin_required
def edit_medicine(medicine_id):
    store = get_store()
    try:
        medicine = store.get_medicine_by_id(medicine_id)
    except MediBookError as e:
        logger.error("medicine_load_failed", medicine_id=medicine_id, error=str(e))
        medicine = None
    if medicine is None:
        flash("The requested medicine could not be found.", "danger")
        return redirect(url_for("admin.manage_medicines"))

    if request.method == "POST":
        fields, error = parse_medicine_form(request.form)
        if error:
            flash(error, "danger")
            return render_template("admin/medicine_form.html", medicine=medicine, form=request.form)

        try:
            store.update_medicine(medicine_id, fields)
        except NotFoundError:
            flash("The requested medicine could not be found.", "danger")
            return redirect(url_for("admin.manage_medicines"))
        except MediBookError as e:
            logger.error("medicine_update_failed", medicine_id=medicine_id, error=str(e))
            flash("Failed to update medicine. Please try again.", "danger")
            return render_template("admin/medicine_form.html", medicine=medicine, form=request.form)

        flash("Medicine updated successfully.", "success")
        return redirect(url_for("admin.manage_medicines"))

    return render_template("admin/medicine_form.html", medicine=medicine, form=medicine.to_dict())


@admin_bp.route("/medicines/<medicine_id>/delete", methods=["POST"])
@admin_required
def delete_medicine(medicine_id):
    try:
        get_store().delete_medicine(medicine_id)
    except MediBookError as e:
        logger.error("medicine_delete_failed", medicine_id=medicine_id, error=str(e))
        flash("Failed to delete medicine. Please try again.", "danger")
        return redirect(url_for("admin.manage_medicines"))

    flash("Medicine deleted.", "success")
    return redirect(url_for("admin.manage_medicines"))
# endregion

# region Orders
@admin_bp.route("/orders")
@admin_required
def manage_orders():
    term = request.args.get("q", "")
    try:
        orders = get_store().filter_orders(term)
    except MediBookError as e:
        logger.error("orders_load_failed", error=str(e))
        flash("Failed to load orders.", "danger")
        orders = []
    return render_template(
        "admin/orders.html", orders=orders, statuses=OrderStatus.values(), search_term=term
    )


@admin_bp.route("/orders/<order_id>/status", methods=["POST"])
@admin_required
def update_order_status(order_id):
    status = request.form.get("status", "")
    try:
        get_store().update_order_status(order_id, status)
    except ValidationError:
        flash("Please choose a valid order status.", "danger")
        return redirect(url_for("admin.manage_orders"))
    except NotFoundError:
        flash("Order not found.", "danger")
        return redirect(url_for("admin.manage_orders"))
    except MediBookError as e:
        logger.error("order_status_update_failed", order_id=order_id, error=str(e))
        flash("Failed to update order status. Please try again.", "danger")
        return redirect(url_for("admin.manage_orders"))

    logger.info("order_status_updated", order_id=order_id, status=status)
    flash(f"Order status updated to {status}.", "success")
    return redirect(url_for("admin.manage_orders"))
# endregion
