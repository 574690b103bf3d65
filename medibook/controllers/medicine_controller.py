from flask import Blueprint, render_template, request, redirect, url_for, flash

from medibook.context.app_state import current_state
from medibook.errors import MediBookError
from medibook.extensions import get_store
from medibook.logging_config import get_logger
from medibook.services.order_service import place_order, LOGIN_REQUIRED

medicine_bp = Blueprint("medicine", __name__)
logger = get_logger(__name__)


def _quantity_from(form, default=1):
    try:
        return int(form.get("quantity", default))
    except (TypeError, ValueError):
        return None


def _flash_cart_change(change, medicine_name):
    if change.refused:
        flash(f"{medicine_name} is out of stock.", "warning")
    elif change.clamped:
        flash(f"Only {change.quantity} of {medicine_name} available. Quantity adjusted.", "warning")

# region Catalogue
@medicine_bp.route("/medicines")
def medicines():
    term = request.args.get("q", "")
    try:
        results = get_store().search_medicines(term)
    except MediBookError as e:
        logger.error("medicines_load_failed", error=str(e))
        flash("Failed to load medicines.", "danger")
        results = []
    return render_template("medicines/list.html", medicines=results, search_term=term)


@medicine_bp.route("/medicines/<medicine_id>")
def medicine_details(medicine_id):
    try:
        medicine = get_store().get_medicine_by_id(medicine_id)
    except MediBookError as e:
        logger.error("medicine_load_failed", medicine_id=medicine_id, error=str(e))
        medicine = None
    if medicine is None:
        flash("The requested medicine could not be found.", "danger")
        return redirect(url_for("medicine.medicines"))
    return render_template("medicines/detail.html", medicine=medicine)
# endregion

# region Cart
@medicine_bp.route("/cart")
def cart():
    return render_template("cart.html", cart=current_state().cart, shipping_address="")


@medicine_bp.route("/cart/add/<medicine_id>", methods=["POST"])
def add_to_cart(medicine_id):
    quantity = _quantity_from(request.form)
    if quantity is None:
        flash("Quantity must be a whole number.", "danger")
        return redirect(request.referrer or url_for("medicine.medicines"))

    try:
        medicine = get_store().get_medicine_by_id(medicine_id)
    except MediBookError as e:
        logger.error("medicine_load_failed", medicine_id=medicine_id, error=str(e))
        flash("Failed to add item to cart.", "danger")
        return redirect(url_for("medicine.medicines"))

    if medicine is None:
        flash("The requested medicine could not be found.", "danger")
        return redirect(url_for("medicine.medicines"))

    change = current_state().cart.add_item(medicine, quantity)
    if change.refused or change.clamped:
        _flash_cart_change(change, medicine.name)
    elif quantity > 0:
        flash(f"{medicine.name} added to your cart.", "success")
    return redirect(request.referrer or url_for("medicine.medicines"))


@medicine_bp.route("/cart/update/<medicine_id>", methods=["POST"])
def update_cart(medicine_id):
    quantity = _quantity_from(request.form)
    if quantity is None:
        flash("Quantity must be a whole number.", "danger")
        return redirect(url_for("medicine.cart"))

    cart_ctx = current_state().cart
    item = cart_ctx.get(medicine_id)
    change = cart_ctx.update_quantity(medicine_id, quantity)
    if item is not None:
        _flash_cart_change(change, item.medicine.name)
    return redirect(url_for("medicine.cart"))


@medicine_bp.route("/cart/remove/<medicine_id>", methods=["POST"])
def remove_from_cart(medicine_id):
    current_state().cart.remove_item(medicine_id)
    return redirect(url_for("medicine.cart"))


@medicine_bp.route("/cart/checkout", methods=["POST"])
def checkout():
    state = current_state()
    shipping_address = request.form.get("shipping_address", "")

    order_id, error = place_order(get_store(), state.session, state.cart, shipping_address)
    if error == LOGIN_REQUIRED:
        flash(error, "warning")
        return redirect(url_for("auth.login"), code=303)
    if error:
        flash(error, "danger")
        return render_template("cart.html", cart=state.cart, shipping_address=shipping_address)

    logger.info("order_placed", order_id=order_id, user_id=state.session.identity)
    flash("Your order has been placed successfully!", "success")
    if state.session.is_patient():
        return redirect(url_for("patient.my_orders"))
    return redirect(url_for("medicine.medicines"))
# endregion
