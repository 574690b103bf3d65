from flask import Blueprint, render_template, request, redirect, url_for, flash

from medibook.context.app_state import current_state
from medibook.errors import MediBookError
from medibook.extensions import get_store
from medibook.guards import login_required
from medibook.logging_config import get_logger
from medibook.services.auth_service import register_user, authenticate_user

auth_bp = Blueprint("auth", __name__)
logger = get_logger(__name__)


def _landing_page(session_ctx):
    if session_ctx.is_admin():
        return url_for("admin.manage_doctors")
    return url_for("home.index")


@auth_bp.route("/register", methods=["GET", "POST"])
def register():
    if request.method == "POST":
        try:
            profile, error = register_user(
                get_store(),
                email=request.form.get("email"),
                name=request.form.get("name"),
                password=request.form.get("password"),
                role=request.form.get("role", "patient"),
            )
        except MediBookError as e:
            logger.error("registration_failed", error=str(e))
            profile, error = None, "Failed to create account. Please try again."

        if error:
            flash(error, "danger")
            return render_template("auth/register.html", error=error, form=request.form)

        session_ctx = current_state().session
        session_ctx.sign_in(profile)
        flash("Your account has been created. Welcome to MediBook!", "success")
        return redirect(_landing_page(session_ctx))

    return render_template("auth/register.html", error=None, form={})


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    error = None
    if request.method == "POST":
        try:
            profile, error = authenticate_user(
                get_store(),
                email=request.form.get("email"),
                password=request.form.get("password"),
            )
        except MediBookError as e:
            logger.error("login_failed", error=str(e))
            profile, error = None, "Failed to login. Please check your credentials."

        if profile:
            session_ctx = current_state().session
            session_ctx.sign_in(profile)
            return redirect(_landing_page(session_ctx))

        flash(error, "danger")

    return render_template("auth/login.html", error=error, form=request.form)


@auth_bp.route("/logout")
@login_required
def logout():
    current_state().session.sign_out()
    return redirect(url_for("auth.login"))
