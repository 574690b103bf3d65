from enum import Enum
from functools import wraps

from flask import flash, redirect, render_template, url_for

from medibook.context.app_state import current_state
from medibook.models.roles import RoleEnum


class Access(Enum):
    LOADING = "loading"
    DENIED = "denied"
    GRANTED = "granted"


def evaluate_access(session_ctx, required_role=None):
    """
    Decide what a protected page should do for the current identity.

    `required_role` None means any signed-in user is enough.
    """
    if session_ctx.is_loading:
        return Access.LOADING
    if not session_ctx.is_authenticated:
        return Access.DENIED
    if required_role is not None and session_ctx.role != required_role:
        return Access.DENIED
    return Access.GRANTED


def _guarded(required_role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            access = evaluate_access(current_state().session, required_role)
            if access == Access.LOADING:
                return render_template("loading.html")
            if access == Access.DENIED:
                flash("Please log in with an account that can access this page.", "warning")
                return redirect(url_for("auth.login"), code=303)
            return view(*args, **kwargs)
        return wrapper
    return decorator


login_required = _guarded(None)
patient_required = _guarded(RoleEnum.PATIENT)
admin_required = _guarded(RoleEnum.ADMIN)
