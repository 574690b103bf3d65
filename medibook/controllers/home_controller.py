from flask import Blueprint, render_template

from medibook.errors import MediBookError
from medibook.extensions import get_store
from medibook.logging_config import get_logger

home_bp = Blueprint("home", __name__)
logger = get_logger(__name__)

FEATURED_COUNT = 3


@home_bp.route("/")
def index():
    try:
        doctors = get_store().get_doctors()[:FEATURED_COUNT]
    except MediBookError as e:
        logger.error("featured_doctors_failed", error=str(e))
        doctors = []
    return render_template("home.html", doctors=doctors)
