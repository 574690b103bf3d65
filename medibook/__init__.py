from flask import Flask, render_template

from .config import Config
from .extensions import db, STORE_KEY
from .logging_config import setup_structured_logging, get_logger, RequestIDMiddleware
from .context.app_state import load_app_state, current_state
from .errors import MediBookError

logger = get_logger(__name__)


def build_store(app):
    backend = app.config["DATA_BACKEND"]
    if backend == "memory":
        from .stores.memory_store import MemoryStore
        return MemoryStore(seed=True)
    if backend == "sql":
        from .stores.sql_store import SqlStore
        return SqlStore()
    raise ValueError(f"Unknown DATA_BACKEND: {backend}")


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    setup_structured_logging(app.config["LOG_LEVEL"])
    app.wsgi_app = RequestIDMiddleware(app.wsgi_app)

    db.init_app(app)

    # models must be imported before create_all
    from .models import user, doctor, appointment, medicine, order  # noqa: F401

    with app.app_context():
        db.create_all()
        if app.config["SEED_SAMPLE_DATA"] and app.config["DATA_BACKEND"] == "sql":
            from .stores.seed import seed_sample_data
            seed_sample_data()

    app.extensions[STORE_KEY] = build_store(app)

    from .controllers.auth_controller import auth_bp
    from .controllers.home_controller import home_bp
    from .controllers.doctor_controller import doctor_bp
    from .controllers.patient_controller import patient_bp
    from .controllers.medicine_controller import medicine_bp
    from .controllers.admin_controller import admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(home_bp)
    app.register_blueprint(doctor_bp)
    app.register_blueprint(patient_bp)
    app.register_blueprint(medicine_bp)
    app.register_blueprint(admin_bp)

    app.before_request(load_app_state)

    @app.context_processor
    def inject_app_state():
        state = current_state()
        return {
            "current_profile": state.session.profile,
            "is_admin": state.session.is_admin(),
            "is_patient": state.session.is_patient(),
            "cart_count": state.cart.item_count,
        }

    @app.errorhandler(404)
    def not_found(error):
        return render_template("not_found.html"), 404

    @app.errorhandler(MediBookError)
    def unhandled_app_error(error):
        logger.error("unhandled_app_error", error=str(error), kind=type(error).__name__)
        return render_template("error.html", message=error.user_message), 500

    @app.errorhandler(500)
    def internal_error(error):
        original = getattr(error, "original_exception", None) or error
        logger.error("unhandled_exception", error=str(original), kind=type(original).__name__)
        return render_template("error.html", message=MediBookError.user_message), 500

    logger.info("app_created", backend=app.config["DATA_BACKEND"])
    return app
