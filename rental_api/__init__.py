import logging

from flask import Flask, jsonify

from .config import Config
from .controllers.auth import bp as auth_bp
from .controllers.bookings import bp as bookings_bp
from .controllers.payments import bp as payments_bp
from .controllers.vehicles import bp as vehicles_bp
from .exceptions import BookingError, StorageTimeoutError
from .models.store import Store
from .services.common import STORE_KEY

log = logging.getLogger(__name__)


def create_app(overrides=None, store=None):
    """
    Application factory. `overrides` wins over environment settings;
    `store` lets tests hand in a ready-made Store.
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(level=app.config["LOG_LEVEL"], format=app.config["LOG_FORMAT"])

    if store is None:
        store = Store(
            app.config["DATA_PATH"] or None,
            timeout=app.config["STORAGE_TIMEOUT"],
            admin_username=app.config["ADMIN_USERNAME"],
            admin_password=app.config["ADMIN_PASSWORD"],
        )
    app.extensions[STORE_KEY] = store

    app.register_blueprint(auth_bp)
    app.register_blueprint(vehicles_bp)
    app.register_blueprint(bookings_bp)
    app.register_blueprint(payments_bp)

    @app.get("/")
    def home():
        return jsonify({"message": "Vehicle Rental API is running"})

    @app.errorhandler(BookingError)
    def handle_booking_error(err: BookingError):
        if isinstance(err, StorageTimeoutError):
            log.error("Storage unavailable: %s", err.message)
        body = {"message": err.public_message}
        conflicts = getattr(err, "conflicts", None)
        if conflicts:
            body["conflicts"] = [{"start": s.isoformat(), "end": e.isoformat()} for s, e in conflicts]
        return jsonify(body), err.status_code

    @app.errorhandler(404)
    def handle_not_found(_err):
        return jsonify({"message": "Not found"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(_err):
        return jsonify({"message": "Method not allowed"}), 405

    @app.errorhandler(500)
    def handle_server_error(err):
        log.exception("Unhandled error: %s", getattr(err, "original_exception", err))
        return jsonify({"message": "Server error"}), 500

    return app
