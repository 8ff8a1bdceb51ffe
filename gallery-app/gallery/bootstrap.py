"""
Setup shared by admin_server and public_server: config, database,
logging, JSON errors, /uploads and /healthz.
"""

from flask import jsonify, send_from_directory
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from gallery.config import (
    DATABASE_URL, IS_PRODUCTION, MAX_CONTENT_LENGTH, SECRET_KEY, SESSION_LIFETIME, UPLOADS_DIR,
)
from gallery.errors import register_error_handlers
from gallery.extensions import db
from gallery.logging_config import configure_logging, get_logger

logger = get_logger(__name__)

UPLOAD_CACHE_SECONDS = 24 * 60 * 60


def init_app(app):
    configure_logging()

    app.secret_key = SECRET_KEY
    app.config.update(
        SQLALCHEMY_DATABASE_URI=DATABASE_URL,
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        MAX_CONTENT_LENGTH=MAX_CONTENT_LENGTH,
        PERMANENT_SESSION_LIFETIME=SESSION_LIFETIME,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        SESSION_COOKIE_SECURE=IS_PRODUCTION,
    )
    if IS_PRODUCTION:
        # Behind a reverse proxy / tunnel
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)

    db.init_app(app)
    register_error_handlers(app)

    # Serve uploaded images
    @app.route("/uploads/<filename>")
    def uploaded_file(filename):
        return send_from_directory(UPLOADS_DIR, filename, max_age=UPLOAD_CACHE_SECONDS)

    @app.route("/healthz")
    def healthz():
        try:
            db.session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error("health_check_failed", error=str(e))
            return jsonify({"status": "unavailable"}), 503
        return jsonify({"status": "ok"})

    with app.app_context():
        db.create_all()

    return app
