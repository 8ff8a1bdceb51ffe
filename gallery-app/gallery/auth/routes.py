from flask import Blueprint, jsonify, request, session

from gallery.auth.decorators import current_admin
from gallery.errors import AuthenticationError, ValidationError
from gallery.logging_config import get_logger, log_security_event
from gallery.services import admin_service

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

logger = get_logger(__name__)


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    username = data.get("username")
    password = data.get("password")
    if not isinstance(username, str) or not isinstance(password, str) or not username.strip() or not password:
        raise ValidationError("Invalid data")

    admin = admin_service.authenticate(username, password)
    if admin is None:
        log_security_event("login_failed", username=username[:80], ip=request.remote_addr)
        raise AuthenticationError("Invalid credentials")

    session.clear()
    session["admin_id"] = admin.id
    session.permanent = True
    logger.info("login", admin_id=admin.id, username=admin.username)
    return jsonify({"admin": admin.to_dict()})


@auth_bp.route("/session")
def get_session():
    if not session.get("admin_id"):
        raise AuthenticationError("Not authenticated")
    admin = current_admin()
    if admin is None:
        session.clear()
        raise AuthenticationError("Admin not found")
    return jsonify({"admin": admin.to_dict()})


@auth_bp.route("/logout", methods=["POST"])
def logout():
    session.clear()
    return jsonify({"ok": True})
