from flask import Blueprint, g, jsonify, request

from gallery.auth.decorators import require_master
from gallery.errors import NotFound, ValidationError
from gallery.models import ROLE_ADMIN
from gallery.services import admin_service, image_service, report_service

master_bp = Blueprint("master", __name__, url_prefix="/api/master")


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid data")
    return data


def _get_admin_or_404(admin_id):
    admin = admin_service.get_admin(admin_id)
    if not admin:
        raise NotFound("Admin not found")
    return admin


# --- Admin accounts ---

@master_bp.route("/admins")
@require_master
def list_admins():
    return jsonify(admin_service.get_all_admins())


@master_bp.route("/admins", methods=["POST"])
@require_master
def create_admin():
    data = _json_body()
    admin = admin_service.create_admin(
        data.get("username"),
        data.get("password"),
        role=data.get("role") or ROLE_ADMIN,
    )
    return jsonify({"admin": admin.to_dict()}), 201


@master_bp.route("/admins/<admin_id>", methods=["PUT"])
@require_master
def update_admin(admin_id):
    admin = _get_admin_or_404(admin_id)
    data = _json_body()
    admin = admin_service.update_admin(
        g.admin, admin,
        role=data.get("role"),
        password=data.get("password"),
    )
    return jsonify({"admin": admin.to_dict()})


@master_bp.route("/admins/<admin_id>", methods=["DELETE"])
@require_master
def delete_admin(admin_id):
    admin = _get_admin_or_404(admin_id)
    profile_picture = admin_service.delete_admin(g.admin, admin)
    image_service.remove_file(profile_picture)
    return jsonify({"ok": True})


# --- Daily reports ---

@master_bp.route("/reports")
@require_master
def list_reports():
    return jsonify(report_service.list_reports())


@master_bp.route("/reports", methods=["POST"])
@require_master
def generate_report():
    data = _json_body()
    report = report_service.generate_report(data.get("date"), generated_by=g.admin.username)
    return jsonify(report), 201


@master_bp.route("/reports/<day>")
@require_master
def get_report(day):
    report = report_service.get_report(day)
    if not report:
        raise NotFound("Report not found")
    return jsonify(report)
