from flask import Blueprint, g, jsonify, request

from gallery.auth.decorators import require_admin
from gallery.errors import NotFound, ValidationError
from gallery.services import admin_service, image_service, like_service, stats_service

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


# --- Images ---

@admin_bp.route("/images")
@require_admin
def list_images():
    return jsonify(image_service.get_images_with_likes())


@admin_bp.route("/images/<image_id>/likes")
@require_admin
def image_likes(image_id):
    if not image_service.get_image(image_id):
        raise NotFound("Image not found")
    return jsonify(like_service.get_likes_for_image(image_id))


@admin_bp.route("/upload", methods=["POST"])
@require_admin
def upload_images():
    uploads = image_service.validate_uploads(request.files.getlist("images"))
    created = image_service.save_images(uploads, g.admin)
    return jsonify([image.to_dict() for image in created])


@admin_bp.route("/images/<image_id>", methods=["DELETE"])
@require_admin
def delete_image(image_id):
    image = image_service.get_image(image_id)
    if not image:
        raise NotFound("Image not found")
    image_service.delete_image(image)
    return jsonify({"ok": True})


# --- Dashboard ---

@admin_bp.route("/stats")
@require_admin
def stats():
    images = image_service.get_images_with_likes()
    return jsonify(stats_service.get_dashboard_stats(images))


# --- Profile ---

@admin_bp.route("/profile", methods=["PUT"])
@require_admin
def update_profile():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Invalid data")

    for key in ("username", "current_password", "new_password"):
        if data.get(key) is not None and not isinstance(data[key], str):
            raise ValidationError("Invalid data")

    admin = admin_service.update_profile(
        g.admin,
        username=data.get("username") or None,
        current_password=data.get("current_password"),
        new_password=data.get("new_password"),
    )
    return jsonify({"admin": admin.to_dict()})


@admin_bp.route("/profile/picture", methods=["POST"])
@require_admin
def upload_profile_picture():
    file = request.files.get("profile_picture")
    if not file or not file.filename:
        raise ValidationError("No files selected")

    filename = image_service.save_profile_picture(file)
    old_picture = g.admin.profile_picture
    admin = admin_service.set_profile_picture(g.admin, filename)
    image_service.remove_file(old_picture)
    return jsonify({"admin": admin.to_dict()})


@admin_bp.route("/profile/picture", methods=["DELETE"])
@require_admin
def delete_profile_picture():
    image_service.remove_file(g.admin.profile_picture)
    admin = admin_service.set_profile_picture(g.admin, None)
    return jsonify({"admin": admin.to_dict()})
