import time
from flask import Blueprint, jsonify, request

from gallery.config import LIKE_RATE_LIMIT_MAX, LIKE_RATE_LIMIT_WINDOW
from gallery.errors import NotFound, RateLimited
from gallery.logging_config import log_security_event
from gallery.services import image_service, like_service

public_bp = Blueprint("public", __name__, url_prefix="/api")

# Simple in-memory rate limiting
_rate_limit = {}


def _evict_idle(now):
    for ip in [ip for ip, times in _rate_limit.items() if now - times[-1] >= LIKE_RATE_LIMIT_WINDOW]:
        del _rate_limit[ip]


def _check_rate_limit(ip):
    now = time.time()
    _evict_idle(now)
    recent = [t for t in _rate_limit.get(ip, []) if now - t < LIKE_RATE_LIMIT_WINDOW]
    if len(recent) >= LIKE_RATE_LIMIT_MAX:
        _rate_limit[ip] = recent
        return False
    recent.append(now)
    _rate_limit[ip] = recent
    return True


def reset_rate_limit():
    _rate_limit.clear()


@public_bp.route("/images")
def list_images():
    return jsonify(image_service.get_images_with_likes())


@public_bp.route("/images/<image_id>/like", methods=["POST"])
def like_image(image_id):
    ip = request.remote_addr
    if not _check_rate_limit(ip):
        log_security_event("like_rate_limited", ip=ip)
        raise RateLimited("Too many requests")

    data = request.get_json(silent=True) or {}
    email = like_service.clean_email(data.get("email") if isinstance(data, dict) else None)

    image = image_service.get_image(image_id)
    if not image:
        raise NotFound("Image not found")

    like = like_service.add_like(image, email)
    return jsonify(like.to_dict())
