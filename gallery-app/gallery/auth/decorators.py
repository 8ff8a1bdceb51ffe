from functools import wraps

from flask import g, request, session

from gallery.errors import AuthenticationError, PermissionDenied
from gallery.logging_config import log_security_event
from gallery.services import admin_service


def current_admin():
    """The admin behind the session cookie, or None."""
    return admin_service.get_admin(session.get("admin_id"))


def require_admin(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        admin = current_admin()
        if admin is None:
            raise AuthenticationError("Not authenticated")
        g.admin = admin
        return f(*args, **kwargs)
    return decorated


def require_master(f):
    @wraps(f)
    @require_admin
    def decorated(*args, **kwargs):
        if not g.admin.is_master:
            log_security_event("master_access_denied", admin_id=g.admin.id, path=request.path)
            raise PermissionDenied("Master admin required")
        return f(*args, **kwargs)
    return decorated
