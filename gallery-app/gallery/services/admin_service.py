from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from gallery.config import SEED_MASTER_PASSWORD, SEED_MASTER_USERNAME
from gallery.errors import AuthenticationError, Conflict, ValidationError
from gallery.extensions import db
from gallery.logging_config import get_logger
from gallery.models import Admin, Image, ROLE_ADMIN, ROLE_MASTER, ROLES
from gallery.utils.helpers import sanitize

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 4
MAX_USERNAME_LENGTH = 80


def get_admin(admin_id):
    if not admin_id:
        return None
    return db.session.get(Admin, admin_id)


def get_admin_by_username(username):
    return Admin.query.filter_by(username=username).first()


def get_admin_count():
    return Admin.query.count()


def get_master_count():
    return Admin.query.filter_by(role=ROLE_MASTER).count()


def get_all_admins():
    """All admins with the number of images each has uploaded, oldest account first."""
    rows = (
        db.session.query(Admin, func.count(Image.id))
        .outerjoin(Image, Image.uploaded_by == Admin.id)
        .group_by(Admin.id)
        .order_by(Admin.created_at, Admin.username)
        .all()
    )
    result = []
    for admin, image_count in rows:
        data = admin.to_dict()
        data["image_count"] = image_count
        result.append(data)
    return result


def _clean_username(username):
    username = sanitize(username)
    if not username:
        raise ValidationError("Username is required")
    if len(username) > MAX_USERNAME_LENGTH:
        raise ValidationError(f"Username must be at most {MAX_USERNAME_LENGTH} characters")
    return username


def _check_password(password):
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return password


def _check_role(role):
    if role not in ROLES:
        raise ValidationError("Role must be 'admin' or 'master'")
    return role


def verify_password(admin, password):
    return check_password_hash(admin.password_hash, password or "")


def authenticate(username, password):
    """Return the admin for valid credentials, None otherwise."""
    admin = get_admin_by_username(sanitize(username))
    if not admin or not verify_password(admin, password):
        return None
    return admin


def create_admin(username, password, role=ROLE_ADMIN):
    username = _clean_username(username)
    _check_password(password)
    _check_role(role)

    if get_admin_by_username(username):
        raise Conflict("This username is already in use")

    admin = Admin(
        username=username,
        password_hash=generate_password_hash(password),
        role=role,
    )
    db.session.add(admin)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("This username is already in use")

    logger.info("admin_created", admin_id=admin.id, username=username, role=role)
    return admin


def update_profile(admin, username=None, current_password=None, new_password=None):
    """Change an admin's own username and/or password."""
    if username is not None and username != admin.username:
        username = _clean_username(username)
        existing = get_admin_by_username(username)
        if existing and existing.id != admin.id:
            raise Conflict("This username is already in use")
        admin.username = username

    if new_password:
        if not current_password:
            raise ValidationError("Current password is required to change the password")
        if not verify_password(admin, current_password):
            db.session.rollback()
            raise AuthenticationError("Current password is incorrect")
        _check_password(new_password)
        admin.password_hash = generate_password_hash(new_password)

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("This username is already in use")
    return admin


def set_profile_picture(admin, filename):
    admin.profile_picture = filename
    db.session.commit()
    return admin


def update_admin(actor, admin, role=None, password=None):
    """Master action: change another admin's role or reset their password."""
    if role is not None and role != admin.role:
        _check_role(role)
        if admin.id == actor.id:
            raise ValidationError("You cannot change your own role")
        if admin.role == ROLE_MASTER and get_master_count() <= 1:
            raise ValidationError("Cannot demote the last master admin")
        admin.role = role

    if password is not None:
        _check_password(password)
        admin.password_hash = generate_password_hash(password)

    db.session.commit()
    logger.info("admin_updated", admin_id=admin.id, by=actor.id, role=admin.role, password_reset=password is not None)
    return admin


def delete_admin(actor, admin):
    """Master action: delete an admin. Their images move to the acting master."""
    if admin.id == actor.id:
        raise ValidationError("You cannot delete your own account")
    if admin.role == ROLE_MASTER and get_master_count() <= 1:
        raise ValidationError("Cannot delete the last master admin")

    admin_id, profile_picture = admin.id, admin.profile_picture
    moved = Image.query.filter_by(uploaded_by=admin_id).update({"uploaded_by": actor.id})
    db.session.delete(admin)
    db.session.commit()
    logger.info("admin_deleted", admin_id=admin_id, by=actor.id, images_reassigned=moved)
    return profile_picture


def seed_master_admin():
    """Create the first master account when no admins exist yet."""
    if get_admin_count() > 0:
        return None
    if SEED_MASTER_PASSWORD == "change-me-in-production":
        logger.warning("seed_default_password", username=SEED_MASTER_USERNAME)
    try:
        admin = create_admin(SEED_MASTER_USERNAME, SEED_MASTER_PASSWORD, role=ROLE_MASTER)
    except Conflict:
        # another worker process seeded it concurrently
        return None
    logger.info("seed_master_created", username=admin.username)
    return admin
