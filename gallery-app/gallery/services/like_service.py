from sqlalchemy.exc import IntegrityError

from gallery.errors import Conflict, ValidationError
from gallery.extensions import db
from gallery.logging_config import get_logger
from gallery.models import Like
from gallery.utils.helpers import normalize_email

logger = get_logger(__name__)

MAX_EMAIL_LENGTH = 254
ALREADY_LIKED_MESSAGE = "This email has already liked an image. Each email can only like once."


def clean_email(email):
    email = normalize_email(email)
    if "@" not in email or len(email) > MAX_EMAIL_LENGTH:
        raise ValidationError("Email must contain @")
    return email


def get_like_by_email(email):
    return Like.query.filter_by(email=email).first()


def get_likes_for_image(image_id):
    likes = Like.query.filter_by(image_id=image_id).order_by(Like.created_at, Like.id).all()
    return [like.to_dict() for like in likes]


def add_like(image, email):
    """Record a like for an email already passed through `clean_email`.

    Each email may like a single image across the whole gallery.
    """

    if get_like_by_email(email):
        raise Conflict(ALREADY_LIKED_MESSAGE)

    like = Like(image_id=image.id, email=email)
    db.session.add(like)
    try:
        db.session.commit()
    except IntegrityError:
        # lost a race against a concurrent like with the same email
        db.session.rollback()
        raise Conflict(ALREADY_LIKED_MESSAGE)

    logger.info("like_created", like_id=like.id, image_id=image.id)
    return like
