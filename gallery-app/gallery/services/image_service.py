"""
Image uploads: validation, storage on disk and the images table.
"""

import io
from pathlib import Path

from PIL import Image as PILImage, UnidentifiedImageError
from sqlalchemy import func
from sqlalchemy.orm import selectinload
from werkzeug.utils import secure_filename

from gallery.config import MAX_FILES_PER_UPLOAD, MAX_IMAGE_BYTES, UPLOADS_DIR
from gallery.errors import ValidationError
from gallery.extensions import db
from gallery.logging_config import get_logger
from gallery.models import Image, Like
from gallery.utils.helpers import generate_id, sanitize

logger = get_logger(__name__)

JPEG_EXTENSIONS = {".jpg", ".jpeg"}
JPEG_MIME_TYPES = {"image/jpeg", "image/jpg"}

PROFILE_PICTURE_EXTENSIONS = {"JPEG": ".jpg", "PNG": ".png", "GIF": ".gif", "WEBP": ".webp"}

TOO_LARGE_MESSAGE = f"File too large. Maximum {MAX_IMAGE_BYTES // 1024}KB."


def _detect_format(data):
    """Return the format Pillow detects for `data` (e.g. "JPEG"), or None."""
    try:
        with PILImage.open(io.BytesIO(data)) as img:
            img.verify()
            return img.format
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        return None


def _extension(filename):
    return Path(filename).suffix.lower()


def read_jpeg_upload(file):
    """
    Read and validate one uploaded file.

    Returns a dict with the bytes and metadata, ready for `save_images`.
    Raises ValidationError when the file is not an acceptable JPEG.
    """
    original_name = sanitize(file.filename)
    if not original_name:
        raise ValidationError("No files selected")

    if _extension(original_name) not in JPEG_EXTENSIONS or file.mimetype not in JPEG_MIME_TYPES:
        raise ValidationError("Only JPEG files are allowed.")

    data = file.read(MAX_IMAGE_BYTES + 1)
    if len(data) > MAX_IMAGE_BYTES:
        raise ValidationError(TOO_LARGE_MESSAGE)

    if _detect_format(data) != "JPEG":
        raise ValidationError("Only JPEG files are allowed.")

    return {
        "data": data,
        "original_name": original_name,
        "extension": _extension(original_name),
        "mime_type": "image/jpeg",
    }


def validate_uploads(files):
    """Validate a whole batch before anything touches the disk."""
    files = [f for f in files if f and f.filename]
    if not files:
        raise ValidationError("No files selected")
    if len(files) > MAX_FILES_PER_UPLOAD:
        raise ValidationError(f"Too many files. Maximum {MAX_FILES_PER_UPLOAD}.")
    return [read_jpeg_upload(f) for f in files]


def _write_file(filename, data):
    path = UPLOADS_DIR / filename
    path.write_bytes(data)
    return path


def remove_file(filename):
    """Delete a stored upload. Missing files are ignored."""
    if not filename:
        return False
    path = UPLOADS_DIR / secure_filename(filename)
    if path.exists():
        path.unlink()
        return True
    return False


def save_images(uploads, admin):
    """Write validated uploads to disk and record them. Returns the new Image rows."""
    created = []
    written = []
    try:
        for upload in uploads:
            filename = f"{generate_id()}{upload['extension']}"
            _write_file(filename, upload["data"])
            written.append(filename)
            image = Image(
                filename=filename,
                original_name=upload["original_name"],
                mime_type=upload["mime_type"],
                size=len(upload["data"]),
                uploaded_by=admin.id,
            )
            db.session.add(image)
            created.append(image)
        db.session.commit()
    except Exception:
        db.session.rollback()
        for filename in written:
            remove_file(filename)
        raise

    for image in created:
        logger.info(
            "image_uploaded",
            image_id=image.id,
            original_name=image.original_name,
            size=image.size,
            admin_id=admin.id,
        )
    return created


def get_image(image_id):
    return db.session.get(Image, image_id)


def get_images_with_likes():
    """All images, oldest first, with like counts and uploader info."""
    like_counts = (
        db.session.query(Like.image_id, func.count(Like.id).label("like_count"))
        .group_by(Like.image_id)
        .subquery()
    )
    rows = (
        db.session.query(Image, func.coalesce(like_counts.c.like_count, 0))
        .outerjoin(like_counts, like_counts.c.image_id == Image.id)
        .options(selectinload(Image.uploader))
        .order_by(Image.created_at, Image.id)
        .all()
    )

    result = []
    for image, like_count in rows:
        data = image.to_dict()
        data["like_count"] = like_count
        data["uploader_username"] = image.uploader.username if image.uploader else None
        data["uploader_profile_picture"] = image.uploader.profile_picture if image.uploader else None
        result.append(data)
    return result


def delete_image(image):
    """Delete an image file, its row and its likes."""
    image_id, filename = image.id, image.filename
    remove_file(filename)
    db.session.delete(image)
    db.session.commit()
    logger.info("image_deleted", image_id=image_id, filename=filename)


# --- Profile pictures ---

def save_profile_picture(file):
    """Validate and store a profile picture.

    The stored extension comes from the format Pillow detects, never from the
    client filename. Only JPEG, PNG, GIF and WebP are accepted.
    """
    original_name = sanitize(file.filename)
    if not original_name:
        raise ValidationError("No files selected")
    if not (file.mimetype or "").startswith("image/"):
        raise ValidationError("Only image files are allowed.")

    data = file.read(MAX_IMAGE_BYTES + 1)
    if len(data) > MAX_IMAGE_BYTES:
        raise ValidationError(TOO_LARGE_MESSAGE)

    extension = PROFILE_PICTURE_EXTENSIONS.get(_detect_format(data))
    if not extension:
        raise ValidationError("Only image files are allowed.")

    filename = f"profile-{generate_id()}{extension}"
    _write_file(filename, data)
    return filename
