"""
Daily reports: one JSON file per UTC day under REPORTS_DIR.
"""

from datetime import datetime, time, timedelta

from sqlalchemy import func

from gallery.config import REPORTS_DIR
from gallery.errors import ValidationError
from gallery.extensions import db
from gallery.logging_config import get_logger
from gallery.models import Image, Like
from gallery.services import email_service
from gallery.utils.file_lock import read_json, write_json
from gallery.utils.helpers import now_iso, parse_day, utcnow

logger = get_logger(__name__)


def _report_path(day):
    return REPORTS_DIR / f"{day.isoformat()}.json"


def resolve_day(day_str=None):
    """Parse a requested report day. Defaults to today (UTC); future days are rejected."""
    today = utcnow().date()
    if not day_str:
        return today
    day = parse_day(day_str)
    if day is None:
        raise ValidationError("Date must be in YYYY-MM-DD format")
    if day > today:
        raise ValidationError("Cannot generate a report for a future date")
    return day


def _day_bounds(day):
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def build_report(day, generated_by):
    """Collect one day's uploads and likes plus all-time totals."""
    start, end = _day_bounds(day)

    uploaded = (
        Image.query
        .filter(Image.created_at >= start, Image.created_at < end)
        .order_by(Image.created_at)
        .all()
    )

    day_likes = (
        db.session.query(Image.id, Image.original_name, func.count(Like.id))
        .join(Like, Like.image_id == Image.id)
        .filter(Like.created_at >= start, Like.created_at < end)
        .group_by(Image.id, Image.original_name)
        .all()
    )
    likes_per_image = sorted(
        ({"id": image_id, "original_name": name, "likes": count} for image_id, name, count in day_likes),
        key=lambda item: (-item["likes"], item["original_name"]),
    )

    total_images, total_size = db.session.query(
        func.count(Image.id), func.coalesce(func.sum(Image.size), 0)
    ).one()

    return {
        "date": day.isoformat(),
        "generated_at": now_iso(),
        "generated_by": generated_by,
        "images_uploaded": {
            "count": len(uploaded),
            "images": [
                {
                    "id": img.id,
                    "original_name": img.original_name,
                    "size": img.size,
                    "uploader": img.uploader.username if img.uploader else None,
                }
                for img in uploaded
            ],
        },
        "likes_received": sum(item["likes"] for item in likes_per_image),
        "likes_per_image": likes_per_image,
        "top_image_of_day": likes_per_image[0] if likes_per_image else None,
        "totals": {
            "images": total_images,
            "likes": Like.query.count(),
            "size": int(total_size),
        },
    }


def generate_report(day_str=None, generated_by="cli", send_email=True):
    """Build, store and (when SMTP is configured) email a daily report."""
    day = resolve_day(day_str)
    report = build_report(day, generated_by)
    write_json(_report_path(day), report)
    logger.info(
        "report_generated",
        date=report["date"],
        generated_by=generated_by,
        images=report["images_uploaded"]["count"],
        likes=report["likes_received"],
    )

    report["emailed"] = email_service.send_report(report) if send_email else False
    return report


def get_report(day_str):
    day = parse_day(day_str)
    if day is None:
        raise ValidationError("Date must be in YYYY-MM-DD format")
    return read_json(_report_path(day))


def list_reports():
    """Summaries of stored reports, newest first."""
    summaries = []
    for path in sorted(REPORTS_DIR.glob("*.json"), reverse=True):
        if parse_day(path.stem) is None:
            continue
        report = read_json(path)
        if not report:
            continue
        summaries.append({
            "date": report["date"],
            "generated_at": report["generated_at"],
            "generated_by": report["generated_by"],
            "images_uploaded": report["images_uploaded"]["count"],
            "likes_received": report["likes_received"],
        })
    return summaries
