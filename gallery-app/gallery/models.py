"""
Database tables: admins, images and likes.
"""

from gallery.extensions import db
from gallery.utils.helpers import generate_id, to_iso, utcnow

ROLE_ADMIN = "admin"
ROLE_MASTER = "master"
ROLES = (ROLE_ADMIN, ROLE_MASTER)


class Admin(db.Model):
    __tablename__ = "admins"
    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_ADMIN)
    profile_picture = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    images = db.relationship("Image", back_populates="uploader", lazy="dynamic")

    @property
    def is_master(self):
        return self.role == ROLE_MASTER

    def to_dict(self):
        # password_hash never leaves the server
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role,
            "profile_picture": self.profile_picture,
            "created_at": to_iso(self.created_at),
        }


class Image(db.Model):
    __tablename__ = "images"
    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    filename = db.Column(db.String(255), nullable=False)
    original_name = db.Column(db.String(255), nullable=False)
    mime_type = db.Column(db.String(50), nullable=False)
    size = db.Column(db.Integer, nullable=False)
    uploaded_by = db.Column(db.String(36), db.ForeignKey("admins.id"), nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    uploader = db.relationship("Admin", back_populates="images")
    likes = db.relationship(
        "Like",
        back_populates="image",
        order_by="Like.created_at",
        cascade="all, delete-orphan",
    )

    @property
    def url(self):
        return f"/uploads/{self.filename}"

    def to_dict(self):
        return {
            "id": self.id,
            "filename": self.filename,
            "original_name": self.original_name,
            "mime_type": self.mime_type,
            "size": self.size,
            "uploaded_by": self.uploaded_by,
            "created_at": to_iso(self.created_at),
            "url": self.url,
        }


class Like(db.Model):
    __tablename__ = "likes"
    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    image_id = db.Column(db.String(36), db.ForeignKey("images.id"), nullable=False, index=True)
    email = db.Column(db.String(254), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    image = db.relationship("Image", back_populates="likes")

    # One like per email across all images
    __table_args__ = (db.UniqueConstraint("email", name="unique_like_email"),)

    def to_dict(self):
        return {
            "id": self.id,
            "image_id": self.image_id,
            "email": self.email,
            "created_at": to_iso(self.created_at),
        }
