"""Shared test helpers: login, image bytes and multipart uploads."""

import io

from PIL import Image as PILImage

MASTER = {"username": "master", "password": "master-pass"}
ADMIN = {"username": "alice", "password": "alice-pass"}


def login(client, username, password):
    return client.post("/api/auth/login", json={"username": username, "password": password})


def jpeg_bytes(size=None, color=(200, 30, 30)):
    """A real JPEG, zero-padded after the end marker to exactly `size` bytes if given."""
    buf = io.BytesIO()
    PILImage.new("RGB", (16, 16), color).save(buf, format="JPEG")
    data = buf.getvalue()
    if size is not None:
        assert size >= len(data)
        data += b"\x00" * (size - len(data))
    return data


def png_bytes():
    buf = io.BytesIO()
    PILImage.new("RGB", (16, 16), (0, 0, 255)).save(buf, format="PNG")
    return buf.getvalue()


def upload(client, *files):
    """POST files to the upload endpoint. Each file is (bytes, filename[, mimetype])."""
    payload = []
    for f in files:
        data, name = f[0], f[1]
        mimetype = f[2] if len(f) > 2 else "image/jpeg"
        payload.append((io.BytesIO(data), name, mimetype))
    return client.post(
        "/api/admin/upload",
        data={"images": payload},
        content_type="multipart/form-data",
    )
