from __future__ import annotations

import base64
import io

from PIL import Image, UnidentifiedImageError

from ..core.constants import ALLOWED_PICTURE_MIMES, MAX_PICTURE_BYTES
from ..core.exceptions import ValidationError

# Pillow format name -> mime type we store in the data URL.
_FORMAT_MIMES = {"JPEG": "image/jpeg", "PNG": "image/png", "WEBP": "image/webp"}


def to_data_url(data: bytes, mimetype: str) -> str:
    """Validate an uploaded profile picture and return it as a base64 data URL.

    The declared mimetype must be an allowed image type and the bytes must
    actually decode as that kind of image.
    """

    mimetype = (mimetype or "").lower()
    if mimetype not in ALLOWED_PICTURE_MIMES:
        raise ValidationError(
            "Invalid file type. Only JPEG, PNG, and WebP images are allowed.",
            field="profile_picture",
        )
    if len(data) > MAX_PICTURE_BYTES:
        raise ValidationError("File too large. Maximum size is 2MB.", field="profile_picture")

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
            actual = _FORMAT_MIMES.get(img.format or "")
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ValidationError("Uploaded file is not a readable image", field="profile_picture")

    if actual is None:
        raise ValidationError(
            "Invalid file type. Only JPEG, PNG, and WebP images are allowed.",
            field="profile_picture",
        )

    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{actual};base64,{encoded}"
