"""Profile photo processing helpers."""

from __future__ import annotations

import io

from PIL import Image, ImageOps, UnidentifiedImageError
from werkzeug.exceptions import BadRequest

PROFILE_PHOTO_SIZE = (250, 250)
JPEG_QUALITY = 90


def resize_profile_photo(data: bytes, size: tuple[int, int] = PROFILE_PHOTO_SIZE) -> bytes:
    """Crop/resize an uploaded image to ``size`` and re-encode it as JPEG."""

    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise BadRequest("Invalid image file.") from exc

    image = ImageOps.exif_transpose(image)
    image = image.convert("RGB")
    image = ImageOps.fit(image, size, Image.LANCZOS)

    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=JPEG_QUALITY)
    return buffer.getvalue()
