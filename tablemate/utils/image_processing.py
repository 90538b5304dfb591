"""Image preprocessing utilities.

Receipt photos straight from a phone are often large and rotated via
EXIF metadata. Normalising them before the vision call keeps requests
small and the orientation right. Pillow is used as the imaging backend.
"""

from __future__ import annotations

import logging
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

# Pillow refuses images whose header claims an absurd pixel count
UNREADABLE_IMAGE_ERRORS = (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError)


def preprocess_image(image_data: bytes, max_size: int = 1568) -> bytes:
    """Preprocess a receipt image for analysis.

    Applies EXIF orientation, converts to RGB and resizes the longest
    edge to ``max_size`` pixels while maintaining aspect ratio. Bytes
    Pillow cannot decode are returned unchanged so the upload still
    reaches the analysis step.

    :param image_data: Raw image bytes
    :param max_size: Maximum size of the longest edge in pixels
    :returns: Processed image bytes in JPEG format
    """
    try:
        with Image.open(BytesIO(image_data)) as img:
            logger.debug("Preprocessing image format=%s size=%s bytes=%d", img.format, img.size, len(image_data))
            img = ImageOps.exif_transpose(img)
            img = img.convert("RGB")
            width, height = img.size
            max_dim = max(width, height)
            if max_dim > max_size:
                scale = max_size / float(max_dim)
                img = img.resize((max(1, int(width * scale)), max(1, int(height * scale))))
            buf = BytesIO()
            img.save(buf, format="JPEG", quality=90)
            return buf.getvalue()
    except UNREADABLE_IMAGE_ERRORS as exc:
        logger.info("Image preprocessing skipped: %s", exc)
        return image_data
