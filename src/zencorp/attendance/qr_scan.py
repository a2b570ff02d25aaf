from __future__ import annotations

import io
from typing import Optional

from PIL import Image, UnidentifiedImageError
from pyzbar.pyzbar import decode as pyzbar_decode


def decode_qr_image(image_bytes: bytes) -> Optional[str]:
    """Text of the first QR code found in the image, or None."""
    try:
        img = Image.open(io.BytesIO(image_bytes)).convert("RGB")
    except (UnidentifiedImageError, OSError):
        return None

    decoded = pyzbar_decode(img)
    if not decoded:
        return None
    return decoded[0].data.decode("utf-8").strip() or None
