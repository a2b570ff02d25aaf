from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class FaceMatch:
    matched: bool
    distance: Optional[float] = None
    reason: str = ""


class FaceVerifier(Protocol):
    """Opaque face matcher: same person in both images or not."""

    def verify(self, reference_image: bytes, probe_image: bytes) -> FaceMatch:
        raise NotImplementedError


def decode_image_payload(value: str) -> bytes:
    """Bytes of a ``data:image/...;base64,`` URL or a bare base64 string."""
    payload = value.split(",", 1)[1] if value.startswith("data:") else value
    try:
        return base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError):
        return b""
