from __future__ import annotations

import logging

import cv2
import face_recognition
import numpy as np

from ..core.constants import DEFAULT_FACE_MATCH_THRESHOLD
from .face_verifier import FaceMatch, FaceVerifier

logger = logging.getLogger(__name__)


def _to_rgb(image_bytes: bytes):
    nparr = np.frombuffer(image_bytes, np.uint8)
    img = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)
    if img is None:
        return None

    # RGBA -> BGR
    if len(img.shape) == 3 and img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    # Grayscale -> BGR
    elif len(img.shape) == 2:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)

    rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
    return np.ascontiguousarray(rgb, dtype=np.uint8)


class FaceRecognitionVerifier(FaceVerifier):
    """Compares the first face in each image by euclidean distance of encodings."""

    def __init__(self, threshold: float = DEFAULT_FACE_MATCH_THRESHOLD):
        self._threshold = float(threshold)

    def _encode(self, image_bytes: bytes):
        rgb = _to_rgb(image_bytes)
        if rgb is None:
            return None
        boxes = face_recognition.face_locations(rgb)
        if not boxes:
            return None
        return face_recognition.face_encodings(rgb, boxes)[0]

    def verify(self, reference_image: bytes, probe_image: bytes) -> FaceMatch:
        known = self._encode(reference_image)
        if known is None:
            return FaceMatch(matched=False, reason="No face found in the reference photo")
        unknown = self._encode(probe_image)
        if unknown is None:
            return FaceMatch(matched=False, reason="No face detected")

        distance = float(face_recognition.face_distance([known], unknown)[0])
        matched = distance <= self._threshold
        logger.debug("Face distance %.3f (threshold %.2f)", distance, self._threshold)
        return FaceMatch(matched=matched, distance=distance, reason="" if matched else "Face does not match")
