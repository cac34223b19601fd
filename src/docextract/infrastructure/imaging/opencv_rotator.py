"""
Adapter: OpenCV Image Rotator.

Gera as variantes rotacionadas usadas nas passadas de OCR.
"""

import cv2
import numpy as np

from docextract.core.interfaces.image_loader import IImageRotator
from docextract.core.interfaces.ocr_engine import OCREngineError

# graus no sentido horário -> código do cv2.rotate
_ROTATIONS = {
    90: cv2.ROTATE_90_CLOCKWISE,
    180: cv2.ROTATE_180,
    270: cv2.ROTATE_90_COUNTERCLOCKWISE,
}


class OpenCVImageRotator(IImageRotator):
    """Rotação sem perda em múltiplos de 90°, reencodada em PNG."""

    def rotate(self, image_bytes: bytes, degrees: int) -> bytes:
        degrees = degrees % 360
        if degrees == 0:
            return image_bytes
        if degrees not in _ROTATIONS:
            raise ValueError(f"Rotação não suportada: {degrees}° (use múltiplos de 90)")

        img = cv2.imdecode(np.frombuffer(image_bytes, dtype=np.uint8), cv2.IMREAD_COLOR)
        if img is None:
            raise OCREngineError("Imagem inválida: não foi possível decodificar")

        ok, encoded = cv2.imencode(".png", cv2.rotate(img, _ROTATIONS[degrees]))
        if not ok:
            raise OCREngineError(f"Falha ao codificar imagem rotacionada ({degrees}°)")
        return encoded.tobytes()
