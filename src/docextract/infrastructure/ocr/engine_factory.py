"""
Factory: escolhe a engine de OCR configurada (OCR_ENGINE).
"""

import logging

from docextract.config.settings import Settings
from docextract.core.interfaces.ocr_engine import IOCREngine, OCRConfigurationError
from docextract.infrastructure.ocr.google_vision_engine import GoogleVisionOCREngine
from docextract.infrastructure.ocr.paddle_ocr_engine import PaddleOCREngine

logger = logging.getLogger(__name__)


def build_ocr_engine(settings: Settings) -> IOCREngine:
    """
    Constrói a engine de OCR.

    Raises:
        OCRConfigurationError: engine desconhecida ou sem credenciais.
    """
    engine_name = (settings.ocr_engine or "").strip().lower()

    if engine_name == "google_vision":
        engine = GoogleVisionOCREngine(
            api_key=settings.google_cloud_vision_api_key,
            endpoint=settings.google_vision_endpoint,
            language_hints=settings.ocr_language_hints,
            timeout=settings.http_timeout_seconds,
        )
    elif engine_name == "paddle":
        engine = PaddleOCREngine(lang=settings.ocr_lang, use_gpu=settings.ocr_use_gpu)
    else:
        raise OCRConfigurationError(f"Engine de OCR desconhecida: {settings.ocr_engine!r}")

    logger.info(f"OCR engine: {engine.name}")
    return engine
