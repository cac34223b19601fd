import pytest

from docextract.config.settings import Settings
from docextract.core.interfaces.ocr_engine import OCRConfigurationError
from docextract.infrastructure.ocr.engine_factory import build_ocr_engine
from docextract.infrastructure.ocr.google_vision_engine import GoogleVisionOCREngine
from docextract.infrastructure.ocr.paddle_ocr_engine import PaddleOCREngine


def settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_google_vision_engine():
    engine = build_ocr_engine(settings(ocr_engine="google_vision", google_cloud_vision_api_key="k"))
    assert isinstance(engine, GoogleVisionOCREngine)


def test_google_vision_without_key():
    with pytest.raises(OCRConfigurationError):
        build_ocr_engine(settings(ocr_engine="google_vision", google_cloud_vision_api_key=""))


def test_paddle_engine_is_lazy():
    engine = build_ocr_engine(settings(ocr_engine="Paddle"))
    assert isinstance(engine, PaddleOCREngine)
    assert engine._engine is None


def test_unknown_engine():
    with pytest.raises(OCRConfigurationError, match="tesseract"):
        build_ocr_engine(settings(ocr_engine="tesseract"))
