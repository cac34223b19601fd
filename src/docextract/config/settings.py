"""
Application Settings.

Engine de OCR, credenciais e limites do retry por orientação,
carregados de .env / variáveis de ambiente.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuração do serviço (nomes de campo = variáveis de ambiente)."""

    # --- App ---
    env: str = "development"
    debug: bool = True
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    # --- OCR ---
    ocr_engine: str = "google_vision"   # "google_vision" | "paddle"
    google_cloud_vision_api_key: str = ""
    google_vision_endpoint: str = "https://vision.googleapis.com/v1/images:annotate"
    ocr_language_hints: list[str] = ["pt"]
    http_timeout_seconds: float = 30.0

    # PaddleOCR local
    ocr_lang: str = "pt"
    ocr_use_gpu: bool = False

    # --- Orientation retry ---
    retry_below_confidence: int = 80
    early_exit_confidence: int = 85
    upside_down_below_confidence: int = 70
    success_min_confidence: int = 50

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Settings lidas uma vez por processo."""
    return Settings()
