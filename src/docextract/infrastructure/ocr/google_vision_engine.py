"""
Adapter: Google Cloud Vision OCR Engine (REST).

Envia a imagem em base64 para `images:annotate` com DOCUMENT_TEXT_DETECTION
e devolve o texto completo (primeira anotação). A detecção de orientação
da própria API não é usada: a rotação é feita pelo chamador.
"""

import base64
import logging

import requests

from docextract.core.interfaces.ocr_engine import (
    IOCREngine,
    OCRConfigurationError,
    OCREngineError,
    OCRText,
)

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://vision.googleapis.com/v1/images:annotate"

# Sem confiança por palavra na resposta
FALLBACK_CONFIDENCE = 75.0


class GoogleVisionOCREngine(IOCREngine):
    """
    OCR em nuvem via Google Cloud Vision.

    Pipeline:
        1. Codifica a imagem em base64
        2. POST images:annotate (DOCUMENT_TEXT_DETECTION + languageHints)
        3. textAnnotations[0] = texto completo; demais = palavras
    """

    name = "google_vision"

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        language_hints: list[str] | None = None,
        timeout: float = 30.0,
    ):
        if not api_key:
            raise OCRConfigurationError(
                "Serviço de OCR não configurado. Configure a chave API do Google Cloud Vision."
            )
        self._api_key = api_key
        self._endpoint = endpoint
        self._language_hints = list(language_hints or ["pt"])
        self._timeout = timeout

    def build_request(self, image_bytes: bytes) -> dict:
        return {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image_bytes).decode("utf-8")},
                    "features": [{"type": "DOCUMENT_TEXT_DETECTION", "maxResults": 1}],
                    "imageContext": {"languageHints": self._language_hints},
                }
            ]
        }

    def recognize(self, image_bytes: bytes) -> OCRText:
        try:
            response = requests.post(
                self._endpoint,
                params={"key": self._api_key},
                json=self.build_request(image_bytes),
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise OCREngineError(f"Google Cloud Vision indisponível: {e}") from e

        if response.status_code != 200:
            logger.warning(f"Vision API error {response.status_code}: {response.text[:200]}")
            raise OCREngineError(f"Google Cloud Vision API error: {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise OCREngineError("Resposta inválida do Google Cloud Vision") from e

        return self.parse_response(payload)

    def parse_response(self, payload: dict) -> OCRText:
        """Converte o JSON de `images:annotate` em OCRText; payload fora do formato vira OCREngineError."""
        if not isinstance(payload, dict):
            raise OCREngineError(f"Resposta inesperada do Google Cloud Vision: {type(payload).__name__}")
        if "error" in payload:
            raise OCREngineError(f"Google Cloud Vision API error: {_error_message(payload['error'])}")

        try:
            responses = payload.get("responses") or [{}]
            first = responses[0]
            if "error" in first:
                raise OCREngineError(f"Google Cloud Vision API error: {_error_message(first['error'])}")

            annotations = first.get("textAnnotations") or []
            if not annotations:
                return OCRText(raw_text="", confidence=0.0, engine=self.name, details={"words": 0})

            raw_text = annotations[0].get("description", "") or ""
            return OCRText(
                raw_text=str(raw_text),
                confidence=self.word_confidence(annotations[1:]),
                engine=self.name,
                details={"words": len(annotations) - 1},
            )
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
            raise OCREngineError(f"Resposta inesperada do Google Cloud Vision: {e}") from e

    @staticmethod
    def word_confidence(words: list[dict]) -> float:
        """Média das confianças (>0) das palavras × 100, ou 75 sem dados."""
        scores = [float(w.get("confidence") or 0) for w in words]
        scores = [s for s in scores if s > 0]
        if not scores:
            return FALLBACK_CONFIDENCE
        return float(round(sum(scores) / len(scores) * 100))


def _error_message(error) -> str:
    if isinstance(error, dict):
        return str(error.get("message", ""))
    return str(error)
