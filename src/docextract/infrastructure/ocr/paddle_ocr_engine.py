"""
Adapter: PaddleOCR Engine (local).

Reconhece o texto com PaddleOCR e devolve as linhas na ordem de
leitura, uma por linha, para que os extractors vejam a mesma
estrutura multi-linha que recebem de engines em nuvem.
"""

import logging
from typing import Any

import cv2
import numpy as np

from docextract.core.interfaces.ocr_engine import (
    IOCREngine,
    OCRConfigurationError,
    OCREngineError,
    OCRText,
)

logger = logging.getLogger(__name__)


class PaddleOCREngine(IOCREngine):
    """
    OCR local com PaddleOCR.

    Pipeline:
        1. Decodifica a imagem (OpenCV)
        2. PaddleOCR extrai caixas + texto + confiança
        3. Ordena as linhas de cima para baixo e junta com quebra de linha
    """

    name = "paddleocr"

    def __init__(self, lang: str = "pt", use_gpu: bool = False):
        self._lang = lang
        self._use_gpu = use_gpu
        self._engine = None  # Lazy init (PaddleOCR é pesado)

    def _get_engine(self) -> Any:
        """Inicializa PaddleOCR sob demanda."""
        if self._engine is None:
            try:
                from paddleocr import PaddleOCR
            except ImportError as e:
                raise OCRConfigurationError(
                    "PaddleOCR não instalado. Instale o extra 'paddle' ou use OCR_ENGINE=google_vision."
                ) from e

            self._engine = PaddleOCR(
                use_angle_cls=False,
                lang=self._lang,
                use_gpu=self._use_gpu,
                show_log=False,
            )
            logger.info("PaddleOCR inicializado com sucesso")
        return self._engine

    def recognize(self, image_bytes: bytes) -> OCRText:
        engine = self._get_engine()

        img = cv2.imdecode(np.frombuffer(image_bytes, dtype=np.uint8), cv2.IMREAD_COLOR)
        if img is None:
            raise OCREngineError("Imagem inválida: não foi possível decodificar")

        try:
            result = engine.ocr(img, cls=False)
        except Exception as e:
            raise OCREngineError(f"PaddleOCR falhou: {e}") from e

        if not result or not result[0]:
            return OCRText(raw_text="", confidence=0.0, engine=self.name, details={"total_lines": 0})

        try:
            lines = self.parse_lines(result[0])
        except (IndexError, KeyError, TypeError, ValueError) as e:
            raise OCREngineError(f"Resultado inesperado do PaddleOCR: {e}") from e
        raw_text = "\n".join(line["text"] for line in lines)
        avg_conf = sum(line["confidence"] for line in lines) / len(lines) if lines else 0.0

        return OCRText(
            raw_text=raw_text,
            confidence=round(avg_conf * 100, 2),
            engine=self.name,
            details={"total_lines": len(lines)},
        )

    @staticmethod
    def parse_lines(page: list) -> list[dict]:
        """[[bbox, (texto, conf)], ...] -> linhas ordenadas por (topo, esquerda)."""
        lines: list[dict] = []
        for item in page:
            bbox = item[0]
            text, conf = item[1][0], float(item[1][1])
            lines.append({
                "text": text,
                "confidence": conf,
                "top": int(min(p[1] for p in bbox)),
                "left": int(min(p[0] for p in bbox)),
            })
        lines.sort(key=lambda line: (line["top"], line["left"]))
        return lines
