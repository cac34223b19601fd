"""
Use Case: Process OCR — Orientation Retry Controller.

Orquestra: Download → (Rotação → OCR → Normalização → Extração → Score)
por orientação → Melhor tentativa → Regras de consistência → Resultado

Sequência de orientações:
    0°  sempre
    90° e 270° se a confiança em 0° ficou abaixo do limite de retry,
        parando assim que alguma atinge o limite de early-exit
    180° se, depois disso, a melhor confiança ainda é baixa
"""

import logging
import time
from typing import Callable

from docextract.core.entities.extraction import OCRProcessResult, OrientationAttempt
from docextract.core.interfaces.document_extractor import IDocumentExtractor
from docextract.core.interfaces.image_loader import IImageLoader, IImageRotator, ImageLoadError
from docextract.core.interfaces.ocr_engine import IOCREngine, OCRConfigurationError, OCREngineError
from docextract.core.interfaces.rules_engine import IRulesEngine
from docextract.core.scoring.confidence import ConfidenceScorer

logger = logging.getLogger(__name__)

PRIMARY_ORIENTATION = 0
SIDEWAYS_ORIENTATIONS = (90, 270)
UPSIDE_DOWN_ORIENTATION = 180

NO_TEXT_MESSAGE = "Nenhum texto foi detectado no documento"


class ProcessOCRUseCase:
    """
    Use Case: URL da imagem + tipo de documento → campos extraídos.

    Dependency Injection: todas as dependências vêm pelo construtor.
    O registry de extractors é somente leitura e compartilhado.
    """

    def __init__(
        self,
        ocr_engine: IOCREngine,
        image_loader: IImageLoader,
        image_rotator: IImageRotator,
        registry,
        normalizer: Callable[[str], str],
        scorer: ConfidenceScorer | None = None,
        rules_engine: IRulesEngine | None = None,
        retry_below_confidence: int = 80,
        early_exit_confidence: int = 85,
        upside_down_below_confidence: int = 70,
        success_min_confidence: int = 50,
    ):
        self._ocr = ocr_engine
        self._loader = image_loader
        self._rotator = image_rotator
        self._registry = registry
        self._normalize = normalizer
        self._scorer = scorer or ConfidenceScorer()
        self._rules = rules_engine
        self.retry_below_confidence = retry_below_confidence
        self.early_exit_confidence = early_exit_confidence
        self.upside_down_below_confidence = upside_down_below_confidence
        self.success_min_confidence = success_min_confidence

    def execute(
        self,
        file_url: str,
        document_type: str,
        expected_fields: list[str] | None = None,
    ) -> OCRProcessResult:
        """
        Executa o pipeline completo.

        1. Resolve o extractor (tipo não suportado retorna sem chamar OCR)
        2. Baixa a imagem uma única vez
        3. Passadas de OCR por orientação (ver docstring do módulo)
        4. Seleciona a melhor tentativa
        5. [Opcional] Regras de consistência sobre os campos finais
        """
        t_start = time.perf_counter()
        expected = list(expected_fields or [])

        extractor = self._registry.get(document_type)
        if extractor is None:
            logger.warning(f"Unsupported document type: {document_type!r}")
            return OCRProcessResult(
                success=False,
                data={},
                confidence=0,
                message=f"Tipo de documento não suportado: {document_type}",
                document_type=document_type or "",
                latency_ms=_elapsed_ms(t_start),
            )

        try:
            image_bytes = self._loader.download(file_url)
        except ImageLoadError as e:
            logger.warning(f"Image download failed for {file_url}: {e}")
            return OCRProcessResult(
                success=False,
                data={},
                confidence=0,
                message=f"Erro ao baixar a imagem do documento: {e}",
                document_type=extractor.doc_type,
                latency_ms=_elapsed_ms(t_start),
                error=str(e),
            )

        attempts = self.run_orientations(
            lambda orientation: self._attempt(image_bytes, orientation, extractor, expected)
        )
        best = self.select_best(attempts)

        result = OCRProcessResult(
            success=best.confidence >= self.success_min_confidence,
            data=dict(best.data),
            confidence=best.confidence,
            message=self._message(best, attempts),
            tested_orientations=[a.orientation for a in attempts],
            attempts=attempts,
            document_type=extractor.doc_type,
        )
        if not any(a.text_length for a in attempts):
            result.success = False
            errors = [a.error for a in attempts if a.error]
            result.error = errors[-1] if errors else None

        if self._rules is not None and result.data:
            result.rules = self._rules.apply(result.data, doc_type=extractor.doc_type)

        result.latency_ms = _elapsed_ms(t_start)
        logger.info(
            f"[{extractor.doc_type}] best orientation {best.orientation}°: "
            f"{best.field_count} fields, confidence {best.confidence} "
            f"(tested {result.tested_orientations}, {result.latency_ms} ms)"
        )
        return result

    # ── Máquina de estados de orientação ─────────────────

    def run_orientations(self, attempt_at: Callable[[int], OrientationAttempt]) -> list[OrientationAttempt]:
        """Executa as passadas na ordem 0° → 90° → 270° → 180° com saída antecipada."""
        attempts = [attempt_at(PRIMARY_ORIENTATION)]

        if attempts[0].confidence < self.retry_below_confidence:
            for orientation in SIDEWAYS_ORIENTATIONS:
                attempt = attempt_at(orientation)
                attempts.append(attempt)
                if attempt.confidence >= self.early_exit_confidence:
                    break

            if max(a.confidence for a in attempts) < self.upside_down_below_confidence:
                attempts.append(attempt_at(UPSIDE_DOWN_ORIENTATION))

        return attempts

    @staticmethod
    def select_best(attempts: list[OrientationAttempt]) -> OrientationAttempt:
        """Mais campos, depois maior confiança, depois resultado mais longo; empate fica com a primeira."""
        return max(attempts, key=lambda a: (a.field_count, a.confidence, a.serialized_length))

    # ── Uma passada ──────────────────────────────────────

    def _attempt(
        self,
        image_bytes: bytes,
        orientation: int,
        extractor: IDocumentExtractor,
        expected_fields: list[str],
    ) -> OrientationAttempt:
        t0 = time.perf_counter()
        try:
            rotated = self._rotator.rotate(image_bytes, orientation)
            ocr = self._ocr.recognize(rotated)
        except OCRConfigurationError:
            raise
        except Exception as e:  # erro de uma passada não derruba as demais
            if isinstance(e, OCREngineError):
                logger.warning(f"[{extractor.doc_type}] OCR pass at {orientation}° failed: {e}")
            else:
                logger.exception(f"[{extractor.doc_type}] unexpected OCR error at {orientation}°: {e!r}")
            return OrientationAttempt(
                orientation=orientation,
                confidence=0,
                error=str(e),
                latency_ms=_elapsed_ms(t0),
            )

        raw_text = ocr.raw_text or ""
        data = extractor.extract(raw_text, self._normalize(raw_text), expected_fields)
        confidence = self._scorer.score(data, expected_fields, len(raw_text))

        attempt = OrientationAttempt(
            orientation=orientation,
            confidence=confidence,
            data=data,
            text_length=len(raw_text.strip()),
            ocr_confidence=ocr.confidence,
            latency_ms=_elapsed_ms(t0),
        )
        logger.info(
            f"[{extractor.doc_type}] orientation {orientation}°: {attempt.field_count} fields, "
            f"confidence {confidence}, {len(raw_text)} chars, engine confidence {ocr.confidence:.1f}"
        )
        return attempt

    def _message(self, best: OrientationAttempt, attempts: list[OrientationAttempt]) -> str:
        if not any(a.text_length for a in attempts):
            return NO_TEXT_MESSAGE
        if best.confidence >= self.success_min_confidence:
            return (
                f"OCR processado com sucesso (orientação {best.orientation}°). "
                f"{best.field_count} campos extraídos."
            )
        return (
            f"Confiança baixa ({best.confidence}%) na melhor orientação ({best.orientation}°). "
            f"{best.field_count} campos extraídos."
        )


def _elapsed_ms(t_start: float) -> float:
    return round((time.perf_counter() - t_start) * 1000, 2)
