"""
Confidence Scorer — score 0-100 de uma extração.

    base      = campos válidos / campos esperados (ou 5) * 100
    × qualidade do texto (texto curto = OCR provavelmente falhou)
    + bônus por campo crítico (+5 cada, máx +20)
    → clamp [0, 100], arredondado (meio para cima)
"""

import math

from docextract.core.entities.extraction import OCRExtractionResult

DEFAULT_EXPECTED_FIELDS = 5

# (comprimento máximo exclusivo, multiplicador)
TEXT_LENGTH_MULTIPLIERS = (
    (50, 0.3),
    (150, 0.6),
    (300, 0.8),
)

# Independe do tipo de documento
CRITICAL_FIELDS = ("nome", "cpf", "rg", "cnpj", "crm")
CRITICAL_FIELD_BONUS = 5
MAX_CRITICAL_BONUS = 20


class ConfidenceScorer:
    """Calcula a confiança de uma extração. Puro e sem estado."""

    def __init__(
        self,
        critical_fields: tuple[str, ...] = CRITICAL_FIELDS,
        default_expected: int = DEFAULT_EXPECTED_FIELDS,
    ):
        self.critical_fields = critical_fields
        self.default_expected = default_expected

    @staticmethod
    def text_multiplier(raw_text_length: int) -> float:
        for limit, multiplier in TEXT_LENGTH_MULTIPLIERS:
            if raw_text_length < limit:
                return multiplier
        return 1.0

    def critical_bonus(self, extracted: OCRExtractionResult) -> int:
        present = sum(1 for name in self.critical_fields if _has_value(extracted.get(name)))
        return min(present * CRITICAL_FIELD_BONUS, MAX_CRITICAL_BONUS)

    def score(
        self,
        extracted: OCRExtractionResult,
        expected_fields: list[str] | None,
        raw_text_length: int,
    ) -> int:
        valid_count = sum(1 for value in extracted.values() if _has_value(value))
        total_expected = len(expected_fields) if expected_fields else self.default_expected

        base_score = (valid_count / total_expected) * 100
        adjusted = base_score * self.text_multiplier(raw_text_length)
        final = adjusted + self.critical_bonus(extracted)

        final = max(0.0, min(100.0, final))
        return int(math.floor(final + 0.5))


def _has_value(value) -> bool:
    return value is not None and str(value).strip() != ""
