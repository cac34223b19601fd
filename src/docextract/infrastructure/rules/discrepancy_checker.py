"""
Discrepancy Checker: valores do OCR vs dados declarados no cadastro.

Cada mapeamento liga um campo do OCR a um caminho (dot notation) nos
dados declarados. Valores iguais após normalização não geram
discrepância; os demais são classificados pela similaridade de
Levenshtein (0-100).
"""

from dataclasses import dataclass, field
from typing import Any

from rapidfuzz.distance import Levenshtein

from docextract.infrastructure.parsing.text_normalizer import normalize_for_comparison


@dataclass(frozen=True)
class FieldMapping:
    ocr_field: str
    context_field: str      # ex: "dados_pessoais.cpf"


@dataclass
class Discrepancy:
    field: str
    expected: Any
    found: Any
    severity: str           # "LOW", "MEDIUM", "CRITICAL"
    similarity: float
    normalized: dict = field(default_factory=dict)


def similarity(a: str, b: str) -> float:
    """(len(maior) - distância) / len(maior) * 100; strings vazias são idênticas."""
    longer = a if len(a) > len(b) else b
    if not longer:
        return 100.0
    return (len(longer) - Levenshtein.distance(a, b)) / len(longer) * 100


def severity_for(score: float) -> str:
    if score > 80:
        return "LOW"
    if score > 60:
        return "MEDIUM"
    return "CRITICAL"


def get_nested_value(data: Any, path: str) -> Any:
    current = data
    for part in path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


class DiscrepancyChecker:
    """Compara o resultado do OCR com os dados declarados."""

    def compare(
        self,
        ocr_data: dict[str, str],
        declared: dict[str, Any],
        mappings: list[FieldMapping],
    ) -> list[Discrepancy]:
        discrepancies: list[Discrepancy] = []

        for mapping in mappings:
            found = ocr_data.get(mapping.ocr_field)
            expected = get_nested_value(declared, mapping.context_field)
            if not found or not expected:
                continue

            expected_norm = normalize_for_comparison(expected)
            found_norm = normalize_for_comparison(found)
            if expected_norm == found_norm:
                continue

            score = similarity(expected_norm, found_norm)
            discrepancies.append(Discrepancy(
                field=mapping.ocr_field,
                expected=expected,
                found=found,
                severity=severity_for(score),
                similarity=round(score, 2),
                normalized={"expected": expected_norm, "found": found_norm},
            ))

        return discrepancies
