"""
Entity: Extraction

Contratos declarativos do motor de extração:

    - RegexStrategy / FunctionStrategy — uma técnica ranqueada para achar
      o valor de um campo dentro do texto.
    - FieldExtractor — um campo nomeado + suas estratégias, validador e
      transformação final.
    - OrientationAttempt — resultado transitório de uma passada de OCR.
    - OCRProcessResult — resultado consolidado de uma requisição.

Estratégias e campos são configuração imutável, construída uma única vez
no início do processo e reutilizada em todas as requisições.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Callable, Union

from docextract.core.interfaces.rules_engine import RulesResult

Transform = Callable[[str], str]
Validator = Callable[[str], bool]
Matcher = Callable[[str], "str | None"]

# campo -> valor; só campos encontrados e válidos aparecem
OCRExtractionResult = dict[str, str]


@dataclass(frozen=True)
class RegexStrategy:
    """Estratégia baseada em regex (grupo 1 ou match inteiro)."""
    priority: int
    pattern: re.Pattern
    transform: Transform | None = None
    context: str | None = None

    def find(self, raw_text: str, normalized_text: str) -> str | None:
        # Texto normalizado primeiro, depois o bruto
        for text in (normalized_text, raw_text):
            if not text:
                continue
            match = self.pattern.search(text)
            if match:
                if self.pattern.groups:
                    return match.group(1) or match.group(0)
                return match.group(0)
        return None


@dataclass(frozen=True)
class FunctionStrategy:
    """Estratégia heurística arbitrária: texto -> valor opcional."""
    priority: int
    function: Matcher
    transform: Transform | None = None
    context: str | None = None

    def find(self, raw_text: str, normalized_text: str) -> str | None:
        # Texto bruto primeiro, depois o normalizado
        value = self.function(raw_text) if raw_text else None
        if not value and normalized_text:
            value = self.function(normalized_text)
        return value or None


ExtractionStrategy = Union[RegexStrategy, FunctionStrategy]


def regex_strategy(
    priority: int,
    pattern: str | re.Pattern,
    transform: Transform | None = None,
    context: str | None = None,
    flags: int = re.IGNORECASE,
) -> RegexStrategy:
    """Helper para criar estratégia de regex simples."""
    if isinstance(pattern, str):
        pattern = re.compile(pattern, flags)
    return RegexStrategy(priority=priority, pattern=pattern, transform=transform, context=context)


def function_strategy(
    priority: int,
    fn: Matcher,
    transform: Transform | None = None,
    context: str | None = None,
) -> FunctionStrategy:
    """Helper para criar estratégia de função."""
    return FunctionStrategy(priority=priority, function=fn, transform=transform, context=context)


@dataclass(frozen=True)
class FieldExtractor:
    """Um campo nomeado e suas estratégias ranqueadas."""
    name: str                                   # ex: "nome", "cpf", "data_nascimento"
    strategies: tuple[ExtractionStrategy, ...]
    validator: Validator | None = None
    transform: Transform | None = None          # aplicada a qualquer candidato
    required: bool = False                      # informativo apenas

    def ordered_strategies(self) -> list[ExtractionStrategy]:
        """Estratégias por prioridade crescente (empates mantêm a declaração)."""
        return sorted(self.strategies, key=lambda s: s.priority)


@dataclass
class OrientationAttempt:
    """Uma passada de OCR numa orientação (não persistida)."""
    orientation: int                            # 0, 90, 270, 180
    confidence: int                             # score 0-100 da extração
    data: OCRExtractionResult = field(default_factory=dict)
    text_length: int = 0
    ocr_confidence: float = 0.0                 # score da própria engine
    error: str | None = None
    latency_ms: float = 0.0

    @property
    def field_count(self) -> int:
        return len(self.data)

    @property
    def serialized_length(self) -> int:
        """Tamanho do resultado serializado (desempate por riqueza)."""
        return len(json.dumps(self.data, ensure_ascii=False, separators=(",", ":")))


@dataclass
class OCRProcessResult:
    """Resultado consolidado de uma requisição de OCR."""
    success: bool
    data: OCRExtractionResult
    confidence: int
    message: str
    tested_orientations: list[int] = field(default_factory=list)
    attempts: list[OrientationAttempt] = field(default_factory=list)
    document_type: str = ""
    latency_ms: float = 0.0
    error: str | None = None
    rules: RulesResult | None = None           # avisos de consistência, nunca alteram data
