"""
Contract: Rules Engine

Checagens de consistência sobre o mapa final de campos
(dígitos verificadores, ordem das datas). O resultado é só
informativo: avisos e nível de risco, sem tocar na extração.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Literal

Severity = Literal["LOW", "MEDIUM", "HIGH", "CRITICAL"]


@dataclass(frozen=True)
class RuleViolation:
    rule_id: str              # ex: "EMISSION_BEFORE_BIRTH"
    rule_name: str
    severity: Severity
    detail: str               # valores que dispararam a regra


@dataclass
class RulesResult:
    """Contagem das regras avaliadas + violações encontradas."""
    rules_passed: int
    rules_failed: int
    rules_total: int
    violations: list[RuleViolation] = field(default_factory=list)
    risk_score: float = 0.0          # soma ponderada das severidades, máx 1.0
    risk_level: Severity = "LOW"
    rules_version: str = ""


class IRulesEngine(ABC):
    """Port: Rules Engine (pós-extração)."""

    @abstractmethod
    def apply(self, fields: dict[str, str], doc_type: str | None = None) -> RulesResult:
        """
        Avalia as regras sobre `fields` (campo -> valor extraído).

        `doc_type` é repassado para regras específicas de um tipo;
        campos ausentes fazem a regra correspondente ser ignorada.
        """
        ...
