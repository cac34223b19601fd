"""
Adapter: Extraction Consistency Rules.

Tabela de checagens sobre o mapa final de campos. Cada checagem
recebe os campos e devolve o detalhe da inconsistência (ou None);
campos ausentes ou ilegíveis fazem a checagem passar.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Callable

from docextract.core.interfaces.rules_engine import IRulesEngine, RulesResult, RuleViolation, Severity
from docextract.infrastructure.parsing.date_parser import parse_date_value
from docextract.infrastructure.parsing.validators import cnpj_checksum_ok, cpf_checksum_ok

logger = logging.getLogger(__name__)

SEVERITY_WEIGHTS = {
    "LOW": 0.1,
    "MEDIUM": 0.25,
    "HIGH": 0.5,
    "CRITICAL": 1.0,
}

# (limite exclusivo, nível)
RISK_LEVELS = ((0.2, "LOW"), (0.5, "MEDIUM"), (0.8, "HIGH"))

MAX_AGE_YEARS = 130

_NAME_CHARS_RE = re.compile(r"^[A-ZÀ-Ü\s\.\-']+$")

Check = Callable[[dict, date], "str | None"]


@dataclass(frozen=True)
class ConsistencyRule:
    rule_id: str
    rule_name: str
    severity: Severity
    check: Check


def _date(fields: dict, name: str) -> date | None:
    return parse_date_value(fields.get(name) or "")


def _check_cpf(fields: dict, today: date) -> str | None:
    cpf = fields.get("cpf")
    if cpf and not cpf_checksum_ok(cpf):
        return f"CPF não passa na validação mod-11: {cpf}"
    return None


def _check_cnpj(fields: dict, today: date) -> str | None:
    cnpj = fields.get("cnpj")
    if cnpj and not cnpj_checksum_ok(cnpj):
        return f"CNPJ não passa na validação dos dígitos: {cnpj}"
    return None


def _check_emission_after_birth(fields: dict, today: date) -> str | None:
    birth, emission = _date(fields, "data_nascimento"), _date(fields, "data_emissao")
    if birth and emission and emission < birth:
        return f"Emissão {fields['data_emissao']} é anterior ao nascimento {fields['data_nascimento']}"
    return None


def _check_expiry_after_emission(fields: dict, today: date) -> str | None:
    emission, expiry = _date(fields, "data_emissao"), _date(fields, "data_validade")
    if emission and expiry and expiry < emission:
        return f"Validade {fields['data_validade']} é anterior à emissão {fields['data_emissao']}"
    return None


def _check_age(fields: dict, today: date) -> str | None:
    birth = _date(fields, "data_nascimento")
    if birth is None:
        return None
    age = (today - birth).days // 365
    if not 0 <= age <= MAX_AGE_YEARS:
        return f"Idade calculada: {age} anos (data: {fields['data_nascimento']})"
    return None


def _check_name(fields: dict, today: date) -> str | None:
    nome = fields.get("nome")
    if nome and not _NAME_CHARS_RE.match(nome.upper()):
        return f"Nome contém caracteres inesperados: {nome}"
    return None


DEFAULT_RULES = (
    ConsistencyRule("CPF_CHECKSUM", "Dígitos verificadores do CPF inválidos", "HIGH", _check_cpf),
    ConsistencyRule("CNPJ_CHECKSUM", "Dígitos verificadores do CNPJ inválidos", "HIGH", _check_cnpj),
    ConsistencyRule(
        "EMISSION_BEFORE_BIRTH", "Data de emissão anterior ao nascimento", "CRITICAL", _check_emission_after_birth
    ),
    ConsistencyRule("EXPIRY_BEFORE_EMISSION", "Validade anterior à emissão", "MEDIUM", _check_expiry_after_emission),
    ConsistencyRule("IMPLAUSIBLE_AGE", "Idade implausível", "HIGH", _check_age),
    ConsistencyRule("INVALID_NAME_CHARS", "Nome com caracteres inválidos", "MEDIUM", _check_name),
)


def risk_score(violations: list[RuleViolation]) -> float:
    return min(sum((SEVERITY_WEIGHTS[v.severity] for v in violations), 0.0), 1.0)


def risk_level(score: float) -> str:
    for limit, level in RISK_LEVELS:
        if score < limit:
            return level
    return "CRITICAL"


class ExtractionConsistencyRules(IRulesEngine):
    """
    Regras de consistência para documentos brasileiros.

    `today` fixa a data de referência do cálculo de idade (testes).
    """

    RULES_VERSION = "1.0.0"

    def __init__(
        self,
        rules_version: str | None = None,
        today: date | None = None,
        rules: tuple[ConsistencyRule, ...] = DEFAULT_RULES,
    ):
        self._rules_version = rules_version or self.RULES_VERSION
        self._today = today
        self._rules = rules

    def apply(self, fields: dict[str, str], doc_type: str | None = None) -> RulesResult:
        today = self._today or date.today()
        violations = []
        for rule in self._rules:
            detail = rule.check(fields, today)
            if detail is not None:
                violations.append(RuleViolation(rule.rule_id, rule.rule_name, rule.severity, detail))

        score = risk_score(violations)
        if violations:
            logger.info(f"[{doc_type}] consistency warnings: {[v.rule_id for v in violations]}")
        return RulesResult(
            rules_passed=len(self._rules) - len(violations),
            rules_failed=len(violations),
            rules_total=len(self._rules),
            violations=violations,
            risk_score=round(score, 3),
            risk_level=risk_level(score),
            rules_version=self._rules_version,
        )
