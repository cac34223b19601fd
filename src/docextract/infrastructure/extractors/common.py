"""
Blocos reutilizáveis de estratégias entre tipos de documento.

Padrões escritos para funcionar nas duas superfícies de matching:
texto normalizado (maiúsculo, sem pontuação, linha única) e texto
bruto (multi-linha, com pontuação e acentos).
"""

import re

from docextract.core.entities.extraction import (
    FieldExtractor,
    Validator,
    function_strategy,
    regex_strategy,
)
from docextract.infrastructure.parsing.date_parser import to_canonical_date
from docextract.infrastructure.parsing.name_parser import (
    clean_name,
    extract_name,
    extract_uppercase_name,
    labeled_name_pattern,
    validate_name,
)
from docextract.infrastructure.parsing.text_normalizer import collapse_spaces, only_digits
from docextract.infrastructure.parsing.validators import UFS, format_cep, is_valid_cep, is_valid_cpf

# Numérica, por extenso, mês abreviado ou compacta
DATE_CAPTURE = (
    r"(\d{1,2}[\/\-\.\s]\d{1,2}[\/\-\.\s]\d{4}"
    r"|\d{1,2}[\/\-\.\s]\d{1,2}[\/\-\.\s]\d{2}(?!\d)"
    r"|\d{1,2}\s+DE\s+[A-ZÇ]{4,9}\s+DE\s+\d{4}"
    r"|\d{1,2}[\s\/\-\.]?[A-Z]{3}[\s\/\-\.]?\d{4}"
    r"|\d{8})"
)

CPF_CAPTURE = r"(\d{3}[\.\s]?\d{3}[\.\s]?\d{3}[\-\.\s]?\d{2})(?!\d)"
CPF_FORMATTED_RE = re.compile(r"(?<![\d.])(\d{3}\.\d{3}\.\d{3}-\d{2})(?![\d])")
_CEP_RE = re.compile(r"(?<!\d)(\d{5}[\-\.]?\d{3})(?!\d)")


def digits(value: str) -> str:
    return only_digits(value)


def upper_compact(value: str) -> str:
    return collapse_spaces(value).upper()


def labeled_date_strategy(priority: int, labels: str, context: str | None = None):
    """Estratégia "RÓTULO: data" para qualquer grafia de data."""
    return regex_strategy(
        priority,
        rf"\b(?:{labels})\b\s*[:\-]?\s*(?:EM\s*[:\-]?\s*)?{DATE_CAPTURE}",
        context=context or f"labeled date ({labels})",
    )


def date_field(
    name: str,
    labels: str,
    validator: Validator | None = None,
    fallbacks: tuple = (),
    required: bool = False,
) -> FieldExtractor:
    """Campo de data: rótulo primeiro, depois heurísticas de varredura."""
    strategies = [labeled_date_strategy(1, labels)]
    for offset, fallback in enumerate(fallbacks, start=2):
        strategies.append(function_strategy(offset, fallback, context=f"{name} fallback"))
    return FieldExtractor(
        name=name,
        strategies=tuple(strategies),
        validator=validator,
        transform=to_canonical_date,
        required=required,
    )


def name_field(
    name: str = "nome",
    labels: tuple[str, ...] = ("NOME",),
    extra: tuple = (),
    required: bool = True,
) -> FieldExtractor:
    """Nome rotulado, depois heurísticas de nome em maiúsculas/capitalizado."""
    strategies = [regex_strategy(1, labeled_name_pattern(labels), context=f"labeled {name}")]
    next_priority = 2
    for strategy in extra:
        strategies.append(strategy)
        next_priority = max(next_priority, strategy.priority + 1)
    strategies.append(function_strategy(next_priority, extract_uppercase_name, context="uppercase name"))
    strategies.append(function_strategy(next_priority + 1, extract_name, context="capitalized name"))
    return FieldExtractor(
        name=name,
        strategies=tuple(strategies),
        validator=validate_name,
        transform=clean_name,
        required=required,
    )


def _formatted_cpf(text: str) -> str | None:
    match = CPF_FORMATTED_RE.search(text)
    return match.group(1) if match else None


def cpf_field(required: bool = False) -> FieldExtractor:
    return FieldExtractor(
        name="cpf",
        strategies=(
            regex_strategy(1, rf"\bCPF\b\s*(?:N[º°O]?\.?)?\s*[:\-]?\s*{CPF_CAPTURE}", context="labeled CPF"),
            function_strategy(2, _formatted_cpf, context="formatted CPF"),
        ),
        validator=is_valid_cpf,
        transform=digits,
        required=required,
    )


def find_uf(text: str) -> str | None:
    """Primeira sigla de UF válida isolada no texto."""
    for match in re.finditer(r"\b([A-Z]{2})\b", text or ""):
        if match.group(1) in UFS:
            return match.group(1)
    return None


def lines_after_label(text: str, label_re: re.Pattern, count: int) -> list[str]:
    """Linhas não vazias logo abaixo da primeira linha que contém o rótulo."""
    lines = [line.strip() for line in (text or "").splitlines()]
    for index, line in enumerate(lines):
        match = label_re.search(line)
        if not match:
            continue
        collected = []
        rest = line[match.end():].strip(" :-\t")
        if rest:
            collected.append(rest)
        for following in lines[index + 1:]:
            if len(collected) >= count:
                break
            if following:
                collected.append(following)
        return collected[:count]
    return []


def format_filiation(father: str | None, mother: str | None) -> str | None:
    if father and mother:
        return f"Pai: {clean_name(father)}, Mãe: {clean_name(mother)}"
    return None


def filiation_from_lines(text: str) -> str | None:
    """FILIAÇÃO seguido de duas linhas de nome (pai, mãe)."""
    lines = lines_after_label(text, re.compile(r"FILIA[CÇ][AÃ]O", re.IGNORECASE), 2)
    names = [line for line in lines if validate_name(line)]
    if len(names) == 2:
        return format_filiation(names[0], names[1])
    return None


def filiation_from_labels(text: str) -> str | None:
    """Rótulos PAI: / MÃE: explícitos."""
    father = re.search(r"\bPAI\b\s*[:\-]?\s*([A-ZÁÀÂÃÉÈÊÍÏÓÔÕÖÚÇÑ ]{10,60})", text, re.IGNORECASE)
    mother = re.search(r"\bM[AÃ]E\b\s*[:\-]?\s*([A-ZÁÀÂÃÉÈÊÍÏÓÔÕÖÚÇÑ ]{10,60})", text, re.IGNORECASE)
    if father and mother:
        return format_filiation(father.group(1), mother.group(1))
    return None


def _cep_anywhere(text: str) -> str | None:
    for match in _CEP_RE.finditer(text):
        if is_valid_cep(match.group(1)):
            return match.group(1)
    return None


def cep_field(required: bool = False) -> FieldExtractor:
    return FieldExtractor(
        name="cep",
        strategies=(
            regex_strategy(1, r"\bCEP\b\s*[:\-]?\s*(\d{2}[\.\s]?\d{3}[\-\.\s]?\d{3})(?!\d)", context="labeled CEP"),
            function_strategy(2, _cep_anywhere, context="CEP-shaped number"),
        ),
        validator=is_valid_cep,
        transform=format_cep,
        required=required,
    )
