"""
Adapter: Extractor de CNH (Carteira Nacional de Habilitação).
"""

import re

from docextract.core.entities.document import DocumentType
from docextract.core.entities.extraction import FieldExtractor, function_strategy, regex_strategy
from docextract.infrastructure.extractors.base_extractor import BaseDocumentExtractor
from docextract.infrastructure.extractors.common import cpf_field, date_field, name_field
from docextract.infrastructure.parsing.date_parser import nth_date, to_canonical_date
from docextract.infrastructure.parsing.name_parser import NAME_CHARS
from docextract.infrastructure.parsing.text_normalizer import only_digits

# 11 dígitos tolerando espaço/ponto entre eles
CNH_DIGITS = r"(?<!\d)(\d(?:[\s\.]?\d){10})(?!\d)"
CNH_DIGITS_RE = re.compile(CNH_DIGITS)
CONDUCTOR_RE = re.compile(rf"(?:NOME|CONDUTOR)\s*[:\-]?\s*[{NAME_CHARS}\s]{{10,60}}", re.IGNORECASE)
PLAIN_ELEVEN_RE = re.compile(r"(?<!\d)\d{11}(?!\d)")

CATEGORY_RE = re.compile(r"^[A-E]{1,3}$")


def compact_number(value: str) -> str:
    return re.sub(r"[\s\.]", "", value)


def looks_like_cpf(number: str) -> bool:
    """Heurística simples: CPFs costumam começar com 0-3, CNHs com dígitos mais altos."""
    return int(number[0]) <= 3


def is_valid_cnh(value: str) -> bool:
    """CNH: 11 dígitos, sem sequência repetida e sem cara de CPF."""
    digits = only_digits(value)
    if len(digits) != 11:
        return False
    if digits == digits[0] * 11:
        return False
    return not looks_like_cpf(digits)


def _cnh_after_conductor(text: str) -> str | None:
    """Número logo após o nome do condutor (até 200 caracteres depois)."""
    match = CONDUCTOR_RE.search(text)
    if not match:
        return None
    window = text[match.end():match.end() + 200]
    number = CNH_DIGITS_RE.search(window)
    return compact_number(number.group(1)) if number else None


def _cnh_in_header(text: str) -> str | None:
    """Primeiro número de 11 dígitos sem cara de CPF no topo do documento."""
    for match in CNH_DIGITS_RE.finditer(text[:300]):
        number = compact_number(match.group(1))
        if not looks_like_cpf(number):
            return number
    return None


def _any_valid_cnh(text: str) -> str | None:
    for match in CNH_DIGITS_RE.finditer(text):
        number = compact_number(match.group(1))
        if is_valid_cnh(number):
            return number
    return None


def _first_plain_eleven(text: str) -> str | None:
    match = PLAIN_ELEVEN_RE.search(text)
    return match.group(0) if match else None


def _third_date(text: str) -> str | None:
    return nth_date(text, 2)


def _first_date(text: str) -> str | None:
    return nth_date(text, 0)


def format_place(value: str) -> str:
    """'DETRAN SP' / 'detran-sp' -> 'DETRAN/SP'; demais locais só em maiúsculas."""
    value = value.strip().upper()
    if value.startswith("DETRAN"):
        return re.sub(r"\s*[\/\-]\s*|\s+", "/", value)
    return value


class CNHExtractor(BaseDocumentExtractor):
    """Carteira Nacional de Habilitação."""

    doc_type = DocumentType.CNH.value

    def _build_fields(self) -> list[FieldExtractor]:
        return [
            name_field(labels=("NOME", "CONDUTOR")),
            FieldExtractor(
                name="cnh",
                strategies=(
                    regex_strategy(
                        1,
                        r"(?:CNH|REGISTRO|N[UÚ]MERO|DOC(?:UMENTO)?)\s*(?:N[º°O]?\.?)?\s*[:\-]?\s*" + CNH_DIGITS,
                        transform=compact_number,
                        context="labeled CNH number",
                    ),
                    function_strategy(2, _cnh_after_conductor, context="number after conductor name"),
                    function_strategy(3, _cnh_in_header, context="number in document header"),
                    function_strategy(4, _any_valid_cnh, context="any valid 11-digit number"),
                    function_strategy(5, _first_plain_eleven, context="last resort 11 digits"),
                ),
                validator=is_valid_cnh,
                transform=compact_number,
                required=True,
            ),
            cpf_field(),
            date_field(
                "data_nascimento",
                r"DATA\s+DE\s+NASCIMENTO|NASCIMENTO|NASC|DN",
                fallbacks=(_first_date,),
            ),
            FieldExtractor(
                name="data_emissao",
                strategies=(
                    regex_strategy(
                        1,
                        r"(?:DATA\s+DE\s+)?(?:EMISS[AÃ]O|EMITIDO)\s*[:\-]?\s*(\d{1,2}[\/\-\.\s]\d{1,2}[\/\-\.\s]\d{4})",
                        context="labeled emission",
                    ),
                    regex_strategy(
                        2,
                        r"(?:PRIMEIRA|1[AªÂ]?)\s+HABILITA[ÇC][AÃ]O\s*[:\-]?\s*(\d{1,2}[\/\-\.\s]\d{1,2}[\/\-\.\s]\d{4})",
                        context="first license date",
                    ),
                ),
                transform=to_canonical_date,
            ),
            date_field(
                "data_validade",
                r"VALIDADE|VENCIMENTO|V[AÁ]LIDA\s+AT[EÉ]",
                fallbacks=(_third_date,),
            ),
            FieldExtractor(
                name="categoria",
                strategies=(
                    regex_strategy(
                        1,
                        r"\bCAT(?:EGORIA)?(?:\s+HAB(?:ILITACAO|ILITAÇÃO)?)?\b\s*[:\-]?\s*([A-E]{1,3})\b",
                        transform=str.upper,
                        context="labeled category",
                    ),
                    regex_strategy(
                        2,
                        r"^\s*([A-E]{1,3})\s*$",
                        context="category alone on a line",
                        flags=re.MULTILINE,
                    ),
                ),
                validator=lambda value: bool(CATEGORY_RE.match(value)),
            ),
            FieldExtractor(
                name="local_emissao",
                strategies=(
                    regex_strategy(
                        1,
                        rf"\bLOCAL\b\s*[:\-]?\s*([{NAME_CHARS}][{NAME_CHARS} \-\/]{{2,49}}?)(?=[ \t]*(?:\r?\n|$)|\s+DATA\b)",
                        context="labeled place",
                    ),
                    regex_strategy(2, r"(DETRAN\s*[\/\-\s]\s*[A-Z]{2})\b", context="DETRAN + UF"),
                ),
                transform=format_place,
            ),
        ]
