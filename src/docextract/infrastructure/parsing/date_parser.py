"""
Parser de datas em grafias brasileiras.

Converte todas as variantes para a forma canônica DD/MM/AAAA:

    10/05/1985, 10-05-85, 10.05.1985, 10 05 1985   (numérica)
    10 de maio de 1985                              (por extenso)
    10 MAI 1985, 10/MAI/1985                        (mês abreviado)
    10051985                                        (compacta)
"""

import re
from datetime import date

from docextract.infrastructure.parsing.text_normalizer import strip_accents

MIN_YEAR = 1900
MAX_YEAR = 2100

MONTHS = {
    "JANEIRO": 1, "FEVEREIRO": 2, "MARCO": 3, "ABRIL": 4,
    "MAIO": 5, "JUNHO": 6, "JULHO": 7, "AGOSTO": 8,
    "SETEMBRO": 9, "OUTUBRO": 10, "NOVEMBRO": 11, "DEZEMBRO": 12,
}
MONTH_ABBREVIATIONS = {name[:3]: number for name, number in MONTHS.items()}

_SEP = r"[\/\-\.\s]"
_NUMERIC_RE = re.compile(rf"(?<!\d)(\d{{1,2}}){_SEP}(\d{{1,2}}){_SEP}(\d{{4}}|\d{{2}})(?!\d)")
_LONG_RE = re.compile(r"(?<!\d)(\d{1,2})\s+DE\s+([A-Z]{4,9})\s+DE\s+(\d{4})(?!\d)")
_ABBR_RE = re.compile(r"(?<!\d)(\d{1,2})[\s\/\-\.]*([A-Z]{3})[A-Z]*[\s\/\-\.]*(\d{4})(?!\d)")
_COMPACT_RE = re.compile(r"(?<!\d)(\d{2})(\d{2})(\d{4})(?!\d)")

# Varredura genérica: só datas com separador e ano de 4 dígitos
_SCAN_NUMERIC_RE = re.compile(r"(?<!\d)(\d{1,2})[\/\-\.](\d{1,2})[\/\-\.](\d{4})(?!\d)")


def _expand_year(year: str) -> int:
    """Ano com 2 dígitos: 00-29 -> 2000s, 30-99 -> 1900s."""
    yy = int(year)
    if len(year) == 2:
        return 2000 + yy if yy < 30 else 1900 + yy
    return yy


def _build(day: str, month: int | str, year: str) -> date | None:
    try:
        month_number = int(month) if isinstance(month, str) else month
        parsed = date(_expand_year(year), month_number, int(day))
    except ValueError:
        return None
    if not MIN_YEAR <= parsed.year <= MAX_YEAR:
        return None
    return parsed


def _month_from_word(word: str) -> int | None:
    return MONTHS.get(word) or MONTH_ABBREVIATIONS.get(word[:3])


def format_date(value: date) -> str:
    return f"{value.day:02d}/{value.month:02d}/{value.year:04d}"


def _prepare(text: str) -> str:
    return strip_accents(text or "").upper()


def parse_date_value(text: str) -> date | None:
    """Primeira data válida encontrada no texto, em qualquer grafia."""
    prepared = _prepare(text)
    if not prepared:
        return None

    for match in _LONG_RE.finditer(prepared):
        month = _month_from_word(match.group(2))
        if month:
            parsed = _build(match.group(1), month, match.group(3))
            if parsed:
                return parsed

    for match in _NUMERIC_RE.finditer(prepared):
        parsed = _build(match.group(1), match.group(2), match.group(3))
        if parsed:
            return parsed

    for match in _ABBR_RE.finditer(prepared):
        month = MONTH_ABBREVIATIONS.get(match.group(2))
        if month:
            parsed = _build(match.group(1), month, match.group(3))
            if parsed:
                return parsed

    for match in _COMPACT_RE.finditer(prepared):
        parsed = _build(match.group(1), match.group(2), match.group(3))
        if parsed:
            return parsed

    return None


def extract_date(text: str) -> str | None:
    """Data canônica DD/MM/AAAA ou None."""
    parsed = parse_date_value(text)
    return format_date(parsed) if parsed else None


def to_canonical_date(value: str) -> str:
    """Transform de campo: canônica quando possível, senão o valor original."""
    return extract_date(value) or value


def find_dates(text: str) -> list[date]:
    """Todas as datas numéricas/por extenso do texto, na ordem em que aparecem."""
    prepared = _prepare(text)
    found: list[tuple[int, date]] = []

    for match in _SCAN_NUMERIC_RE.finditer(prepared):
        parsed = _build(match.group(1), match.group(2), match.group(3))
        if parsed:
            found.append((match.start(), parsed))

    for match in _LONG_RE.finditer(prepared):
        month = _month_from_word(match.group(2))
        parsed = _build(match.group(1), month, match.group(3)) if month else None
        if parsed:
            found.append((match.start(), parsed))

    found.sort(key=lambda item: item[0])
    return [parsed for _, parsed in found]


def earliest_date(text: str) -> str | None:
    dates = find_dates(text)
    return format_date(min(dates)) if dates else None


def latest_date(text: str) -> str | None:
    dates = find_dates(text)
    return format_date(max(dates)) if dates else None


def nth_date(text: str, index: int) -> str | None:
    dates = find_dates(text)
    if -len(dates) <= index < len(dates):
        return format_date(dates[index])
    return None


def year_between(min_year: int, max_year: int):
    """Validador: data canônica com ano dentro do intervalo."""
    def _validator(value: str) -> bool:
        parsed = parse_date_value(value)
        return parsed is not None and min_year <= parsed.year <= max_year
    return _validator


is_valid_date = year_between(MIN_YEAR, MAX_YEAR)
