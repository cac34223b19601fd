"""
Normalização de texto de OCR.

Gera a superfície secundária de matching: sem acentos, sem pontuação,
espaços colapsados e em maiúsculas.
"""

import re
import unicodedata

_NON_WORD_RE = re.compile(r"[^\w\s]")
_SPACES_RE = re.compile(r"\s+")
_DIGITS_RE = re.compile(r"\D")


def strip_accents(text: str) -> str:
    """Remove marcas diacríticas combinantes (á -> a, ç -> c)."""
    decomposed = unicodedata.normalize("NFD", text or "")
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def collapse_spaces(text: str) -> str:
    return _SPACES_RE.sub(" ", text or "").strip()


def normalize(text: str) -> str:
    """
    Canonicaliza o texto bruto do OCR.

    Idempotente: normalize(normalize(x)) == normalize(x).
    """
    if not text:
        return ""
    # upper antes de decompor: algumas maiúsculas só ganham acento combinante no upper
    text = strip_accents(text.upper())
    text = _NON_WORD_RE.sub(" ", text)
    return collapse_spaces(text).upper()


def only_digits(value: str) -> str:
    return _DIGITS_RE.sub("", value or "")


def normalize_for_comparison(value) -> str:
    """Forma usada para comparar valores declarados vs extraídos."""
    text = strip_accents(str(value).lower())
    text = _NON_WORD_RE.sub("", text)
    return collapse_spaces(text)
