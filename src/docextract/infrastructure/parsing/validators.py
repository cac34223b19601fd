"""
Validadores primitivos de identificadores brasileiros.

Validação estrutural (sem dígito verificador) usada como gate das
estratégias de extração. Os checks de dígito verificador ficam à
parte e são usados apenas pelas regras de consistência.
"""

import re

from docextract.infrastructure.parsing.text_normalizer import only_digits

UFS = frozenset({
    "AC", "AL", "AP", "AM", "BA", "CE", "DF", "ES", "GO",
    "MA", "MT", "MS", "MG", "PA", "PB", "PR", "PE", "PI",
    "RJ", "RN", "RS", "RO", "RR", "SC", "SP", "SE", "TO",
})

CPF_LENGTH = 11
CNPJ_LENGTH = 14

_CEP_RE = re.compile(r"^\d{5}-?\d{3}$")
_RG_RE = re.compile(r"^\d+[Xx]?$")


def _is_repeated(digits: str) -> bool:
    return len(digits) > 0 and digits == digits[0] * len(digits)


def is_valid_rg(value: str) -> bool:
    """
    RG: 7 a 10 dígitos (último pode ser X), sem sequência repetida.

    Tamanhos de CPF (11) e CNPJ (14) são rejeitados explicitamente para
    evitar confusão entre campos.
    """
    compact = re.sub(r"[\s\.\-/]", "", value or "")
    if not _RG_RE.match(compact):
        return False
    digits = only_digits(compact)
    if len(compact) in (CPF_LENGTH, CNPJ_LENGTH):
        return False
    if not 7 <= len(compact) <= 10:
        return False
    if _is_repeated(digits):
        return False
    return True


def is_valid_cpf(value: str) -> bool:
    """CPF: exatamente 11 dígitos, sem sequência repetida."""
    digits = only_digits(value)
    return len(digits) == CPF_LENGTH and not _is_repeated(digits)


def is_valid_cnpj(value: str) -> bool:
    """CNPJ: exatamente 14 dígitos, sem sequência repetida."""
    digits = only_digits(value)
    return len(digits) == CNPJ_LENGTH and not _is_repeated(digits)


def is_valid_cep(value: str) -> bool:
    return bool(_CEP_RE.match((value or "").strip())) and not _is_repeated(only_digits(value))


def is_valid_uf(value: str) -> bool:
    return (value or "").strip().upper() in UFS


def is_valid_crm(value: str) -> bool:
    """CRM: 4 a 8 dígitos."""
    digits = only_digits(value)
    return digits == (value or "").strip() and 4 <= len(digits) <= 8 and not _is_repeated(digits)


# ─── Dígitos verificadores ───────────────────────────────

def cpf_checksum_ok(value: str) -> bool:
    """Valida últimos 2 dígitos do CPF (algoritmo mod-11)."""
    digits = only_digits(value)
    if not is_valid_cpf(digits):
        return False
    nums = [int(d) for d in digits]

    # Primeiro dígito verificador
    weights_1 = list(range(10, 1, -1))
    sum_1 = sum(n * w for n, w in zip(nums[:9], weights_1))
    d1 = 11 - (sum_1 % 11)
    d1 = 0 if d1 >= 10 else d1

    # Segundo dígito verificador
    weights_2 = list(range(11, 1, -1))
    sum_2 = sum(n * w for n, w in zip(nums[:10], weights_2))
    d2 = 11 - (sum_2 % 11)
    d2 = 0 if d2 >= 10 else d2

    return nums[9] == d1 and nums[10] == d2


def cnpj_checksum_ok(value: str) -> bool:
    """Valida os 2 dígitos verificadores do CNPJ."""
    digits = only_digits(value)
    if not is_valid_cnpj(digits):
        return False
    weights_1 = [5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2]
    weights_2 = [6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2]
    rem_1 = sum(int(d) * w for d, w in zip(digits[:12], weights_1)) % 11
    check_1 = 0 if rem_1 < 2 else 11 - rem_1
    rem_2 = sum(int(d) * w for d, w in zip(digits[:13], weights_2)) % 11
    check_2 = 0 if rem_2 < 2 else 11 - rem_2
    return digits[12] == str(check_1) and digits[13] == str(check_2)


def format_cep(value: str) -> str:
    digits = only_digits(value)
    return f"{digits[:5]}-{digits[5:]}" if len(digits) == 8 else value
