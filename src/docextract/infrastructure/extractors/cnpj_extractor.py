"""
Adapter: Extractor de CNPJ (Comprovante de Inscrição e Situação Cadastral).
"""

import re

from docextract.core.entities.document import DocumentType
from docextract.core.entities.extraction import FieldExtractor, function_strategy, regex_strategy
from docextract.infrastructure.extractors.base_extractor import BaseDocumentExtractor
from docextract.infrastructure.extractors.common import cep_field, date_field, digits, upper_compact
from docextract.infrastructure.parsing.date_parser import earliest_date, year_between
from docextract.infrastructure.parsing.name_parser import NAME_CHARS
from docextract.infrastructure.parsing.validators import is_valid_cnpj

CNPJ_CAPTURE = r"(\d{2}[\.\s]?\d{3}[\.\s]?\d{3}[\/\s]?\d{4}[\-\.\s]?\d{2})(?!\d)"
_CNPJ_ANYWHERE_RE = re.compile(r"(?<!\d)(\d{2}[\.\-\/]?\d{3}[\.\-\/]?\d{3}[\.\-\/]?\d{4}[\.\-\/]?\d{2})(?!\d)")

COMPANY_CHARS = f"{NAME_CHARS}0-9&"
COMPANY_STOPS = (
    r"CNPJ", r"NOME\s+(?:DE\s+)?FANTASIA", r"T[IÍ]TULO", r"LOGRADOURO", r"END(?:ERE[CÇ]O)?",
    r"DATA", r"C[OÓ]DIGO", r"PORTE", r"NATUREZA", r"SITUA[CÇ][AÃ]O", r"CEP", r"N[UÚ]MERO",
)
_STOPS = "|".join(COMPANY_STOPS)
LINE_END = rf"(?=[ \t]*(?:\r?\n|$)|\s+(?:{_STOPS})\b)"

STATUSES = ("ATIVA", "SUSPENSA", "INAPTA", "BAIXADA", "NULA")


def is_valid_company_name(value: str) -> bool:
    letters = [ch for ch in value if ch.isalpha()]
    return 3 <= len(value) <= 150 and len(letters) >= 3


def _cnpj_anywhere(text: str) -> str | None:
    for match in _CNPJ_ANYWHERE_RE.finditer(text):
        if is_valid_cnpj(match.group(1)):
            return match.group(1)
    return None


def company_field(name: str, labels: str, context: str) -> FieldExtractor:
    return FieldExtractor(
        name=name,
        strategies=(
            regex_strategy(
                1,
                rf"\b(?:{labels})\b\s*[:\-]?\s*([{COMPANY_CHARS}][{COMPANY_CHARS}\.\-\/' ]{{2,120}}?){LINE_END}",
                context=context,
            ),
        ),
        validator=is_valid_company_name,
        transform=upper_compact,
    )


class CNPJExtractor(BaseDocumentExtractor):
    """Cartão CNPJ."""

    doc_type = DocumentType.CNPJ.value

    def _build_fields(self) -> list[FieldExtractor]:
        return [
            company_field(
                "razao_social",
                r"NOME\s+EMPRESARIAL|RAZ[AÃ]O\s+SOCIAL|EMPRESA",
                "labeled corporate name",
            ),
            company_field(
                "nome_fantasia",
                r"NOME\s+DE\s+FANTASIA|NOME\s+FANTASIA|T[IÍ]TULO\s+DO\s+ESTABELECIMENTO",
                "labeled trade name",
            ),
            FieldExtractor(
                name="cnpj",
                strategies=(
                    regex_strategy(
                        1,
                        rf"(?:\bCNPJ\b|N[UÚ]MERO\s+DE\s+INSCRI[CÇ][AÃ]O)\s*(?:N[º°O]?\.?)?\s*[:\-]?\s*{CNPJ_CAPTURE}",
                        context="labeled CNPJ",
                    ),
                    function_strategy(2, _cnpj_anywhere, context="first CNPJ-shaped number"),
                ),
                validator=is_valid_cnpj,
                transform=digits,
                required=True,
            ),
            date_field(
                "data_abertura",
                r"DATA\s+DE\s+ABERTURA|ABERTURA|IN[IÍ]CIO\s+DE\s+ATIVIDADE",
                validator=year_between(1900, 2100),
                fallbacks=(earliest_date,),
            ),
            FieldExtractor(
                name="endereco",
                strategies=(
                    regex_strategy(
                        1,
                        rf"\b(?:LOGRADOURO|ENDERE[CÇ]O)\b\s*[:\-]?\s*([{COMPANY_CHARS}][{COMPANY_CHARS},\.\-\/º° ]{{4,150}}?)"
                        r"(?=[ \t]*(?:\r?\n|$)|\s+(?:CEP|BAIRRO|MUNIC[IÍ]PIO|CIDADE|UF|COMPLEMENTO)\b)",
                        context="labeled address",
                    ),
                    regex_strategy(
                        2,
                        rf"\b((?:RUA|AV(?:ENIDA)?|TRAVESSA|ALAMEDA|RODOVIA|ESTRADA|PRA[CÇ]A)\.?\s+[{COMPANY_CHARS}][{COMPANY_CHARS},\.\-º° ]{{3,120}}?)"
                        r"(?=[ \t]*(?:\r?\n|$)|\s+(?:CEP|BAIRRO|CIDADE|UF)\b)",
                        context="street prefix",
                    ),
                ),
                transform=upper_compact,
            ),
            cep_field(),
            FieldExtractor(
                name="situacao_cadastral",
                strategies=(
                    regex_strategy(
                        1,
                        rf"SITUA[CÇ][AÃ]O\s+CADASTRAL\s*[:\-]?\s*({'|'.join(STATUSES)})\b",
                        transform=str.upper,
                        context="labeled registration status",
                    ),
                ),
            ),
        ]
