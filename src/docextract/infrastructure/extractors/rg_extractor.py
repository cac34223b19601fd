"""
Adapter: Extractor de RG (Carteira de Identidade).

É o extractor mais rico: validadores estruturais próprios por campo e
faixas de ano distintas para nascimento (1900-2010) e expedição
(1970-2030), de modo que a mesma data bruta não seja atribuída aos dois
campos quando o documento traz várias datas.
"""

import re

from docextract.core.entities.extraction import FieldExtractor, function_strategy, regex_strategy
from docextract.core.entities.document import DocumentType
from docextract.infrastructure.extractors.base_extractor import BaseDocumentExtractor
from docextract.infrastructure.extractors.common import (
    cpf_field,
    date_field,
    filiation_from_labels,
    filiation_from_lines,
    name_field,
)
from docextract.infrastructure.parsing.date_parser import earliest_date, find_dates, format_date, year_between
from docextract.infrastructure.parsing.validators import UFS, is_valid_rg

RG_CAPTURE = r"(\d{1,2}[\.\s]?\d{3}[\.\s]?\d{3}[\-\.\s]?[\dXx])(?![\d])"
RG_FORMATTED_RE = re.compile(r"(?<![\d.])(\d{1,2}\.\d{3}\.\d{3}-[\dXx])(?![\d])")
RG_NEAR_LABEL_RE = re.compile(
    r"(?:IDENTIDADE|REGISTRO\s+GERAL)[^\d]{0,40}" + RG_CAPTURE,
    re.IGNORECASE,
)

ISSUERS = (
    "SSP", "SESP", "SDS", "SSPDS", "SEJUSP", "SESDEC", "DETRAN", "DGPC", "PC",
    "IFP", "IGP", "IIRGD", "IPF", "SJS", "DIC", "ITEP", "POLITEC", "SPTC", "SSPDC",
)
ISSUER_RE = re.compile(rf"\b({'|'.join(ISSUERS)})\s*[\/\-]?\s*([A-Z]{{2}})\b")
ISSUER_VALUE_RE = re.compile(r"^[A-Z]{2,10}(?:/[A-Z]{2})?$")

BIRTH_YEARS = (1900, 2010)
ISSUE_YEARS = (1970, 2030)


def rg_digits(value: str) -> str:
    """Mantém dígitos e o X final (dígito verificador alfabético)."""
    return re.sub(r"[^\dX]", "", value.upper())


def format_issuer(value: str) -> str:
    """'SSP SP', 'ssp-sp', 'SSP/SP' -> 'SSP/SP'."""
    parts = re.findall(r"[A-Z]+", value.upper())
    if len(parts) >= 2 and len(parts[-1]) == 2:
        return f"{''.join(parts[:-1])}/{parts[-1]}"
    return "".join(parts)


def is_valid_issuer(value: str) -> bool:
    if not ISSUER_VALUE_RE.match(value or ""):
        return False
    if "/" in value:
        return value.split("/")[1] in UFS
    return True


def _rg_near_label(text: str) -> str | None:
    match = RG_NEAR_LABEL_RE.search(text)
    return match.group(1) if match else None


def _formatted_rg(text: str) -> str | None:
    match = RG_FORMATTED_RE.search(text)
    return match.group(1) if match else None


def _latest_of_several(text: str) -> str | None:
    """Data mais recente, só quando há ao menos duas datas distintas (a única fica com o nascimento)."""
    dates = set(find_dates(text))
    if len(dates) < 2:
        return None
    return format_date(max(dates))


def _known_issuer(text: str) -> str | None:
    for match in ISSUER_RE.finditer(text):
        if match.group(2) in UFS:
            return f"{match.group(1)}/{match.group(2)}"
    return None


class RGExtractor(BaseDocumentExtractor):
    """Carteira de Identidade (RG)."""

    doc_type = DocumentType.RG.value

    def _build_fields(self) -> list[FieldExtractor]:
        return [
            name_field(labels=("NOME",)),
            FieldExtractor(
                name="rg",
                strategies=(
                    regex_strategy(
                        1,
                        r"\b(?:RG|R\.G\.|REGISTRO\s+GERAL|N[º°O]?\s+DO\s+RG|DOC(?:UMENTO)?\s+DE\s+IDENTIDADE)\b"
                        r"\s*(?:N[º°O]?\.?)?\s*[:\-]?\s*" + RG_CAPTURE,
                        context="labeled RG",
                    ),
                    function_strategy(2, _rg_near_label, context="RG near IDENTIDADE header"),
                    function_strategy(3, _formatted_rg, context="formatted RG anywhere"),
                ),
                validator=is_valid_rg,
                transform=rg_digits,
                required=True,
            ),
            cpf_field(),
            date_field(
                "data_nascimento",
                r"DATA\s+DE\s+NASCIMENTO|NASCIMENTO|NASC|DN",
                validator=year_between(*BIRTH_YEARS),
                fallbacks=(earliest_date,),
                required=True,
            ),
            date_field(
                "data_emissao",
                r"DATA\s+DE\s+EXPEDI[CÇ][AÃ]O|EXPEDI[CÇ][AÃ]O|DATA\s+DE\s+EMISS[AÃ]O|EMISS[AÃ]O|EXPEDID[AO]",
                validator=year_between(*ISSUE_YEARS),
                fallbacks=(_latest_of_several,),
            ),
            FieldExtractor(
                name="orgao_emissor",
                strategies=(
                    regex_strategy(
                        1,
                        r"(?:[OÓ]RG[AÃ]O\s+(?:EMISSOR|EXPEDIDOR)|EMISSOR)\s*[:\-]?\s*"
                        r"([A-Z]{2,10}(?:\s*[\/\-]?\s*[A-Z]{2})?)\b",
                        transform=format_issuer,
                        context="labeled issuer",
                    ),
                    function_strategy(2, _known_issuer, context="known issuer + UF"),
                ),
                validator=is_valid_issuer,
            ),
            FieldExtractor(
                name="naturalidade",
                strategies=(
                    regex_strategy(
                        1,
                        r"NATURALIDADE\s*[:\-]?\s*([A-ZÁÀÂÃÉÈÊÍÏÓÔÕÖÚÇÑ][A-ZÁÀÂÃÉÈÊÍÏÓÔÕÖÚÇÑ ]{2,40}?"
                        r"(?:\s*[\/\-]\s*[A-Z]{2})?)(?=[ \t]*(?:\r?\n|$)|\s+(?:DATA|DOC|CPF|NASC|FILIA))",
                        context="labeled birthplace",
                    ),
                ),
            ),
            FieldExtractor(
                name="filiacao",
                strategies=(
                    function_strategy(1, filiation_from_labels, context="PAI/MAE labels"),
                    function_strategy(2, filiation_from_lines, context="lines below FILIACAO"),
                ),
            ),
        ]
