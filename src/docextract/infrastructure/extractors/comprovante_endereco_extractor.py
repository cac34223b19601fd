"""
Adapter: Extractor de Comprovante de Endereço (contas de consumo, faturas).
"""

import re

from docextract.core.entities.document import DocumentType
from docextract.core.entities.extraction import FieldExtractor, function_strategy, regex_strategy
from docextract.infrastructure.extractors.base_extractor import BaseDocumentExtractor
from docextract.infrastructure.extractors.common import cep_field, date_field, name_field, upper_compact
from docextract.infrastructure.parsing.date_parser import latest_date, year_between
from docextract.infrastructure.parsing.name_parser import NAME_CHARS
from docextract.infrastructure.parsing.validators import UFS, is_valid_uf

STREET_TYPES = r"RUA|R\.|AV(?:ENIDA)?\.?|TRAVESSA|TV\.?|ALAMEDA|AL\.?|RODOVIA|ESTRADA|PRA[CÇ]A|LARGO"
ADDRESS_STOPS = r"BAIRRO|CEP|CIDADE|MUNIC[IÍ]PIO|UF|ESTADO|COMPLEMENTO"

_CITY_UF_RE = re.compile(rf"([{NAME_CHARS}][{NAME_CHARS} ]{{2,40}}?)\s*[\-\/]\s*([A-Z]{{2}})\b")


def _city_uf_pair(text: str) -> tuple[str, str] | None:
    """Par 'CIDADE - UF' numa mesma linha."""
    for line in text.splitlines():
        for match in _CITY_UF_RE.finditer(line.strip()):
            if match.group(2) in UFS:
                return match.group(1).strip(), match.group(2)
    return None


def _city_from_pair(text: str) -> str | None:
    pair = _city_uf_pair(text)
    return pair[0] if pair else None


def _uf_from_pair(text: str) -> str | None:
    pair = _city_uf_pair(text)
    return pair[1] if pair else None


def is_valid_place(value: str) -> bool:
    return len(value) >= 3 and not any(ch.isdigit() for ch in value)


class ComprovanteEnderecoExtractor(BaseDocumentExtractor):
    """Comprovante de residência."""

    doc_type = DocumentType.COMPROVANTE_ENDERECO.value

    def _build_fields(self) -> list[FieldExtractor]:
        return [
            name_field(labels=("NOME", "DESTINAT[AÁ]RIO", "CLIENTE", "TITULAR\\s+DA\\s+CONTA", "TITULAR")),
            FieldExtractor(
                name="logradouro",
                strategies=(
                    regex_strategy(
                        1,
                        rf"\b(?:ENDERE[CÇ]O|LOGRADOURO)\b\s*[:\-]?\s*([{NAME_CHARS}0-9][{NAME_CHARS}0-9,\.\-º° ]{{4,120}}?)"
                        rf"(?=[ \t]*(?:\r?\n|$)|\s+(?:{ADDRESS_STOPS})\b)",
                        context="labeled address",
                    ),
                    regex_strategy(
                        2,
                        rf"(?<![{NAME_CHARS}])((?:{STREET_TYPES})\s+[{NAME_CHARS}0-9][{NAME_CHARS}0-9,\.\-º° ]{{2,120}}?)"
                        rf"(?=[ \t]*(?:\r?\n|$)|\s+(?:{ADDRESS_STOPS})\b)",
                        context="street type prefix",
                    ),
                ),
                validator=lambda value: len(value) >= 5,
                transform=upper_compact,
                required=True,
            ),
            FieldExtractor(
                name="bairro",
                strategies=(
                    regex_strategy(
                        1,
                        rf"\bBAIRRO\b\s*[:\-]?\s*([{NAME_CHARS}0-9][{NAME_CHARS}0-9 ]{{1,60}}?)"
                        rf"(?=[ \t]*(?:\r?\n|$)|\s*[,\-]|\s+(?:CEP|CIDADE|MUNIC[IÍ]PIO|UF|ESTADO)\b)",
                        context="labeled district",
                    ),
                ),
                transform=upper_compact,
            ),
            cep_field(required=True),
            FieldExtractor(
                name="cidade",
                strategies=(
                    regex_strategy(
                        1,
                        rf"\b(?:CIDADE|MUNIC[IÍ]PIO)\b\s*[:\-]?\s*([{NAME_CHARS}][{NAME_CHARS} ]{{2,40}}?)"
                        r"(?=[ \t]*(?:\r?\n|$)|\s*[\-\/,]|\s+(?:UF|ESTADO|CEP)\b)",
                        context="labeled city",
                    ),
                    function_strategy(2, _city_from_pair, context="CITY - UF pair"),
                ),
                validator=is_valid_place,
                transform=upper_compact,
            ),
            FieldExtractor(
                name="estado",
                strategies=(
                    regex_strategy(1, r"\b(?:ESTADO|UF)\b\s*[:\-]?\s*([A-Z]{2})\b", context="labeled state"),
                    function_strategy(2, _uf_from_pair, context="CITY - UF pair"),
                ),
                validator=is_valid_uf,
                transform=str.upper,
            ),
            date_field(
                "data_referencia",
                r"DATA\s+DE\s+EMISS[AÃ]O|EMISS[AÃ]O|DATA\s+DO\s+DOCUMENTO|VENCIMENTO|LEITURA\s+ATUAL",
                validator=year_between(1990, 2100),
                fallbacks=(latest_date,),
            ),
        ]
