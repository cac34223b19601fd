"""
Heurísticas para localizar nomes próprios em texto de OCR.

Um nome plausível tem pelo menos duas palavras significativas, nenhuma
letra fora do alfabeto latino/acentuado, nenhum dígito e nenhuma das
palavras fixas impressas nos documentos (REPÚBLICA, CARTEIRA, ...).
"""

import re

from docextract.infrastructure.parsing.text_normalizer import collapse_spaces, strip_accents

NAME_CHARS = "A-ZÁÀÂÃÉÈÊÍÏÓÔÕÖÚÇÑ"

CONNECTORS = frozenset({"DA", "DE", "DO", "DAS", "DOS", "E", "D"})

# Palavras impressas nos documentos; nunca fazem parte de um nome
DOCUMENT_WORDS = frozenset({
    "REPUBLICA", "FEDERATIVA", "BRASIL", "ESTADO", "GOVERNO", "MINISTERIO",
    "SECRETARIA", "SEGURANCA", "PUBLICA", "INSTITUTO", "IDENTIFICACAO",
    "CARTEIRA", "IDENTIDADE", "NACIONAL", "HABILITACAO", "PERMISSAO",
    "REGISTRO", "GERAL", "DOCUMENTO", "VALIDA", "TODO", "TERRITORIO",
    "NOME", "FILIACAO", "NATURALIDADE", "NASCIMENTO", "DATA", "EXPEDICAO",
    "EMISSAO", "ASSINATURA", "TITULAR", "DIRETOR", "DIRETORA", "CERTIDAO",
    "CPF", "RG", "CNH", "CNPJ", "CRM", "ORGAO", "EMISSOR", "CATEGORIA",
    "VALIDADE", "RECEITA", "FEDERAL", "CADASTRO", "PESSOA", "FISICA",
    "JURIDICA", "CONSELHO", "REGIONAL", "MEDICINA", "MEDICO", "DIPLOMA",
    "UNIVERSIDADE", "FACULDADE", "CURSO", "GRAU", "BACHAREL", "LICENCIADO",
    "CARTORIO", "OFICIAL", "LIVRO", "FOLHA", "TERMO", "MATRICULA",
    "ENDERECO", "RUA", "AVENIDA", "BAIRRO", "CIDADE", "CEP", "TOTAL",
    "VALOR", "VENCIMENTO", "CONTA", "FATURA", "CLIENTE", "LOCAL", "DETRAN",
    "SITUACAO", "CADASTRAL", "REGULAR", "INSCRICAO", "COMPROVANTE", "PAI", "MAE",
    "OBSERVACOES", "DOADOR", "ORGAOS", "TRANSITO", "DEPARTAMENTO", "CONTRIBUINTE",
    "EMPRESA", "SOCIAL", "RAZAO", "FANTASIA", "INSTITUICAO", "CONCLUSAO", "ESPECIALIDADE",
    "CONDUTOR", "NASCIDO", "NASCIDA", "LAVRADO", "DESTINATARIO", "REFERENCIA", "CERTIFICO", "QUE",
})

# Rótulos que encerram um nome rotulado ("NOME: FULANO DE TAL  CPF ...")
NAME_STOP_LABELS = (
    "FILIA[CÇ][AÃ]O", "FILHO", "FILHA", "PAI", "M[AÃ]E", "NASC\\w*", "DATA", "DN",
    "RG", "CPF", "CNH", "CNPJ", "CRM", "DOC(?:UMENTO)?", "NATURALIDADE", "REGISTRO", "CAT(?:EGORIA)?",
    "[OÓ]RG[AÃ]O", "EMISSOR", "ASSINATURA", "ESPEC(?:IALIDADES?)?", "END(?:ERE[CÇ]O)?", "RUA", "AV",
    "CEP", "CURSO", "GRAU", "VALIDADE", "IDENTIDADE", "HABILITA[CÇ][AÃ]O", "SEXO",
    "INSCRI[CÇ][AÃ]O", "SITUA[CÇ][AÃ]O", "T[IÍ]TULO", "UF", "EXPEDI[CÇ][AÃ]O",
    "EMISS[AÃ]O", "N[UÚ]MERO", "LIVRO", "FOLHA", "TERMO", "CERTID[AÃ]O", "PERMISS[AÃ]O", "NACIONALIDADE",
)

_VALID_NAME_RE = re.compile(rf"^[{NAME_CHARS}a-záàâãéèêíïóôõöúçñ' \.\-]+$")
_WORD_RE = re.compile(r"[^\s]+")


def labeled_name_pattern(labels: tuple[str, ...] | list[str]) -> re.Pattern:
    """
    Regex "RÓTULO: NOME" que para no fim da linha ou no próximo rótulo.

    Funciona tanto no texto bruto (multi-linha) quanto no normalizado
    (linha única, sem pontuação).
    """
    label = "|".join(labels)
    stops = "|".join(NAME_STOP_LABELS)
    return re.compile(
        rf"\b(?:{label})\b\s*[:\-]?\s*"
        rf"([{NAME_CHARS}][{NAME_CHARS}' ]{{3,80}}?)"
        rf"(?=[ \t]*(?:\r?\n|$)|\s+(?:{stops})\b)",
        re.IGNORECASE,
    )


def _key(word: str) -> str:
    return strip_accents(word).upper().strip(".'-")


def _significant(words: list[str]) -> list[str]:
    return [w for w in words if _key(w) not in CONNECTORS]


def clean_name(value: str) -> str:
    """Remove ruído das bordas, colapsa espaços e coloca em maiúsculas."""
    value = collapse_spaces(value)
    value = value.strip(" .,:;-'")
    return value.upper()


def validate_name(value: str) -> bool:
    """Nome completo plausível (>= 2 palavras, sem dígitos nem palavras de documento)."""
    if not value:
        return False
    name = collapse_spaces(value)
    if not 5 <= len(name) <= 100:
        return False
    if any(ch.isdigit() for ch in name):
        return False
    if not _VALID_NAME_RE.match(name):
        return False

    words = name.split(" ")
    significant = _significant(words)
    if len(significant) < 2:
        return False
    if any(_key(w) in DOCUMENT_WORDS for w in significant):
        return False
    return all(len(_key(w)) >= 2 for w in significant)


def _runs(line: str, accept) -> list[list[str]]:
    """Sequências contíguas de palavras aceitas por `accept`."""
    runs: list[list[str]] = []
    current: list[str] = []
    for word in _WORD_RE.findall(line):
        if accept(word):
            current.append(word)
        else:
            if current:
                runs.append(current)
            current = []
    if current:
        runs.append(current)
    return runs


def _trim_connectors(words: list[str]) -> list[str]:
    start, end = 0, len(words)
    while start < end and _key(words[start]) in CONNECTORS:
        start += 1
    while end > start and _key(words[end - 1]) in CONNECTORS:
        end -= 1
    return words[start:end]


def _first_plausible(text: str, accept, max_words: int = 8) -> str | None:
    for line in (text or "").splitlines():
        for run in _runs(line, accept):
            words = _trim_connectors(run)
            if len(words) > max_words:
                continue
            candidate = " ".join(words)
            if validate_name(candidate):
                return clean_name(candidate)
    return None


def _is_uppercase_name_word(word: str) -> bool:
    key = _key(word)
    if not key.isalpha() or key in DOCUMENT_WORDS:
        return False
    return word.isupper()


def _is_capitalized_name_word(word: str) -> bool:
    key = _key(word)
    if not key.isalpha() or key in DOCUMENT_WORDS:
        return False
    if key in CONNECTORS:
        return True
    return word[0].isupper() and (word[1:].islower() or word[1:].isupper())


def extract_uppercase_name(text: str) -> str | None:
    """Primeira sequência de palavras TODAS EM MAIÚSCULAS que forma um nome."""
    return _first_plausible(text, _is_uppercase_name_word)


def extract_name(text: str) -> str | None:
    """Primeira sequência de palavras Capitalizadas que forma um nome."""
    return _first_plausible(text, _is_capitalized_name_word)
