import pytest

from docextract.infrastructure.rules.discrepancy_checker import (
    DiscrepancyChecker,
    FieldMapping,
    get_nested_value,
    severity_for,
    similarity,
)

DECLARED = {
    "dados_pessoais": {
        "nome": "José da Silva",
        "cpf": "529.982.247-25",
        "rg": "12345678-0",
    },
    "medico": {"nome": "ROBERTO CARLOS"},
}


@pytest.fixture
def checker():
    return DiscrepancyChecker()


def test_equal_after_normalization_is_not_a_discrepancy(checker):
    ocr = {"nome": "JOSE DA SILVA", "cpf": "52998224725"}
    mappings = [
        FieldMapping("nome", "dados_pessoais.nome"),
        FieldMapping("cpf", "dados_pessoais.cpf"),
    ]
    assert checker.compare(ocr, DECLARED, mappings) == []


def test_single_digit_difference_is_low(checker):
    result = checker.compare({"rg": "123456789"}, DECLARED, [FieldMapping("rg", "dados_pessoais.rg")])

    assert len(result) == 1
    discrepancy = result[0]
    assert discrepancy.field == "rg"
    assert discrepancy.expected == "12345678-0"
    assert discrepancy.found == "123456789"
    assert discrepancy.similarity == 88.89
    assert discrepancy.severity == "LOW"
    assert discrepancy.normalized == {"expected": "123456780", "found": "123456789"}


def test_different_names_are_critical(checker):
    result = checker.compare({"nome": "ANA"}, DECLARED, [FieldMapping("nome", "medico.nome")])
    assert result[0].severity == "CRITICAL"


def test_missing_values_are_skipped(checker):
    mappings = [
        FieldMapping("nome", "dados_pessoais.nome"),
        FieldMapping("cnpj", "empresa.cnpj"),
    ]
    assert checker.compare({"cnpj": "11222333000181"}, DECLARED, mappings) == []


@pytest.mark.parametrize("score, severity", [
    (100.0, "LOW"),
    (80.01, "LOW"),
    (80.0, "MEDIUM"),
    (60.01, "MEDIUM"),
    (60.0, "CRITICAL"),
    (0.0, "CRITICAL"),
])
def test_severity_thresholds(score, severity):
    assert severity_for(score) == severity


def test_similarity():
    assert similarity("", "") == 100.0
    assert similarity("abc", "abc") == 100.0
    assert similarity("abc", "") == 0.0
    assert similarity("kitten", "sitting") == pytest.approx(4 / 7 * 100)


def test_get_nested_value():
    assert get_nested_value(DECLARED, "dados_pessoais.cpf") == "529.982.247-25"
    assert get_nested_value(DECLARED, "dados_pessoais.cpf.digito") is None
    assert get_nested_value(DECLARED, "inexistente.campo") is None
