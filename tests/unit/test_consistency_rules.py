from datetime import date

import pytest

from docextract.infrastructure.rules.consistency_rules import ExtractionConsistencyRules

VALID_RG = {
    "nome": "MARIA DA SILVA SANTOS",
    "rg": "123456789",
    "cpf": "52998224725",
    "data_nascimento": "10/05/1985",
    "data_emissao": "20/11/2021",
}


@pytest.fixture
def rules():
    return ExtractionConsistencyRules(today=date(2024, 6, 1))


def rule_ids(result):
    return [v.rule_id for v in result.violations]


def test_consistent_document_passes_everything(rules):
    result = rules.apply(VALID_RG, doc_type="rg")

    assert result.violations == []
    assert result.rules_total == 6
    assert result.rules_passed == 6
    assert result.risk_score == 0.0
    assert result.risk_level == "LOW"
    assert result.rules_version == "1.0.0"


def test_cpf_checksum(rules):
    result = rules.apply({**VALID_RG, "cpf": "52998224724"})

    assert rule_ids(result) == ["CPF_CHECKSUM"]
    assert result.risk_score == 0.5
    assert result.risk_level == "HIGH"


def test_cnpj_checksum(rules):
    assert rule_ids(rules.apply({"cnpj": "11.222.333/0001-82"})) == ["CNPJ_CHECKSUM"]
    assert rules.apply({"cnpj": "11222333000181"}).violations == []


def test_emission_before_birth_is_critical(rules):
    result = rules.apply({**VALID_RG, "data_emissao": "01/01/1980"})

    assert rule_ids(result) == ["EMISSION_BEFORE_BIRTH"]
    assert result.violations[0].severity == "CRITICAL"
    assert result.risk_level == "CRITICAL"


def test_expiry_before_emission(rules):
    result = rules.apply({"data_emissao": "10/01/2020", "data_validade": "10/01/2019"})

    assert rule_ids(result) == ["EXPIRY_BEFORE_EMISSION"]
    assert result.risk_level == "MEDIUM"


def test_birth_in_the_future_is_implausible():
    rules = ExtractionConsistencyRules(today=date(2000, 1, 1))
    result = rules.apply({"data_nascimento": "10/05/2010"})
    assert rule_ids(result) == ["IMPLAUSIBLE_AGE"]


def test_name_with_digits(rules):
    result = rules.apply({"nome": "MAR1A SILVA"})
    assert rule_ids(result) == ["INVALID_NAME_CHARS"]
    assert rules.apply({"nome": "José D'Ávila"}).violations == []


def test_risk_score_is_capped(rules):
    result = rules.apply({**VALID_RG, "cpf": "52998224724", "data_emissao": "01/01/1980"})

    assert result.rules_failed == 2
    assert result.rules_passed == 4
    assert result.risk_score == 1.0
    assert result.risk_level == "CRITICAL"


def test_missing_or_unparseable_fields_are_skipped(rules):
    result = rules.apply({"data_nascimento": "sem data", "data_emissao": ""})
    assert result.violations == []


def test_custom_rules_version():
    assert ExtractionConsistencyRules(rules_version="2.0.0").apply({}).rules_version == "2.0.0"
