import pytest

from docextract.core.scoring.confidence import ConfidenceScorer


@pytest.fixture
def scorer():
    return ConfidenceScorer()


def test_empty_extraction_scores_zero(scorer):
    assert scorer.score({}, None, 1000) == 0
    assert scorer.score({}, ["nome", "rg"], 0) == 0


@pytest.mark.parametrize("length, multiplier", [
    (0, 0.3),
    (49, 0.3),
    (50, 0.6),
    (149, 0.6),
    (150, 0.8),
    (299, 0.8),
    (300, 1.0),
    (5000, 1.0),
])
def test_text_multiplier_boundaries(length, multiplier):
    assert ConfidenceScorer.text_multiplier(length) == multiplier


def test_short_text_is_penalized(scorer):
    data = {"bairro": "CENTRO", "cidade": "RECIFE"}
    assert scorer.score(data, None, 49) == 12
    assert scorer.score(data, None, 300) == 40


def test_rounds_half_up(scorer):
    assert scorer.score({"bairro": "CENTRO"}, ["a", "b", "c", "d", "e", "f", "g", "h"], 300) == 13


def test_critical_bonus_is_capped(scorer):
    data = {
        "nome": "MARIA DA SILVA",
        "cpf": "52998224725",
        "rg": "123456789",
        "cnpj": "11222333000181",
        "crm": "123456",
    }
    assert scorer.critical_bonus(data) == 20
    assert scorer.score(data, None, 10) == 50


def test_score_is_clamped_to_100(scorer):
    data = {"nome": "MARIA DA SILVA", "rg": "123456789", "cpf": "52998224725"}
    assert scorer.score(data, ["nome", "rg", "cpf"], 1000) == 100


def test_more_fields_never_lower_the_score(scorer):
    data = {}
    previous = scorer.score(data, None, 200)
    for name in ("bairro", "cidade", "estado", "cep"):
        data[name] = "X"
        current = scorer.score(data, None, 200)
        assert current >= previous
        previous = current


def test_blank_values_are_not_counted(scorer):
    assert scorer.score({"bairro": "   ", "cidade": "RECIFE"}, None, 300) == 20
    assert scorer.critical_bonus({"nome": " "}) == 0
