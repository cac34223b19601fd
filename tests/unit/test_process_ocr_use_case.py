"""
Controlador de orientação e pipeline completo com ports fake.
"""

import pytest

from docextract.core.entities.extraction import OrientationAttempt
from docextract.core.interfaces.ocr_engine import OCRConfigurationError, OCREngineError
from docextract.core.use_cases.process_ocr import NO_TEXT_MESSAGE
from docextract.infrastructure.rules.consistency_rules import ExtractionConsistencyRules

from conftest import RG_TEXT, FakeImageLoader

SHORT_TEXT = "NOME: MARIA DA SILVA SANTOS"


# ─── Pipeline ────────────────────────────────────────────

def test_upright_document_needs_a_single_pass(make_use_case):
    use_case, engine = make_use_case({0: RG_TEXT})
    result = use_case.execute("https://docs.example/rg.png", "rg")

    assert engine.calls == [0]
    assert result.success
    assert result.tested_orientations == [0]
    assert result.data["rg"] == "123456789"
    assert result.confidence == 100
    assert result.document_type == "rg"


def test_sideways_document_found_at_90(make_use_case):
    use_case, engine = make_use_case({0: "", 90: RG_TEXT})
    result = use_case.execute("https://docs.example/rg.png", "rg")

    assert engine.calls == [0, 90]
    assert result.tested_orientations == [0, 90]
    assert result.success
    assert result.message.startswith("OCR processado com sucesso (orientação 90°)")
    assert result.attempts[1].ocr_confidence == 92.5


def test_low_confidence_everywhere_tries_all_four(make_use_case):
    use_case, engine = make_use_case({o: SHORT_TEXT for o in (0, 90, 180, 270)})
    result = use_case.execute("https://docs.example/rg.png", "rg")

    assert engine.calls == [0, 90, 270, 180]
    assert result.tested_orientations == [0, 90, 270, 180]
    assert not result.success
    assert result.confidence == 11
    assert result.message.startswith("Confiança baixa (11%) na melhor orientação (0°)")
    assert result.data == {"nome": "MARIA DA SILVA SANTOS"}


def test_all_passes_failing_reports_no_text(make_use_case):
    use_case, _ = make_use_case({o: OCREngineError("boom") for o in (0, 90, 180, 270)})
    result = use_case.execute("https://docs.example/rg.png", "rg")

    assert not result.success
    assert result.message == NO_TEXT_MESSAGE
    assert result.error == "boom"
    assert result.data == {}
    assert all(a.error == "boom" for a in result.attempts)


def test_failed_pass_does_not_stop_the_retry(make_use_case):
    use_case, _ = make_use_case({0: OCREngineError("timeout"), 90: RG_TEXT})
    result = use_case.execute("https://docs.example/rg.png", "rg")

    assert result.success
    assert result.tested_orientations == [0, 90]
    assert result.error is None


def test_unexpected_engine_error_counts_as_a_failed_pass(make_use_case):
    use_case, engine = make_use_case({0: KeyError("textAnnotations"), 90: RG_TEXT})
    result = use_case.execute("https://docs.example/rg.png", "rg")

    assert engine.calls == [0, 90]
    assert result.success
    assert result.attempts[0].confidence == 0
    assert "textAnnotations" in result.attempts[0].error
    assert result.data["rg"] == "123456789"


def test_configuration_error_is_not_retried(make_use_case):
    use_case, engine = make_use_case({0: OCRConfigurationError("sem chave")})
    with pytest.raises(OCRConfigurationError):
        use_case.execute("https://docs.example/rg.png", "rg")
    assert engine.calls == [0]


def test_unsupported_document_type_skips_download_and_ocr(make_use_case):
    loader = FakeImageLoader()
    use_case, engine = make_use_case({0: RG_TEXT}, loader=loader)
    result = use_case.execute("https://docs.example/p.png", "passaporte")

    assert not result.success
    assert "passaporte" in result.message
    assert loader.calls == []
    assert engine.calls == []
    assert result.tested_orientations == []


def test_download_error_is_reported(make_use_case):
    use_case, engine = make_use_case({0: RG_TEXT}, loader=FakeImageLoader(error="HTTP 404"))
    result = use_case.execute("https://docs.example/missing.png", "rg")

    assert not result.success
    assert result.message.startswith("Erro ao baixar a imagem do documento")
    assert result.error == "HTTP 404"
    assert engine.calls == []


def test_image_is_downloaded_once(make_use_case):
    loader = FakeImageLoader()
    use_case, _ = make_use_case({o: SHORT_TEXT for o in (0, 90, 180, 270)}, loader=loader)
    use_case.execute("https://docs.example/rg.png", "rg")
    assert loader.calls == ["https://docs.example/rg.png"]


def test_expected_fields_restrict_the_result(make_use_case):
    use_case, _ = make_use_case({0: RG_TEXT})
    result = use_case.execute("https://docs.example/rg.png", "RG", ["rg"])

    assert result.data == {"rg": "123456789"}
    assert result.confidence == 100


def test_rules_are_attached_without_touching_data(make_use_case):
    use_case, _ = make_use_case({0: RG_TEXT}, rules_engine=ExtractionConsistencyRules())
    result = use_case.execute("https://docs.example/rg.png", "rg")

    assert result.rules is not None
    assert result.rules.violations == []
    assert result.rules.risk_level == "LOW"
    assert result.data["cpf"] == "52998224725"


def test_no_rules_without_data(make_use_case):
    use_case, _ = make_use_case({}, rules_engine=ExtractionConsistencyRules())
    result = use_case.execute("https://docs.example/rg.png", "rg")
    assert result.rules is None


# ─── Máquina de orientação ───────────────────────────────

def scripted_attempts(scores: dict):
    """orientation -> (confidence, número de campos)."""
    calls = []

    def attempt_at(orientation):
        calls.append(orientation)
        confidence, fields = scores[orientation]
        data = {f"campo{i}": "x" for i in range(fields)}
        return OrientationAttempt(orientation=orientation, confidence=confidence, data=data, text_length=10)

    return attempt_at, calls


@pytest.mark.parametrize("scores, expected_calls, expected_best", [
    ({0: (85, 3)}, [0], 0),
    ({0: (79, 3), 90: (90, 4)}, [0, 90], 90),
    ({0: (40, 1), 90: (90, 4)}, [0, 90], 90),
    ({0: (60, 2), 90: (75, 3), 270: (72, 3)}, [0, 90, 270], 90),
    ({0: (60, 2), 90: (50, 1), 270: (85, 3)}, [0, 90, 270], 270),
    ({0: (10, 1), 90: (10, 1), 270: (10, 1), 180: (10, 1)}, [0, 90, 270, 180], 0),
    ({0: (69, 1), 90: (20, 1), 270: (30, 1), 180: (10, 1)}, [0, 90, 270, 180], 0),
])
def test_orientation_sequence(make_use_case, scores, expected_calls, expected_best):
    use_case, _ = make_use_case({})
    attempt_at, calls = scripted_attempts(scores)
    attempts = use_case.run_orientations(attempt_at)

    assert calls == expected_calls
    assert [a.orientation for a in attempts] == expected_calls
    assert use_case.select_best(attempts).orientation == expected_best


def test_thresholds_are_configurable(make_use_case):
    use_case, _ = make_use_case({}, retry_below_confidence=50)
    attempt_at, calls = scripted_attempts({0: (60, 2)})
    use_case.run_orientations(attempt_at)
    assert calls == [0]


def test_best_attempt_prefers_more_fields_over_confidence(make_use_case):
    use_case, _ = make_use_case({})
    few = OrientationAttempt(orientation=0, confidence=95, data={"a": "1"})
    many = OrientationAttempt(orientation=90, confidence=60, data={"a": "1", "b": "2"})
    assert use_case.select_best([few, many]) is many


def test_best_attempt_ties(make_use_case):
    use_case, _ = make_use_case({})
    first = OrientationAttempt(orientation=0, confidence=70, data={"a": "1"})
    second = OrientationAttempt(orientation=90, confidence=70, data={"a": "1"})
    longer = OrientationAttempt(orientation=270, confidence=70, data={"a": "1234"})

    assert use_case.select_best([first, second]) is first
    assert use_case.select_best([first, second, longer]) is longer
