import base64

import pytest
import requests

from docextract.core.interfaces.ocr_engine import OCRConfigurationError, OCREngineError
from docextract.infrastructure.ocr import google_vision_engine
from docextract.infrastructure.ocr.google_vision_engine import FALLBACK_CONFIDENCE, GoogleVisionOCREngine


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


@pytest.fixture
def engine():
    return GoogleVisionOCREngine(api_key="test-key", language_hints=["pt"], timeout=5)


@pytest.fixture
def fake_post(monkeypatch):
    """Substitui requests.post e guarda os argumentos da última chamada."""
    state = {"response": FakeResponse(payload={"responses": [{}]}), "calls": []}

    def _post(url, **kwargs):
        state["calls"].append((url, kwargs))
        if isinstance(state["response"], Exception):
            raise state["response"]
        return state["response"]

    monkeypatch.setattr(google_vision_engine.requests, "post", _post)
    return state


def test_missing_api_key_is_a_configuration_error():
    with pytest.raises(OCRConfigurationError):
        GoogleVisionOCREngine(api_key="")


def test_request_body(engine, fake_post):
    engine.recognize(b"\x89PNG-bytes")

    url, kwargs = fake_post["calls"][0]
    assert url == google_vision_engine.DEFAULT_ENDPOINT
    assert kwargs["params"] == {"key": "test-key"}
    assert kwargs["timeout"] == 5

    request = kwargs["json"]["requests"][0]
    assert request["features"] == [{"type": "DOCUMENT_TEXT_DETECTION", "maxResults": 1}]
    assert request["imageContext"] == {"languageHints": ["pt"]}
    assert base64.b64decode(request["image"]["content"]) == b"\x89PNG-bytes"


def test_full_text_and_word_confidence(engine, fake_post):
    fake_post["response"] = FakeResponse(payload={"responses": [{"textAnnotations": [
        {"description": "NOME: MARIA\nRG: 123"},
        {"description": "NOME", "confidence": 0.9},
        {"description": "MARIA", "confidence": 0.8},
    ]}]})
    ocr = engine.recognize(b"img")

    assert ocr.raw_text == "NOME: MARIA\nRG: 123"
    assert ocr.confidence == 85.0
    assert ocr.engine == "google_vision"
    assert ocr.details == {"words": 2}


def test_no_annotations_is_empty_text(engine, fake_post):
    ocr = engine.recognize(b"img")
    assert ocr.raw_text == ""
    assert not ocr.has_text


def test_word_confidence_fallback():
    assert GoogleVisionOCREngine.word_confidence([]) == FALLBACK_CONFIDENCE
    assert GoogleVisionOCREngine.word_confidence([{"description": "x"}]) == FALLBACK_CONFIDENCE


def test_http_error_status(engine, fake_post):
    fake_post["response"] = FakeResponse(status_code=403, text="API key not valid")
    with pytest.raises(OCREngineError, match="403"):
        engine.recognize(b"img")


def test_error_payload(engine, fake_post):
    fake_post["response"] = FakeResponse(payload={"responses": [{"error": {"message": "Bad image data."}}]})
    with pytest.raises(OCREngineError, match="Bad image data"):
        engine.recognize(b"img")


def test_invalid_json(engine, fake_post):
    fake_post["response"] = FakeResponse(payload=None)
    with pytest.raises(OCREngineError):
        engine.recognize(b"img")


def test_transport_error(engine, fake_post):
    fake_post["response"] = requests.ConnectionError("connection refused")
    with pytest.raises(OCREngineError, match="indisponível"):
        engine.recognize(b"img")


@pytest.mark.parametrize("payload", [
    {"error": "quota exceeded"},
    ["not", "a", "dict"],
    {"responses": "garbage"},
    {"responses": [{"textAnnotations": [{"description": "TEXTO"}, {"confidence": "alta"}]}]},
])
def test_malformed_payload_is_an_engine_error(engine, payload):
    with pytest.raises(OCREngineError):
        engine.parse_response(payload)


def test_string_error_message_is_kept(engine):
    with pytest.raises(OCREngineError, match="quota exceeded"):
        engine.parse_response({"error": "quota exceeded"})
