"""
Endpoints HTTP com o use case montado sobre ports fake.
"""

import pytest
from fastapi.testclient import TestClient

from docextract.api.main import app
from docextract.api.routes.process_ocr import get_use_case
from docextract.core.interfaces.ocr_engine import OCRConfigurationError
from docextract.infrastructure.rules.consistency_rules import ExtractionConsistencyRules

from conftest import RG_TEXT

URL = "https://bucket.example/documentos/rg.png"


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def use_case_for(make_use_case):
    def _install(texts: dict):
        use_case, engine = make_use_case(texts, rules_engine=ExtractionConsistencyRules())
        app.dependency_overrides[get_use_case] = lambda: use_case
        return engine
    return _install


def test_process_ocr_success(client, use_case_for):
    use_case_for({0: RG_TEXT})
    response = client.post("/api/v1/process-ocr", json={
        "fileUrl": URL,
        "documentType": "rg",
        "expectedFields": ["nome", "rg", "data_nascimento"],
    })

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"] == {
        "nome": "MARIA DA SILVA SANTOS",
        "rg": "123456789",
        "data_nascimento": "10/05/1985",
    }
    assert body["confidence"] == 100
    assert body["testedOrientations"] == [0]
    assert body["attempts"][0]["fieldCount"] == 3
    assert body["riskLevel"] == "LOW"
    assert body["warnings"] == []
    assert "error" not in body


def test_non_list_expected_fields_means_no_filter(client, use_case_for):
    use_case_for({0: RG_TEXT})
    response = client.post("/api/v1/process-ocr", json={
        "fileUrl": URL,
        "documentType": "rg",
        "expectedFields": "nome",
    })

    assert response.status_code == 200
    assert len(response.json()["data"]) == 7


def test_consistency_warnings(client, use_case_for):
    use_case_for({0: RG_TEXT.replace("247-25", "247-24")})
    body = client.post("/api/v1/process-ocr", json={"fileUrl": URL, "documentType": "rg"}).json()

    assert body["success"] is True
    assert [w["ruleId"] for w in body["warnings"]] == ["CPF_CHECKSUM"]
    assert body["riskLevel"] == "HIGH"
    assert body["data"]["cpf"] == "52998224724"


def test_discrepancies_against_declared_data(client, use_case_for):
    use_case_for({0: RG_TEXT})
    body = client.post("/api/v1/process-ocr", json={
        "fileUrl": URL,
        "documentType": "rg",
        "declaredData": {"dadosPessoais": {"rg": "12345678-0", "nome": "Maria da Silva Santos"}},
        "fieldMappings": [
            {"ocrField": "rg", "contextField": "dadosPessoais.rg"},
            {"ocrField": "nome", "contextField": "dadosPessoais.nome"},
        ],
    }).json()

    assert body["discrepancies"] == [{
        "field": "rg",
        "expected": "12345678-0",
        "found": "123456789",
        "severity": "LOW",
        "similarity": 88.89,
    }]


def test_low_confidence_is_not_an_http_error(client, use_case_for):
    use_case_for({})
    response = client.post("/api/v1/process-ocr", json={"fileUrl": URL, "documentType": "rg"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["testedOrientations"] == [0, 90, 270, 180]


def test_unsupported_document_type(client, use_case_for):
    engine = use_case_for({0: RG_TEXT})
    body = client.post("/api/v1/process-ocr", json={"fileUrl": URL, "documentType": "passaporte"}).json()

    assert body["success"] is False
    assert engine.calls == []


def test_missing_file_url_is_rejected(client, use_case_for):
    use_case_for({0: RG_TEXT})
    response = client.post("/api/v1/process-ocr", json={"documentType": "rg"})
    assert response.status_code == 422


def test_unconfigured_engine_returns_500(client):
    def _unconfigured():
        raise OCRConfigurationError("Serviço de OCR não configurado.")

    app.dependency_overrides[get_use_case] = _unconfigured
    response = client.post("/api/v1/process-ocr", json={"fileUrl": URL, "documentType": "rg"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Serviço de OCR não configurado."}


def test_document_types(client):
    response = client.get("/api/v1/document-types")

    assert response.status_code == 200
    types = {item["documentType"]: item["fields"] for item in response.json()}
    assert len(types) == 8
    assert types["cnpj"][0] == "razao_social"
    assert "uf_crm" in types["crm"]


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert len(body["document_types"]) == 8
