import pytest

from docextract.core.entities.document import DocumentType
from docextract.infrastructure.extractors.registry import ExtractorRegistry, build_default_registry
from docextract.infrastructure.extractors.rg_extractor import RGExtractor


def test_default_registry_covers_every_document_type(registry):
    assert len(registry) == 8
    assert set(registry.supported_types()) == {t.value for t in DocumentType}


@pytest.mark.parametrize("tag", ["rg", "RG", " Cnh ", "comprovante_endereco"])
def test_lookup_is_case_insensitive(registry, tag):
    extractor = registry.get(tag)
    assert extractor is not None
    assert extractor.doc_type == tag.strip().lower()


@pytest.mark.parametrize("tag", ["passaporte", "", None, "rg2"])
def test_unknown_types_are_not_supported(registry, tag):
    assert registry.get(tag) is None
    assert not registry.is_supported(tag)


def test_duplicate_registration_is_rejected():
    with pytest.raises(ValueError):
        ExtractorRegistry([RGExtractor(), RGExtractor()])


def test_registry_is_read_only():
    registry = build_default_registry()
    with pytest.raises(TypeError):
        registry._extractors["rg"] = None


def test_extractors_declare_fields(registry):
    for doc_type in registry.supported_types():
        names = registry.get(doc_type).field_names
        assert names
        assert len(names) == len(set(names))
    assert registry.get("rg").field_names[:2] == ["nome", "rg"]
