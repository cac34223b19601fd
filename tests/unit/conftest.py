"""
Fixtures compartilhadas: textos de documentos e fakes dos ports
(loader, rotator e engine de OCR roteirizada por orientação).
"""

import pytest

from docextract.core.interfaces.image_loader import IImageLoader, IImageRotator, ImageLoadError
from docextract.core.interfaces.ocr_engine import IOCREngine, OCRText
from docextract.core.use_cases.process_ocr import ProcessOCRUseCase
from docextract.infrastructure.extractors.registry import build_default_registry
from docextract.infrastructure.parsing.text_normalizer import normalize

PADDING = "VALIDA EM TODO O TERRITORIO NACIONAL\n" * 10

RG_TEXT = (
    "REPUBLICA FEDERATIVA DO BRASIL\n"
    "CARTEIRA DE IDENTIDADE\n"
    "NOME: MARIA DA SILVA SANTOS\n"
    "RG: 12.345.678-9\n"
    "DATA DE NASCIMENTO: 10/05/1985\n"
    "ÓRGÃO EMISSOR: SSP/SP\n"
    "DATA DE EXPEDIÇÃO: 20/11/2021\n"
    "NATURALIDADE: SAO PAULO - SP\n"
    "CPF: 529.982.247-25\n"
) + PADDING


class FakeImageLoader(IImageLoader):
    def __init__(self, content: bytes = b"image-bytes", error: str | None = None):
        self.content = content
        self.error = error
        self.calls: list[str] = []

    def download(self, url: str) -> bytes:
        self.calls.append(url)
        if self.error:
            raise ImageLoadError(self.error)
        return self.content


class TaggingRotator(IImageRotator):
    """Troca a imagem pela orientação pedida, para a engine fake saber a passada."""

    def rotate(self, image_bytes: bytes, degrees: int) -> bytes:
        return str(degrees).encode()


class ScriptedOCREngine(IOCREngine):
    """Devolve um texto (ou levanta uma exceção) por orientação."""

    name = "scripted"

    def __init__(self, texts: dict):
        self.texts = texts
        self.calls: list[int] = []

    def recognize(self, image_bytes: bytes) -> OCRText:
        orientation = int(image_bytes.decode())
        self.calls.append(orientation)
        value = self.texts.get(orientation, "")
        if isinstance(value, Exception):
            raise value
        return OCRText(raw_text=value, confidence=92.5, engine=self.name)


@pytest.fixture(scope="session")
def registry():
    return build_default_registry()


@pytest.fixture
def rg_text() -> str:
    return RG_TEXT


@pytest.fixture
def make_use_case(registry):
    def _make(texts: dict, loader: IImageLoader | None = None, **kwargs):
        engine = ScriptedOCREngine(texts)
        use_case = ProcessOCRUseCase(
            ocr_engine=engine,
            image_loader=loader or FakeImageLoader(),
            image_rotator=TaggingRotator(),
            registry=registry,
            normalizer=normalize,
            **kwargs,
        )
        return use_case, engine
    return _make
