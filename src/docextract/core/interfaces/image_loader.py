"""
Contract: Image Loader / Rotator

Busca a imagem original de um documento e gera variantes
rotacionadas para as passadas de OCR.
"""

from abc import ABC, abstractmethod

from docextract.core.interfaces.ocr_engine import OCREngineError


class ImageLoadError(OCREngineError):
    """A imagem de origem não pôde ser baixada."""


class IImageLoader(ABC):
    """Port: baixa a imagem referenciada por uma URL."""

    @abstractmethod
    def download(self, url: str) -> bytes:
        """
        Baixa um arquivo.

        Raises:
            ImageLoadError: URL inacessível ou resposta vazia.
        """
        ...


class IImageRotator(ABC):
    """Port: rotaciona uma imagem em múltiplos de 90°."""

    @abstractmethod
    def rotate(self, image_bytes: bytes, degrees: int) -> bytes:
        """
        Rotaciona a imagem no sentido horário.

        Raises:
            OCREngineError: imagem não decodificável.
        """
        ...
