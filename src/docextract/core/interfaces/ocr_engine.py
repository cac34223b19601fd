"""
Contract: OCR Engine

Converte a imagem de um documento em texto bruto.
Qualquer engine (Google Cloud Vision, PaddleOCR, API externa)
deve implementar este contrato. A engine NÃO extrai campos;
isso é responsabilidade dos document extractors.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class OCRConfigurationError(Exception):
    """Engine sem credenciais ou configuração: fatal, nenhuma extração é feita."""


class OCREngineError(Exception):
    """Falha de transporte ou da engine numa passada de OCR."""


@dataclass
class OCRText:
    """Texto reconhecido numa passada de OCR."""
    raw_text: str                 # texto bruto completo
    confidence: float             # confiança da própria engine (0-100)
    engine: str = ""              # identificação da engine usada
    details: dict = field(default_factory=dict)

    @property
    def has_text(self) -> bool:
        return bool(self.raw_text and self.raw_text.strip())


class IOCREngine(ABC):
    """
    Port: OCR Engine

    Recebe os bytes de uma imagem (já rotacionada pelo chamador)
    e devolve o texto reconhecido.
    """

    name: str = ""

    @abstractmethod
    def recognize(self, image_bytes: bytes) -> OCRText:
        """
        Reconhece o texto de uma imagem.

        Args:
            image_bytes: Imagem em bytes.

        Returns:
            OCRText com texto bruto e confiança da engine.

        Raises:
            OCREngineError: chamada falhou ou retornou payload de erro.
        """
        ...
