"""
Entity: Document Type

Tipos de documento suportados pelo motor de extração.
Modelo puro, sem dependência de framework.
"""

from enum import Enum


class DocumentType(str, Enum):
    RG = "rg"
    CNH = "cnh"
    CPF = "cpf"
    CRM = "crm"
    CNPJ = "cnpj"
    DIPLOMA = "diploma"
    CERTIDAO = "certidao"
    COMPROVANTE_ENDERECO = "comprovante_endereco"

    @classmethod
    def from_tag(cls, tag: str | None) -> "DocumentType | None":
        """Converte a tag recebida na requisição (case-insensitive)."""
        if not tag:
            return None
        try:
            return cls(tag.strip().lower())
        except ValueError:
            return None
