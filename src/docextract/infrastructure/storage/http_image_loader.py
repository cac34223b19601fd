"""
Adapter: HTTP Image Loader

Baixa a imagem do documento a partir da URL recebida na requisição
(URL pública ou pré-assinada do storage).
"""

import logging

import requests

from docextract.core.interfaces.image_loader import IImageLoader, ImageLoadError

logger = logging.getLogger(__name__)


class HttpImageLoader(IImageLoader):
    """Download síncrono via requests."""

    def __init__(self, timeout: float = 30.0, session: requests.Session | None = None):
        self._timeout = timeout
        self._session = session or requests.Session()

    def download(self, url: str) -> bytes:
        if not url or not url.strip():
            raise ImageLoadError("URL do arquivo não informada")

        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ImageLoadError(f"Failed to fetch image: {e}") from e

        content = response.content
        if not content:
            raise ImageLoadError("Arquivo vazio")

        logger.debug(f"Downloaded {len(content)} bytes from {url}")
        return content
