"""
FastAPI Application — Document Field Extraction.

Architecture:
  - Google Cloud Vision (padrão) ou PaddleOCR local para o texto bruto
  - Extractors declarativos por tipo de documento (estratégias ranqueadas)
  - Retry por orientação (0°, 90°, 270°, 180°)
  - Regras de consistência + comparação com dados declarados
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docextract.api.routes.process_ocr import get_registry, router as ocr_router
from docextract.config.settings import get_settings
from docextract.core.interfaces.ocr_engine import OCRConfigurationError

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="DocExtract",
    description="Rule-based field extraction for Brazilian documents with orientation-aware OCR retries.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ocr_router, prefix="/api/v1", tags=["OCR"])


@app.exception_handler(OCRConfigurationError)
async def ocr_configuration_error_handler(request: Request, exc: OCRConfigurationError):
    logger.error(f"OCR engine not configured: {exc}")
    return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})


# ── Health ──
@app.get("/health")
async def health():
    return {
        "status": "ok",
        "version": "1.0.0",
        "ocr_engine": get_settings().ocr_engine,
        "document_types": get_registry().supported_types(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("docextract.api.main:app", host=settings.api_host, port=settings.api_port, reload=settings.debug)
