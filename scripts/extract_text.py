"""
Roda um extractor sobre um arquivo de texto já reconhecido (sem OCR).

Uso:
    python scripts/extract_text.py rg amostras/rg.txt
    python scripts/extract_text.py cnh amostras/cnh.txt --fields nome,cnh --rules
"""
import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from docextract.core.scoring.confidence import ConfidenceScorer
from docextract.infrastructure.extractors.registry import build_default_registry
from docextract.infrastructure.parsing.text_normalizer import normalize
from docextract.infrastructure.rules.consistency_rules import ExtractionConsistencyRules


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Extrai campos de um texto de documento")
    parser.add_argument("document_type", help="rg, cnh, cpf, crm, cnpj, diploma, certidao, comprovante_endereco")
    parser.add_argument("text_file", type=Path, help="Arquivo com o texto bruto do OCR")
    parser.add_argument("--fields", default="", help="Campos esperados, separados por vírgula")
    parser.add_argument("--rules", action="store_true", help="Aplica as regras de consistência")
    parser.add_argument("--verbose", action="store_true", help="Log DEBUG de cada estratégia")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    registry = build_default_registry()
    extractor = registry.get(args.document_type)
    if extractor is None:
        print(f"ERROR: tipo não suportado: {args.document_type} (use {', '.join(registry.supported_types())})")
        return 2

    if not args.text_file.exists():
        print(f"ERROR: arquivo não encontrado: {args.text_file}")
        return 2

    raw_text = args.text_file.read_text(encoding="utf-8")
    expected = [f.strip() for f in args.fields.split(",") if f.strip()]

    data = extractor.extract(raw_text, normalize(raw_text), expected)
    output = {
        "documentType": extractor.doc_type,
        "data": data,
        "confidence": ConfidenceScorer().score(data, expected, len(raw_text)),
    }
    if args.rules:
        output["rules"] = asdict(ExtractionConsistencyRules().apply(data, doc_type=extractor.doc_type))

    print(json.dumps(output, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
