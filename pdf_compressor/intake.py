"""
intake.py

Validação de entrada: só aceita `.pdf` (qualquer caixa) até MAX_UPLOAD_BYTES.
"""

from __future__ import annotations

import re

from .engine_config import MAX_UPLOAD_BYTES, MIB
from .errors import IntakeError

_PDF_SUFFIX = re.compile(r"\.pdf$", re.IGNORECASE)


def is_pdf_name(filename: str | None) -> bool:
    return bool(filename) and bool(_PDF_SUFFIX.search(filename or ""))


def validate_upload(filename: str | None, size: int, max_bytes: int = MAX_UPLOAD_BYTES) -> None:
    """Levanta IntakeError com a mensagem para o usuário se o arquivo for recusado."""
    if not is_pdf_name(filename):
        raise IntakeError("Please select a PDF file")
    if size < 0:
        raise IntakeError("Error loading PDF: invalid file size")
    if size > max_bytes:
        raise IntakeError(f"File size exceeds the {max_bytes // MIB}MB limit")


def output_filename(filename: str) -> str:
    """'Relatorio.PDF' -> 'Relatorio_compressed.pdf'"""
    name = (filename or "").strip() or "document.pdf"
    stem = _PDF_SUFFIX.sub("", name)
    return f"{stem}_compressed.pdf"
