"""Exceções do motor."""

from __future__ import annotations


class PdfCompressorError(Exception):
    """Base para erros do motor."""


class IntakeError(PdfCompressorError):
    """Arquivo recusado na entrada; a mensagem é mostrada ao usuário."""


class NoDocumentError(PdfCompressorError):
    def __init__(self, message: str = "No PDF file loaded") -> None:
        super().__init__(message)


class RasterizeError(PdfCompressorError):
    """Falha no caminho rasterizar→JPEG→PDF (não tem fallback interno)."""
