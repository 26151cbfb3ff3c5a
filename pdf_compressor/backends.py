"""
backends.py

Colaboradores externos do motor, vistos como interfaces:
- StructuralOptimizer: load(bytes) → documento; save(documento, flags) → bytes
- PageRenderer: open(bytes) → documento; render(documento, página, escala) → PIL.Image

As implementações padrão usam PyMuPDF. Testes podem trocar por fakes que
simulam sucesso, saída maior ou falha.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import fitz  # PyMuPDF
from PIL import Image

log = logging.getLogger(__name__)


class StructuralOptimizer(Protocol):
    def load(self, data: bytes, ignore_encryption: bool = True) -> Any: ...

    def page_count(self, doc: Any) -> int: ...

    def save(self, doc: Any, use_object_streams: bool = True,
             add_default_page: bool = False) -> bytes: ...

    def close(self, doc: Any) -> None: ...


class PageRenderer(Protocol):
    def open(self, data: bytes) -> Any: ...

    def page_count(self, doc: Any) -> int: ...

    def render(self, doc: Any, page_index: int, scale: float) -> Image.Image: ...

    def close(self, doc: Any) -> None: ...


class FitzOptimizer:
    """Reserializa PDFs com PyMuPDF (garbage collection + deflate + object streams)."""

    def __init__(self, garbage: int = 4) -> None:
        self.garbage = garbage

    def load(self, data: bytes, ignore_encryption: bool = True) -> fitz.Document:
        doc = fitz.open(stream=data, filetype="pdf")
        if doc.needs_pass:
            # criptografia só com senha de dono abre com senha vazia
            if not ignore_encryption or not doc.authenticate(""):
                doc.close()
                raise ValueError("PDF is password protected")
        return doc

    def page_count(self, doc: fitz.Document) -> int:
        return doc.page_count

    def save(self, doc: fitz.Document, use_object_streams: bool = True,
             add_default_page: bool = False) -> bytes:
        if add_default_page and doc.page_count == 0:
            doc.new_page()
        return doc.tobytes(
            garbage=self.garbage,
            deflate=True,
            use_objstms=1 if use_object_streams else 0,
            encryption=fitz.PDF_ENCRYPT_KEEP,
        )  # pyright: ignore[reportArgumentType]

    def close(self, doc: fitz.Document) -> None:
        doc.close()


class FitzRenderer:
    """Renderiza páginas em RGB (sem alpha) com antialiasing máximo."""

    AA_LEVEL = 8

    def open(self, data: bytes) -> fitz.Document:
        return fitz.open(stream=data, filetype="pdf")

    def page_count(self, doc: fitz.Document) -> int:
        return doc.page_count

    def render(self, doc: fitz.Document, page_index: int, scale: float) -> Image.Image:
        fitz.TOOLS.set_aa_level(self.AA_LEVEL)
        page: Any = doc.load_page(page_index)
        mat = fitz.Matrix(scale, scale)
        pix = page.get_pixmap(matrix=mat, alpha=False)  # pyright: ignore[reportAttributeAccessIssue]
        return Image.frombytes("RGB", (pix.width, pix.height), pix.samples)

    def close(self, doc: fitz.Document) -> None:
        doc.close()
