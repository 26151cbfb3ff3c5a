"""
pdf_ops.py

Motor de processamento puro (sem GUI):
- Compressão estrutural (object streams) com guard-rail: se não ficar menor, devolve o original
- Caminho alternativo: rasterizar páginas → JPEG → novo PDF
- Re-encode de imagem avulsa em JPEG dentro de uma caixa máxima

Todas as funções trabalham com bytes e metadados simples.
"""


from __future__ import annotations

import enum
import io
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, cast

import img2pdf
from PIL import Image

from .backends import FitzOptimizer, FitzRenderer, PageRenderer, StructuralOptimizer
from .engine_config import MIB, RASTER_JPEG_QUALITY, RASTER_SCALE, SAVE_FLAGS
from .errors import RasterizeError

log = logging.getLogger(__name__)

# 1 pixel renderizado = 1 ponto na página nova
_PIXEL_LAYOUT = img2pdf.get_fixed_dpi_layout_fun((72, 72))


class Outcome(str, enum.Enum):
    OPTIMIZED = "optimized"
    NO_GAIN = "no_gain"
    FAILED = "failed"


@dataclass(frozen=True)
class CompressionResult:
    """Resultado da tentativa de compressão.

    `data` é sempre o que deve ser oferecido para download: os bytes
    reserializados quando `outcome` é OPTIMIZED, ou o original intacto.
    """
    outcome: Outcome
    data: bytes
    original_size: int
    candidate_size: Optional[int] = None
    page_count: Optional[int] = None
    reason: Optional[str] = None

    @property
    def optimized(self) -> bool:
        return self.outcome is Outcome.OPTIMIZED

    @property
    def failed(self) -> bool:
        return self.outcome is Outcome.FAILED


# ===========================
#   COMPRESSÃO ESTRUTURAL
# ===========================
def _notify_pages(on_pages: Callable[[int], None] | None, pages: int) -> None:
    # falha do callback de UI não vira falha de compressão
    if on_pages is None:
        return
    try:
        on_pages(pages)
    except Exception:
        log.exception("Page-count callback failed")


def compress_pdf(
    pdf_bytes: bytes,
    optimizer: StructuralOptimizer | None = None,
    on_pages: Callable[[int], None] | None = None,
) -> CompressionResult:
    """Reserializa o PDF com object streams e escolhe o menor.

    Nunca levanta exceção: qualquer falha ao abrir/salvar devolve o original.

    Args:
        pdf_bytes (bytes): PDF de entrada (pode estar criptografado ou corrompido).
        optimizer (StructuralOptimizer | None): colaborador estrutural; PyMuPDF por padrão.
        on_pages (Callable[[int], None] | None): avisado com o número de páginas após abrir.

    Returns:
        CompressionResult: OPTIMIZED só se o candidato for estritamente menor.
    """

    opt = optimizer or FitzOptimizer()
    original_size = len(pdf_bytes)
    pages: Optional[int] = None

    try:
        log.debug("Loading PDF document (%d bytes)", original_size)
        doc = opt.load(pdf_bytes, ignore_encryption=True)
        try:
            pages = opt.page_count(doc)
            log.debug("PDF has %d pages", pages)
            _notify_pages(on_pages, pages)
            out_bytes = opt.save(
                doc,
                use_object_streams=SAVE_FLAGS["use_object_streams"],
                add_default_page=SAVE_FLAGS["add_default_page"],
            )
        finally:
            opt.close(doc)
    except Exception as e:
        log.warning("Error during compression, returning original: %s", e)
        return CompressionResult(
            outcome=Outcome.FAILED,
            data=pdf_bytes,
            original_size=original_size,
            page_count=pages,
            reason=str(e) or e.__class__.__name__,
        )

    log.debug("Original size: %.2f MB", original_size / MIB)
    log.debug("Compressed size: %.2f MB", len(out_bytes) / MIB)

    # guard-rail: empate ou aumento → original
    if len(out_bytes) >= original_size:
        log.debug("Compression did not reduce size, returning original")
        return CompressionResult(
            outcome=Outcome.NO_GAIN,
            data=pdf_bytes,
            original_size=original_size,
            candidate_size=len(out_bytes),
            page_count=pages,
            reason="output not smaller than input",
        )

    log.debug("Compression successful")
    return CompressionResult(
        outcome=Outcome.OPTIMIZED,
        data=out_bytes,
        original_size=original_size,
        candidate_size=len(out_bytes),
        page_count=pages,
    )


def compress_pdf_bytes(pdf_bytes: bytes, optimizer: StructuralOptimizer | None = None) -> bytes:
    """Atalho: só os bytes escolhidos por `compress_pdf`."""
    return compress_pdf(pdf_bytes, optimizer).data


# ===========================
#   RASTERIZAR → JPEG → PDF
# ===========================
def _jpeg_bytes(img: Image.Image, quality: int) -> bytes:
    # sempre RGB para JPEG
    if img.mode != "RGB":
        img = img.convert("RGB")
    buf = io.BytesIO()
    img.save(buf, "JPEG", quality=max(1, min(int(quality), 95)), optimize=True)
    return buf.getvalue()


def rasterize_pdf(
    pdf_bytes: bytes,
    renderer: PageRenderer | None = None,
    optimizer: StructuralOptimizer | None = None,
    scale: float = RASTER_SCALE,
    jpeg_quality: int = RASTER_JPEG_QUALITY,
) -> bytes:
    """Recria o PDF a partir de imagens JPEG de cada página.

    Compressão com perdas: texto e vetores viram bitmap. Ao contrário de
    `compress_pdf`, não há fallback; qualquer falha aborta tudo.

    Args:
        pdf_bytes (bytes): PDF de origem.
        renderer (PageRenderer | None): renderizador; PyMuPDF por padrão.
        optimizer (StructuralOptimizer | None): usado na serialização final.
        scale (float): fator linear da renderização (0.7 = 70%).
        jpeg_quality (int): qualidade JPEG (escala do Pillow).

    Returns:
        bytes: PDF novo, uma página por imagem, com o mesmo tamanho em pixels.

    Raises:
        RasterizeError: falha ao abrir, renderizar, codificar ou salvar.
    """

    rnd = renderer or FitzRenderer()
    opt = optimizer or FitzOptimizer()

    try:
        src = rnd.open(pdf_bytes)
    except Exception as e:
        raise RasterizeError(f"Failed to open PDF: {e}") from e

    jpg_pages: List[bytes] = []
    try:
        try:
            total = rnd.page_count(src)
        except Exception as e:
            raise RasterizeError(f"Failed to read page count: {e}") from e
        for i in range(total):
            try:
                img = rnd.render(src, i, scale)
                jpg_pages.append(_jpeg_bytes(img, jpeg_quality))
            except Exception as e:
                raise RasterizeError(f"Failed on page {i + 1}: {e}") from e
            log.debug("Page %d/%d rasterized (%d bytes)", i + 1, total, len(jpg_pages[-1]))
    finally:
        rnd.close(src)

    if not jpg_pages:
        raise RasterizeError("PDF has no pages")

    try:
        built = cast(bytes, img2pdf.convert(jpg_pages, layout_fun=_PIXEL_LAYOUT))
        doc = opt.load(built, ignore_encryption=True)
        try:
            out_bytes = opt.save(
                doc,
                use_object_streams=SAVE_FLAGS["use_object_streams"],
                add_default_page=SAVE_FLAGS["add_default_page"],
            )
        finally:
            opt.close(doc)
    except Exception as e:
        raise RasterizeError(f"Failed to build PDF: {e}") from e

    log.info("Rasterized %d page(s): %d → %d bytes", len(jpg_pages), len(pdf_bytes), len(out_bytes))
    return out_bytes


def compress_image(
    img_bytes: bytes,
    quality: float = 0.7,
    max_width: int = 1200,
    max_height: int = 1200,
) -> bytes:
    """Reduz uma imagem para caber na caixa (se maior) e re-encoda em JPEG.

    `quality` vai de 0 a 1. O lado dominante encosta no limite e o outro
    acompanha a proporção.
    """
    try:
        im = Image.open(io.BytesIO(img_bytes))
        im.load()
    except Exception as e:
        raise RasterizeError(f"Failed to load image for compression: {e}") from e

    w, h = im.size
    if w > max_width or h > max_height:
        if w > h:
            h = h * (max_width / w)
            w = max_width
        else:
            w = w * (max_height / h)
            h = max_height
        im = im.resize((max(1, int(w)), max(1, int(h))), Image.Resampling.LANCZOS)

    return _jpeg_bytes(im, round(quality * 100))
