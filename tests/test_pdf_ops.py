from __future__ import annotations

import io

import fitz  # PyMuPDF
import pytest
from PIL import Image

from fakes import FakeOptimizer, FakeRenderer, build_pdf
from pdf_compressor.backends import FitzOptimizer
from pdf_compressor.errors import RasterizeError
from pdf_compressor.pdf_ops import (
    Outcome,
    compress_image,
    compress_pdf,
    compress_pdf_bytes,
    rasterize_pdf,
)


# ---------- política com colaborador falso ----------

def test_smaller_output_is_selected():
    data = b"%PDF-1.7" + b"x" * 1000
    opt = FakeOptimizer(output=lambda d: d[:100])
    res = compress_pdf(data, opt)
    assert res.outcome is Outcome.OPTIMIZED
    assert res.data == data[:100]
    assert res.candidate_size == 100
    assert res.page_count == 3
    assert opt.closed == 1


def test_save_flags_request_object_streams_without_default_page():
    opt = FakeOptimizer()
    compress_pdf(b"x" * 10, opt)
    assert opt.save_calls == [{"use_object_streams": True, "add_default_page": False}]


def test_larger_output_falls_back_to_original():
    data = b"y" * 500
    res = compress_pdf(data, FakeOptimizer(output=lambda d: d + b"padding"))
    assert res.outcome is Outcome.NO_GAIN
    assert res.data is data
    assert res.candidate_size == 507


def test_equal_size_is_not_an_improvement():
    data = b"z" * 300
    res = compress_pdf(data, FakeOptimizer(output=lambda d: b"w" * len(d)))
    assert res.outcome is Outcome.NO_GAIN
    assert res.data == data


@pytest.mark.parametrize("stage", ["load", "save"])
def test_optimizer_failure_returns_original_bytes(stage):
    data = b"%PDF-broken" * 20
    opt = FakeOptimizer(fail_on=stage)
    res = compress_pdf(data, opt)
    assert res.outcome is Outcome.FAILED
    assert res.failed
    assert res.data == data
    assert res.reason
    # documento aberto é sempre fechado
    assert opt.closed == (1 if stage == "save" else 0)


def test_page_count_callback():
    seen = []
    compress_pdf(b"a" * 50, FakeOptimizer(pages=7), on_pages=seen.append)
    assert seen == [7]


def test_failing_page_callback_does_not_fail_compression():
    def broken(n):
        raise RuntimeError("ui gone")

    res = compress_pdf(b"a" * 50, FakeOptimizer(output=lambda d: d[:5]), on_pages=broken)
    assert res.outcome is Outcome.OPTIMIZED
    assert res.data == b"a" * 5


def test_compress_pdf_bytes_returns_selected_data():
    assert compress_pdf_bytes(b"q" * 40, FakeOptimizer(output=lambda d: b"q")) == b"q"
    assert compress_pdf_bytes(b"q" * 40, FakeOptimizer(fail_on="load")) == b"q" * 40


# ---------- PyMuPDF real ----------

def test_real_uncompressed_pdf_gets_smaller(plain_pdf):
    res = compress_pdf(plain_pdf)
    assert res.outcome is Outcome.OPTIMIZED
    assert len(res.data) < len(plain_pdf)
    with fitz.open(stream=res.data, filetype="pdf") as doc:
        assert doc.page_count == 2
        assert "page 2 line 3" in doc[1].get_text()


def test_second_pass_never_grows(plain_pdf):
    once = compress_pdf_bytes(plain_pdf)
    twice = compress_pdf_bytes(once)
    assert len(twice) <= len(once)


@pytest.mark.parametrize("data", [b"", b"this is not a pdf at all", b"\x00" * 64])
def test_non_pdf_input_degrades_to_original(data):
    res = compress_pdf(data)
    assert res.outcome is Outcome.FAILED
    assert res.data == data
    assert res.reason == "PDF is password protected"


def test_user_password_pdf_is_returned_unchanged():
    data = build_pdf(encryption=fitz.PDF_ENCRYPT_AES_256, owner_pw="owner", user_pw="secret")
    res = compress_pdf(data)
    assert res.outcome is Outcome.FAILED
    assert res.data == data


def test_owner_only_encryption_is_tolerated_and_kept():
    data = build_pdf(
        encryption=fitz.PDF_ENCRYPT_AES_256, owner_pw="owner", user_pw="",
        permissions=int(fitz.PDF_PERM_PRINT | fitz.PDF_PERM_ACCESSIBILITY),
    )
    with fitz.open(stream=data, filetype="pdf") as src:
        src_encryption = src.metadata["encryption"]
        src_perms = src.permissions
    assert src_encryption

    res = compress_pdf(data)
    assert len(res.data) <= len(data)
    with fitz.open(stream=res.data, filetype="pdf") as doc:
        assert not doc.needs_pass
        assert doc.page_count == 2
        assert doc.metadata["encryption"] == src_encryption
        assert doc.permissions == src_perms


def test_fitz_optimizer_can_add_default_page():
    opt = FitzOptimizer()
    doc = fitz.open()
    out = opt.save(doc, add_default_page=True)
    opt.close(doc)
    with fitz.open(stream=out, filetype="pdf") as check:
        assert check.page_count == 1


# ---------- rasterizar ----------

def test_rasterize_with_fakes_builds_one_page_per_image():
    rnd = FakeRenderer(pages=3, size=(100, 60))
    out = rasterize_pdf(b"ignored", renderer=rnd, optimizer=FitzOptimizer(), scale=0.5)
    assert rnd.rendered == [(0, 0.5), (1, 0.5), (2, 0.5)]
    assert rnd.closed
    with fitz.open(stream=out, filetype="pdf") as doc:
        assert doc.page_count == 3
        # 50x30 px -> 50x30 pt
        assert doc[0].rect.width == pytest.approx(50, abs=0.5)
        assert doc[0].rect.height == pytest.approx(30, abs=0.5)


def test_rasterize_failure_on_any_page_propagates():
    rnd = FakeRenderer(pages=3, fail_at=1)
    with pytest.raises(RasterizeError, match="page 2"):
        rasterize_pdf(b"ignored", renderer=rnd, optimizer=FakeOptimizer())
    assert rnd.closed


def test_rasterize_page_count_failure_is_wrapped():
    class BrokenCount(FakeRenderer):
        def page_count(self, doc):
            raise RuntimeError("xref broken")

    rnd = BrokenCount()
    with pytest.raises(RasterizeError, match="xref broken") as info:
        rasterize_pdf(b"ignored", renderer=rnd, optimizer=FakeOptimizer())
    assert isinstance(info.value.__cause__, RuntimeError)
    assert rnd.closed


def test_rasterize_rejects_unreadable_input():
    with pytest.raises(RasterizeError):
        rasterize_pdf(b"not a pdf")


def test_rasterize_real_pdf_uses_scaled_pixel_size(plain_pdf):
    out = rasterize_pdf(plain_pdf)
    with fitz.open(stream=out, filetype="pdf") as doc:
        assert doc.page_count == 2
        assert doc[0].rect.width == pytest.approx(200 * 0.7, abs=1.5)
        assert doc[0].rect.height == pytest.approx(300 * 0.7, abs=1.5)
        # só imagem, sem texto
        assert doc[0].get_text().strip() == ""
        assert len(doc[0].get_images()) == 1


# ---------- imagem avulsa ----------

def _png(w: int, h: int) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (w, h), (10, 120, 200)).save(buf, "PNG")
    return buf.getvalue()


def test_compress_image_fits_wide_image_to_max_width():
    out = compress_image(_png(2400, 1200))
    im = Image.open(io.BytesIO(out))
    assert im.format == "JPEG"
    assert im.size == (1200, 600)


def test_compress_image_fits_tall_image_to_max_height():
    im = Image.open(io.BytesIO(compress_image(_png(600, 1800))))
    assert im.size == (400, 1200)


def test_compress_image_keeps_small_image_size():
    im = Image.open(io.BytesIO(compress_image(_png(320, 200), quality=0.5)))
    assert im.size == (320, 200)


def test_compress_image_rejects_garbage():
    with pytest.raises(RasterizeError, match="Failed to load image"):
        compress_image(b"nope")
