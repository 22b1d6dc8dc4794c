"""Tests for the infrastructure adapters (PDF renderers, image decoder, Tesseract)."""

import asyncio
import io

import pytest
import numpy as np
from PIL import Image, ImageDraw

from features.extraction.application.extraction_pipeline import ExtractionPipeline
from features.extraction.domain.entities import ExtractionDecision
from features.extraction.infrastructure import pdfplumber_renderer, tesseract_ocr_engine
from features.extraction.infrastructure.pdfplumber_renderer import PdfplumberRenderer
from features.extraction.infrastructure.pillow_image_decoder import PillowImageDecoder
from features.extraction.infrastructure.pymupdf_renderer import PymupdfRenderer
from features.extraction.infrastructure.tesseract_ocr_engine import TesseractOcrEngine
from features.extraction.infrastructure.utils.ocr_utils import preprocess_for_ocr, tesseract_config


BODY = "Quarterly results were strong across every region we track."


@pytest.fixture(params=[PdfplumberRenderer, PymupdfRenderer], ids=["pdfplumber", "pymupdf"])
def renderer(request):
    return request.param()


def test_renderer_reads_text_layer(renderer, make_pdf):
    doc = renderer.open_document(make_pdf([BODY, ""]))
    try:
        assert doc.page_count == 2
        first = doc.get_native_text(doc.get_page(1))
        second = doc.get_native_text(doc.get_page(2))
    finally:
        doc.close()

    assert "Quarterly results" in first
    assert second.strip() == ""


def test_renderer_renders_at_scale(renderer, make_pdf):
    doc = renderer.open_document(make_pdf([""]))
    try:
        bitmap = doc.render_to_bitmap(doc.get_page(1), 2.0)
    finally:
        doc.close()

    assert bitmap.mode == "RGB"
    # 595x842 points at 2x
    assert abs(bitmap.width - 1190) <= 2
    assert abs(bitmap.height - 1684) <= 2


def test_renderer_rejects_garbage(renderer):
    with pytest.raises(Exception):
        renderer.open_document(b"definitely not a pdf")


class RecordingOcr:
    def __init__(self):
        self.sizes = []

    def recognize(self, bitmap, language="eng"):
        self.sizes.append(bitmap.size)
        return "scanned page text"


def test_pipeline_with_real_pdf(renderer, make_pdf):
    ocr = RecordingOcr()
    pipeline = ExtractionPipeline(renderer=renderer, ocr_engine=ocr, image_decoder=PillowImageDecoder())

    result = asyncio.run(pipeline.extract(make_pdf([BODY, ""]), "application/pdf"))

    assert [p.decision for p in result.pages] == [ExtractionDecision.NATIVE_TEXT, ExtractionDecision.OCR_REQUIRED]
    assert result.text.endswith("\n\nscanned page text")
    assert "Quarterly results" in result.text
    assert len(ocr.sizes) == 1


def test_image_decoder_returns_rgb(png_bytes):
    bitmap = PillowImageDecoder().decode(png_bytes)

    assert bitmap.mode == "RGB"
    assert bitmap.size == (64, 32)


def test_image_decoder_converts_palette_images():
    buf = io.BytesIO()
    Image.new("P", (8, 8)).save(buf, format="GIF")

    assert PillowImageDecoder().decode(buf.getvalue()).mode == "RGB"


def test_image_decoder_rejects_garbage():
    with pytest.raises(Exception):
        PillowImageDecoder().decode(b"not an image")


def test_tesseract_config():
    assert tesseract_config() == "--oem 1 --psm 3"
    assert tesseract_config(oem=3, psm=6) == "--oem 3 --psm 6"


def test_preprocess_for_ocr_returns_binary_image():
    img = Image.new("RGB", (80, 40), "white")

    processed = preprocess_for_ocr(img)

    assert processed.size == (80, 40)
    assert processed.mode == "L"


def test_tesseract_engine_passes_language_and_config(monkeypatch):
    calls = []

    def fake_image_to_string(image, lang, config):
        calls.append((image.size, lang, config))
        return "  recognized\n"

    monkeypatch.setattr(tesseract_ocr_engine.pytesseract, "image_to_string", fake_image_to_string)
    engine = TesseractOcrEngine(oem=1, psm=6)

    text = engine.recognize(Image.new("RGB", (20, 10), "white"), "eng+fra")

    assert text == "  recognized\n"
    assert calls == [((20, 10), "eng+fra", "--oem 1 --psm 6")]


def test_tesseract_engine_none_becomes_empty(monkeypatch):
    monkeypatch.setattr(tesseract_ocr_engine.pytesseract, "image_to_string", lambda image, lang, config: None)

    assert TesseractOcrEngine().recognize(Image.new("RGB", (4, 4))) == ""


def test_tesseract_engine_preprocesses_when_enabled(monkeypatch):
    modes = []

    def fake_image_to_string(image, lang, config):
        modes.append(image.mode)
        return ""

    monkeypatch.setattr(tesseract_ocr_engine.pytesseract, "image_to_string", fake_image_to_string)

    TesseractOcrEngine(preprocess=True).recognize(Image.new("RGB", (40, 40), "white"))

    assert modes == ["L"]


def test_tesseract_engine_errors_propagate(monkeypatch):
    def boom(image, lang, config):
        raise RuntimeError("tesseract is not installed")

    monkeypatch.setattr(tesseract_ocr_engine.pytesseract, "image_to_string", boom)

    with pytest.raises(RuntimeError):
        TesseractOcrEngine().recognize(Image.new("RGB", (4, 4)))


def test_tesseract_cmd_is_applied(monkeypatch):
    monkeypatch.setattr(tesseract_ocr_engine.pytesseract.pytesseract, "tesseract_cmd", "tesseract")

    TesseractOcrEngine(tesseract_cmd="/opt/tesseract/bin/tesseract")

    assert tesseract_ocr_engine.pytesseract.pytesseract.tesseract_cmd == "/opt/tesseract/bin/tesseract"


class BrokenPageTreePdf:
    def __init__(self):
        self.closed = False

    @property
    def pages(self):
        raise KeyError("Kids")

    def close(self):
        self.closed = True


def test_pdfplumber_closes_pdf_when_page_tree_is_broken(monkeypatch):
    broken = BrokenPageTreePdf()
    monkeypatch.setattr(pdfplumber_renderer.pdfplumber, "open", lambda stream: broken)

    with pytest.raises(KeyError):
        PdfplumberRenderer().open_document(b"%PDF-1.7")

    assert broken.closed


def test_image_decoder_puts_transparent_png_on_white():
    img = Image.new("RGBA", (100, 40), (0, 0, 0, 0))
    ImageDraw.Draw(img).rectangle((30, 10, 70, 30), fill=(0, 0, 0, 255))
    buf = io.BytesIO()
    img.save(buf, format="PNG")

    bitmap = PillowImageDecoder().decode(buf.getvalue())

    assert bitmap.mode == "RGB"
    assert bitmap.getpixel((5, 5)) == (255, 255, 255)
    assert bitmap.getpixel((50, 20)) == (0, 0, 0)


def test_image_decoder_flattens_palette_transparency():
    buf = io.BytesIO()
    Image.new("P", (10, 10), 0).save(buf, format="GIF", transparency=0)

    bitmap = PillowImageDecoder().decode(buf.getvalue())

    assert bitmap.getcolors() == [(100, (255, 255, 255))]


def test_preprocess_for_ocr_evens_out_shading():
    # Dark block on a page that fades from grey to near white
    gray = np.tile(np.linspace(140, 230, 200).astype(np.uint8), (100, 1))
    gray[40:60, 90:110] = 30
    img = Image.fromarray(gray).convert("RGB")

    processed = preprocess_for_ocr(img)

    assert processed.getpixel((100, 50)) == 0
    assert processed.getpixel((5, 5)) == 255
    assert processed.getpixel((195, 95)) == 255
    assert processed.getpixel((60, 50)) == 255
