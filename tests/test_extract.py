"""Tests for extract_text: PDF text layer, OCR branches, and error handling."""

import io
from unittest.mock import patch

import fitz
import pytesseract
import pytest
from PIL import Image

from notetaker.config import NotesConfig
from notetaker.extract import (
    SCANNING_STAGE,
    UNSUPPORTED_MESSAGE,
    ExtractionError,
    extract_text,
    is_boilerplate_line,
)


class FakeUpload:
    """Stands in for Streamlit's UploadedFile."""

    def __init__(self, name, type, data):
        self.name = name
        self.type = type
        self._data = data

    def getvalue(self):
        return self._data


def make_pdf(*pages):
    """Each page is a list of (y, text) pairs."""
    doc = fitz.open()
    for lines in pages:
        page = doc.new_page()
        for y, text in lines:
            page.insert_text((72, y), text, fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


def make_png():
    buf = io.BytesIO()
    Image.new("RGB", (40, 20), "white").save(buf, format="PNG")
    return buf.getvalue()


class TestPdf:
    def test_text_layer_lines_and_pages(self):
        data = make_pdf(
            [(72, "Cell Biology"), (100, "Cells are the basic unit of life.")],
            [(72, "Second page text.")],
        )
        text = extract_text(FakeUpload("bio.pdf", "application/pdf", data))
        assert text == "Cell Biology\nCells are the basic unit of life.\n\nSecond page text."

    def test_path_input(self, tmp_path):
        path = tmp_path / "notes.pdf"
        path.write_bytes(make_pdf([(72, "Hello World")]))
        assert extract_text(path) == "Hello World"
        assert extract_text(str(path)) == "Hello World"

    def test_detects_pdf_by_name(self):
        data = make_pdf([(72, "Hello World")])
        assert extract_text(FakeUpload("x.PDF", "application/octet-stream", data)) == "Hello World"

    def test_margin_band_dropped(self):
        data = make_pdf([(40, "Running Header"), (400, "Body text stays.")])
        text = extract_text(FakeUpload("x.pdf", None, data), config=NotesConfig(margin_frac=0.1))
        assert text == "Body text stays."

    def test_boilerplate_dropped_when_enabled(self):
        data = make_pdf([(100, "Body text stays."), (700, "Page 3")])
        kept = extract_text(FakeUpload("x.pdf", None, data))
        dropped = extract_text(FakeUpload("x.pdf", None, data), config=NotesConfig(drop_boilerplate=True))
        assert kept == "Body text stays.\nPage 3"
        assert dropped == "Body text stays."

    def test_blank_page_is_ocrd(self):
        data = make_pdf([(72, "Typed page.")], [])
        with patch("notetaker.extract.pytesseract.image_to_string", return_value="Scanned page\n") as ocr:
            text = extract_text(FakeUpload("scan.pdf", "application/pdf", data))
        assert text == "Typed page.\n\nScanned page"
        ocr.assert_called_once()
        assert ocr.call_args.kwargs["lang"] == "eng"

    def test_ocr_fallback_disabled(self):
        data = make_pdf([])
        with patch("notetaker.extract.pytesseract.image_to_string") as ocr:
            text = extract_text(FakeUpload("scan.pdf", "application/pdf", data), config=NotesConfig(pdf_ocr_fallback=False))
        assert text == ""
        ocr.assert_not_called()

    def test_broken_pdf(self):
        with pytest.raises(ExtractionError, match="PDF"):
            extract_text(FakeUpload("broken.pdf", "application/pdf", b"not a pdf at all"))

    def test_oversized_scanned_page(self, monkeypatch):
        data = make_pdf([])
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
        with patch("notetaker.extract.pytesseract.image_to_string"):
            with pytest.raises(ExtractionError, match="too large"):
                extract_text(FakeUpload("scan.pdf", "application/pdf", data))


class TestImage:
    def test_ocr_text_is_cleaned(self):
        stages = []
        with patch(
            "notetaker.extract.pytesseract.image_to_string",
            return_value="Lecture  Notes \n\n\n\nBody",
        ) as ocr:
            text = extract_text(FakeUpload("board.png", "image/png", make_png()), on_stage=stages.append)
        assert text == "Lecture Notes \n\nBody"
        assert stages == [SCANNING_STAGE]
        assert ocr.call_args.kwargs["lang"] == "eng"

    def test_language_from_config(self):
        with patch("notetaker.extract.pytesseract.image_to_string", return_value="x y z") as ocr:
            extract_text(FakeUpload("a.jpg", None, make_png()), config=NotesConfig(ocr_language="deu"))
        assert ocr.call_args.kwargs["lang"] == "deu"

    def test_unreadable_image(self):
        with pytest.raises(ExtractionError, match="image"):
            extract_text(FakeUpload("photo.png", "image/png", b"\x00\x01 nope"))

    def test_tesseract_missing(self):
        with patch(
            "notetaker.extract.pytesseract.image_to_string",
            side_effect=pytesseract.TesseractNotFoundError(),
        ):
            with pytest.raises(ExtractionError, match="Tesseract"):
                extract_text(FakeUpload("board.png", "image/png", make_png()))

    def test_oversized_image(self, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
        with patch("notetaker.extract.pytesseract.image_to_string") as ocr:
            with pytest.raises(ExtractionError, match="too large"):
                extract_text(FakeUpload("huge.png", "image/png", make_png()))
        ocr.assert_not_called()

    def test_extension_fallback(self, tmp_path):
        path = tmp_path / "board.webp"
        path.write_bytes(make_png())
        with patch("notetaker.extract.mimetypes.guess_type", return_value=(None, None)):
            with patch("notetaker.extract.pytesseract.image_to_string", return_value="Board text") as ocr:
                assert extract_text(path) == "Board text"
        ocr.assert_called_once()


class TestOtherInputs:
    def test_unsupported_type(self):
        with pytest.raises(ExtractionError) as err:
            extract_text(FakeUpload("archive.zip", "application/zip", b"PK\x03\x04"))
        assert str(err.value) == UNSUPPORTED_MESSAGE

    def test_plain_text(self):
        assert extract_text(FakeUpload("notes.txt", "text/plain", b"Hello\t world \n")) == "Hello world"

    def test_missing_path(self, tmp_path):
        with pytest.raises(ExtractionError, match="Could not read"):
            extract_text(tmp_path / "missing.pdf")

    def test_file_object(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("Some notes here.", encoding="utf-8")
        with open(path, "rb") as fh:
            assert extract_text(fh) == "Some notes here."


class TestBoilerplate:
    @pytest.mark.parametrize("line", ["Page 12", "3 of 10", "4 / 20", "Course: MTH 101", "Week 3 review", "", "   "])
    def test_boilerplate(self, line):
        assert is_boilerplate_line(line)

    @pytest.mark.parametrize("line", ["Photosynthesis", "Pages of history are long", "The week ahead"])
    def test_content(self, line):
        assert not is_boilerplate_line(line)
