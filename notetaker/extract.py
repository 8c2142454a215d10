"""
Turn an uploaded PDF or image into raw text.

- PDFs: text layer via PyMuPDF, words regrouped into lines per page.
  Pages without a text layer are rendered and OCR'd.
- Images: Tesseract OCR through pytesseract.
- Plain .txt files are decoded as UTF-8.
Every failure surfaces as ExtractionError with a message fit for the UI.
"""

import io
import logging
import mimetypes
import re
from pathlib import Path
from typing import Callable, List, Optional

import fitz  # PyMuPDF
import pytesseract
from PIL import Image, UnidentifiedImageError

from .config import NotesConfig
from .text import clean_text

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
UNSUPPORTED_MESSAGE = "Please provide a PDF or an image (PNG/JPG)."
SCANNING_STAGE = "Scanning image…"

# not every platform's mimetypes table knows these
EXTENSION_MIMES = {
    ".pdf": PDF_MIME,
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
    ".gif": "image/gif",
    ".txt": "text/plain",
}

StageCallback = Callable[[str], None]


class ExtractionError(Exception):
    """The file is not a PDF/image, or its text could not be extracted."""


# ---------------------- Boilerplate ----------------------

HEADER_PATTERNS = [
    r"^\s*course\s*:\s*", r"^\s*topic\s*:\s*", r"\bweek\s*\d+\b",
    r"^page\s*\d+\s*$", r"^\s*\d+\s*(/|of)\s*\d+\s*$",
]
HEADER_REGEXES = [re.compile(p, re.I) for p in HEADER_PATTERNS]


def is_boilerplate_line(line: str) -> bool:
    """Running headers/footers: course banners, page numbers, 'x of y'."""
    ln = (line or "").strip()
    if not ln:
        return True
    return any(rgx.search(ln) for rgx in HEADER_REGEXES)


# ---------------------- Input handling ----------------------

def _read_upload(file):
    """Return (name, mime, bytes) for a path or an uploaded-file object."""
    if isinstance(file, (str, Path)):
        path = Path(file)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ExtractionError(f"Could not read {path.name}: {exc.strerror or exc}") from exc
        return path.name, None, data

    name = getattr(file, "name", "") or ""
    mime = getattr(file, "type", None)
    if hasattr(file, "getvalue"):
        data = file.getvalue()
    else:
        data = file.read()
    return Path(name).name, mime, data


def _detect_kind(name: str, mime: Optional[str]) -> str:
    # browsers sometimes send application/octet-stream, so the name gets a say too
    lower = name.lower()
    mimes = (
        mime or "",
        mimetypes.guess_type(lower)[0] or "",
        EXTENSION_MIMES.get(Path(lower).suffix, ""),
    )
    if PDF_MIME in mimes:
        return "pdf"
    if any(m.startswith("image/") for m in mimes):
        return "image"
    if "text/plain" in mimes:
        return "text"
    return ""


# ---------------------- OCR ----------------------

def ocr_image(image: Image.Image, config: NotesConfig) -> str:
    if config.tesseract_cmd:
        pytesseract.pytesseract.tesseract_cmd = config.tesseract_cmd
    try:
        return pytesseract.image_to_string(image, lang=config.ocr_language) or ""
    except pytesseract.TesseractNotFoundError as exc:
        raise ExtractionError("Tesseract is not installed or not on PATH (set TESSERACT_CMD).") from exc
    except pytesseract.TesseractError as exc:
        raise ExtractionError(f"OCR failed: {exc.message or exc}") from exc


def open_image(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except Image.DecompressionBombError as exc:
        raise ExtractionError("The image is too large to scan.") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise ExtractionError("Could not read the image. Is it a valid PNG/JPG?") from exc
    return image


def extract_from_image(data: bytes, config: NotesConfig) -> str:
    return clean_text(ocr_image(open_image(data), config))


# ---------------------- PDF ----------------------

def _page_lines(page, config: NotesConfig) -> List[str]:
    """Rebuild reading-order lines from PyMuPDF words, minus margins/boilerplate."""
    height = page.rect.height
    top_cut = height * config.margin_frac
    bot_cut = height * (1 - config.margin_frac)

    lines_map = {}
    for x0, y0, x1, y1, w, bno, lno, wno in page.get_text("words"):
        if y0 < top_cut or y1 > bot_cut:
            continue
        lines_map.setdefault((bno, lno), []).append((x0, w))

    lines = []
    for _, items in sorted(lines_map.items(), key=lambda kv: kv[0]):
        items.sort(key=lambda t: t[0])
        line = " ".join(tok for _, tok in items).strip()
        if not line:
            continue
        if config.drop_boilerplate and is_boilerplate_line(line):
            continue
        lines.append(line)
    return lines


def _ocr_page(page, config: NotesConfig) -> str:
    pix = page.get_pixmap(dpi=config.ocr_dpi)
    return ocr_image(open_image(pix.tobytes("png")), config).strip()


def extract_from_pdf(data: bytes, config: NotesConfig) -> str:
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except RuntimeError as exc:
        raise ExtractionError(f"Could not open the PDF: {exc}") from exc

    pages = []
    try:
        for page in doc:
            lines = _page_lines(page, config)
            if lines:
                pages.append("\n".join(lines))
            elif config.pdf_ocr_fallback:
                logger.info("Page %d has no text layer, running OCR", page.number + 1)
                text = _ocr_page(page, config)
                if text:
                    pages.append(text)
        logger.info("Read %d page(s), %d with text", doc.page_count, len(pages))
    except RuntimeError as exc:
        raise ExtractionError(f"Could not read the PDF: {exc}") from exc
    finally:
        doc.close()

    return clean_text("\n\n".join(pages))


# ---------------------- Public API ----------------------

def extract_text(
    file,
    config: Optional[NotesConfig] = None,
    on_stage: Optional[StageCallback] = None,
) -> str:
    """
    Extract raw text from a PDF, an image or a .txt file.

    `file` is a path or an uploaded-file object with `name`, optional `type`
    and `getvalue()`/`read()`. Raises ExtractionError on unsupported types
    and on any extraction failure.
    """
    config = config or NotesConfig()
    name, mime, data = _read_upload(file)
    kind = _detect_kind(name, mime)
    logger.info("Extracting %s (%s, %d bytes)", name or "<upload>", kind or "unsupported", len(data))

    if kind == "pdf":
        return extract_from_pdf(data, config)
    if kind == "image":
        if on_stage:
            on_stage(SCANNING_STAGE)
        return extract_from_image(data, config)
    if kind == "text":
        return clean_text(data.decode("utf-8", "ignore"))
    raise ExtractionError(UNSUPPORTED_MESSAGE)
