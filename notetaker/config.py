"""
Environment-based configuration.

Values come from the process environment, with a .env file (found from the
current directory upwards) filling in anything unset.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True))

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (true/false), got {raw!r}")


@dataclass
class NotesConfig:
    """Knobs for condensing and extraction."""

    # Notes
    takeaways: int = 6
    terms: int = 12

    # OCR
    ocr_language: str = "eng"
    ocr_dpi: int = 200
    tesseract_cmd: Optional[str] = None

    # PDF
    margin_frac: float = 0.0          # top/bottom band dropped as header/footer
    drop_boilerplate: bool = False
    pdf_ocr_fallback: bool = True     # OCR pages that have no text layer

    def __post_init__(self):
        if self.takeaways < 0:
            raise ValueError("takeaways must be >= 0")
        if self.terms < 0:
            raise ValueError("terms must be >= 0")
        if not 0 <= self.margin_frac < 0.5:
            raise ValueError("margin_frac must be in [0, 0.5)")
        if self.ocr_dpi <= 0:
            raise ValueError("ocr_dpi must be positive")
        if not self.ocr_language:
            raise ValueError("ocr_language must not be empty")

    @classmethod
    def from_env(cls) -> "NotesConfig":
        """
        Load configuration from environment variables.

        Environment Variables:
            NOTETAKER_TAKEAWAYS: key takeaways to keep (default: 6)
            NOTETAKER_TERMS: key terms to keep (default: 12)
            NOTETAKER_OCR_LANGUAGE: Tesseract language code (default: "eng")
            NOTETAKER_OCR_DPI: render DPI for OCR'd PDF pages (default: 200)
            NOTETAKER_MARGIN_FRAC: page fraction cut at top and bottom (default: 0.0)
            NOTETAKER_DROP_BOILERPLATE: drop page-number/banner lines (default: false)
            NOTETAKER_PDF_OCR_FALLBACK: OCR PDF pages without text (default: true)
            TESSERACT_CMD: path to the tesseract binary (default: found on PATH)
        """
        return cls(
            takeaways=_env_int("NOTETAKER_TAKEAWAYS", 6),
            terms=_env_int("NOTETAKER_TERMS", 12),
            ocr_language=os.getenv("NOTETAKER_OCR_LANGUAGE", "eng").strip() or "eng",
            ocr_dpi=_env_int("NOTETAKER_OCR_DPI", 200),
            tesseract_cmd=os.getenv("TESSERACT_CMD") or None,
            margin_frac=_env_float("NOTETAKER_MARGIN_FRAC", 0.0),
            drop_boilerplate=_env_bool("NOTETAKER_DROP_BOILERPLATE", False),
            pdf_ocr_fallback=_env_bool("NOTETAKER_PDF_OCR_FALLBACK", True),
        )
