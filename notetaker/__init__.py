"""Drop a PDF or image, get Markdown study notes."""

from .config import NotesConfig
from .extract import ExtractionError, extract_text
from .notes import (
    NotesDocument,
    OutlineChunk,
    build_notes,
    build_outline,
    guess_title,
    select_takeaways,
    to_markdown,
    top_terms,
)
from .session import NoteSession
from .text import STOPWORDS, clean_text, split_sentences, tokenize

normalize = clean_text

__all__ = [
    "STOPWORDS",
    "ExtractionError",
    "NoteSession",
    "NotesConfig",
    "NotesDocument",
    "OutlineChunk",
    "build_notes",
    "build_outline",
    "clean_text",
    "extract_text",
    "guess_title",
    "normalize",
    "select_takeaways",
    "split_sentences",
    "to_markdown",
    "tokenize",
    "top_terms",
]

__version__ = "0.1.0"
