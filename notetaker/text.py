"""Text cleanup, tokenizing and sentence splitting shared by every notes stage."""

import re
from typing import List

# ---------------------- Stopwords ----------------------

STOPWORDS = frozenset(
    """
    the a an and or of to in is are was were be been for with on at by from as
    that this these those into over under about after before between within
    without using use used than more most very much many can could should would
    may might not no yes if then when where how what who which also etc
    data info page slide figure table section chapter article
    """.split()
)

# ---------------------- Regexes ----------------------

INLINE_SPACE_RE = re.compile(r"[\t ]+")
BLANK_LINES_RE = re.compile(r"\n{3,}")
WHITESPACE_RE = re.compile(r"\s+")
NON_WORD_RE = re.compile(r"[^a-z0-9\s-]")
# zero-width split point: after terminal punctuation, the whitespace is consumed
SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s+")

MIN_TOKEN_LEN = 3
MIN_SENTENCE_LEN = 3


def clean_text(t: str) -> str:
    """Drop NBSPs, collapse spaces/tabs, cap blank-line runs at one, trim."""
    t = (t or "").replace("\u00a0", " ")
    t = INLINE_SPACE_RE.sub(" ", t)
    t = BLANK_LINES_RE.sub("\n\n", t)
    return t.strip()


def tokenize(t: str) -> List[str]:
    """Lowercase content words, hyphens kept, stopwords and short words dropped."""
    t = NON_WORD_RE.sub(" ", clean_text(t).lower())
    return [w for w in t.split() if len(w) >= MIN_TOKEN_LEN and w not in STOPWORDS]


def split_sentences(t: str) -> List[str]:
    """
    Split on '.', '!' or '?' followed by whitespace.
    Punctuation stays with its sentence; fragments of two chars or less are dropped.
    """
    flat = WHITESPACE_RE.sub(" ", clean_text(t))
    return [s for s in SENTENCE_END_RE.split(flat) if len(s) >= MIN_SENTENCE_LEN]
