"""
Condense extracted text into a Markdown study sheet.

Four independent passes run over the same text:
- title from the first short line (or the top terms),
- key takeaways by lexical richness,
- outline from heading-shaped lines,
- most frequent terms,
and NotesDocument lays them out as Markdown.
"""

import json
import logging
import re
from collections import Counter
from dataclasses import asdict, dataclass
from typing import List, Tuple

import numpy as np

from .text import clean_text, split_sentences, tokenize

logger = logging.getLogger(__name__)

DEFAULT_TAKEAWAYS = 6
DEFAULT_TERMS = 12
TITLE_TERMS = 5
FALLBACK_TITLE = "Notes"
SECTION_LABEL = "Section"

MAX_LINE_LEN = 80           # headings and titles are shorter than this
MAX_LENGTH_BONUS = 8        # cap on the token-count part of a sentence score
OUTLINE_BODY_CHARS = 220

LINE_SPLIT_RE = re.compile(r"\n+")
HEADING_RE = re.compile(r"([0-9]+\.|-|•)?\s*[A-Z][A-Za-z0-9\s-]{3,}")
TITLE_PREFIX_RE = re.compile(r"^[-•0-9.\s]+")


@dataclass(frozen=True)
class OutlineChunk:
    heading: str
    body: str


@dataclass(frozen=True)
class NotesDocument:
    """Everything one upload condenses into."""

    title: str
    takeaways: Tuple[str, ...]
    outline: Tuple[OutlineChunk, ...]
    terms: Tuple[str, ...]

    def to_markdown(self) -> str:
        """Fixed section order: title, Key Takeaways, Outline, Terms."""
        md = [f"# {self.title}", "", "## Key Takeaways"]
        md.extend(f"- {t}" for t in self.takeaways)
        md.extend(["", "## Outline"])
        md.extend(f"- **{c.heading}** — {c.body[:OUTLINE_BODY_CHARS]}" for c in self.outline)
        md.extend(["", "## Terms", f"> {', '.join(self.terms)}"])
        return "\n".join(md)

    def to_json(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False, indent=2)


# ---------------------- Ranking ----------------------

def top_terms(text: str, k: int = DEFAULT_TERMS) -> List[str]:
    """Most frequent tokens first; equal counts keep first-seen order."""
    if k <= 0:
        return []
    return [w for w, _ in Counter(tokenize(text)).most_common(k)]


def sentence_score(sentence: str) -> int:
    words = tokenize(sentence)
    return len(set(words)) + min(MAX_LENGTH_BONUS, len(words))


def select_takeaways(text: str, n: int = DEFAULT_TAKEAWAYS) -> List[str]:
    """
    Pick the n richest sentences, best first.

    Score = distinct content words + min(8, content word count), so dense
    sentences win and sheer length stops paying off after eight words.
    Ties keep document order.
    """
    sents = split_sentences(text)
    if n <= 0 or not sents:
        return []
    scores = np.array([sentence_score(s) for s in sents])
    top_idx = np.argsort(-scores, kind="stable")[:n]
    return [sents[i] for i in top_idx.tolist()]


# ---------------------- Outline ----------------------

def is_heading(line: str) -> bool:
    """Short line starting with a capital, letters/digits/spaces/hyphens only."""
    return len(line) < MAX_LINE_LEN and HEADING_RE.fullmatch(line) is not None


def build_outline(text: str) -> List[OutlineChunk]:
    """
    Single pass over the lines.

    A heading flushes any buffered body as a "Section" chunk and is emitted
    on its own with an empty body. Body lines that follow a heading become
    the next "Section" chunk rather than that heading's body.
    """
    chunks: List[OutlineChunk] = []
    buf: List[str] = []

    def flush():
        while buf and not buf[-1]:
            buf.pop()
        if buf:
            chunks.append(OutlineChunk(SECTION_LABEL, " ".join(buf)))
            buf.clear()

    for line in LINE_SPLIT_RE.split(clean_text(text)):
        if not line.strip():
            # a blank line inside a body keeps its slot, edges are dropped
            if buf:
                buf.append("")
            continue
        if is_heading(line):
            flush()
            chunks.append(OutlineChunk(line.strip(), ""))
        else:
            buf.append(line.strip())
    flush()
    return chunks


# ---------------------- Title ----------------------

def guess_title(text: str) -> str:
    first_line = LINE_SPLIT_RE.split(clean_text(text))[0]
    if len(first_line) < MAX_LINE_LEN:
        title = TITLE_PREFIX_RE.sub("", first_line)
    else:
        terms = top_terms(text, TITLE_TERMS)
        title = " • ".join(w[:1].upper() + w[1:] for w in terms)
    return title or FALLBACK_TITLE


# ---------------------- Assembly ----------------------

def build_notes(
    text: str,
    takeaways: int = DEFAULT_TAKEAWAYS,
    terms: int = DEFAULT_TERMS,
) -> NotesDocument:
    doc = NotesDocument(
        title=guess_title(text),
        takeaways=tuple(select_takeaways(text, takeaways)),
        outline=tuple(build_outline(text)),
        terms=tuple(top_terms(text, terms)),
    )
    logger.debug(
        "Condensed %d chars: %d takeaway(s), %d outline chunk(s), %d term(s)",
        len(text or ""), len(doc.takeaways), len(doc.outline), len(doc.terms),
    )
    return doc


def to_markdown(text: str) -> str:
    """Title, Key Takeaways, Outline and Terms for `text`, as Markdown."""
    return build_notes(text).to_markdown()
