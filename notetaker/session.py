"""UI-independent state for one note-taking session: stage message, texts, busy flag."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from .config import NotesConfig
from .extract import ExtractionError, extract_text
from .notes import build_notes

logger = logging.getLogger(__name__)

IDLE_STAGE = "Drop a PDF or image to begin"
READING_STAGE = "Reading file…"
CONDENSING_STAGE = "Condensing notes…"
DONE_STAGE = "Done ✔ Copy into Notion"


@dataclass
class NoteSession:
    stage: str = IDLE_STAGE
    raw_text: str = ""
    markdown: str = ""
    busy: bool = False
    config: NotesConfig = field(default_factory=NotesConfig)

    @property
    def has_result(self) -> bool:
        return bool(self.raw_text)

    def condense(self, text: str) -> str:
        doc = build_notes(text, takeaways=self.config.takeaways, terms=self.config.terms)
        return doc.to_markdown()

    def handle_file(
        self,
        file,
        extractor: Callable = extract_text,
        on_stage: Optional[Callable[[str], None]] = None,
    ) -> bool:
        """
        Extract and condense one file. Returns True when notes were produced.

        Ignored while another file is in flight. On failure the stage shows
        the error and the previous texts are kept. `on_stage` sees every
        stage change, including the extractor's own.
        """
        if file is None or self.busy:
            return False

        def stage(message: str) -> None:
            self.stage = message
            if on_stage:
                on_stage(message)

        self.busy = True
        stage(READING_STAGE)
        try:
            extracted = extractor(file, config=self.config, on_stage=stage)
            stage(CONDENSING_STAGE)
            markdown = self.condense(extracted)
            self.raw_text = extracted
            self.markdown = markdown
            stage(DONE_STAGE)
            return True
        except ExtractionError as exc:
            logger.warning("Extraction failed for %s: %s", getattr(file, "name", file), exc)
            stage("Error: " + (str(exc) or "Failed to process file"))
            return False
        finally:
            self.busy = False

    def edit_raw(self, text: str) -> None:
        self.raw_text = text

    def edit_markdown(self, text: str) -> None:
        self.markdown = text

    def regenerate(self) -> None:
        """Re-condense the (possibly hand-edited) raw text."""
        self.markdown = self.condense(self.raw_text)
        self.stage = DONE_STAGE

    def reset(self) -> None:
        self.stage = IDLE_STAGE
        self.raw_text = ""
        self.markdown = ""
        self.busy = False
