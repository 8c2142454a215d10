"""
Command line front end.

Examples:
  notetaker lecture.pdf
  notetaker scan.png --format both --out notes
  pbpaste | notetaker - --takeaways 4

Use '-' to read already-extracted text from stdin.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import NotesConfig
from .extract import ExtractionError, extract_text
from .notes import build_notes

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="notetaker",
        description="Turn a PDF or image into Markdown study notes (offline).",
    )
    parser.add_argument("input", help="PDF, image or .txt path, or '-' to read plain text from stdin.")
    parser.add_argument("--format", choices=("md", "json", "both"), default="md", help="Output format.")
    parser.add_argument("--out", help="Output path (without extension) to write files instead of stdout.")
    parser.add_argument("--takeaways", type=int, default=None, help="Number of key takeaways.")
    parser.add_argument("--terms", type=int, default=None, help="Number of key terms.")
    parser.add_argument("--raw", action="store_true", help="Print the extracted text instead of notes.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr.")
    return parser.parse_args(argv)


def _read_input(source: str, config: NotesConfig) -> str:
    if source == "-":
        return sys.stdin.read()
    return extract_text(Path(source), config=config, on_stage=logger.info)


def _write(path: Path, content: str) -> None:
    path.write_text(content, encoding="utf-8")
    logger.info("Saved: %s", path)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = NotesConfig.from_env()
    if args.takeaways is not None:
        config.takeaways = max(0, args.takeaways)
    if args.terms is not None:
        config.terms = max(0, args.terms)

    try:
        raw = _read_input(args.input, config)
    except ExtractionError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.raw:
        print(raw)
        return 0

    doc = build_notes(raw, takeaways=config.takeaways, terms=config.terms)
    md = doc.to_markdown()
    js = doc.to_json()

    if not args.out:
        if args.format in ("md", "both"):
            print(md)
            if args.format == "both":
                print("\n" + "-" * 80 + "\n")
        if args.format in ("json", "both"):
            print(js)
        return 0

    base = args.out
    wrote = []
    if args.format in ("md", "both"):
        _write(Path(base + ".md"), md)
        wrote.append(base + ".md")
    if args.format in ("json", "both"):
        _write(Path(base + ".json"), js)
        wrote.append(base + ".json")
    print("Wrote:", ", ".join(wrote))
    return 0


if __name__ == "__main__":
    sys.exit(main())
