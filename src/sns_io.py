"""
    Readers for the lexicon and inverted index files and the stem report.

    lexicon:   one term per line, "term,anything"; the term id is the zero
               based line number.
    inverted:  one posting list per line, "termId (docId,freq) (docId,freq) ...",
               in lexicon order and sorted by docId.
    report:    one "word<TAB>stem" line per lexicon word.
"""
import os
from pathlib import Path
from typing import Dict, Mapping

import regex as re

from postings import InvertedIndex, Lexicon

POSTING_LINE_RE = re.compile(r"^\d+((?:[ \t]+\(\d+,\d+\))*)[ \t]*$")
POSTING_RE = re.compile(r"\((\d+),(\d+)\)")


class ParseError(ValueError):
    def __init__(self, path, line_no: int, message: str):
        self.path = Path(path)
        self.line_no = line_no
        super().__init__(f"{self.path}:{line_no}: {message}")


def _open(path: Path):
    if not path.is_file():
        raise FileNotFoundError(f"input file not found: {path}")
    return path.open(encoding="utf-8")


def read_lexicon(path) -> Lexicon:
    path = Path(path)
    lexicon = Lexicon()
    with _open(path) as fh:
        for line_no, line in enumerate(fh, start=1):
            term = line.rstrip("\r\n").split(",", 1)[0]
            if not term:
                raise ParseError(path, line_no, "empty term")
            if "\t" in term:
                raise ParseError(path, line_no, f"tab in term {term!r}")
            lexicon.add(term)
    return lexicon


def read_inverted(path) -> InvertedIndex:
    path = Path(path)
    inverted = InvertedIndex()
    with _open(path) as fh:
        for line_no, line in enumerate(fh, start=1):
            line = line.rstrip("\r\n")
            match = POSTING_LINE_RE.match(line)
            if match is None:
                raise ParseError(path, line_no, f"expected 'termId (docId,freq) ...', got {line!r}")
            postings = [(int(d), int(f)) for d, f in POSTING_RE.findall(match.group(1))]
            try:
                inverted.add_term(postings)
            except ValueError as exc:
                raise ParseError(path, line_no, str(exc)) from None
    return inverted


def write_stems(path, stems: Mapping[str, str]) -> Path:
    """Write the report next to its final place and move it in when complete."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        with tmp_path.open("w", encoding="utf-8", newline="\n") as fh:
            for word, stem in stems.items():
                fh.write(f"{word}\t{stem}\n")
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()
    return path


def load_stems(path) -> Dict[str, str]:
    path = Path(path)
    stems: Dict[str, str] = {}
    with _open(path) as fh:
        for line_no, line in enumerate(fh, start=1):
            parts = line.rstrip("\r\n").split("\t")
            if len(parts) != 2 or not parts[0]:
                raise ParseError(path, line_no, "expected 'word<TAB>stem'")
            stems[parts[0]] = parts[1]
    return stems
