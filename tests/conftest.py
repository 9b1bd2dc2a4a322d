"""Shared fixtures: a small corpus where run/running/runner and jump/jumped co-occur."""

import pytest

from postings import InvertedIndex, Lexicon

WORDS = ["run", "running", "runner", "jump", "jumped"]

POSTINGS = [
    [(1, 3), (2, 2), (3, 1)],
    [(1, 2), (2, 2), (3, 1)],
    [(1, 1), (2, 1), (3, 2)],
    [(4, 2), (5, 1)],
    [(4, 1), (5, 3)],
]

EXPECTED_STEMS = {
    "run": "run",
    "running": "run",
    "runner": "run",
    "jump": "jump",
    "jumped": "jump",
}


@pytest.fixture
def lexicon():
    return Lexicon(WORDS)


@pytest.fixture
def inverted():
    index = InvertedIndex()
    for postings in POSTINGS:
        index.add_term(postings)
    return index


@pytest.fixture
def corpus_files(tmp_path):
    """Write the sample corpus in the lexicon / inverted index file formats."""
    lexicon_path = tmp_path / "lexicon.txt"
    inverted_path = tmp_path / "inverted.txt"
    lexicon_path.write_text(
        "".join(f"{word},{len(word)}\n" for word in WORDS), encoding="utf-8"
    )
    lines = []
    for term_id, postings in enumerate(POSTINGS):
        pairs = " ".join(f"({doc},{freq})" for doc, freq in postings)
        lines.append(f"{term_id} {pairs}\n")
    inverted_path.write_text("".join(lines), encoding="utf-8")
    return lexicon_path, inverted_path


@pytest.fixture
def expected_stems():
    return dict(EXPECTED_STEMS)
