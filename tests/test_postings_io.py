"""
Unit tests for the lexicon, the inverted index and their file readers.
"""

import pytest

from postings import InvertedIndex, Lexicon
from sns_io import ParseError, load_stems, read_inverted, read_lexicon, write_stems


class TestInvertedIndex:
    def test_common_documents_merge(self):
        index = InvertedIndex()
        index.add_term([(1, 2), (4, 1), (7, 3), (9, 1)])
        index.add_term([(2, 5), (4, 2), (9, 4), (12, 1)])
        assert list(index.common_documents(0, 1)) == [(4, 1, 2), (9, 1, 4)]
        assert list(index.common_documents(1, 0)) == [(4, 2, 1), (9, 4, 1)]

    def test_co_occurrence_is_sum_of_minimums(self, inverted):
        assert inverted.co_occurrence(0, 1) == 5
        assert inverted.co_occurrence(0, 2) == 3
        assert inverted.co_occurrence(0, 3) == 0

    def test_term_without_postings(self):
        index = InvertedIndex()
        index.add_term()
        index.add_term([(1, 1)])
        assert index.document_count(0) == 0
        assert list(index.common_documents(0, 1)) == []
        assert len(index) == 2

    def test_postings_must_ascend(self):
        index = InvertedIndex()
        with pytest.raises(ValueError):
            index.add_term([(3, 1), (3, 2)])
        with pytest.raises(ValueError):
            index.add_term([(5, 1), (2, 1)])


class TestReaders:
    def test_read_sample_corpus(self, corpus_files):
        lexicon_path, inverted_path = corpus_files
        lexicon = read_lexicon(lexicon_path)
        inverted = read_inverted(inverted_path)
        assert list(lexicon) == ["run", "running", "runner", "jump", "jumped"]
        assert lexicon.word(2) == "runner"
        assert inverted.term_count == 5
        assert inverted.postings(4) == [(4, 1), (5, 3)]

    def test_lexicon_ignores_rest_of_line(self, tmp_path):
        path = tmp_path / "lexicon.txt"
        path.write_text("alpha,12,x\nbeta\n", encoding="utf-8")
        assert list(read_lexicon(path)) == ["alpha", "beta"]

    def test_empty_lexicon_term_is_rejected(self, tmp_path):
        path = tmp_path / "lexicon.txt"
        path.write_text("alpha,1\n,2\n", encoding="utf-8")
        with pytest.raises(ParseError) as exc:
            read_lexicon(path)
        assert exc.value.line_no == 2
        assert exc.value.path == path

    def test_tab_in_lexicon_term_is_rejected(self, tmp_path):
        path = tmp_path / "lexicon.txt"
        path.write_text("alpha,1\nbe\tta,2\n", encoding="utf-8")
        with pytest.raises(ParseError) as exc:
            read_lexicon(path)
        assert exc.value.line_no == 2

    @pytest.mark.parametrize(
        "bad_line",
        ["0 (1,2) (3)", "x (1,2)", "0 1,2", "", "0 (1,2)(3,4)"],
    )
    def test_malformed_posting_line(self, tmp_path, bad_line):
        path = tmp_path / "inverted.txt"
        path.write_text(f"0 (1,1)\n{bad_line}\n", encoding="utf-8")
        with pytest.raises(ParseError) as exc:
            read_inverted(path)
        assert exc.value.line_no == 2
        assert "inverted.txt:2" in str(exc.value)

    def test_unsorted_postings_are_a_parse_error(self, tmp_path):
        path = tmp_path / "inverted.txt"
        path.write_text("0 (4,1) (2,1)\n", encoding="utf-8")
        with pytest.raises(ParseError):
            read_inverted(path)

    def test_term_with_no_postings(self, tmp_path):
        path = tmp_path / "inverted.txt"
        path.write_text("0\n1 (2,3)\n", encoding="utf-8")
        inverted = read_inverted(path)
        assert inverted.postings(0) == []
        assert inverted.postings(1) == [(2, 3)]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_lexicon(tmp_path / "absent.txt")
        with pytest.raises(FileNotFoundError):
            read_inverted(tmp_path / "absent.txt")


class TestStemReport:
    def test_write_then_load(self, tmp_path):
        path = tmp_path / "out" / "stems.tsv"
        write_stems(path, {"running": "run", "cat": "cat", "x": ""})
        assert path.read_text(encoding="utf-8") == "running\trun\ncat\tcat\nx\t\n"
        assert load_stems(path) == {"running": "run", "cat": "cat", "x": ""}
        assert not (tmp_path / "out" / "stems.tsv.tmp").exists()

    def test_load_rejects_bad_line(self, tmp_path):
        path = tmp_path / "stems.tsv"
        path.write_text("running\trun\nbroken\n", encoding="utf-8")
        with pytest.raises(ParseError):
            load_stems(path)


class TestLexicon:
    def test_words_by_id(self):
        lexicon = Lexicon(["a", "b"])
        assert lexicon.add("c") == 2
        assert lexicon.words([2, 0]) == ["c", "a"]
        assert lexicon[1] == "b"
        assert len(lexicon) == 3
