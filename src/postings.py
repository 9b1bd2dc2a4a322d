from typing import Iterator, List, Sequence, Tuple

Posting = Tuple[int, int]


class Lexicon:
    def __init__(self, words: Sequence[str] = ()):
        self._words: List[str] = list(words)

    def add(self, word: str) -> int:
        self._words.append(word)
        return len(self._words) - 1

    def word(self, term_id: int) -> str:
        return self._words[term_id]

    def words(self, term_ids) -> List[str]:
        return [self._words[t] for t in term_ids]

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __getitem__(self, term_id: int) -> str:
        return self._words[term_id]


class InvertedIndex:
    """
    Posting lists indexed by dense term id.

    Every posting list is a sequence of (doc_id, frequency) pairs sorted by
    strictly ascending doc_id; common_documents relies on it.
    """

    def __init__(self):
        self._postings: List[List[Posting]] = []

    def add_term(self, postings: Sequence[Posting] = ()) -> int:
        postings = list(postings)
        for (prev, _), (doc_id, _) in zip(postings, postings[1:]):
            if doc_id <= prev:
                raise ValueError(f"posting list not strictly ascending: doc {doc_id} after {prev}")
        self._postings.append(postings)
        return len(self._postings) - 1

    @property
    def term_count(self) -> int:
        return len(self._postings)

    def __len__(self) -> int:
        return len(self._postings)

    def postings(self, term_id: int) -> List[Posting]:
        return self._postings[term_id]

    def document_count(self, term_id: int) -> int:
        return len(self._postings[term_id])

    def common_documents(self, term_a: int, term_b: int) -> Iterator[Tuple[int, int, int]]:
        """Yield (doc_id, freq_a, freq_b) for every document holding both terms."""
        left, right = self._postings[term_a], self._postings[term_b]
        i = j = 0
        while i < len(left) and j < len(right):
            doc_a, doc_b = left[i][0], right[j][0]
            if doc_a == doc_b:
                yield doc_a, left[i][1], right[j][1]
                i += 1
                j += 1
            elif doc_a > doc_b:
                j += 1
            else:
                i += 1

    def co_occurrence(self, term_a: int, term_b: int) -> int:
        return sum(min(fa, fb) for _, fa, fb in self.common_documents(term_a, term_b))
