from typing import Sequence


def lcp_length(left: str, right: str) -> int:
    limit = min(len(left), len(right))
    for i in range(limit):
        if left[i] != right[i]:
            return i
    return limit


def longest_common_prefix(words: Sequence[str]) -> str:
    """
    Longest common prefix of a collection of words.

    Neighbouring prefixes are merged pairwise, round after round, until a
    single prefix is left. An empty collection has the empty prefix and a
    single word is its own prefix.
    """
    prefixes = list(words)
    if not prefixes:
        return ""
    while len(prefixes) > 1:
        merged = []
        for i in range(0, len(prefixes) - 1, 2):
            left, right = prefixes[i], prefixes[i + 1]
            merged.append(left[: lcp_length(left, right)])
        if len(prefixes) % 2:
            merged.append(prefixes[-1])
        prefixes = merged
    return prefixes[0]


def common_prefix_length(words: Sequence[str]) -> int:
    return len(longest_common_prefix(words))
