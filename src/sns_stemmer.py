"""
    Implementation of the SNS statistical stemmer.

    Words are grouped by corpus evidence alone: terms that co-occur in the same
    documents and look alike (same leading characters, suffixes that are not
    both common endings) are linked, every term keeps only its strongest links,
    and each connected group of terms is stemmed to the longest prefix its
    words share.

    Run as a script to write a "word<TAB>stem" report:

        python src/sns_stemmer.py --lexicon data/lexicon.txt --inverted data/inverted.txt
"""
import argparse
import sys
from functools import partial
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Set, Tuple

from clusters import connected_components
from cooccurrence import DiskCoOccurrences, co_occurrences_in_memory
from postings import InvertedIndex, Lexicon
from prefixes import longest_common_prefix
from rco import RestrictedCoOccurrences, keep_strong_edges
from sns_config import CO_STRATEGIES, StemmerConfig
from sns_io import read_inverted, read_lexicon, write_stems
from term_matrix import Matrix

STAGES = ("BUILD_CO", "BUILD_RCO", "CLUSTER", "ASSIGN_STEMS")
DEFAULT_CONFIG_FILE = Path("config.properties")

CoStrategy = Callable[[InvertedIndex], Matrix]
RcoStrategy = Callable[[Matrix, Lexicon], Matrix]


def assign_stems(clusters: Iterable[Set[int]], lexicon: Lexicon) -> Dict[str, str]:
    stem_of: List[str] = [None] * len(lexicon)
    for cluster in clusters:
        members = sorted(cluster)
        stem = longest_common_prefix(lexicon.words(members))
        for term_id in members:
            stem_of[term_id] = stem
    missing = [t for t, stem in enumerate(stem_of) if stem is None]
    if missing:
        raise ValueError(f"{len(missing)} terms belong to no cluster, first is {missing[0]}")
    return {lexicon.word(t): stem_of[t] for t in range(len(lexicon))}


class SnsStemmer:
    def __init__(self, co_strategy: CoStrategy, rco_strategy: RcoStrategy, quiet: bool = False):
        self.co_strategy = co_strategy
        self.rco_strategy = rco_strategy
        self.quiet = quiet
        self.completed: List[str] = []

    @classmethod
    def from_config(cls, config: StemmerConfig, quiet: bool = False) -> "SnsStemmer":
        if config.co_strategy == "disk":
            co_strategy = DiskCoOccurrences(
                config.co_block_path,
                config.co_block_size,
                cache_capacity=config.cache_capacity,
                quiet=quiet,
            )
        else:
            co_strategy = partial(co_occurrences_in_memory, quiet=quiet)
        rco_strategy = RestrictedCoOccurrences(
            config.min_lcp_length, config.prefix_length, config.rco_weight, quiet=quiet
        )
        return cls(co_strategy, rco_strategy, quiet=quiet)

    def adjacency_matrix(self, co: Matrix, lexicon: Lexicon) -> Matrix:
        rco = self.rco_strategy(co, lexicon)
        removed = keep_strong_edges(rco)
        self._log(f"[i] pruned {removed:,} weak edges")
        return rco

    def pipeline(self, lexicon: Lexicon) -> List[Tuple[str, Callable]]:
        return [
            ("BUILD_CO", self.co_strategy),
            ("BUILD_RCO", lambda co: self.adjacency_matrix(co, lexicon)),
            ("CLUSTER", connected_components),
            ("ASSIGN_STEMS", lambda clusters: assign_stems(clusters, lexicon)),
        ]

    def stems(self, lexicon: Lexicon, inverted: InvertedIndex) -> Dict[str, str]:
        if len(lexicon) != inverted.term_count:
            raise ValueError(
                f"lexicon has {len(lexicon):,} terms but the inverted index has {inverted.term_count:,}"
            )
        self.completed = []
        result = inverted
        for name, stage in self.pipeline(lexicon):
            self._log(f"[i] {name}")
            result = stage(result)
            self.completed.append(name)
        clusters = len(set(result.values()))
        self._log(f"[✓] {len(result):,} words stemmed to {clusters:,} stems")
        return result

    def _log(self, message: str) -> None:
        if not self.quiet:
            print(message)


def sns_tokens(tokens: List[str], stem_map: Dict[str, str]) -> List[str]:
    return [stem_map.get(t, t) for t in tokens]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="SNS statistical stemmer")
    p.add_argument("--config", type=Path, default=None, help="properties file (default: ./config.properties if present)")
    p.add_argument("--lexicon", type=Path, help="lexicon file, one 'term,...' per line")
    p.add_argument("--inverted", type=Path, help="inverted index file, one 'termId (docId,freq) ...' per line")
    p.add_argument("--output", type=Path, help="where to write the word<TAB>stem report")
    p.add_argument("--min-lcp-length", type=int, help="shortest common prefix that counts a suffix pair")
    p.add_argument("--prefix-length", type=int, help="leading characters two terms must share")
    p.add_argument("--rco-weight", type=float, help="weight of co-occurrences shared through neighbours")
    p.add_argument("--co-strategy", choices=CO_STRATEGIES, help="keep CO in memory or page it to disk")
    p.add_argument("--co-block-path", type=Path, help="directory for CO block files (disk strategy)")
    p.add_argument("--co-block-size", type=int, help="terms per CO block (disk strategy)")
    p.add_argument("--cache-capacity", type=int, help="resident CO blocks per axis (disk strategy)")
    p.add_argument("--quiet", action="store_true", help="no progress output")
    return p


def resolve_config(args: argparse.Namespace) -> StemmerConfig:
    config_file = args.config
    if config_file is None and DEFAULT_CONFIG_FILE.is_file():
        config_file = DEFAULT_CONFIG_FILE
    config = StemmerConfig.from_properties(config_file) if config_file else StemmerConfig()
    config.update(
        lexicon_path=args.lexicon,
        inverted_path=args.inverted,
        output_path=args.output,
        min_lcp_length=args.min_lcp_length,
        prefix_length=args.prefix_length,
        rco_weight=args.rco_weight,
        co_strategy=args.co_strategy,
        co_block_path=args.co_block_path,
        co_block_size=args.co_block_size,
        cache_capacity=args.cache_capacity,
    )
    return config


def run(config: StemmerConfig, quiet: bool = False) -> Dict[str, str]:
    lexicon = read_lexicon(config.lexicon_path)
    inverted = read_inverted(config.inverted_path)
    if not quiet:
        print(f"[i] stemming {len(lexicon):,} terms (prefix_length={config.prefix_length}, "
              f"min_lcp_length={config.min_lcp_length}, rco_weight={config.rco_weight}, co={config.co_strategy})")
    stems = SnsStemmer.from_config(config, quiet=quiet).stems(lexicon, inverted)
    write_stems(config.output_path, stems)
    if not quiet:
        print(f"[✓] saved SNS stems to {config.output_path}")
    return stems


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        run(resolve_config(args), quiet=args.quiet)
    except (OSError, ValueError) as exc:
        sys.exit(f"error: {exc}")
    except KeyboardInterrupt:
        sys.exit("aborted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
