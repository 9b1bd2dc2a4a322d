"""
    Settings of the SNS stemmer.

    Values come from the defaults below, then from an optional properties file
    ("key=value" lines, '#' or '!' comments), then from command line flags.
"""
from pathlib import Path
from typing import Dict

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
STEMS_DIR = PROJECT_ROOT / "stems"

LEXICON_FILE_PATH = DATA_DIR / "lexicon.txt"
INVERTED_FILE_PATH = DATA_DIR / "inverted.txt"
OUTPUT_FILE_PATH = STEMS_DIR / "sns_stems.tsv"
CO_BLOCK_PATH = DATA_DIR / "co_blocks"

MIN_LCP_LENGTH = 3
PREFIX_LENGTH = 3
RCO_WEIGHT = 0.5
CO_BLOCK_SIZE = 1000
CACHE_CAPACITY = 1
CO_STRATEGIES = ("ram", "disk")

PROPERTY_KEYS = {
    "outputPath": ("output_path", Path),
    "lexiconPath": ("lexicon_path", Path),
    "invertedPath": ("inverted_path", Path),
    "minLongestCommonPrefixLength": ("min_lcp_length", int),
    "prefixLength": ("prefix_length", int),
    "rcoWeight": ("rco_weight", float),
    "coStrategy": ("co_strategy", str),
    "coBlockPath": ("co_block_path", Path),
    "coBlockSize": ("co_block_size", int),
    "cacheCapacity": ("cache_capacity", int),
}


def load_properties(path) -> Dict[str, str]:
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"config file not found: {path}")
    properties: Dict[str, str] = {}
    for line_no, raw in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        line = raw.strip()
        if not line or line[0] in "#!":
            continue
        key, sep, value = line.partition("=")
        if not sep:
            key, sep, value = line.partition(":")
        if not sep:
            raise ValueError(f"{path}:{line_no}: expected 'key=value', got {line!r}")
        properties[key.strip()] = value.strip()
    return properties


class StemmerConfig:
    def __init__(
        self,
        lexicon_path=LEXICON_FILE_PATH,
        inverted_path=INVERTED_FILE_PATH,
        output_path=OUTPUT_FILE_PATH,
        min_lcp_length: int = MIN_LCP_LENGTH,
        prefix_length: int = PREFIX_LENGTH,
        rco_weight: float = RCO_WEIGHT,
        co_strategy: str = "ram",
        co_block_path=CO_BLOCK_PATH,
        co_block_size: int = CO_BLOCK_SIZE,
        cache_capacity: int = CACHE_CAPACITY,
    ):
        self.lexicon_path = Path(lexicon_path)
        self.inverted_path = Path(inverted_path)
        self.output_path = Path(output_path)
        self.min_lcp_length = min_lcp_length
        self.prefix_length = prefix_length
        self.rco_weight = rco_weight
        self.co_strategy = co_strategy
        self.co_block_path = Path(co_block_path)
        self.co_block_size = co_block_size
        self.cache_capacity = cache_capacity
        self.validate()

    @classmethod
    def from_properties(cls, path) -> "StemmerConfig":
        config = cls()
        config.update_from_properties(load_properties(path))
        return config

    def update_from_properties(self, properties: Dict[str, str]) -> None:
        values = {}
        for key, raw in properties.items():
            if key not in PROPERTY_KEYS:
                raise ValueError(f"unknown config key: {key}")
            attr, convert = PROPERTY_KEYS[key]
            try:
                values[attr] = convert(raw)
            except ValueError:
                raise ValueError(f"invalid value for {key}: {raw!r}") from None
        self.update(**values)

    def update(self, **values) -> None:
        for attr, value in values.items():
            if value is None:
                continue
            if not hasattr(self, attr):
                raise ValueError(f"unknown setting: {attr}")
            if attr.endswith("_path"):
                value = Path(value)
            setattr(self, attr, value)
        self.validate()

    def validate(self) -> None:
        if self.min_lcp_length < 0:
            raise ValueError(f"minLongestCommonPrefixLength must be >= 0, got {self.min_lcp_length}")
        if self.prefix_length < 0:
            raise ValueError(f"prefixLength must be >= 0, got {self.prefix_length}")
        if not self.rco_weight >= 0:
            raise ValueError(f"rcoWeight must be >= 0, got {self.rco_weight}")
        if self.co_strategy not in CO_STRATEGIES:
            raise ValueError(f"coStrategy must be one of {', '.join(CO_STRATEGIES)}, got {self.co_strategy!r}")
        if self.co_block_size < 1:
            raise ValueError(f"coBlockSize must be >= 1, got {self.co_block_size}")
        if self.cache_capacity < 1:
            raise ValueError(f"cacheCapacity must be >= 1, got {self.cache_capacity}")

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"StemmerConfig({fields})"
