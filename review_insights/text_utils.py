"""
Tokenizer and lexicon shared by every stage of the pipeline.

The stopword sets, the recognized word prefixes and the stemmer are bundled
into an immutable ``Lexicon``; ``default_lexicon()`` builds it once per
process and every public function accepts another one through ``lexicon=``.
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import FrozenSet, Iterable, List, Optional, Tuple

from nltk.stem import PorterStemmer

from . import settings

STOPWORDS = frozenset([
    "a", "about", "above", "after", "again", "against", "all", "am", "an", "and", "any", "are", "as", "at", "be",
    "because", "been", "before", "being", "below", "between", "both", "but", "by", "could", "did", "do", "does",
    "doing", "down", "during", "each", "few", "for", "from", "further", "had", "has", "have", "having", "he",
    "her", "here", "hers", "herself", "him", "himself", "his", "how", "i", "if", "in", "into", "is", "it", "its",
    "itself", "just", "me", "more", "most", "my", "myself", "no", "nor", "not", "now", "of", "off", "on", "once",
    "only", "or", "other", "our", "ours", "ourselves", "out", "over", "own", "same", "she", "should", "so", "some",
    "such", "than", "that", "the", "their", "theirs", "them", "themselves", "then", "there", "these", "they",
    "this", "those", "through", "to", "too", "under", "until", "up", "very", "was", "we", "were", "what", "when",
    "where", "which", "while", "who", "whom", "why", "will", "with", "would", "you", "your", "yours", "yourself",
    "yourselves", "also", "get", "got", "im",
])

# Words every review uses; they say nothing about what the review is about
DOMAIN_STOPWORDS = frozenset([
    "review", "star", "stars", "rating", "rated", "product", "service", "customer",
    "experience", "purchased", "buy", "bought", "ordering", "order", "received",
])

COMMON_PREFIXES = ("multi", "pre", "post", "non", "sub", "inter", "intra")

_TOKEN_RE = re.compile(r"[^\W_]+(?:'[^\W_]+)*")
_PREFIX_HYPHEN_RE = re.compile(r"\b(" + "|".join(COMMON_PREFIXES) + r")-(\w+)", re.IGNORECASE)
_KEYWORD_RE = re.compile(r"^[a-z0-9']+$")
_CURLY_APOSTROPHES = str.maketrans({"’": "'", "‘": "'"})


def _porter_stemmer() -> PorterStemmer:
    return PorterStemmer(mode=PorterStemmer.ORIGINAL_ALGORITHM)


@dataclass(frozen=True)
class Lexicon:
    """
    @brief Read-only word lists and stemmer used for filtering and grouping tokens.

    @var stopwords Generic English function words.
    @var domain_stopwords Review boilerplate ("product", "stars", ...).
    @var prefixes Prefixes whose compounds are kept as theme representatives.
    @var stemmer Porter stemmer (original algorithm).
    """
    stopwords: FrozenSet[str] = STOPWORDS
    domain_stopwords: FrozenSet[str] = DOMAIN_STOPWORDS
    prefixes: Tuple[str, ...] = COMMON_PREFIXES
    stemmer: PorterStemmer = field(default_factory=_porter_stemmer, compare=False, repr=False)

    def stem(self, token: str) -> str:
        return self.stemmer.stem(token)

    def is_stopword(self, token: str) -> bool:
        return token in self.stopwords

    def is_domain_stopword(self, token: str) -> bool:
        return token in self.domain_stopwords

    def has_prefix(self, token: str, strict: bool = True) -> bool:
        """True if the token starts with a recognized prefix.

        In strict mode the prefix alone ("pre") does not count.
        """
        return any(
            token.startswith(prefix) and (not strict or len(token) > len(prefix))
            for prefix in self.prefixes
        )


@lru_cache(maxsize=None)
def default_lexicon() -> Lexicon:
    return Lexicon()


def tokenize(text: Optional[str]) -> List[str]:
    """Split text into lowercase word tokens, keeping internal apostrophes."""
    if not text:
        return []
    return _TOKEN_RE.findall(str(text).lower().translate(_CURLY_APOSTROPHES))


def join_prefixed_words(text: Optional[str]) -> str:
    """Join hyphenated prefix compounds: "multi-channel" -> "multichannel"."""
    if not text:
        return ""
    return _PREFIX_HYPHEN_RE.sub(lambda m: m.group(1) + m.group(2), str(text))


def is_keyword_token(token: str) -> bool:
    return bool(_KEYWORD_RE.match(token))


def filter_tokens(
    tokens: Iterable[str],
    min_word_length: int = settings.MIN_WORD_LENGTH,
    remove_stopwords: bool = settings.REMOVE_STOPWORDS,
    remove_domain_stopwords: bool = settings.REMOVE_DOMAIN_STOPWORDS,
    lexicon: Optional[Lexicon] = None,
) -> List[str]:
    lexicon = lexicon or default_lexicon()
    kept = []
    for token in tokens:
        if len(token) < min_word_length:
            continue
        if remove_stopwords and lexicon.is_stopword(token):
            continue
        if remove_domain_stopwords and lexicon.is_domain_stopword(token):
            continue
        if not is_keyword_token(token):
            continue
        kept.append(token)
    return kept


def choose_representative(current: Optional[str], candidate: str, lexicon: Optional[Lexicon] = None) -> str:
    """Pick the surface form shown for a stem.

    Prefixed compounds always take over; otherwise the shorter form wins and
    the earlier one is kept on equal length.
    """
    lexicon = lexicon or default_lexicon()
    if current is None or lexicon.has_prefix(candidate, strict=False) or len(candidate) < len(current):
        return candidate
    return current
