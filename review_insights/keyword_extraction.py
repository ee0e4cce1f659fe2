"""
Keyword and bigram extraction over review text.
"""

import logging
from collections import Counter
from typing import Dict, List, Optional, Sequence

from . import settings
from .models import Bigram, Keyword, Review, ensure_reviews
from .text_utils import Lexicon, default_lexicon, filter_tokens, tokenize

logger = logging.getLogger(__name__)


def extract_keywords(
    text: Optional[str],
    min_word_length: int = settings.MIN_WORD_LENGTH,
    remove_stopwords: bool = settings.REMOVE_STOPWORDS,
    remove_domain_stopwords: bool = settings.REMOVE_DOMAIN_STOPWORDS,
    stem_words: bool = settings.STEM_WORDS,
    lexicon: Optional[Lexicon] = None,
) -> List[str]:
    """
    Tokenize text and keep candidate keywords.

    Args:
        text: Raw text, None or empty gives [].
        min_word_length: Shortest token kept.
        remove_stopwords: Drop generic English stopwords.
        remove_domain_stopwords: Drop review boilerplate words.
        stem_words: Replace each kept token by its stem.
        lexicon: Word lists and stemmer, the shared default if omitted.

    Returns:
        Kept tokens in text order, duplicates included.
    """
    if not text:
        return []
    lexicon = lexicon or default_lexicon()
    tokens = filter_tokens(
        tokenize(text),
        min_word_length=min_word_length,
        remove_stopwords=remove_stopwords,
        remove_domain_stopwords=remove_domain_stopwords,
        lexicon=lexicon,
    )
    if stem_words:
        tokens = [lexicon.stem(token) for token in tokens]
    return tokens


def _rank(counts: Counter, min_frequency: int, limit: Optional[int]) -> List[tuple]:
    # Counter keeps first-seen order and sorted() is stable, so ties stay in that order
    ranked = sorted(
        ((item, count) for item, count in counts.items() if count >= min_frequency),
        key=lambda pair: pair[1],
        reverse=True,
    )
    return ranked[:limit] if limit is not None else ranked


def extract_top_keywords(
    reviews: Sequence[Review],
    limit: int = settings.KEYWORD_LIMIT,
    min_frequency: int = settings.KEYWORD_MIN_FREQUENCY,
    text_field: str = "text",
    **filters,
) -> List[Keyword]:
    """Most frequent keywords across reviews, at least ``min_frequency`` each."""
    counts: Counter = Counter()
    for review in ensure_reviews(reviews):
        counts.update(extract_keywords(getattr(review, text_field, ""), **filters))

    keywords = [Keyword(keyword=word, count=count) for word, count in _rank(counts, min_frequency, limit)]
    logger.debug(f"Ranked {len(keywords)} of {len(counts)} distinct keywords")
    return keywords


def extract_keywords_by_sentiment(reviews: Sequence[Review], **options) -> Dict[str, List[Keyword]]:
    """
    Top keywords per sentiment class.

    Reviews are partitioned by their attached classification; reviews
    without sentiment count as neutral and are not scored here.
    """
    partitions: Dict[str, List[Review]] = {label: [] for label in settings.SENTIMENT_LABELS}
    for review in ensure_reviews(reviews):
        label = review.sentiment.classification if review.sentiment else "neutral"
        partitions.setdefault(label, []).append(review)
    return {label: extract_top_keywords(partitions[label], **options) for label in settings.SENTIMENT_LABELS}


def extract_top_bigrams(
    reviews: Sequence[Review],
    limit: int = settings.BIGRAM_LIMIT,
    min_frequency: int = settings.BIGRAM_MIN_FREQUENCY,
    remove_stopwords: bool = settings.REMOVE_STOPWORDS,
    remove_domain_stopwords: bool = settings.BIGRAM_REMOVE_DOMAIN_STOPWORDS,
    text_field: str = "text",
    lexicon: Optional[Lexicon] = None,
) -> List[Bigram]:
    """
    Most frequent two-word phrases.

    Stopwords are removed before pairing, so "battery life is short" yields
    "battery life" and "life short". Both words must be longer than two
    characters.
    """
    lexicon = lexicon or default_lexicon()
    counts: Counter = Counter()
    for review in ensure_reviews(reviews):
        tokens = tokenize(getattr(review, text_field, ""))
        if remove_stopwords:
            tokens = [t for t in tokens if not lexicon.is_stopword(t)]
        if remove_domain_stopwords:
            tokens = [t for t in tokens if not lexicon.is_domain_stopword(t)]
        for first, second in zip(tokens, tokens[1:]):
            if len(first) > 2 and len(second) > 2:
                counts[f"{first} {second}"] += 1

    return [Bigram(phrase=phrase, count=count) for phrase, count in _rank(counts, min_frequency, limit)]
