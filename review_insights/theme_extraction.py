"""
Theme extraction: stemmed terms ranked by frequency and shown through their
most natural surface form.
"""

import logging
import re
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence, Union

from sklearn.feature_extraction.text import TfidfVectorizer

from . import settings
from .models import Review, Theme, ensure_reviews
from .periods import group_reviews_by_time_period
from .text_utils import Lexicon, choose_representative, default_lexicon, join_prefixed_words, tokenize

logger = logging.getLogger(__name__)

_LETTERS_RE = re.compile(r"^[a-z]+$")


def _theme_tokens(text: str, lexicon: Lexicon) -> List[str]:
    tokens = tokenize(join_prefixed_words(text))
    return [
        token for token in tokens
        if len(token) > 2
        and not lexicon.is_stopword(token)
        and not token.isdigit()
        and (lexicon.has_prefix(token) or _LETTERS_RE.match(token))
    ]


def extract_themes(
    texts: Iterable[Optional[str]],
    max_themes: int = settings.MAX_THEMES,
    lexicon: Optional[Lexicon] = None,
) -> List[Theme]:
    """
    Rank stemmed terms across a corpus.

    Args:
        texts: Review texts; None entries are ignored.
        max_themes: Maximum number of themes returned.
        lexicon: Word lists and stemmer, the shared default if omitted.

    Returns:
        Themes seen more than once with a surface form longer than three
        characters, most frequent first.
    """
    texts = [text for text in (texts or []) if text]
    if not texts:
        return []
    lexicon = lexicon or default_lexicon()

    counts: Counter = Counter()
    surface: Dict[str, str] = {}
    for token in _theme_tokens(" ".join(texts), lexicon):
        stem = lexicon.stem(token)
        counts[stem] += 1
        surface[stem] = choose_representative(surface.get(stem), token, lexicon)

    themes = [
        Theme(word=surface[stem], count=count)
        for stem, count in counts.items()
        if count > 1 and len(surface[stem]) > 3
    ]
    themes.sort(key=lambda theme: theme.count, reverse=True)
    logger.debug(f"Extracted {len(themes)} themes from {len(counts)} stems")
    return themes[:max_themes]


def find_reviews_by_theme(
    reviews: Sequence[Review],
    theme: Union[Theme, str],
    text_field: str = "text",
) -> List[Review]:
    """Reviews whose lowercased text contains the theme word."""
    word = theme.word if isinstance(theme, Theme) else theme
    if not word:
        return []
    word = word.lower()
    return [
        review for review in ensure_reviews(reviews)
        if word in (getattr(review, text_field, "") or "").lower()
    ]


def theme_relevance_by_rating(
    reviews: Sequence[Review],
    theme_limit: int = settings.THEME_RELEVANCE_LIMIT,
    text_field: str = "text",
) -> Dict[int, List[Theme]]:
    by_rating: Dict[int, List[str]] = {}
    for review in ensure_reviews(reviews):
        if review.rating is None:
            continue
        by_rating.setdefault(int(review.rating), []).append(getattr(review, text_field, ""))
    return {rating: extract_themes(texts, theme_limit) for rating, texts in by_rating.items()}


def trending_themes(
    reviews: Sequence[Review],
    time_unit: str = settings.TREND_TIME_UNIT,
    limit: int = settings.TRENDING_THEMES_LIMIT,
    text_field: str = "text",
) -> List[Dict]:
    """
    Themes of the newest period ranked by growth over the oldest period.

    A theme absent from the oldest period counts as new with 100% growth.
    Fewer than two dated periods gives [].
    """
    grouped = group_reviews_by_time_period(reviews, time_unit)
    periods = sorted(grouped)
    if len(periods) < 2:
        return []

    def period_themes(period: str) -> List[Theme]:
        return extract_themes([getattr(r, text_field, "") for r in grouped[period]], limit * 2)

    old_counts = {theme.word: theme.count for theme in period_themes(periods[0])}
    trends = []
    for theme in period_themes(periods[-1]):
        old_count = old_counts.get(theme.word, 0)
        growth = 100.0 if old_count == 0 else (theme.count - old_count) / old_count * 100
        trends.append({
            "word": theme.word,
            "count": theme.count,
            "growth": round(growth, 2),
            "is_new": old_count == 0,
        })

    trends.sort(key=lambda item: (item["growth"], item["count"]), reverse=True)
    return trends[:limit]


def calculate_theme_importance(
    reviews: Sequence[Review],
    limit: int = settings.THEME_IMPORTANCE_LIMIT,
    text_field: str = "text",
    lexicon: Optional[Lexicon] = None,
) -> List[Dict]:
    """Terms ranked by their TF-IDF weight summed over all reviews."""
    docs = [getattr(r, text_field, "") or "" for r in ensure_reviews(reviews)]
    if not docs:
        return []
    lexicon = lexicon or default_lexicon()

    vectorizer = TfidfVectorizer(tokenizer=tokenize, lowercase=False, token_pattern=None)
    try:
        X = vectorizer.fit_transform(docs)
    except ValueError:
        # every document is empty
        return []
    vocab = vectorizer.get_feature_names_out()
    scores = X.sum(axis=0).A1

    ranked = [
        {"word": term, "score": round(float(score), 4)}
        for term, score in zip(vocab, scores)
        if len(term) > 2 and not lexicon.is_stopword(term) and not term.isdigit()
    ]
    ranked.sort(key=lambda item: item["score"], reverse=True)
    return ranked[:limit]
