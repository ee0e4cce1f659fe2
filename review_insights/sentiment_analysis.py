"""
Lexicon-based sentiment scoring and sentiment aggregates.

Two classifiers coexist on purpose: ``classify_by_comparative`` (length
normalized, used for annotations and aggregates) and
``classify_by_raw_score`` (used when bucketing reviews for display).
"""

import logging
from collections import Counter
from dataclasses import replace
from functools import lru_cache
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np
from afinn import Afinn

from . import settings
from .models import AggregateSentiment, Review, SentimentResult, TimeSeriesPoint, ensure_reviews
from .periods import group_reviews_by_time_period
from .text_utils import tokenize

logger = logging.getLogger(__name__)


class SentimentAnalyzer:
    """
    Scores text by summing per-token polarity weights.

    Weights come from the AFINN word list unless an explicit
    ``word -> weight`` mapping is given. Lookups are memoized; the analyzer
    holds no other state, so one instance can be shared across threads.
    """

    def __init__(self, lexicon: Optional[Mapping[str, float]] = None, language: str = "en"):
        if lexicon is not None:
            weights = {str(word).lower(): float(weight) for word, weight in lexicon.items()}
            lookup = lambda token: weights.get(token, 0.0)  # noqa: E731
            self.source = "custom"
        else:
            lookup = Afinn(language=language).score
            self.source = f"afinn-{language}"
        self._polarity = lru_cache(maxsize=16384)(lookup)
        logger.debug(f"Initialized SentimentAnalyzer with lexicon={self.source}")

    def polarity(self, token: str) -> float:
        return float(self._polarity(token))

    def analyze(self, text: Optional[str]) -> SentimentResult:
        tokens = tokenize(text)
        if not tokens:
            return SentimentResult()
        score = float(sum(self.polarity(token) for token in tokens))
        comparative = score / len(tokens)
        return SentimentResult(
            score=score,
            comparative=comparative,
            classification=classify_by_comparative(comparative),
        )


@lru_cache(maxsize=None)
def default_analyzer() -> SentimentAnalyzer:
    return SentimentAnalyzer()


def classify_by_comparative(comparative: float, threshold: float = settings.COMPARATIVE_THRESHOLD) -> str:
    if comparative > threshold:
        return "positive"
    if comparative < -threshold:
        return "negative"
    return "neutral"


def classify_by_raw_score(score: float, threshold: float = settings.RAW_SCORE_THRESHOLD) -> str:
    if score >= threshold:
        return "positive"
    if score <= -threshold:
        return "negative"
    return "neutral"


def analyze_sentiment(text: Optional[str], analyzer: Optional[SentimentAnalyzer] = None) -> SentimentResult:
    """
    Score a single text.

    Args:
        text: Text to score; None or empty gives a neutral zero result.
        analyzer: Analyzer to use, the shared AFINN one by default.

    Returns:
        SentimentResult with raw score, comparative score and its comparative class.
    """
    return (analyzer or default_analyzer()).analyze(text)


def annotate_review(review: Review, analyzer: Optional[SentimentAnalyzer] = None) -> Review:
    """Return the review with sentiment attached; already annotated reviews are returned as is."""
    if review.sentiment is not None:
        return review
    return replace(review, sentiment=analyze_sentiment(review.text, analyzer))


def batch_analyze_sentiment(reviews: Sequence[Review], analyzer: Optional[SentimentAnalyzer] = None) -> List[Review]:
    return [annotate_review(review, analyzer) for review in ensure_reviews(reviews)]


def calculate_average_sentiment(texts: Iterable[str], analyzer: Optional[SentimentAnalyzer] = None) -> float:
    texts = list(texts or [])
    if not texts:
        return 0.0
    scores = np.array([analyze_sentiment(text, analyzer).score for text in texts], dtype=float)
    return float(scores.mean())


def group_by_sentiment(
    reviews: Sequence[Review],
    text_field: str = "text",
    analyzer: Optional[SentimentAnalyzer] = None,
) -> Dict[str, List[Review]]:
    """Bucket reviews by raw score; only non-empty buckets are returned."""
    groups: Dict[str, List[Review]] = {}
    for review in ensure_reviews(reviews):
        result = analyze_sentiment(getattr(review, text_field, ""), analyzer)
        groups.setdefault(classify_by_raw_score(result.score), []).append(review)
    return groups


def _percentage(count: int, total: int) -> float:
    return round(count / total * 100, 2) if total else 0.0


def calculate_aggregate_sentiment(
    reviews: Sequence[Review],
    analyzer: Optional[SentimentAnalyzer] = None,
) -> AggregateSentiment:
    """
    Average raw score and class shares over a review set.

    Reviews lacking sentiment are scored on the fly; the caller's objects
    are never modified.
    """
    annotated = batch_analyze_sentiment(reviews, analyzer)
    if not annotated:
        return AggregateSentiment()

    scores = np.array([review.sentiment.score for review in annotated], dtype=float)
    counts = Counter(review.sentiment.classification for review in annotated)
    total = len(annotated)
    return AggregateSentiment(
        average_score=round(float(scores.mean()), 4),
        positive_percentage=_percentage(counts["positive"], total),
        negative_percentage=_percentage(counts["negative"], total),
        neutral_percentage=_percentage(counts["neutral"], total),
        review_count=total,
    )


def calculate_sentiment_by_rating(
    reviews: Sequence[Review],
    analyzer: Optional[SentimentAnalyzer] = None,
) -> Dict[int, AggregateSentiment]:
    by_rating: Dict[int, List[Review]] = {}
    for review in batch_analyze_sentiment(reviews, analyzer):
        if review.rating is None:
            continue
        by_rating.setdefault(int(review.rating), []).append(review)
    return {rating: calculate_aggregate_sentiment(group, analyzer) for rating, group in by_rating.items()}


def get_extreme_sentiment_reviews(
    reviews: Sequence[Review],
    limit: int = settings.EXTREME_LIMIT,
    min_length: int = settings.EXTREME_MIN_LENGTH,
    analyzer: Optional[SentimentAnalyzer] = None,
) -> Dict[str, List[Review]]:
    """
    Most positive and most negative reviews by comparative score.

    Both lists are stable sorts of the same candidates, so ties keep input
    order and small sets can show the same review in both lists.
    """
    annotated = batch_analyze_sentiment(reviews, analyzer)
    if min_length:
        annotated = [review for review in annotated if len(review.text) >= min_length]

    most_positive = sorted(annotated, key=lambda r: r.sentiment.comparative, reverse=True)
    most_negative = sorted(annotated, key=lambda r: r.sentiment.comparative)
    return {
        "positive": most_positive[:limit],
        "negative": most_negative[:limit],
    }


def track_sentiment_over_time(
    reviews: Sequence[Review],
    time_unit: str = settings.TREND_TIME_UNIT,
    limit: int = settings.TREND_LIMIT,
    analyzer: Optional[SentimentAnalyzer] = None,
) -> List[TimeSeriesPoint]:
    """
    Sentiment aggregates per calendar period, oldest first.

    Only the most recent ``limit`` periods are returned; older ones are
    dropped. Reviews without a valid date are not counted.
    """
    annotated = batch_analyze_sentiment(reviews, analyzer)
    if not annotated:
        return []

    grouped = group_reviews_by_time_period(annotated, time_unit)
    periods = sorted(grouped)
    if limit and limit > 0:
        periods = periods[-limit:]

    points = []
    for period in periods:
        metrics = calculate_aggregate_sentiment(grouped[period], analyzer)
        points.append(TimeSeriesPoint(
            period=period,
            average_score=metrics.average_score,
            positive_percentage=metrics.positive_percentage,
            negative_percentage=metrics.negative_percentage,
            neutral_percentage=metrics.neutral_percentage,
            review_count=len(grouped[period]),
        ))
    logger.info(f"Built {len(points)} {time_unit} sentiment points from {len(annotated)} reviews")
    return points
