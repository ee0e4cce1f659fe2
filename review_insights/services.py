"""
Review-level services built on the analytics pipeline.

Filtering and statistics for a review list, demo data, and ``run_analysis``,
which runs every stage and packs the results into an ``Analysis``.
"""

import logging
import random
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence

from . import settings
from .keyword_extraction import extract_top_bigrams, extract_top_keywords
from .models import Analysis, DateLike, Review, ensure_reviews, parse_review_date
from .sentiment_analysis import (
    SentimentAnalyzer,
    batch_analyze_sentiment,
    calculate_aggregate_sentiment,
    calculate_sentiment_by_rating,
    track_sentiment_over_time,
)
from .theme_extraction import extract_themes
from .topic_modeling import group_reviews_by_topic

logger = logging.getLogger(__name__)

SORT_KEYS = ("dateDesc", "dateAsc", "ratingDesc", "ratingAsc")

_SAMPLE_REVIEWS = [
    ("Delivery was late and the courier was rude", 1, "Trustpilot"),
    ("Product quality is excellent, exceeded my expectations", 5, "Google"),
    ("Price is okay for the value", 3, "Trustpilot"),
    ("Very satisfied with the purchase, will buy again", 5, "Yelp"),
    ("Package was damaged and the box was open", 2, "Google"),
    ("Support answered quickly and helped solve my issue", 4, "Trustpilot"),
    ("Battery life could be better", 3, "Yelp"),
    ("Terrible quality and awful customer service. Complete waste of money. Do not buy!", 1, "Trustpilot"),
    ("I absolutely love this product! Works perfectly.", 5, "Google"),
    ("Great multi-channel support, the team was friendly and helpful", 4, "Yelp"),
]
_SAMPLE_AUTHORS = ["Alex P.", "Maria G.", "Sam K.", "Jordan L.", "Chris D."]


@dataclass
class ReviewFilters:
    """
    @brief Criteria for narrowing a review list.

    @var min_rating, max_rating Inclusive rating bounds.
    @var start_date, end_date Inclusive date bounds; undated reviews fail them.
    @var search_term Case-insensitive substring of text or title.
    @var authors, sources Allowed values, empty means any.
    @var verified_only Keep verified reviews only.
    @var sort_by One of SORT_KEYS, newest first by default.
    """
    min_rating: Optional[int] = None
    max_rating: Optional[int] = None
    start_date: DateLike = None
    end_date: DateLike = None
    search_term: Optional[str] = None
    authors: List[str] = field(default_factory=list)
    sources: List[str] = field(default_factory=list)
    verified_only: bool = False
    sort_by: str = "dateDesc"


def _sort_reviews(reviews: List[Review], sort_by: str) -> List[Review]:
    if sort_by in ("ratingDesc", "ratingAsc"):
        rated = [r for r in reviews if r.rating is not None]
        unrated = [r for r in reviews if r.rating is None]
        rated.sort(key=lambda r: r.rating, reverse=sort_by == "ratingDesc")
        return rated + unrated

    if sort_by not in SORT_KEYS:
        logger.warning(f"Unknown sort key '{sort_by}', sorting by date (newest first)")
        sort_by = "dateDesc"
    dated = [(parse_review_date(r.date), r) for r in reviews]
    undated = [r for day, r in dated if day is None]
    dated = [(day, r) for day, r in dated if day is not None]
    dated.sort(key=lambda pair: pair[0], reverse=sort_by == "dateDesc")
    return [r for _, r in dated] + undated


def filter_reviews(reviews: Sequence[Review], filters: Optional[ReviewFilters] = None) -> List[Review]:
    """Apply ReviewFilters and sort the result."""
    filters = filters or ReviewFilters()
    result = ensure_reviews(reviews)

    if filters.min_rating is not None:
        result = [r for r in result if r.rating is not None and r.rating >= filters.min_rating]
    if filters.max_rating is not None:
        result = [r for r in result if r.rating is not None and r.rating <= filters.max_rating]

    start = parse_review_date(filters.start_date)
    end = parse_review_date(filters.end_date)
    if start is not None or end is not None:
        kept = []
        for review in result:
            day = parse_review_date(review.date)
            if day is None:
                continue
            if start is not None and day < start:
                continue
            if end is not None and day > end:
                continue
            kept.append(review)
        result = kept

    if filters.search_term:
        term = filters.search_term.lower()
        result = [r for r in result if term in r.text.lower() or term in r.title.lower()]
    if filters.authors:
        result = [r for r in result if r.author in filters.authors]
    if filters.verified_only:
        result = [r for r in result if r.verified]
    if filters.sources:
        result = [r for r in result if r.source in filters.sources]

    return _sort_reviews(result, filters.sort_by)


def get_review_stats(reviews: Sequence[Review]) -> Dict:
    """Rating-based counts: 4-5 stars positive, 1-2 negative, 3 neutral."""
    reviews = ensure_reviews(reviews)
    stats = {
        "total_reviews": len(reviews),
        "average_rating": 0.0,
        "positive_count": 0,
        "neutral_count": 0,
        "negative_count": 0,
        "verified_count": 0,
        "rating_distribution": {1: 0, 2: 0, 3: 0, 4: 0, 5: 0},
    }
    ratings = []
    for review in reviews:
        if review.verified:
            stats["verified_count"] += 1
        if review.rating is None:
            continue
        ratings.append(review.rating)
        stats["rating_distribution"][review.rating] += 1
        if review.rating >= 4:
            stats["positive_count"] += 1
        elif review.rating <= 2:
            stats["negative_count"] += 1
        else:
            stats["neutral_count"] += 1

    if ratings:
        stats["average_rating"] = round(sum(ratings) / len(ratings), 1)
    return stats


def get_all_sources(reviews: Sequence[Review]) -> List[str]:
    return list(dict.fromkeys(r.source for r in ensure_reviews(reviews) if r.source))


def get_all_authors(reviews: Sequence[Review]) -> List[str]:
    return list(dict.fromkeys(r.author for r in ensure_reviews(reviews) if r.author))


def get_date_filters(now: Optional[date] = None) -> Dict[str, ReviewFilters]:
    """Preset "last N days" windows ending today."""
    today = now or date.today()
    windows = {"last30Days": 30, "last3Months": 91, "last6Months": 182, "lastYear": 365}
    return {
        name: ReviewFilters(start_date=(today - timedelta(days=days)).isoformat(), end_date=today.isoformat())
        for name, days in windows.items()
    }


def generate_sample_reviews(n: int = 5, seed: Optional[int] = None, end_date: Optional[date] = None) -> List[Review]:
    """
    Build demo reviews from a fixed pool of texts.

    Args:
        n: Number of reviews to generate.
        seed: Seed for reproducible picks and dates.
        end_date: Latest review date, today by default.

    Returns:
        Reviews dated within the year before ``end_date``.
    """
    rng = random.Random(seed)
    end_date = end_date or date.today()
    reviews = []
    for _ in range(n):
        text, rating, source = rng.choice(_SAMPLE_REVIEWS)
        reviews.append(
            Review(
                id=str(uuid.UUID(int=rng.getrandbits(128), version=4)),
                text=text,
                rating=rating,
                date=(end_date - timedelta(days=rng.randint(0, 364))).isoformat(),
                source=source,
                author=rng.choice(_SAMPLE_AUTHORS),
                verified=rng.random() < 0.7,
            )
        )
    return reviews


def run_analysis(
    reviews: Sequence[Review],
    analyzer: Optional[SentimentAnalyzer] = None,
    topic_count: int = settings.TOPIC_COUNT,
    time_unit: str = settings.TREND_TIME_UNIT,
) -> Analysis:
    """
    Run every pipeline stage over a review list.

    Args:
        reviews: Reviews or plain records.
        analyzer: Sentiment analyzer, the shared AFINN one by default.
        topic_count: Number of topics to build.
        time_unit: Bucket size of the sentiment trend.

    Returns:
        Analysis with annotated reviews and the aggregates in ``stats``.
    """
    annotated = batch_analyze_sentiment(reviews, analyzer)
    topics = group_reviews_by_topic(annotated, topic_count=topic_count)

    stats = {
        "sentiment": calculate_aggregate_sentiment(annotated, analyzer).to_dict(),
        "sentiment_by_rating": {
            rating: metrics.to_dict()
            for rating, metrics in calculate_sentiment_by_rating(annotated, analyzer).items()
        },
        "keywords": [k.to_dict() for k in extract_top_keywords(annotated)],
        "bigrams": [b.to_dict() for b in extract_top_bigrams(annotated)],
        "themes": [t.to_dict() for t in extract_themes([r.text for r in annotated])],
        "topics": [t.to_dict() for t in topics["topics"]],
        "topic_distribution": {key: len(group) for key, group in topics["grouped_reviews"].items()},
        "trend": [p.to_dict() for p in track_sentiment_over_time(annotated, time_unit=time_unit, analyzer=analyzer)],
    }
    logger.info(f"Analyzed {len(annotated)} reviews")

    return Analysis(
        id=str(uuid.uuid4()),
        created_at=datetime.now(),
        reviews=annotated,
        stats=stats,
    )
