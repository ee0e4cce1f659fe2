"""
Period-over-period comparison of ratings, volume, rating mix and keywords.

Ratios with a zero baseline never produce inf/nan: ratings and keywords
report None, volume and rating shares report 100 (growth from nothing) or 0.
"""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from . import settings
from .keyword_extraction import extract_top_keywords
from .models import KeywordChange, Review, ensure_reviews

logger = logging.getLogger(__name__)

RATING_VALUES = (1, 2, 3, 4, 5)


def _mean_rating(reviews: List[Review]) -> Optional[float]:
    ratings = [review.rating for review in reviews if review.rating is not None]
    if not ratings:
        return None
    return float(np.mean(ratings))


def _round(value: Optional[float], digits: int = 2) -> Optional[float]:
    return None if value is None else round(value, digits)


def _growth(old: float, new: float) -> float:
    if old:
        return (new - old) / old * 100
    return 100.0 if new > 0 else 0.0


def compare_ratings(period1_reviews: Sequence[Review], period2_reviews: Sequence[Review]) -> Dict:
    """Mean rating per period with absolute and percent change."""
    period1 = ensure_reviews(period1_reviews)
    period2 = ensure_reviews(period2_reviews)

    avg1 = _mean_rating(period1)
    avg2 = _mean_rating(period2)
    change = percent_change = None
    if avg1 is not None and avg2 is not None:
        change = avg2 - avg1
        percent_change = change / avg1 * 100 if avg1 else None

    return {
        "period1": _round(avg1),
        "period2": _round(avg2),
        "change": _round(change),
        "percent_change": _round(percent_change),
    }


def compare_volume(period1_reviews: Optional[Sequence], period2_reviews: Optional[Sequence]) -> Dict:
    count1 = len(period1_reviews or [])
    count2 = len(period2_reviews or [])
    return {
        "period1": count1,
        "period2": count2,
        "change": count2 - count1,
        "percent_change": round(_growth(count1, count2), 2),
    }


def get_rating_distribution(reviews: Sequence[Review]) -> Dict[int, float]:
    """Percentage share of each rating 1-5; {} for no reviews."""
    reviews = ensure_reviews(reviews)
    if not reviews:
        return {}
    counts = {rating: 0 for rating in RATING_VALUES}
    for review in reviews:
        if review.rating in counts:
            counts[review.rating] += 1
    total = len(reviews)
    return {rating: round(count / total * 100, 2) for rating, count in counts.items()}


def compare_rating_distribution(period1_reviews: Sequence[Review], period2_reviews: Sequence[Review]) -> Dict[int, Dict]:
    dist1 = get_rating_distribution(period1_reviews)
    dist2 = get_rating_distribution(period2_reviews)

    changes = {}
    for rating in RATING_VALUES:
        share1 = dist1.get(rating, 0.0)
        share2 = dist2.get(rating, 0.0)
        changes[rating] = {
            "period1": share1,
            "period2": share2,
            "change": round(share2 - share1, 2),
            "percent_change": round(_growth(share1, share2), 2),
        }
    return changes


def compare_keywords_between_periods(
    period1_reviews: Sequence[Review],
    period2_reviews: Sequence[Review],
    limit: int = settings.COMPARISON_KEYWORD_LIMIT,
    **filters,
) -> Dict[str, List]:
    """
    Classify keywords as increased, decreased or new between two periods.

    Args:
        period1_reviews: Earlier period.
        period2_reviews: Later period.
        limit: Maximum entries per list.
        **filters: Passed to extract_top_keywords (min_frequency, stopword flags...).

    Returns:
        Dict with "increased", "decreased" and "new" KeywordChange lists plus
        "period1_top" and "period2_top" Keyword lists. Keywords missing from
        the later period count as decreased to zero.
    """
    period1_top = extract_top_keywords(period1_reviews, limit=settings.COMPARISON_CANDIDATE_LIMIT, **filters)
    period2_top = extract_top_keywords(period2_reviews, limit=settings.COMPARISON_CANDIDATE_LIMIT, **filters)
    counts1 = {k.keyword: k.count for k in period1_top}
    counts2 = {k.keyword: k.count for k in period2_top}

    increased, new = [], []
    for keyword in period2_top:
        previous = counts1.get(keyword.keyword)
        if previous is None:
            new.append(KeywordChange(keyword=keyword.keyword, count=keyword.count, change=keyword.count))
        elif keyword.count > previous:
            increased.append(KeywordChange(
                keyword=keyword.keyword,
                count=keyword.count,
                previous_count=previous,
                change=keyword.count - previous,
                percent_change=round((keyword.count - previous) / previous * 100, 2),
            ))

    decreased = []
    for keyword in period1_top:
        current = counts2.get(keyword.keyword, 0)
        if current < keyword.count:
            decreased.append(KeywordChange(
                keyword=keyword.keyword,
                count=current,
                previous_count=keyword.count,
                change=current - keyword.count,
                percent_change=round((current - keyword.count) / keyword.count * 100, 2),
            ))

    increased.sort(key=lambda k: k.change, reverse=True)
    decreased.sort(key=lambda k: k.change)
    new.sort(key=lambda k: k.count, reverse=True)

    logger.debug(f"Keyword shifts: {len(increased)} up, {len(decreased)} down, {len(new)} new")
    return {
        "increased": increased[:limit],
        "decreased": decreased[:limit],
        "new": new[:limit],
        "period1_top": period1_top[:limit],
        "period2_top": period2_top[:limit],
    }


def compare_across_sources(reviews: Sequence[Review]) -> Dict[str, Dict]:
    """Volume, share, mean rating and rating mix per review source."""
    reviews = ensure_reviews(reviews)
    if not reviews:
        return {}

    by_source: Dict[str, List[Review]] = {}
    for review in reviews:
        by_source.setdefault(review.source or "unknown", []).append(review)

    comparison = {}
    for source, source_reviews in by_source.items():
        comparison[source] = {
            "count": len(source_reviews),
            "percentage": round(len(source_reviews) / len(reviews) * 100, 2),
            "avg_rating": _round(_mean_rating(source_reviews)),
            "distribution": get_rating_distribution(source_reviews),
        }
    return comparison


def generate_comprehensive_comparison(period1_reviews: Sequence[Review], period2_reviews: Sequence[Review]) -> Dict:
    return {
        "ratings": compare_ratings(period1_reviews, period2_reviews),
        "volume": compare_volume(period1_reviews, period2_reviews),
        "distribution": compare_rating_distribution(period1_reviews, period2_reviews),
        "period1_count": len(period1_reviews or []),
        "period2_count": len(period2_reviews or []),
    }
