"""
Calendar bucketing of reviews.

Weeks follow ISO-8601 (Monday start, ISO week-numbering year), so
"2021-01-03" falls into "2020-W53". Reviews without a parsable date are
left out of every bucketed view.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence

from . import settings
from .models import DateLike, Review, ensure_reviews, parse_review_date

logger = logging.getLogger(__name__)


def period_key(value: date, time_unit: str = settings.TREND_TIME_UNIT) -> str:
    if time_unit == "day":
        return value.strftime("%Y-%m-%d")
    if time_unit == "week":
        iso_year, iso_week, _ = value.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    if time_unit == "quarter":
        return f"{value.year}-Q{(value.month - 1) // 3 + 1}"
    if time_unit == "year":
        return f"{value.year}"
    if time_unit != "month":
        logger.warning(f"Unknown time unit '{time_unit}', grouping by month")
    return value.strftime("%Y-%m")


def group_reviews_by_time_period(
    reviews: Sequence[Review],
    time_unit: str = settings.TREND_TIME_UNIT,
) -> Dict[str, List[Review]]:
    """
    Bucket reviews by calendar period.

    Args:
        reviews: Reviews (or plain records) to bucket.
        time_unit: "day", "week", "month", "quarter" or "year".

    Returns:
        Period key -> reviews, in first-seen order. Reviews with a missing or
        malformed date are skipped.
    """
    if time_unit not in settings.TIME_UNITS:
        logger.warning(f"Unknown time unit '{time_unit}', grouping by month")
        time_unit = "month"

    groups: Dict[str, List[Review]] = {}
    skipped = 0
    for review in ensure_reviews(reviews):
        day = parse_review_date(review.date)
        if day is None:
            skipped += 1
            logger.debug(f"Review {review.id} has no usable date ({review.date!r}), skipping")
            continue
        groups.setdefault(period_key(day, time_unit), []).append(review)

    if skipped:
        logger.info(f"Excluded {skipped} reviews without a valid date from {time_unit} buckets")
    return groups


def split_reviews_by_date(reviews: Sequence[Review], dividing_date: DateLike) -> Dict[str, List[Review]]:
    """Split reviews into before (period1) and on-or-after (period2) a date."""
    reviews = ensure_reviews(reviews)
    divider = parse_review_date(dividing_date)
    if not reviews or divider is None:
        return {"period1": [], "period2": []}

    period1, period2 = [], []
    for review in reviews:
        day = parse_review_date(review.date)
        if day is None:
            continue
        (period1 if day < divider else period2).append(review)
    return {"period1": period1, "period2": period2}


def get_comparison_periods(now: Optional[datetime] = None) -> List[Dict]:
    """Predefined "last N days vs previous N days" windows."""
    now = now or datetime.now()
    options = [
        ("last30", "Last 30 Days vs Previous 30 Days", 30),
        ("last90", "Last 90 Days vs Previous 90 Days", 90),
        ("last180", "Last 6 Months vs Previous 6 Months", 180),
        ("yearOverYear", "This Year vs Last Year", 365),
    ]
    periods = []
    for period_id, name, days in options:
        current_start = now - timedelta(days=days)
        periods.append({
            "id": period_id,
            "name": name,
            "current_start": current_start,
            "previous_start": current_start - timedelta(days=days),
        })
    return periods
