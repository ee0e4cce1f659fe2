"""
Topic grouping by keyword co-occurrence.

Seeds are the most frequent keywords; each seed collects the keywords it
shares reviews with, and every review goes to the topic matching most of
its keywords. This is a greedy assignment, not a statistical clustering.
"""

import logging
from typing import Dict, List, Sequence, Set

from . import settings
from .keyword_extraction import extract_keywords, extract_top_keywords
from .models import Review, Topic, ensure_reviews

logger = logging.getLogger(__name__)


def _co_occurring(seed: str, candidates: List[str], review_keywords: List[Set[str]], limit: int) -> List[str]:
    scored = []
    for keyword in candidates:
        if keyword == seed:
            continue
        co_occurrences = sum(1 for words in review_keywords if seed in words and keyword in words)
        if co_occurrences > 0:
            scored.append((keyword, co_occurrences))
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return [keyword for keyword, _ in scored[:max(limit, 0)]]


def _best_topic(words: Set[str], topics: List[Topic]) -> str:
    best, max_matches = settings.OTHER_TOPIC, 0
    for topic in topics:
        matches = sum(1 for keyword in topic.keywords if keyword in words)
        # strictly greater: the earlier topic keeps ties
        if matches > max_matches:
            best, max_matches = topic.main_keyword, matches
    return best


def group_reviews_by_topic(
    reviews: Sequence[Review],
    topic_count: int = settings.TOPIC_COUNT,
    keywords_per_topic: int = settings.KEYWORDS_PER_TOPIC,
    text_field: str = "text",
) -> Dict:
    """
    Cluster reviews around their most frequent keywords.

    Args:
        reviews: Reviews (or plain records) to group.
        topic_count: Number of seed keywords, i.e. topics.
        keywords_per_topic: Seed plus related keywords per topic.
        text_field: Review attribute holding the text.

    Returns:
        {"topics": [Topic, ...], "grouped_reviews": {main_keyword: [Review], ..., "other": [...]}}
    """
    reviews = ensure_reviews(reviews)
    if not reviews:
        return {"topics": [], "grouped_reviews": {}}

    candidates = extract_top_keywords(
        reviews,
        limit=settings.TOPIC_CANDIDATE_LIMIT,
        min_frequency=settings.TOPIC_MIN_FREQUENCY,
        text_field=text_field,
    )
    candidate_words = [k.keyword for k in candidates]
    review_keywords = [set(extract_keywords(getattr(r, text_field, ""))) for r in reviews]

    topics = []
    for seed in candidates[:topic_count]:
        topics.append(Topic(
            main_keyword=seed.keyword,
            frequency=seed.count,
            related_keywords=_co_occurring(seed.keyword, candidate_words, review_keywords, keywords_per_topic - 1),
            review_count=sum(1 for words in review_keywords if seed.keyword in words),
        ))

    grouped: Dict[str, List[Review]] = {topic.main_keyword: [] for topic in topics}
    grouped[settings.OTHER_TOPIC] = []
    for review, words in zip(reviews, review_keywords):
        grouped[_best_topic(words, topics)].append(review)

    logger.info(
        f"Grouped {len(reviews)} reviews into {len(topics)} topics "
        f"({len(grouped[settings.OTHER_TOPIC])} in '{settings.OTHER_TOPIC}')"
    )
    return {"topics": topics, "grouped_reviews": grouped}
