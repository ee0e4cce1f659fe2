"""
Configuration settings for review-insights.

Centralized defaults and thresholds for the text-analytics pipeline.
"""

import logging
import os
import sys

# Sentiment classification
COMPARATIVE_THRESHOLD = 0.05  # |score / tokens| above this is polar (annotations, aggregates)
RAW_SCORE_THRESHOLD = 2  # |score| at or above this is polar (display buckets)
SENTIMENT_LABELS = ("positive", "negative", "neutral")

# Token filters
MIN_WORD_LENGTH = 3
REMOVE_STOPWORDS = True
REMOVE_DOMAIN_STOPWORDS = True
STEM_WORDS = False

# Keyword / bigram extraction
KEYWORD_LIMIT = 20
KEYWORD_MIN_FREQUENCY = 2
BIGRAM_LIMIT = 20
BIGRAM_MIN_FREQUENCY = 2
BIGRAM_REMOVE_DOMAIN_STOPWORDS = False

# Themes
MAX_THEMES = 20
THEME_RELEVANCE_LIMIT = 10
TRENDING_THEMES_LIMIT = 10
THEME_IMPORTANCE_LIMIT = 15

# Topic grouping
TOPIC_COUNT = 5
KEYWORDS_PER_TOPIC = 5
TOPIC_CANDIDATE_LIMIT = 100
TOPIC_MIN_FREQUENCY = 3
OTHER_TOPIC = "other"

# Aggregation & trends
EXTREME_LIMIT = 5
EXTREME_MIN_LENGTH = 20
TREND_TIME_UNIT = "month"
TREND_LIMIT = 12
TIME_UNITS = ("day", "week", "month", "quarter", "year")

# Period comparison
COMPARISON_KEYWORD_LIMIT = 10
COMPARISON_CANDIDATE_LIMIT = 100

# Ingestion
TEXT_COLUMN_CANDIDATES = ("text", "review", "comment", "content", "body", "message")
FILE_ENCODINGS = ("utf-8", "utf-8-sig", "cp1252", "iso-8859-1")

# Logging
LOG_LEVEL = os.getenv("REVIEW_INSIGHTS_LOG_LEVEL", "WARNING")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(log_level: str = LOG_LEVEL):
    """Configure logging for a host application that has none of its own."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
