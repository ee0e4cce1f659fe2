"""
Customer-review text analytics.

Sentiment scoring, keyword, bigram and theme extraction, topic grouping,
sentiment trends and period comparison over in-memory review lists.
"""

import logging

from .models import (
    Review,
    SentimentResult,
    Keyword,
    Bigram,
    Theme,
    Topic,
    AggregateSentiment,
    TimeSeriesPoint,
    KeywordChange,
    Analysis,
    ensure_reviews,
    parse_review_date,
)

from .text_utils import (
    Lexicon,
    default_lexicon,
    tokenize,
    join_prefixed_words,
    STOPWORDS,
    DOMAIN_STOPWORDS,
    COMMON_PREFIXES,
)

from .sentiment_analysis import (
    SentimentAnalyzer,
    default_analyzer,
    analyze_sentiment,
    classify_by_comparative,
    classify_by_raw_score,
    annotate_review,
    batch_analyze_sentiment,
    calculate_average_sentiment,
    group_by_sentiment,
    calculate_aggregate_sentiment,
    calculate_sentiment_by_rating,
    get_extreme_sentiment_reviews,
    track_sentiment_over_time,
)

from .keyword_extraction import (
    extract_keywords,
    extract_top_keywords,
    extract_keywords_by_sentiment,
    extract_top_bigrams,
)

from .theme_extraction import (
    extract_themes,
    find_reviews_by_theme,
    theme_relevance_by_rating,
    trending_themes,
    calculate_theme_importance,
)

from .periods import (
    period_key,
    group_reviews_by_time_period,
    split_reviews_by_date,
    get_comparison_periods,
)

from .topic_modeling import group_reviews_by_topic

from .comparison import (
    compare_ratings,
    compare_volume,
    compare_rating_distribution,
    compare_keywords_between_periods,
    get_rating_distribution,
    compare_across_sources,
    generate_comprehensive_comparison,
)

from .file_processing import load_reviews_from_file, reviews_from_records

from .services import (
    ReviewFilters,
    filter_reviews,
    get_review_stats,
    get_all_sources,
    get_all_authors,
    get_date_filters,
    generate_sample_reviews,
    run_analysis,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Models
    'Review',
    'SentimentResult',
    'Keyword',
    'Bigram',
    'Theme',
    'Topic',
    'AggregateSentiment',
    'TimeSeriesPoint',
    'KeywordChange',
    'Analysis',
    'ensure_reviews',
    'parse_review_date',

    # Tokenizer & lexicon
    'Lexicon',
    'default_lexicon',
    'tokenize',
    'join_prefixed_words',
    'STOPWORDS',
    'DOMAIN_STOPWORDS',
    'COMMON_PREFIXES',

    # Sentiment & aggregation
    'SentimentAnalyzer',
    'default_analyzer',
    'analyze_sentiment',
    'classify_by_comparative',
    'classify_by_raw_score',
    'annotate_review',
    'batch_analyze_sentiment',
    'calculate_average_sentiment',
    'group_by_sentiment',
    'calculate_aggregate_sentiment',
    'calculate_sentiment_by_rating',
    'get_extreme_sentiment_reviews',
    'track_sentiment_over_time',

    # Keywords
    'extract_keywords',
    'extract_top_keywords',
    'extract_keywords_by_sentiment',
    'extract_top_bigrams',

    # Themes
    'extract_themes',
    'find_reviews_by_theme',
    'theme_relevance_by_rating',
    'trending_themes',
    'calculate_theme_importance',

    # Periods & topics
    'period_key',
    'group_reviews_by_time_period',
    'split_reviews_by_date',
    'get_comparison_periods',
    'group_reviews_by_topic',

    # Comparison
    'compare_ratings',
    'compare_volume',
    'compare_rating_distribution',
    'compare_keywords_between_periods',
    'get_rating_distribution',
    'compare_across_sources',
    'generate_comprehensive_comparison',

    # Ingestion & services
    'load_reviews_from_file',
    'reviews_from_records',
    'ReviewFilters',
    'filter_reviews',
    'get_review_stats',
    'get_all_sources',
    'get_all_authors',
    'get_date_filters',
    'generate_sample_reviews',
    'run_analysis',
]
