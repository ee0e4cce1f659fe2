from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
import uuid

import pandas as pd

DateLike = Union[str, date, datetime, None]


@dataclass(frozen=True)
class SentimentResult:
    """
    @brief Lexicon-based sentiment of a single text.

    @var score Sum of polarity weights of the matched tokens.
    @var comparative score divided by the token count (0 for no tokens).
    @var classification "positive", "negative" or "neutral".
    """
    score: float = 0.0
    comparative: float = 0.0
    classification: str = "neutral"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SentimentResult":
        return cls(
            score=float(data.get("score", 0.0) or 0.0),
            comparative=float(data.get("comparative", 0.0) or 0.0),
            classification=str(data.get("classification") or "neutral"),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Review:
    """
    @brief A single customer review.

    @var id Unique identifier of the review.
    @var text Review text, may be empty.
    @var rating Star rating 1-5, None when absent.
    @var date ISO-8601 string, date or datetime; normalized on use.
    @var title, source, author, product, verified Pass-through attributes.
    @var sentiment Attached SentimentResult, None until annotated.
    """
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    text: str = ""
    rating: Optional[int] = None
    date: DateLike = None
    title: str = ""
    source: Optional[str] = None
    author: Optional[str] = None
    product: Optional[str] = None
    verified: bool = False
    sentiment: Optional[SentimentResult] = None

    def __post_init__(self):
        if self.text is None:
            self.text = ""
        if self.title is None:
            self.title = ""
        if self.rating is not None:
            self.rating = _coerce_rating(self.rating)

    @property
    def is_annotated(self) -> bool:
        return self.sentiment is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Review":
        """Create a Review from a plain record, coercing rating and verified flag."""
        rating = data.get("rating")
        if rating is None or (isinstance(rating, str) and not rating.strip()) or _is_missing(rating):
            rating = None
        else:
            rating = _coerce_rating(rating)

        sentiment = data.get("sentiment")
        if isinstance(sentiment, Mapping):
            sentiment = SentimentResult.from_dict(sentiment)
        elif not isinstance(sentiment, SentimentResult):
            sentiment = None

        review_id = data.get("id") or data.get("review_id")
        return cls(
            id=str(review_id) if review_id is not None else str(uuid.uuid4()),
            text=_text_or_empty(data.get("text", data.get("content"))),
            rating=rating,
            date=data.get("date"),
            title=_text_or_empty(data.get("title")),
            source=data.get("source"),
            author=data.get("author"),
            product=data.get("product"),
            verified=_as_bool(data.get("verified", False)),
            sentiment=sentiment,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        if isinstance(self.date, (date, datetime)):
            data["date"] = self.date.isoformat()
        return data


@dataclass(frozen=True)
class Keyword:
    keyword: str
    count: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Bigram:
    phrase: str
    count: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Theme:
    """A frequency-ranked stem shown through its representative surface form."""
    word: str
    count: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Topic:
    """
    @brief Reviews clustered around a seed keyword.

    @var main_keyword Seed keyword, also the key of the topic's review group.
    @var frequency Corpus-wide count of the seed keyword.
    @var related_keywords Co-occurring keywords, most frequent first.
    @var review_count Number of reviews mentioning the seed keyword.
    """
    main_keyword: str
    frequency: int
    related_keywords: List[str] = field(default_factory=list)
    review_count: int = 0

    @property
    def keywords(self) -> List[str]:
        return [self.main_keyword] + self.related_keywords

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AggregateSentiment:
    average_score: float = 0.0
    positive_percentage: float = 0.0
    negative_percentage: float = 0.0
    neutral_percentage: float = 0.0
    review_count: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class TimeSeriesPoint:
    period: str
    average_score: float = 0.0
    positive_percentage: float = 0.0
    negative_percentage: float = 0.0
    neutral_percentage: float = 0.0
    review_count: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class KeywordChange:
    """Keyword frequency movement between two periods."""
    keyword: str
    count: int
    previous_count: int = 0
    change: int = 0
    percent_change: Optional[float] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Analysis:
    """
    @brief Result of a full pass of the pipeline over a review list.

    @var id Unique identifier of the analysis.
    @var created_at Date and time the analysis was produced.
    @var reviews Annotated Review objects included in the analysis.
    @var stats Aggregates keyed by report section.
    """
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=datetime.now)
    reviews: List[Review] = field(default_factory=list)
    stats: Dict[str, Any] = field(
        default_factory=lambda: {
            "sentiment": AggregateSentiment().to_dict(),
            "sentiment_by_rating": {},
            "keywords": [],
            "bigrams": [],
            "themes": [],
            "topics": [],
            "trend": [],
        }
    )


def _is_missing(value: Any) -> bool:
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _text_or_empty(value: Any) -> str:
    if value is None or _is_missing(value):
        return ""
    return str(value)


_TRUE_STRINGS = {"true", "yes", "y", "1"}


def _as_bool(value: Any) -> bool:
    if value is None or _is_missing(value):
        return False
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _coerce_rating(value: Any) -> int:
    """Whole-star rating 1-5 from an int, float or numeric string."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid rating: {value!r}. Must be an integer 1-5") from None
    if not number.is_integer() or not 1 <= number <= 5:
        raise ValueError(f"Invalid rating: {value!r}. Must be an integer 1-5")
    return int(number)


def ensure_review(item: Union[Review, Mapping[str, Any]]) -> Review:
    if isinstance(item, Review):
        return item
    if isinstance(item, Mapping):
        return Review.from_dict(item)
    raise TypeError(f"Expected Review or mapping, got {type(item).__name__}")


def ensure_reviews(items: Optional[Iterable[Union[Review, Mapping[str, Any]]]]) -> List[Review]:
    """Coerce a sequence of Review objects or plain records into Reviews."""
    if not items:
        return []
    return [ensure_review(item) for item in items]


def parse_review_date(value: DateLike) -> Optional[date]:
    """
    Normalize a review date to a calendar date.

    Returns None for missing or unparsable values; callers exclude such
    reviews from date-dependent views.
    """
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        parsed = pd.to_datetime(value, errors="coerce")
        if pd.isna(parsed):
            # outside the Timestamp range (years before 1677 or after 2262)
            try:
                return datetime.fromisoformat(value.strip()).date()
            except ValueError:
                return None
        return parsed.date()
    if _is_missing(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None
