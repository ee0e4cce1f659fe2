import pytest

from review_insights import (
    AggregateSentiment,
    Review,
    SentimentAnalyzer,
    SentimentResult,
    analyze_sentiment,
    annotate_review,
    batch_analyze_sentiment,
    calculate_aggregate_sentiment,
    calculate_average_sentiment,
    calculate_sentiment_by_rating,
    classify_by_comparative,
    classify_by_raw_score,
    get_extreme_sentiment_reviews,
    group_by_sentiment,
    track_sentiment_over_time,
)


def test_analyze_sentiment_scores_tokens(analyzer):
    result = analyze_sentiment("I love it", analyzer)
    assert result == SentimentResult(score=3.0, comparative=1.0, classification="positive")


def test_analyze_sentiment_comparative_is_score_per_token(analyzer):
    result = analyze_sentiment("love it love it but terrible", analyzer)
    # 3 + 3 - 3 over 6 tokens
    assert result.score == 3.0
    assert result.comparative == 0.5
    assert result.classification == "positive"

    result = analyze_sentiment("great and then some other words", analyzer)
    assert result.comparative == 0.5

    result = analyze_sentiment("late one two", analyzer)
    assert result.comparative == pytest.approx(-1 / 3)


@pytest.mark.parametrize("text", ["", None])
def test_analyze_sentiment_empty_text(analyzer, text):
    assert analyze_sentiment(text, analyzer) == SentimentResult(0.0, 0.0, "neutral")


@pytest.mark.parametrize(
    "comparative,expected",
    [(0.06, "positive"), (0.05, "neutral"), (0.0, "neutral"), (-0.05, "neutral"), (-0.06, "negative")],
)
def test_classify_by_comparative(comparative, expected):
    assert classify_by_comparative(comparative) == expected


@pytest.mark.parametrize(
    "score,expected",
    [(2, "positive"), (5, "positive"), (1.9, "neutral"), (0, "neutral"), (-2, "negative"), (-7, "negative")],
)
def test_classify_by_raw_score(score, expected):
    assert classify_by_raw_score(score) == expected


def test_two_classifiers_disagree_on_long_text(analyzer):
    text = "love " + "word " * 60
    result = analyze_sentiment(text, analyzer)
    assert result.classification == "neutral"
    assert classify_by_raw_score(result.score) == "positive"


def test_stored_comparative_matches_its_classification():
    analyzer = SentimentAnalyzer(lexicon={"meh": 1.0005})
    result = analyze_sentiment("meh " + "word " * 19, analyzer)
    # 1.0005 over 20 tokens sits just above the 0.05 threshold
    assert result.comparative == pytest.approx(0.050025)
    assert result.classification == "positive"
    assert classify_by_comparative(result.comparative) == result.classification


def test_annotate_review_does_not_mutate(analyzer):
    review = Review(id="x", text="love it", rating=5, date="2024-01-01")
    annotated = annotate_review(review, analyzer)
    assert review.sentiment is None
    assert annotated.sentiment.classification == "positive"
    assert annotated.rating == 5 and annotated.date == "2024-01-01" and annotated.text == "love it"
    assert annotate_review(annotated, analyzer) is annotated


def test_batch_analyze_sentiment_accepts_records(analyzer):
    out = batch_analyze_sentiment([{"id": "a", "text": "awful", "rating": "2"}], analyzer)
    assert out[0].rating == 2
    assert out[0].sentiment.classification == "negative"


def test_calculate_average_sentiment(analyzer):
    assert calculate_average_sentiment(["love", "terrible", "meh"], analyzer) == 0.0
    assert calculate_average_sentiment(["love", "love"], analyzer) == 3.0
    assert calculate_average_sentiment([], analyzer) == 0.0


def test_group_by_sentiment_uses_raw_score(analyzer):
    reviews = [
        Review(id="a", text="love " + "word " * 60),
        Review(id="b", text="late"),
        Review(id="c", text="rude"),
    ]
    groups = group_by_sentiment(reviews, analyzer=analyzer)
    assert [r.id for r in groups["positive"]] == ["a"]
    assert [r.id for r in groups["neutral"]] == ["b"]
    assert [r.id for r in groups["negative"]] == ["c"]


def test_aggregate_sentiment_documented_scenario():
    # real AFINN lexicon
    reviews = [
        {"text": "Terrible quality and awful customer service. Complete waste of money. Do not buy!", "rating": 1},
        {"text": "I absolutely love this product! Works perfectly.", "rating": 5},
    ]
    annotated = batch_analyze_sentiment(reviews)
    assert [r.sentiment.classification for r in annotated] == ["negative", "positive"]

    result = calculate_aggregate_sentiment(reviews)
    assert result.positive_percentage == 50
    assert result.negative_percentage == 50
    assert result.neutral_percentage == 0
    assert result.review_count == 2


def test_aggregate_sentiment_mixed(analyzer):
    reviews = [Review(text="love"), Review(text="terrible"), Review(text="meh"), Review(text="great")]
    result = calculate_aggregate_sentiment(reviews, analyzer)
    assert result == AggregateSentiment(
        average_score=0.75,
        positive_percentage=50.0,
        negative_percentage=25.0,
        neutral_percentage=25.0,
        review_count=4,
    )


def test_aggregate_percentages_sum_to_100(analyzer):
    reviews = [Review(text="love"), Review(text="terrible"), Review(text="meh")]
    result = calculate_aggregate_sentiment(reviews, analyzer)
    total = result.positive_percentage + result.negative_percentage + result.neutral_percentage
    assert total == pytest.approx(100, abs=0.02)


def test_aggregate_sentiment_empty():
    assert calculate_aggregate_sentiment([]) == AggregateSentiment()
    assert calculate_aggregate_sentiment(None).review_count == 0


def test_aggregate_sentiment_is_idempotent(analyzer, mixed_reviews):
    once = calculate_aggregate_sentiment(mixed_reviews, analyzer)
    annotated = batch_analyze_sentiment(mixed_reviews, analyzer)
    assert calculate_aggregate_sentiment(annotated, analyzer) == once
    assert all(r.sentiment is None for r in mixed_reviews)


def test_aggregate_sentiment_keeps_existing_annotation(analyzer):
    review = Review(text="love", sentiment=SentimentResult(score=-4.0, comparative=-4.0, classification="negative"))
    result = calculate_aggregate_sentiment([review], analyzer)
    assert result.negative_percentage == 100.0
    assert result.average_score == -4.0


def test_sentiment_by_rating(analyzer):
    reviews = [
        Review(text="love", rating=5),
        Review(text="terrible", rating=1),
        Review(text="meh", rating=5),
        Review(text="great"),
    ]
    result = calculate_sentiment_by_rating(reviews, analyzer)
    assert list(result) == [5, 1]
    assert result[5].review_count == 2
    assert result[5].positive_percentage == 50.0
    assert result[1].negative_percentage == 100.0
    assert calculate_sentiment_by_rating([], analyzer) == {}


def test_extreme_sentiment_reviews_order(analyzer):
    reviews = [
        Review(id="neutral", text="this one is just fine overall"),
        Review(id="best", text="love love love this so much"),
        Review(id="worst", text="terrible awful bad purchase here"),
        Review(id="short", text="love"),
    ]
    result = get_extreme_sentiment_reviews(reviews, limit=2, analyzer=analyzer)
    assert [r.id for r in result["positive"]] == ["best", "neutral"]
    assert [r.id for r in result["negative"]] == ["worst", "neutral"]


def test_extreme_sentiment_ties_keep_input_order(analyzer):
    text = "the same text for every single review"
    reviews = [Review(id=str(i), text=text) for i in range(4)]
    result = get_extreme_sentiment_reviews(reviews, limit=3, analyzer=analyzer)
    assert [r.id for r in result["positive"]] == ["0", "1", "2"]
    assert [r.id for r in result["negative"]] == ["0", "1", "2"]


def test_extreme_sentiment_orders_close_scores():
    analyzer = SentimentAnalyzer(lexicon={"aaa": 0.001, "bbb": 0.0012})
    reviews = [
        Review(id="low", text="aaa " + "word " * 9),
        Review(id="high", text="bbb " + "word " * 9),
    ]
    result = get_extreme_sentiment_reviews(reviews, min_length=0, analyzer=analyzer)
    assert [r.id for r in result["positive"]] == ["high", "low"]
    assert [r.id for r in result["negative"]] == ["low", "high"]


def test_extreme_sentiment_min_length_zero_keeps_short(analyzer):
    result = get_extreme_sentiment_reviews([Review(id="s", text="love")], min_length=0, analyzer=analyzer)
    assert [r.id for r in result["positive"]] == ["s"]
    assert get_extreme_sentiment_reviews([], analyzer=analyzer) == {"positive": [], "negative": []}


def _monthly_reviews(months):
    reviews = []
    for i in range(months):
        year, month = 2023 + i // 12, i % 12 + 1
        reviews.append(Review(id=f"m{i}", text="love it", date=f"{year}-{month:02d}-15"))
    return reviews


def test_track_sentiment_over_time_keeps_latest_periods(analyzer):
    points = track_sentiment_over_time(_monthly_reviews(14), limit=12, analyzer=analyzer)
    assert len(points) == 12
    assert points[0].period == "2023-03"
    assert points[-1].period == "2024-02"
    assert [p.period for p in points] == sorted(p.period for p in points)
    assert all(p.positive_percentage == 100.0 and p.review_count == 1 for p in points)


def test_track_sentiment_over_time_skips_bad_dates(analyzer):
    reviews = [
        Review(id="a", text="love", date="2024-05-01"),
        Review(id="b", text="terrible", date="2024-05-20T10:30:00Z"),
        Review(id="c", text="love", date="not-a-date"),
        Review(id="d", text="love", date=None),
    ]
    points = track_sentiment_over_time(reviews, analyzer=analyzer)
    assert len(points) == 1
    assert points[0].period == "2024-05"
    assert points[0].review_count == 2
    assert points[0].positive_percentage == 50.0
    # undated reviews still count where dates do not matter
    assert calculate_aggregate_sentiment(reviews, analyzer).review_count == 4


@pytest.mark.parametrize(
    "time_unit,expected",
    [
        ("day", ["2020-12-31", "2021-01-03"]),
        ("week", ["2020-W53"]),
        ("month", ["2020-12", "2021-01"]),
        ("quarter", ["2020-Q4", "2021-Q1"]),
        ("year", ["2020", "2021"]),
    ],
)
def test_track_sentiment_over_time_units(analyzer, time_unit, expected):
    reviews = [Review(text="love", date="2020-12-31"), Review(text="love", date="2021-01-03")]
    points = track_sentiment_over_time(reviews, time_unit=time_unit, analyzer=analyzer)
    assert [p.period for p in points] == expected


def test_track_sentiment_over_time_empty():
    assert track_sentiment_over_time([]) == []
