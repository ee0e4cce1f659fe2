import pytest

from review_insights import Review, SentimentAnalyzer

# Small fixed lexicon so expected scores can be worked out by hand
STUB_LEXICON = {
    "love": 3,
    "great": 3,
    "excellent": 3,
    "perfectly": 3,
    "happy": 3,
    "good": 3,
    "terrible": -3,
    "awful": -3,
    "bad": -3,
    "damaged": -3,
    "rude": -2,
    "poor": -2,
    "late": -1,
    "broken": -1,
    "waste": -1,
}


@pytest.fixture(scope="session")
def analyzer():
    return SentimentAnalyzer(lexicon=STUB_LEXICON)


@pytest.fixture
def mixed_reviews():
    return [
        Review(id="r1", text="I love it, great battery", rating=5, date="2024-01-15", source="Google", author="Ann"),
        Review(id="r2", text="Terrible screen, awful support", rating=1, date="2024-02-03", source="Yelp", author="Bob"),
        Review(id="r3", text="It works", rating=3, date="2024-02-20", source="Google", author="Cid", verified=True),
        Review(id="r4", text="Good battery but late delivery", rating=4, date="2024-03-01", source="Trustpilot",
               author="Ann", verified=True),
    ]
