import pytest

from review_insights import (
    Bigram,
    Keyword,
    Review,
    batch_analyze_sentiment,
    default_lexicon,
    extract_keywords,
    extract_keywords_by_sentiment,
    extract_top_bigrams,
    extract_top_keywords,
)


def test_extract_keywords_keeps_duplicates_in_order():
    assert extract_keywords("The battery life is great, battery lasts!") == [
        "battery", "life", "great", "battery", "lasts",
    ]


@pytest.mark.parametrize("text", ["", None])
def test_extract_keywords_empty(text):
    assert extract_keywords(text) == []


def test_extract_keywords_domain_stopwords():
    text = "Bought this product for the camera"
    assert extract_keywords(text) == ["camera"]
    assert extract_keywords(text, remove_domain_stopwords=False) == ["bought", "product", "camera"]
    assert extract_keywords(text, remove_stopwords=False, remove_domain_stopwords=False) == [
        "bought", "this", "product", "for", "the", "camera",
    ]


def test_extract_keywords_min_word_length():
    assert extract_keywords("big fan of the zoom lens", min_word_length=4) == ["zoom", "lens"]


def test_extract_keywords_stemming():
    lexicon = default_lexicon()
    words = extract_keywords("batteries charging quickly", stem_words=True)
    assert words == [lexicon.stem("batteries"), lexicon.stem("charging"), lexicon.stem("quickly")]
    assert words[0] == lexicon.stem("battery")


def test_extract_keywords_drops_non_ascii_tokens():
    assert extract_keywords("café latte") == ["latte"]


@pytest.fixture
def gadget_reviews():
    return [
        Review(id="g1", text="Battery is great, screen is sharp"),
        Review(id="g2", text="Battery died, camera blurry"),
        Review(id="g3", text="Screen cracked, camera okay, battery weak"),
    ]


def test_extract_top_keywords(gadget_reviews):
    assert extract_top_keywords(gadget_reviews) == [
        Keyword("battery", 3),
        Keyword("screen", 2),
        Keyword("camera", 2),
    ]


def test_extract_top_keywords_limit_and_min_frequency(gadget_reviews):
    assert extract_top_keywords(gadget_reviews, limit=1) == [Keyword("battery", 3)]
    assert extract_top_keywords(gadget_reviews, min_frequency=3) == [Keyword("battery", 3)]
    assert len(extract_top_keywords(gadget_reviews, min_frequency=1)) == 10
    assert extract_top_keywords([]) == []


def test_extract_top_keywords_accepts_records():
    records = [{"text": "zoom lens"}, {"text": "zoom button"}]
    assert extract_top_keywords(records) == [Keyword("zoom", 2)]


def test_extract_keywords_by_sentiment(analyzer):
    reviews = batch_analyze_sentiment(
        [
            Review(text="love the battery"),
            Review(text="great battery"),
            Review(text="terrible screen, awful screen"),
            Review(text="camera camera"),
        ],
        analyzer,
    )
    result = extract_keywords_by_sentiment(reviews)
    assert list(result) == ["positive", "negative", "neutral"]
    assert result["positive"][0] == Keyword("battery", 2)
    assert result["negative"][0] == Keyword("screen", 2)
    assert result["neutral"] == [Keyword("camera", 2)]


def test_extract_keywords_by_sentiment_unannotated_is_neutral():
    result = extract_keywords_by_sentiment([Review(text="zoom zoom")])
    assert result == {"positive": [], "negative": [], "neutral": [Keyword("zoom", 2)]}
    assert extract_keywords_by_sentiment([]) == {"positive": [], "negative": [], "neutral": []}


@pytest.fixture
def service_reviews():
    return [
        Review(text="Battery life is amazing"),
        Review(text="The battery life could be better"),
        Review(text="Poor battery life and rude customer service"),
        Review(text="Great customer service"),
    ]


def test_extract_top_bigrams(service_reviews):
    assert extract_top_bigrams(service_reviews) == [
        Bigram("battery life", 3),
        Bigram("customer service", 2),
    ]


def test_extract_top_bigrams_domain_stopwords(service_reviews):
    assert extract_top_bigrams(service_reviews, remove_domain_stopwords=True) == [Bigram("battery life", 3)]


def test_extract_top_bigrams_skips_short_words():
    reviews = [Review(text="go big lens"), Review(text="go big lens")]
    assert extract_top_bigrams(reviews) == [Bigram("big lens", 2)]
    assert extract_top_bigrams([]) == []
