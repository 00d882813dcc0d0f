# test_sentiment_service.py
import pytest

from feedback_sentiment.models.feedback_model import SentimentJudgment, SentimentLabel
from feedback_sentiment.services import sentiment_service
from feedback_sentiment.services.sentiment_service import (
    SentimentService,
    load_lexicon_file,
    score,
    score_batch,
    tokenize,
)

TEXTS = [
    "",
    "   \n\t ",
    "good",
    "bad",
    "good bad",
    "Good, GREAT and helpful!",
    "terrible terrible awful slow",
    "not good",
    "never bad",
    "ceci n'est pas une critique",
    "日本語のフィードバック",
    "great " * 50,
    "awful " * 50,
]


def test_tokenize_lowercases_and_splits_punctuation():
    assert tokenize("Great!! Very 'helpful', didn't crash.") == [
        "great", "very", "helpful", "didn't", "crash"
    ]


def test_score_empty_is_neutral(service):
    assert service.score("") == SentimentJudgment(label="Neutral", score=0.0, confidence=0.0)


@pytest.mark.parametrize("text", TEXTS)
def test_confidence_is_abs_score(service, text):
    j = service.score(text)
    assert j.confidence == abs(j.score)
    assert -1.0 <= j.score <= 1.0


@pytest.mark.parametrize("text", TEXTS)
def test_label_follows_sign_of_raw_sum(service, text):
    raw = service.raw_score(text)
    label = service.score(text).label
    if raw > 0:
        assert label == SentimentLabel.POSITIVE
    elif raw < 0:
        assert label == SentimentLabel.NEGATIVE
    else:
        assert label == SentimentLabel.NEUTRAL


def test_score_is_raw_over_ten(service):
    j = service.score("good helpful")  # 3 + 2
    assert j.label == SentimentLabel.POSITIVE
    assert j.score == pytest.approx(0.5)
    assert j.confidence == pytest.approx(0.5)


def test_strong_text_is_clamped(service):
    pos = service.score("great " * 50)
    neg = service.score("awful " * 50)
    assert pos.score == 1.0 and pos.label == SentimentLabel.POSITIVE
    assert neg.score == -1.0 and neg.label == SentimentLabel.NEGATIVE


def test_unknown_words_contribute_nothing(service):
    assert service.raw_score("the quick brown fox") == 0
    assert service.score("the quick brown fox").label == SentimentLabel.NEUTRAL


def test_negation_flips_following_word(service):
    assert service.raw_score("not good") == -3
    assert service.raw_score("never bad") == 3
    assert service.raw_score("not the good one") == 3  # only the next token


def test_negation_can_be_disabled():
    svc = SentimentService(lexicon={"good": 3}, negation=False)
    assert svc.raw_score("not good") == 3


def test_custom_normalization():
    svc = SentimentService(lexicon={"good": 3}, normalization=5)
    assert svc.score("good").score == pytest.approx(0.6)


def test_score_is_idempotent(service):
    text = "Good support but slow delivery"
    assert service.score(text) == service.score(text)


def test_non_string_input_does_not_raise(service):
    assert service.score(None).label == SentimentLabel.NEUTRAL
    assert service.score(12345).score == 0.0


def test_internal_failure_falls_back_to_neutral(service, monkeypatch, caplog):
    def boom(text):
        raise RuntimeError("lexicon unavailable")

    monkeypatch.setattr(service, "raw_score", boom)
    j = service.score("good")
    assert j == SentimentJudgment.neutral()
    assert "Sentiment analysis failed" in caplog.text


def test_score_batch_keeps_order_and_length(service):
    texts = ["good", "", "bad", "good"]
    out = service.score_batch(texts)
    assert len(out) == len(texts)
    assert [j.label.value for j in out] == ["Positive", "Neutral", "Negative", "Positive"]


def test_lexicon_is_read_only(service):
    with pytest.raises(TypeError):
        service.lexicon["good"] = -10


def test_default_lexicon_from_vader_is_integer():
    lex = sentiment_service.vader_lexicon()
    assert lex
    assert all(isinstance(v, int) and v != 0 for v in lex.values())


def test_customer_service_praise_is_positive():
    j = score("The customer service was absolutely fantastic! Very responsive and helpful.")
    assert j.label == SentimentLabel.POSITIVE
    assert j.score > 0


def test_app_crash_complaint_is_negative():
    j = score("The app crashed multiple times. Very disappointed.")
    assert j.label == SentimentLabel.NEGATIVE
    assert j.score < 0


def test_module_score_batch_uses_shared_service():
    out = score_batch(["fantastic", "disappointed", ""])
    assert [j.label.value for j in out] == ["Positive", "Negative", "Neutral"]


def test_load_lexicon_file(tmp_path):
    path = tmp_path / "lexicon.txt"
    path.write_text("# word\tweight\nGood\t3\nbad\t-2\n\ncan't stand\t-3\n", encoding="utf-8")
    assert load_lexicon_file(str(path)) == {"good": 3, "bad": -2, "can't stand": -3}


def test_load_lexicon_file_rejects_bad_line(tmp_path):
    path = tmp_path / "lexicon.txt"
    path.write_text("good 3\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_lexicon_file(str(path))


def test_shared_service_reads_lexicon_path(tmp_path, monkeypatch):
    path = tmp_path / "lexicon.txt"
    path.write_text("widget\t4\n", encoding="utf-8")
    monkeypatch.setenv("LEXICON_PATH", str(path))
    monkeypatch.setenv("NORMALIZATION_CONSTANT", "8")

    j = score("widget")
    assert j.label == SentimentLabel.POSITIVE
    assert j.score == pytest.approx(0.5)
    assert score("fantastic").label == SentimentLabel.NEUTRAL
