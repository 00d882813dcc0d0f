# conftest.py
from datetime import datetime, timezone

import pytest

from feedback_sentiment.config.config import get_settings
from feedback_sentiment.models.feedback_model import FeedbackRecord, SentimentJudgment
from feedback_sentiment.services.sentiment_service import SentimentService, get_sentiment_service

TEST_LEXICON = {
    "good": 3,
    "great": 3,
    "love": 3,
    "helpful": 2,
    "slow": -2,
    "bad": -3,
    "awful": -3,
    "terrible": -4,
}


@pytest.fixture(autouse=True)
def set_env(monkeypatch, tmp_path):
    # Keep every test on default settings and a throwaway data path
    for name in ("NORMALIZATION_CONSTANT", "NEGATION_ENABLED", "LEXICON_PATH",
                 "TREND_TIMEZONE", "DEFAULT_USER_ID", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DATA_PATH", str(tmp_path / "feedback.parquet"))
    get_settings.cache_clear()
    get_sentiment_service.cache_clear()
    yield
    get_settings.cache_clear()
    get_sentiment_service.cache_clear()


@pytest.fixture
def service() -> SentimentService:
    return SentimentService(lexicon=TEST_LEXICON)


@pytest.fixture
def spy_service_class():
    class SpyService(SentimentService):
        def __init__(self):
            super().__init__(lexicon=TEST_LEXICON)
            self.calls = []

        def score(self, text):
            self.calls.append(text)
            return super().score(text)
    return SpyService


def make_record(created_at, label, score, user_id="u1", text="some feedback"):
    return FeedbackRecord(
        user_id=user_id,
        feedback=text,
        sentiment=SentimentJudgment(label=label, score=score, confidence=abs(score)),
        created_at=created_at,
    )


@pytest.fixture
def records():
    utc = timezone.utc
    return [
        make_record(datetime(2024, 3, 5, 9, 0, tzinfo=utc), "Positive", 0.4),
        make_record(datetime(2024, 3, 5, 18, 30, tzinfo=utc), "Negative", -0.2),
        make_record(datetime(2024, 3, 7, 12, 0, tzinfo=utc), "Neutral", 0.0, user_id="u2"),
        make_record(datetime(2024, 3, 8, 8, 0, tzinfo=utc), "Positive", 0.6, user_id="u2"),
        make_record(datetime(2024, 3, 8, 9, 0, tzinfo=utc), "Positive", 0.3),
    ]
