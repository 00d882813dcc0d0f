from .sentiment_service import SentimentService, get_sentiment_service, score, score_batch
from .aggregator import (
    Aggregator,
    SentimentStats,
    TrendBucket,
    TrendDate,
    aggregate,
    bucket_by_day,
)

__all__ = [
    "SentimentService", "get_sentiment_service", "score", "score_batch",
    "Aggregator", "SentimentStats", "TrendBucket", "TrendDate", "aggregate", "bucket_by_day",
]
