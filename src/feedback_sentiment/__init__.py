from .models.feedback_model import FeedbackRecord, SentimentJudgment, SentimentLabel
from .services.aggregator import SentimentStats, TrendBucket, aggregate, bucket_by_day
from .services.sentiment_service import SentimentService, score, score_batch

__all__ = [
    "FeedbackRecord", "SentimentJudgment", "SentimentLabel",
    "SentimentStats", "TrendBucket", "aggregate", "bucket_by_day",
    "SentimentService", "score", "score_batch",
]
