# src/feedback_sentiment/pipelines/feedback_pipeline.py

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Union

from ..config.config import get_settings
from ..models.feedback_model import FeedbackRecord, SentimentLabel
from ..services.aggregator import Aggregator
from ..services.sentiment_service import SentimentService, get_sentiment_service
from ..utils.io import read_feedback_csv

logger = logging.getLogger(__name__)


# -------- helpers --------

def _as_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _label_value(label: Union[str, SentimentLabel]) -> str:
    return SentimentLabel(label).value


# -------- write path --------

def create_feedback(
    feedback: str,
    client_name: Optional[str] = None,
    rating: Optional[Union[int, str]] = None,
    category: Optional[str] = None,
    user_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
    service: Optional[SentimentService] = None,
) -> FeedbackRecord:
    """Score `feedback` once and build the record that carries the judgment."""
    if not feedback or not str(feedback).strip():
        raise ValueError("Feedback text is required")

    service = service or get_sentiment_service()
    judgment = service.score(feedback)
    logger.debug("Sentiment analysis: %s", judgment)

    fields = {}
    if created_at is not None:
        fields["created_at"] = _as_utc(created_at)
    return FeedbackRecord(
        user_id=user_id or get_settings().DEFAULT_USER_ID,
        client_name=client_name,
        feedback=feedback,
        sentiment=judgment,
        rating=rating or None,
        category=category,
        **fields,
    )


def import_feedback_csv(
    path: str,
    user_id: Optional[str] = None,
    service: Optional[SentimentService] = None,
) -> List[FeedbackRecord]:
    """
    Bulk import: one record per CSV row, scored in row order.
    Columns: feedback (required), clientName, rating, category.
    """
    df = read_feedback_csv(path)
    service = service or get_sentiment_service()

    out: List[FeedbackRecord] = []
    for lineno, row in enumerate(df.to_dict(orient="records"), start=2):
        text = row.get("feedback")
        if not text:
            logger.warning("%s:%d: empty feedback, row skipped", path, lineno)
            continue
        out.append(
            create_feedback(
                text,
                client_name=row.get("clientName") or None,
                rating=row.get("rating") or None,
                category=row.get("category") or None,
                user_id=user_id,
                service=service,
            )
        )
    logger.info("Imported %d feedback items from %s", len(out), path)
    return out


# -------- read path --------

def filter_feedback(
    records: Iterable[FeedbackRecord],
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    sentiment: Optional[Union[str, SentimentLabel]] = None,
    user_id: Optional[str] = None,
) -> List[FeedbackRecord]:
    """Inclusive date bounds, exact label match; newest first."""
    start = _as_utc(start_date) if start_date else None
    end = _as_utc(end_date) if end_date else None
    label = _label_value(sentiment) if sentiment else None

    out = []
    for r in records:
        created = _as_utc(r.created_at)
        if user_id is not None and r.user_id != user_id:
            continue
        if start is not None and created < start:
            continue
        if end is not None and created > end:
            continue
        if label is not None and r.sentiment.label.value != label:
            continue
        out.append(r)
    out.sort(key=lambda r: _as_utc(r.created_at), reverse=True)
    return out


def build_analytics(
    records: Iterable[FeedbackRecord],
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    user_id: Optional[str] = None,
    tz: Optional[str] = None,
) -> Dict:
    """`{success, stats, trend}` for the records inside the window."""
    selected = filter_feedback(records, start_date, end_date, user_id=user_id)
    stats = Aggregator.aggregate(r.sentiment for r in selected)
    trend = Aggregator.bucket_by_day(selected, tz=tz)
    return {
        "success": True,
        "stats": stats.to_wire(),
        "trend": [b.to_wire() for b in trend],
    }


def build_feedback_list(
    records: Iterable[FeedbackRecord],
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    sentiment: Optional[Union[str, SentimentLabel]] = None,
    user_id: Optional[str] = None,
) -> Dict:
    selected = filter_feedback(records, start_date, end_date, sentiment, user_id)
    stats = Aggregator.aggregate(r.sentiment for r in selected)
    return {
        "success": True,
        "count": len(selected),
        "stats": stats.to_wire(),
        "data": [r.to_wire() for r in selected],
    }


def build_system_stats(records: Iterable[FeedbackRecord]) -> Dict:
    """System-wide view across all owners."""
    settings = get_settings()
    records = list(records)
    recent = filter_feedback(records)[: settings.RECENT_FEEDBACK_LIMIT]
    return {
        "success": True,
        "stats": {
            "feedback": {
                "total": len(records),
                "bySentiment": [b.to_wire() for b in Aggregator.by_label(r.sentiment for r in records)],
                "topContributors": [
                    c.to_wire()
                    for c in Aggregator.top_contributors(records, settings.TOP_CONTRIBUTORS_LIMIT)
                ],
                "recent": [r.to_wire() for r in recent],
            },
        },
    }
