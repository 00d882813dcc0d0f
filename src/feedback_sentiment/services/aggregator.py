import logging
from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd
from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

from ..config.config import get_settings
from ..models.feedback_model import SentimentLabel

logger = logging.getLogger(__name__)

LABEL_ORDER = [l.value for l in SentimentLabel]
CENT = Decimal("0.01")


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class SentimentStats(_WireModel):
    """
    Label distribution of a set of judgments. Percentages and the average
    score are kept rounded to 2 places (exact binary ties away from zero, sign
    kept, as `Number.toFixed(2)` does); on the wire they are 2-decimal strings,
    or the number 0 for an empty set.
    """
    total: int = 0
    positive: int = 0
    negative: int = 0
    neutral: int = 0
    positive_percentage: float = 0.0
    negative_percentage: float = 0.0
    neutral_percentage: float = 0.0
    average_score: float = 0.0

    @field_serializer(
        "positive_percentage", "negative_percentage", "neutral_percentage", "average_score"
    )
    def _two_places(self, v: float):
        return f"{v:.2f}" if self.total else 0


class TrendDate(_WireModel):
    year: int
    month: int
    day: int


class TrendBucket(_WireModel):
    date: TrendDate
    count: int
    avg_score: float
    positive: int
    negative: int
    neutral: int


class LabelBreakdown(_WireModel):
    label: SentimentLabel
    count: int
    avg_score: float


class Contributor(_WireModel):
    user_id: str
    feedback_count: int


def _label_score(judgment: Any) -> Tuple[str, float]:
    if isinstance(judgment, Mapping):
        label, score = judgment["label"], judgment["score"]
    else:
        label, score = judgment.label, judgment.score
    return getattr(label, "value", label), float(score)


def _created_and_sentiment(record: Any) -> Tuple[Any, Any]:
    if isinstance(record, Mapping):
        created = record.get("createdAt", record.get("created_at"))
        return created, record["sentiment"]
    return record.created_at, record.sentiment


def _round2(x: float) -> float:
    if x == 0:
        return 0.0
    return float(Decimal(x).quantize(CENT, rounding=ROUND_HALF_UP))


class Aggregator:
    @staticmethod
    def aggregate(judgments: Iterable[Any]) -> SentimentStats:
        """Fold judgments (models or {label, score} mappings) into SentimentStats."""
        counts = Counter()
        score_sum = 0.0
        total = 0
        for j in judgments:
            label, score = _label_score(j)
            counts[label] += 1
            score_sum += score
            total += 1

        if total == 0:
            return SentimentStats()

        pos = counts[SentimentLabel.POSITIVE.value]
        neg = counts[SentimentLabel.NEGATIVE.value]
        neu = counts[SentimentLabel.NEUTRAL.value]
        return SentimentStats(
            total=total,
            positive=pos,
            negative=neg,
            neutral=neu,
            positive_percentage=_round2(pos / total * 100),
            negative_percentage=_round2(neg / total * 100),
            neutral_percentage=_round2(neu / total * 100),
            average_score=_round2(score_sum / total),
        )

    @staticmethod
    def bucket_by_day(records: Iterable[Any], tz: Optional[str] = None) -> List[TrendBucket]:
        """
        Group `{createdAt, sentiment}` records by calendar day in `tz`
        (default: TREND_TIMEZONE setting). Naive timestamps are read as UTC.
        Only days with at least one record are returned, oldest first.
        """
        rows = []
        for r in records:
            created, judgment = _created_and_sentiment(r)
            label, score = _label_score(judgment)
            rows.append({"created_at": created, "label": label, "score": score})
        if not rows:
            return []

        tz = tz or get_settings().TREND_TIMEZONE
        df = pd.DataFrame(rows)
        # convert to UTC -> target zone; unparseable timestamps are dropped
        df["created_at"] = pd.to_datetime(df["created_at"], utc=True, format="ISO8601", errors="coerce")
        bad = int(df["created_at"].isna().sum())
        if bad:
            logger.warning("%d record(s) without a parseable createdAt left out of the trend", bad)
            df = df.dropna(subset=["created_at"])
        if df.empty:
            return []
        local = df["created_at"].dt.tz_convert(tz)
        df["year"] = local.dt.year
        df["month"] = local.dt.month
        df["day"] = local.dt.day
        for name, label in (("positive", "Positive"), ("negative", "Negative"), ("neutral", "Neutral")):
            df[name] = (df["label"] == label).astype(int)

        agg = (
            df.groupby(["year", "month", "day"], as_index=False, sort=True)
              .agg(
                  bucket_count=("score", "size"),
                  avg_score=("score", "mean"),
                  positive=("positive", "sum"),
                  negative=("negative", "sum"),
                  neutral=("neutral", "sum"),
              )
        )

        out: List[TrendBucket] = []
        for row in agg.itertuples(index=False):
            out.append(
                TrendBucket(
                    date=TrendDate(year=int(row.year), month=int(row.month), day=int(row.day)),
                    count=int(row.bucket_count),
                    avg_score=float(row.avg_score),
                    positive=int(row.positive),
                    negative=int(row.negative),
                    neutral=int(row.neutral),
                )
            )
        return out

    @staticmethod
    def by_label(judgments: Iterable[Any]) -> List[LabelBreakdown]:
        counts: Dict[str, int] = Counter()
        sums: Dict[str, float] = Counter()
        for j in judgments:
            label, score = _label_score(j)
            counts[label] += 1
            sums[label] += score
        return [
            LabelBreakdown(label=label, count=counts[label], avg_score=sums[label] / counts[label])
            for label in LABEL_ORDER
            if counts[label]
        ]

    @staticmethod
    def top_contributors(records: Iterable[Any], limit: int = 10) -> List[Contributor]:
        counts = Counter(
            r["userId"] if isinstance(r, Mapping) else r.user_id
            for r in records
        )
        return [
            Contributor(user_id=str(user), feedback_count=n)
            for user, n in counts.most_common(limit)
        ]


aggregate = Aggregator.aggregate
bucket_by_day = Aggregator.bucket_by_day
