import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class SentimentLabel(str, Enum):
    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    NEUTRAL = "Neutral"


class SentimentJudgment(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: SentimentLabel
    score: float = Field(ge=-1.0, le=1.0)
    confidence: float = Field(ge=0.0, le=1.0)

    @classmethod
    def neutral(cls) -> "SentimentJudgment":
        return cls(label=SentimentLabel.NEUTRAL, score=0.0, confidence=0.0)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FeedbackRecord(BaseModel):
    """
    One scored piece of client feedback. `sentiment` is computed once when the
    record is created and is never recomputed afterwards.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    user_id: str = "local"
    client_name: str = "Anonymous"
    feedback: str = Field(..., min_length=1)
    sentiment: SentimentJudgment
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    category: str = "General"
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("client_name", "category", mode="before")
    @classmethod
    def _blank_to_default(cls, v, info):
        if v is None or (isinstance(v, str) and not v.strip()):
            return "Anonymous" if info.field_name == "client_name" else "General"
        return v

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
