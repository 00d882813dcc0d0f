import logging
import math
import re
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional

from vaderSentiment.vaderSentiment import NEGATE, SentimentIntensityAnalyzer

from ..config.config import get_settings
from ..models.feedback_model import SentimentJudgment, SentimentLabel

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(r"[a-z0-9']+")
NEGATORS = frozenset(w.lower() for w in NEGATE)


def _round_half_away(x: float) -> int:
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def vader_lexicon() -> dict:
    """
    Integer polarity table built from the VADER lexicon: each mean valence is
    rounded half away from zero, entries that round to 0 are dropped.
    """
    out = {}
    for word, valence in SentimentIntensityAnalyzer().lexicon.items():
        weight = _round_half_away(float(valence))
        if weight:
            out[word.lower()] = weight
    return out


def load_lexicon_file(path: str) -> dict:
    """Read an AFINN-style file: one `word<TAB>weight` pair per line."""
    out = {}
    with Path(path).open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            word, sep, weight = line.rpartition("\t")
            if not sep:
                raise ValueError(f"{path}:{lineno}: expected 'word<TAB>weight'")
            out[word.strip().lower()] = int(weight)
    return out


def tokenize(text: str) -> List[str]:
    tokens = (t.strip("'") for t in TOKEN_RE.findall(text.lower()))
    return [t for t in tokens if t]


class SentimentService:
    """
    Lexical scorer: sums integer word weights, then
      - label comes from the sign of the raw sum
      - score = clamp(raw / normalization, -1, 1)
      - confidence = |score|
    A word directly after a negator ("not", "never", ...) counts with its sign
    flipped when `negation` is on.
    """
    def __init__(
        self,
        lexicon: Optional[Mapping[str, int]] = None,
        normalization: float = 10.0,
        negation: bool = True,
    ):
        if lexicon is None:
            lexicon = vader_lexicon()
        self.lexicon = MappingProxyType({k.lower(): int(v) for k, v in lexicon.items()})
        self.normalization = float(normalization)
        self.negation = negation

    def raw_score(self, text) -> int:
        if text is None:
            return 0
        if not isinstance(text, str):
            text = str(text)

        total = 0
        prev = None
        for tok in tokenize(text):
            weight = self.lexicon.get(tok, 0)
            if weight and self.negation and prev in NEGATORS:
                weight = -weight
            total += weight
            prev = tok
        return total

    def score(self, text) -> SentimentJudgment:
        try:
            raw = self.raw_score(text)
            norm = max(-1.0, min(1.0, raw / self.normalization))
            if raw > 0:
                label = SentimentLabel.POSITIVE
            elif raw < 0:
                label = SentimentLabel.NEGATIVE
            else:
                label = SentimentLabel.NEUTRAL
            return SentimentJudgment(label=label, score=norm, confidence=abs(norm))
        except Exception:
            logger.warning("Sentiment analysis failed, using neutral judgment", exc_info=True)
            return SentimentJudgment.neutral()

    def score_batch(self, texts: Iterable) -> List[SentimentJudgment]:
        return [self.score(t) for t in texts]


@lru_cache()
def get_sentiment_service() -> SentimentService:
    s = get_settings()
    lexicon = load_lexicon_file(s.LEXICON_PATH) if s.LEXICON_PATH else None
    return SentimentService(
        lexicon=lexicon,
        normalization=s.NORMALIZATION_CONSTANT,
        negation=s.NEGATION_ENABLED,
    )


def score(text) -> SentimentJudgment:
    return get_sentiment_service().score(text)


def score_batch(texts: Iterable) -> List[SentimentJudgment]:
    return get_sentiment_service().score_batch(texts)
