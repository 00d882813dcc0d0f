import logging
from typing import List, Optional

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from ..services.aggregator import SentimentStats, TrendBucket

logger = logging.getLogger(__name__)

LABEL_COLORS = {"Positive": "#2ecc71", "Negative": "#e74c3c", "Neutral": "#95a5a6"}

# Clean defaults
plt.style.use("seaborn-v0_8")
sns.set_palette("husl")


def plot_sentiment_trend(buckets: List[TrendBucket], show: bool = True) -> Optional[plt.Figure]:
    """
    Two stacked panels sharing the date axis:
      - daily average score, with the neutral line at 0
      - per-label daily counts as stacked bars
    """
    if not buckets:
        logger.info("No trend data available for visualization")
        return None

    df = pd.DataFrame([b.model_dump() for b in buckets])
    df["date"] = pd.to_datetime(df["date"].apply(lambda d: f"{d['year']:04d}-{d['month']:02d}-{d['day']:02d}"))

    fig, (ax_score, ax_count) = plt.subplots(2, 1, figsize=(10, 8), sharex=True)

    ax_score.plot(df["date"], df["avg_score"], marker="o", color="#34495e")
    ax_score.axhline(0, linestyle="--", linewidth=1, alpha=0.6, color="gray")  # neutral guide
    ax_score.set_ylim(-1.05, 1.05)
    ax_score.set_title("Daily Average Sentiment Score")
    ax_score.set_ylabel("Score (-1 to 1)")

    bottom = pd.Series(0, index=df.index)
    for label in ("Positive", "Neutral", "Negative"):
        col = label.lower()
        ax_count.bar(df["date"], df[col], bottom=bottom, color=LABEL_COLORS[label], label=label)
        bottom = bottom + df[col]
    ax_count.set_title("Feedback Volume by Sentiment")
    ax_count.set_xlabel("Date")
    ax_count.set_ylabel("Feedback count")
    ax_count.legend()

    plt.tight_layout()
    if show:
        plt.show()
    return fig


def plot_sentiment_distribution(stats: SentimentStats, show: bool = True) -> Optional[plt.Figure]:
    if stats.total == 0:
        logger.info("No sentiment data available for visualization")
        return None

    counts = {"Positive": stats.positive, "Negative": stats.negative, "Neutral": stats.neutral}
    counts = {k: v for k, v in counts.items() if v}

    fig, ax = plt.subplots(figsize=(6, 6))
    ax.pie(
        list(counts.values()),
        labels=list(counts.keys()),
        colors=[LABEL_COLORS[k] for k in counts],
        autopct="%1.1f%%",
        startangle=90,
    )
    ax.set_title(f"Sentiment Distribution (n={stats.total}, avg={stats.average_score:.2f})")
    plt.tight_layout()
    if show:
        plt.show()
    return fig
