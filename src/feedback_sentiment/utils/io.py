import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pandas as pd

from ..config.config import get_settings
from ..models.feedback_model import FeedbackRecord

logger = logging.getLogger(__name__)


def read_feedback_csv(path: str) -> pd.DataFrame:
    """Read an upload-style CSV; every cell is a stripped string, blanks are ""."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    df.columns = [c.strip() for c in df.columns]
    if "feedback" not in df.columns:
        raise ValueError(f"{path}: missing required 'feedback' column")
    for c in df.columns:
        df[c] = df[c].str.strip()
    return df


def save_records(records: List[FeedbackRecord], path: Optional[str] = None) -> str:
    """Write records to `path` and to a timestamped sibling; returns the sibling."""
    path = path or get_settings().DATA_PATH
    rows = []
    for r in records:
        row = r.model_dump()
        row["sentiment"] = json.dumps(r.sentiment.model_dump(mode="json"))
        rows.append(row)
    df = pd.DataFrame(rows, columns=list(FeedbackRecord.model_fields))
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True)
    p = Path(path)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    timestamped_path = p.parent / f"{p.stem}_{timestamp}{p.suffix}"
    timestamped_path.parent.mkdir(parents=True, exist_ok=True)

    df.to_parquet(timestamped_path, index=False)
    df.to_parquet(p, index=False)

    logger.info("Saved %d records to %s", len(records), timestamped_path)
    return str(timestamped_path)


def load_records(path: Optional[str] = None) -> List[FeedbackRecord]:
    path = path or get_settings().DATA_PATH
    try:
        df = pd.read_parquet(path)
    except FileNotFoundError:
        return []

    out: List[FeedbackRecord] = []
    for row in df.to_dict(orient="records"):
        row["sentiment"] = json.loads(row["sentiment"])
        if pd.isna(row.get("rating")):
            row["rating"] = None
        else:
            row["rating"] = int(row["rating"])
        row["created_at"] = pd.Timestamp(row["created_at"]).to_pydatetime()
        out.append(FeedbackRecord(**row))
    return out
