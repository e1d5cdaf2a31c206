"""
Local history cache for the CLI client.

The gateway's history can arrive partial (response_history_limit) or be
lost across service restarts; the client keeps its own copy and merges
every reply into it. Merging is idempotent: a record is identified by
(x, y, r, currentTime, processingTimeMs), so replaying the same reply
changes nothing.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, List

from areacheck_mqtt.schemas import EvaluationRecord

logger = logging.getLogger(__name__)


def merge_history(
    existing: Iterable[EvaluationRecord],
    incoming: Iterable[EvaluationRecord],
) -> List[EvaluationRecord]:
    """
    Merge two histories, oldest first, without duplicates.

    Existing records keep their order; unseen incoming records are
    appended in their own order.
    """
    merged: dict = {}
    for record in existing:
        merged.setdefault(record.key, record)
    for record in incoming:
        merged.setdefault(record.key, record)
    return list(merged.values())


class HistoryCache:
    """
    JSON file holding the merged history.

    Example:
        cache = HistoryCache(Path("~/.areacheck-history.json").expanduser())
        history = cache.merge(envelope.history)
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[EvaluationRecord]:
        """
        Load cached records.

        A missing file is an empty cache. Unreadable content is discarded
        with a warning, as the cache is only a convenience copy.
        """
        if not self.path.exists():
            return []

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise ValueError("cache root must be a list")
            return [EvaluationRecord.from_dict(item) for item in data]
        except (OSError, ValueError) as e:
            logger.warning(f"⚠️ Ignoring unreadable history cache {self.path}: {e}")
            return []

    def save(self, records: Iterable[EvaluationRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump([record.to_dict() for record in records], f, indent=2)

    def merge(self, incoming: Iterable[EvaluationRecord]) -> List[EvaluationRecord]:
        """Merge incoming records into the cache and persist the result."""
        merged = merge_history(self.load(), incoming)
        self.save(merged)
        return merged
