"""
Feedback store: outcome history of completed and dismissed tasks.

Stored as a flat JSON array in <data_dir>/feedback.json. Upstream prompt
assembly reads recent records to calibrate future suggestions; the store
itself only does retention bookkeeping.
"""

import logging
from datetime import timedelta
from pathlib import Path

from whatsnext.lib.fileio import atomic_write_json, read_json
from whatsnext.lib.timeutil import utc_now
from whatsnext.lib.validate import ValidationError, validate, validate_before_write
from whatsnext.store.models import FeedbackRecord

logger = logging.getLogger(__name__)

FEEDBACK_FILENAME = "feedback.json"
MAX_RECORDS_PER_SOURCE = 50
RETENTION_DAYS = 30


def get_feedback_path(data_dir: Path) -> Path:
    return data_dir / FEEDBACK_FILENAME


class FeedbackStore:
    def __init__(
        self,
        path: Path,
        max_records_per_source: int = MAX_RECORDS_PER_SOURCE,
        retention_days: int = RETENTION_DAYS,
    ):
        self.path = path
        self.max_records_per_source = max_records_per_source
        self.retention_days = retention_days
        self._records: list[FeedbackRecord] = self._load()

    @property
    def records(self) -> list[FeedbackRecord]:
        """All retained records, newest first."""
        return list(self._records)

    def record_outcome(self, record: FeedbackRecord) -> bool:
        """Append a record, prune, and persist. Returns True on success."""
        pruned = self._prune(self._records + [record])
        if not self._save(pruned):
            return False
        self._records = pruned
        return True

    def recent_records(self, within_days: int = RETENTION_DAYS) -> list[FeedbackRecord]:
        """Records resolved in the last `within_days` days."""
        cutoff = utc_now() - timedelta(days=within_days)
        return [r for r in self._records if r.resolved_at >= cutoff]

    def _prune(self, records: list[FeedbackRecord]) -> list[FeedbackRecord]:
        """Drop expired records, then keep the newest N per (source type, source name)."""
        cutoff = utc_now() - timedelta(days=self.retention_days)
        live = sorted(
            (r for r in records if r.resolved_at >= cutoff),
            key=lambda r: r.resolved_at,
            reverse=True,
        )

        kept = []
        per_source: dict[tuple[str, str], int] = {}
        for record in live:
            n = per_source.get(record.source_key, 0)
            if n >= self.max_records_per_source:
                continue
            per_source[record.source_key] = n + 1
            kept.append(record)
        return kept

    def _load(self) -> list[FeedbackRecord]:
        data = read_json(self.path)
        if data is None:
            return []
        try:
            validate(data, "feedback")
            return [FeedbackRecord.from_dict(r) for r in data]
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.warning(f"Failed to load feedback: {e}")
            return []

    def _save(self, records: list[FeedbackRecord]) -> bool:
        data = [r.to_dict() for r in records]
        try:
            validate_before_write(data, "feedback", self.path)
            atomic_write_json(self.path, data)
            return True
        except (OSError, ValidationError) as e:
            logger.error(f"Failed to save feedback: {e}")
            return False
