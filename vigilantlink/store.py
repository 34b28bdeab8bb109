"""Report persistence: per-user history and aggregate counters.

Two thread-safe stores share one interface:
    - InMemoryReportStore : list held in process memory
    - JsonFileReportStore : same, mirrored to a JSON file on every save

Saves are independent appends. Reads copy a snapshot under the lock and
may miss a save that is still in flight.
"""

import json
import logging
import os
import tempfile
import threading
import time
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from vigilantlink import config
from vigilantlink.models import Classification, ScamReport, ScamStats

logger = logging.getLogger(__name__)


class PersistenceError(RuntimeError):
    """Saving a report failed. Classification is unaffected; retry is safe."""


class ReportStore(ABC):
    """Storage interface consumed by the API layer."""

    @abstractmethod
    def save(self, report: ScamReport) -> ScamReport:
        """Persist a report; return it with `id` and `reportedAt` assigned."""

    @abstractmethod
    def get(self, report_id: str) -> Optional[ScamReport]:
        ...

    @abstractmethod
    def list_by_user(self, user_id: str, limit: int = config.HISTORY_LIMIT) -> List[ScamReport]:
        ...

    @abstractmethod
    def recent_aggregate(self, limit: int = config.STATS_WINDOW) -> ScamStats:
        ...


class InMemoryReportStore(ReportStore):
    """Thread-safe in-memory report list, oldest first."""

    def __init__(self) -> None:
        self._reports: List[ScamReport] = []
        self._lock = threading.Lock()

    def save(self, report: ScamReport) -> ScamReport:
        """Assign id and timestamp, append, and return the stored copy."""
        stored = report.model_copy(update={
            "id": uuid.uuid4().hex,
            "reportedAt": int(time.time() * 1000),
        })
        with self._lock:
            self._reports.append(stored)
            self._persist(self._reports)
        logger.info(
            f"[{stored.id[:8]}] SAVED  class={stored.classification.value}  "
            f"score={stored.riskScore}  user={stored.userId or 'anonymous'}"
        )
        return stored

    def get(self, report_id: str) -> Optional[ScamReport]:
        with self._lock:
            for report in self._reports:
                if report.id == report_id:
                    return report
        return None

    def list_by_user(self, user_id: str, limit: int = config.HISTORY_LIMIT) -> List[ScamReport]:
        """Most recent first. Anonymous (empty) user ids have no history."""
        if not user_id or limit <= 0:
            return []
        with self._lock:
            snapshot = list(self._reports)
        mine = [r for r in reversed(snapshot) if r.userId == user_id]
        return mine[:limit]

    def recent_aggregate(self, limit: int = config.STATS_WINDOW) -> ScamStats:
        """Classification counts over the most recent `limit` reports."""
        with self._lock:
            recent = self._reports[-limit:] if limit > 0 else []
        counts = {c: 0 for c in Classification}
        for report in recent:
            counts[report.classification] += 1
        return ScamStats(
            total=len(recent),
            highRisk=counts[Classification.HIGH_RISK],
            warning=counts[Classification.WARNING],
            safe=counts[Classification.SAFE],
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._reports)

    def _persist(self, reports: List[ScamReport]) -> None:
        """Hook for durable subclasses. Called with the lock held."""


class JsonFileReportStore(InMemoryReportStore):
    """In-memory store mirrored to a JSON file.

    The file is loaded on construction and rewritten atomically
    (temp file + os.replace) after each save. A failed write rolls the
    append back and raises PersistenceError.
    """

    def __init__(self, path: str) -> None:
        super().__init__()
        self.path = path
        self._reports = self._load()
        logger.info(f"Report store loaded {len(self._reports)} reports from {path}")

    def _load(self) -> List[ScamReport]:
        if not os.path.exists(self.path):
            return []
        with open(self.path, "r", encoding="utf-8") as fh:
            raw = json.load(fh)
        return [ScamReport.model_validate(item) for item in raw]

    def _persist(self, reports: List[ScamReport]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            payload = [r.model_dump(mode="json") for r in reports]
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, ValueError) as exc:
            reports.pop()
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            logger.error(f"Report store write failed for {self.path}: {exc}", exc_info=True)
            raise PersistenceError(f"Could not write {self.path}: {exc}") from exc


def build_report_store(path: Optional[str] = None) -> ReportStore:
    """File-backed store when a path is configured, in-memory otherwise."""
    path = config.REPORT_STORE_PATH if path is None else path
    if path:
        return JsonFileReportStore(path)
    return InMemoryReportStore()
