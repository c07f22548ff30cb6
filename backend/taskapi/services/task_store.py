import threading
import time

from taskapi.models.task import ChallengeRecord


class TaskStore:
    """
    In-memory map of task id to challenge record.

    One lock guards the whole dict. Records are immutable, so readers get a
    complete record or nothing.
    """

    def __init__(self) -> None:
        self._records: dict[str, ChallengeRecord] = {}
        self._lock = threading.Lock()

    def insert(self, task_id: str, record: ChallengeRecord) -> None:
        """Insert or overwrite the record for ``task_id``."""
        with self._lock:
            self._records[task_id] = record

    def get(self, task_id: str) -> ChallengeRecord | None:
        with self._lock:
            return self._records.get(task_id)

    def evict_older_than(self, max_age_seconds: float, now: float | None = None) -> int:
        """Delete records created more than ``max_age_seconds`` ago. Returns count of deleted records."""
        cutoff = (time.time() if now is None else now) - max_age_seconds
        with self._lock:
            stale = [task_id for task_id, r in self._records.items() if r.created_at < cutoff]
            for task_id in stale:
                del self._records[task_id]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, task_id: object) -> bool:
        with self._lock:
            return task_id in self._records
