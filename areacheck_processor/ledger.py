"""
History Ledger - Thread-safe, append-only record store.

This module provides the HistoryLedger class which keeps every
EvaluationRecord produced by the service, in arrival order, for the
lifetime of the process.

Thread Safety:
- A single threading.Lock serializes append() and snapshot()
- Lock holding time is O(1) for append (list append + index read)
- Records are immutable (frozen dataclass), so a snapshot is a shallow copy
- Lock acquisition is bounded; a timeout raises LedgerUnavailableError
  instead of blocking forever behind a stalled holder
"""

import threading
from typing import Any, Dict, List, Optional, Tuple

from areacheck_mqtt.schemas import EvaluationRecord


class LedgerUnavailableError(Exception):
    """Raised when the ledger cannot be locked within its timeout."""
    pass


class HistoryLedger:
    """
    Append-only ledger of evaluation records.

    Positions are 0-based indices: strictly increasing, unique, and equal to
    the record's index in every later snapshot.

    Thread Safety Guarantees:
    - append(): Write operation (acquires lock)
    - snapshot(), __len__(), get_stats(): Read operations (acquire lock briefly)

    Usage:
        ledger = HistoryLedger()
        position = ledger.append(record)       # 0
        history = ledger.snapshot()            # (record,)
        recent = ledger.snapshot(limit=100)    # newest 100 at most
    """

    def __init__(self, lock_timeout: float = 1.0):
        """
        Initialize empty ledger.

        Args:
            lock_timeout: Seconds to wait for the lock before giving up
        """
        if lock_timeout <= 0:
            raise ValueError(f"lock_timeout must be > 0, got {lock_timeout}")

        self._records: List[EvaluationRecord] = []
        self._lock = threading.Lock()
        self._lock_timeout = lock_timeout

    def _acquire(self, operation: str) -> None:
        if not self._lock.acquire(timeout=self._lock_timeout):
            raise LedgerUnavailableError(
                f"Could not lock history ledger for {operation} "
                f"within {self._lock_timeout}s"
            )

    def append(self, record: EvaluationRecord) -> int:
        """
        Append a record.

        Args:
            record: Fully constructed, immutable record

        Returns:
            Position assigned to the record

        Raises:
            TypeError: If record is not an EvaluationRecord
            LedgerUnavailableError: If the lock could not be acquired

        Thread-safe: Acquires lock for write operation. Once the lock is
        held the append always completes.
        """
        if not isinstance(record, EvaluationRecord):
            raise TypeError(f"Expected EvaluationRecord, got {type(record).__name__}")

        self._acquire("append")
        try:
            self._records.append(record)
            return len(self._records) - 1
        finally:
            self._lock.release()

    def append_and_snapshot(
        self,
        record: EvaluationRecord,
        limit: Optional[int] = None,
    ) -> Tuple[int, Tuple[EvaluationRecord, ...]]:
        """
        Append a record and copy the ledger under the same lock hold.

        No other append can land in between, so ``record`` is always the
        last element of the returned snapshot.

        Returns:
            Tuple of (position, snapshot)

        Raises:
            TypeError: If record is not an EvaluationRecord
            ValueError: If limit is < 1
            LedgerUnavailableError: If the lock could not be acquired
        """
        if not isinstance(record, EvaluationRecord):
            raise TypeError(f"Expected EvaluationRecord, got {type(record).__name__}")
        if limit is not None and limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")

        self._acquire("append")
        try:
            self._records.append(record)
            position = len(self._records) - 1
            if limit is None:
                return position, tuple(self._records)
            return position, tuple(self._records[-limit:])
        finally:
            self._lock.release()

    def snapshot(self, limit: Optional[int] = None) -> Tuple[EvaluationRecord, ...]:
        """
        Point-in-time copy of the ledger, oldest first.

        Args:
            limit: Return only the newest ``limit`` records (None = all)

        Returns:
            Immutable tuple of records

        Raises:
            ValueError: If limit is < 0
            LedgerUnavailableError: If the lock could not be acquired
        """
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")

        self._acquire("snapshot")
        try:
            if limit is None:
                return tuple(self._records)
            if limit == 0:
                return ()
            return tuple(self._records[-limit:])
        finally:
            self._lock.release()

    def __len__(self) -> int:
        self._acquire("len")
        try:
            return len(self._records)
        finally:
            self._lock.release()

    def get_stats(self) -> Dict[str, Any]:
        """
        Ledger statistics.

        Returns:
            Dictionary with record and hit counts
        """
        self._acquire("stats")
        try:
            total = len(self._records)
            hits = sum(1 for record in self._records if record.hit)
        finally:
            self._lock.release()

        return {
            'records': total,
            'hits': hits,
            'misses': total - hits,
        }
