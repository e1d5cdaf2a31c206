import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from areacheck_processor import HistoryLedger, LedgerUnavailableError
from conftest import make_record


def test_append_assigns_increasing_positions(ledger):
    positions = [ledger.append(make_record(x=float(i))) for i in range(5)]

    assert positions == [0, 1, 2, 3, 4]
    assert len(ledger) == 5
    assert [record.x for record in ledger.snapshot()] == [0.0, 1.0, 2.0, 3.0, 4.0]


def test_snapshot_is_a_point_in_time_copy(ledger):
    ledger.append(make_record(x=1.0))
    snapshot = ledger.snapshot()

    ledger.append(make_record(x=2.0))

    assert isinstance(snapshot, tuple)
    assert len(snapshot) == 1
    assert len(ledger.snapshot()) == 2


def test_snapshot_limit_returns_newest_records(ledger):
    for i in range(10):
        ledger.append(make_record(x=float(i)))

    assert [record.x for record in ledger.snapshot(limit=3)] == [7.0, 8.0, 9.0]
    assert ledger.snapshot(limit=0) == ()
    assert len(ledger.snapshot(limit=100)) == 10
    # Limiting a snapshot never trims the ledger
    assert len(ledger) == 10

    with pytest.raises(ValueError):
        ledger.snapshot(limit=-1)


def test_append_and_snapshot_puts_record_last(ledger):
    ledger.append(make_record(x=1.0))
    record = make_record(x=2.0)

    position, snapshot = ledger.append_and_snapshot(record)

    assert position == 1
    assert snapshot[-1] is record

    position, snapshot = ledger.append_and_snapshot(make_record(x=3.0), limit=1)
    assert position == 2
    assert [r.x for r in snapshot] == [3.0]


def test_append_rejects_non_records(ledger):
    with pytest.raises(TypeError):
        ledger.append({"x": 1})
    with pytest.raises(TypeError):
        ledger.append_and_snapshot("record")
    assert len(ledger) == 0


def test_concurrent_appends_lose_nothing(ledger):
    n = 500

    def worker(i):
        return ledger.append(make_record(x=float(i % 5)))

    with ThreadPoolExecutor(max_workers=16) as pool:
        positions = list(pool.map(worker, range(n)))

    assert sorted(positions) == list(range(n))
    assert len(ledger) == n
    assert len(ledger.snapshot()) == n


def test_snapshots_during_appends_are_never_torn(ledger):
    stop = threading.Event()
    sizes = []
    torn = []

    def reader():
        while not stop.is_set():
            snapshot = ledger.snapshot()
            # Every visible record is fully formed and in position order
            if not all(record.processing_time_ms == i for i, record in enumerate(snapshot)):
                torn.append(snapshot)
            sizes.append(len(snapshot))

    reader_thread = threading.Thread(target=reader)
    reader_thread.start()
    for i in range(300):
        ledger.append(make_record(processing_time_ms=i))
    stop.set()
    reader_thread.join()

    assert torn == []
    assert sizes == sorted(sizes)
    assert len(ledger) == 300


def test_lock_timeout_raises_ledger_unavailable():
    ledger = HistoryLedger(lock_timeout=0.05)
    ledger._lock.acquire()
    try:
        with pytest.raises(LedgerUnavailableError):
            ledger.append(make_record())
        with pytest.raises(LedgerUnavailableError):
            ledger.snapshot()
    finally:
        ledger._lock.release()

    assert ledger.append(make_record()) == 0


def test_invalid_lock_timeout():
    with pytest.raises(ValueError):
        HistoryLedger(lock_timeout=0)


def test_stats(ledger):
    ledger.append(make_record(hit=True))
    ledger.append(make_record(hit=False))
    ledger.append(make_record(hit=True))

    assert ledger.get_stats() == {'records': 3, 'hits': 2, 'misses': 1}
