import json
import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from areacheck_processor import EngineConfig, HistoryLedger, HitCheckService
from areacheck_mqtt import LogEvent, create_logger
from areacheck_mqtt.schemas import ResponseStatus
from conftest import FIXED_TIME


class ExplodingArea:
    def contains(self, x, y, r):
        raise RuntimeError("boom")

    def mask(self, xs, ys, r):
        raise RuntimeError("boom")


def test_end_to_end_ok(service, ledger):
    before = len(ledger.snapshot())

    envelope = service.handle("2", "1", "2")
    data = envelope.to_dict()

    assert data['status'] == 'ok'
    assert isinstance(data['data']['hit'], bool)
    assert data['data']['hit'] is False
    assert data['data']['processingTimeMs'] >= 0
    assert len(data['history']) == before + 1
    assert data['history'][-1] == data['data']


def test_end_to_end_error_leaves_history_unchanged(service, ledger):
    service.handle("0", "0", "1")
    before = len(ledger)

    envelope = service.handle("abc", "1", "2")
    data = envelope.to_dict()

    assert data['status'] == 'error'
    assert data['errors']
    assert 'data' not in data
    assert len(data['history']) == before
    assert len(ledger) == before


@pytest.mark.parametrize("raw_x", ["-3.1", "5.1"])
def test_out_of_range_x_does_not_append(service, ledger, raw_x):
    envelope = service.handle(raw_x, "0", "1")

    assert envelope.status == ResponseStatus.ERROR
    assert envelope.errors == ("Parameter x must be between -3 and 5.",)
    assert len(ledger) == 0


def test_invalid_r_reported(service):
    envelope = service.handle("0", "0", "1.2")

    assert envelope.errors == ("Parameter r is not within the allowed set (1, 1.5, 2, 2.5, 3).",)


def test_all_errors_reported_at_once(service):
    envelope = service.handle("abc", "9", "1.2")

    assert len(envelope.errors) == 3


def test_origin_is_deterministic(service):
    verdicts = {service.handle("0", "0", "1").data.hit for _ in range(20)}

    assert verdicts == {True}


def test_duration_uses_monotonic_clock_and_timestamp_uses_wall_clock(quiet_logger):
    ticks = iter([1_000_000_000, 1_003_700_000])
    service = HitCheckService(
        ledger=HistoryLedger(),
        logger=quiet_logger,
        monotonic_ns=lambda: next(ticks),
        wall_clock=lambda: FIXED_TIME,
    )

    record = service.handle("0.5", "0", "2").data

    assert record.processing_time_ms == 3
    assert record.to_dict()['currentTime'] == '2026-10-19T12:00:00.123+00:00'


def test_history_ends_with_own_record(service, ledger):
    for raw_x in ("1", "2", "3"):
        envelope = service.handle(raw_x, "1", "2")
        assert envelope.history[-1] is envelope.data
    assert len(ledger) == 3


def test_response_history_limit_returns_partial_ledger(ledger, quiet_logger):
    service = HitCheckService(
        ledger=ledger,
        config=EngineConfig(response_history_limit=2),
        logger=quiet_logger,
    )

    for raw_x in ("1", "2", "3"):
        envelope = service.handle(raw_x, "0", "1")

    assert [record.x for record in envelope.history] == [2.0, 3.0]
    assert envelope.history[-1] is envelope.data
    assert len(ledger) == 3

    rejected = service.handle("abc", "0", "1")
    assert len(rejected.history) == 2


def test_concurrent_requests_each_get_a_record(service, ledger):
    n = 200
    before = len(ledger)
    raw = [(str(i % 9 - 3), str(i % 11 - 5), ("1", "1.5", "2", "2.5", "3")[i % 5]) for i in range(n)]

    with ThreadPoolExecutor(max_workers=32) as pool:
        envelopes = list(pool.map(lambda fields: service.handle(*fields), raw))

    assert all(envelope.is_ok for envelope in envelopes)
    assert all(envelope.history[-1] is envelope.data for envelope in envelopes)

    snapshot = ledger.snapshot()
    assert len(snapshot) == before + n
    assert len({id(record) for record in snapshot}) == n
    assert {id(envelope.data) for envelope in envelopes} == {id(record) for record in snapshot}


def test_ledger_unavailable_becomes_error_envelope(quiet_logger):
    ledger = HistoryLedger(lock_timeout=0.05)
    service = HitCheckService(ledger=ledger, logger=quiet_logger)

    ledger._lock.acquire()
    try:
        envelope = service.handle("2", "1", "2")
    finally:
        ledger._lock.release()

    assert envelope.status == ResponseStatus.ERROR
    assert envelope.errors[0].startswith("History ledger unavailable")
    assert envelope.history == ()
    assert len(ledger) == 0


def test_unexpected_failure_becomes_internal_error(ledger, quiet_logger):
    service = HitCheckService(ledger=ledger, area=ExplodingArea(), logger=quiet_logger)

    envelope = service.handle("2", "1", "2")

    assert envelope.status == ResponseStatus.ERROR
    assert envelope.errors == ("Internal error: boom",)
    assert len(ledger) == 0


def test_handle_request_accepts_mappings(service):
    envelope = service.handle_request({'x': 2, 'y': 1, 'r': 2})

    assert envelope.is_ok
    assert envelope.data.to_dict()['x'] == 2.0


def test_handle_request_reports_missing_and_malformed(service):
    missing = service.handle_request({})
    assert missing.errors == (
        "Missing parameter: x",
        "Missing parameter: y",
        "Missing parameter: r",
    )

    malformed = service.handle_request(["2", "1", "2"])
    assert malformed.errors == ("Malformed request: expected fields x, y, r.",)

    undecodable = service.handle_request(None)
    assert undecodable.status == ResponseStatus.ERROR


def test_stats(service):
    service.handle("0", "0", "1")
    service.handle("2", "1", "2")

    stats = service.get_stats()

    assert stats['records'] == 2
    assert stats['hits'] == 1
    assert stats['allowed_r'] == [1.0, 1.5, 2.0, 2.5, 3.0]


def test_rejection_keeps_validation_errors_when_ledger_is_busy(quiet_logger):
    ledger = HistoryLedger(lock_timeout=0.05)
    service = HitCheckService(ledger=ledger, logger=quiet_logger)

    ledger._lock.acquire()
    try:
        envelope = service.handle("abc", "1", "2")
    finally:
        ledger._lock.release()

    assert envelope.status == ResponseStatus.ERROR
    assert envelope.errors == ("Parameter x must be a number.",)
    assert envelope.history == ()


def test_rejection_is_logged_as_validated(ledger, caplog):
    service = HitCheckService(ledger=ledger, logger=create_logger("rejections", level=logging.INFO))

    with caplog.at_level(logging.INFO, logger="areacheck.rejections"):
        service.handle("abc", "1", "2")

    rejected = [
        json.loads(record.getMessage()) for record in caplog.records
        if record.name == "areacheck.rejections"
    ]
    rejected = [entry for entry in rejected if entry['event'] == LogEvent.REQUEST_REJECTED.value]
    assert len(rejected) == 1
    assert rejected[0]['metadata']['state'] == 'validated'
    assert rejected[0]['metadata']['codes'] == ['invalid_x']
