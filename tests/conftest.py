import logging
from datetime import datetime, timezone

import pytest

from areacheck_mqtt import create_logger
from areacheck_mqtt.schemas import EvaluationRecord
from areacheck_processor import EngineConfig, HistoryLedger, HitCheckService


FIXED_TIME = datetime(2026, 10, 19, 12, 0, 0, 123456, tzinfo=timezone.utc)


def make_record(x=0.0, y=0.0, r=1.0, hit=True, evaluated_at=FIXED_TIME, processing_time_ms=0):
    return EvaluationRecord(
        x=x,
        y=y,
        r=r,
        hit=hit,
        evaluated_at=evaluated_at,
        processing_time_ms=processing_time_ms,
    )


@pytest.fixture
def quiet_logger():
    return create_logger("test", level=logging.CRITICAL)


@pytest.fixture
def ledger():
    return HistoryLedger()


@pytest.fixture
def service(ledger, quiet_logger):
    return HitCheckService(ledger=ledger, config=EngineConfig(), logger=quiet_logger)
