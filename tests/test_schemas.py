import json
from datetime import datetime, timedelta, timezone

import pytest

from areacheck_mqtt.schemas import (
    EvaluationRecord,
    RequestMessage,
    ResponseEnvelope,
    ResponseStatus,
    Timestamp,
    format_timestamp,
    parse_timestamp,
)
from conftest import FIXED_TIME, make_record


def test_record_wire_shape():
    record = make_record(x=2.0, y=1.0, r=2.0, hit=False, processing_time_ms=3)

    assert record.to_dict() == {
        'x': 2.0,
        'y': 1.0,
        'r': 2.0,
        'hit': False,
        'currentTime': '2026-10-19T12:00:00.123+00:00',
        'processingTimeMs': 3,
    }


def test_current_time_keeps_local_offset():
    moscow = timezone(timedelta(hours=3))
    record = make_record(evaluated_at=datetime(2026, 1, 2, 3, 4, 5, 6000, tzinfo=moscow))

    assert record.current_time == '2026-01-02T03:04:05.006+03:00'


def test_record_invariants():
    with pytest.raises(ValueError):
        make_record(processing_time_ms=-1)
    with pytest.raises(ValueError):
        make_record(evaluated_at=datetime(2026, 1, 1))


def test_record_from_dict():
    record = make_record(x=-1.5, y=0.0, r=3.0, hit=True, processing_time_ms=7)
    data = json.loads(json.dumps(record.to_dict()))

    restored = EvaluationRecord.from_dict(data)

    assert restored.to_dict() == record.to_dict()
    assert restored.key == record.key


def test_record_from_dict_rejects_bad_data():
    with pytest.raises(ValueError, match="Missing"):
        EvaluationRecord.from_dict({'x': 1})
    with pytest.raises(ValueError):
        EvaluationRecord.from_dict({
            'x': 1, 'y': 1, 'r': 1, 'hit': 'yes',
            'currentTime': '2026-10-19T12:00:00.000Z', 'processingTimeMs': 0,
        })


def test_ok_envelope_shape():
    record = make_record()
    envelope = ResponseEnvelope.ok(record, [make_record(x=4.0), record])

    data = envelope.to_dict()

    assert set(data) == {'status', 'data', 'history'}
    assert data['status'] == 'ok'
    assert data['history'][-1] == data['data']


def test_error_envelope_shape():
    envelope = ResponseEnvelope.error(["Parameter x must be a number."], history=[make_record()])

    data = envelope.to_dict()

    assert set(data) == {'status', 'errors', 'history'}
    assert data['status'] == 'error'
    assert data['errors'] == ["Parameter x must be a number."]
    assert len(data['history']) == 1


def test_envelope_invariants():
    with pytest.raises(ValueError):
        ResponseEnvelope(status=ResponseStatus.OK)
    with pytest.raises(ValueError):
        ResponseEnvelope(status=ResponseStatus.ERROR)
    with pytest.raises(ValueError):
        ResponseEnvelope(status=ResponseStatus.ERROR, data=make_record(), errors=("x",))
    with pytest.raises(ValueError):
        ResponseEnvelope(status=ResponseStatus.OK, data=make_record(), errors=("x",))


def test_envelope_from_dict():
    envelope = ResponseEnvelope.error(["a", "b"], history=[make_record()])

    restored = ResponseEnvelope.from_dict(json.loads(json.dumps(envelope.to_dict())))

    assert restored.status == ResponseStatus.ERROR
    assert restored.errors == ("a", "b")
    assert restored.history[0].to_dict() == make_record().to_dict()

    with pytest.raises(ValueError):
        ResponseEnvelope.from_dict({'status': 'maybe'})


def test_request_message_from_dict_stringifies_fields():
    message = RequestMessage.from_dict({'x': 2, 'y': 1.5, 'r': "2", 'request_id': 42})

    assert message.fields() == {'x': '2', 'y': '1.5', 'r': '2'}
    assert message.request_id == '42'
    assert message.reply_to is None


def test_request_message_keeps_missing_fields_as_none():
    message = RequestMessage.from_dict({'x': '1'})

    assert message.fields() == {'x': '1', 'y': None, 'r': None}
    assert message.to_dict() == {'x': '1'}

    with pytest.raises(ValueError):
        RequestMessage.from_dict(['x', 'y', 'r'])


def test_timestamp_helpers():
    assert format_timestamp(FIXED_TIME) == '2026-10-19T12:00:00.123+00:00'
    assert parse_timestamp('2026-10-19T12:00:00.123Z') == FIXED_TIME.replace(microsecond=123000)

    with pytest.raises(ValueError):
        format_timestamp(datetime(2026, 1, 1))
    with pytest.raises(ValueError):
        parse_timestamp('2026-10-19T12:00:00')
    with pytest.raises(ValueError):
        parse_timestamp('yesterday')

    now = Timestamp.now()
    assert now.to_datetime().tzinfo is not None
