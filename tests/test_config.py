from pathlib import Path

import pytest

from areacheck_processor import EngineConfig, ServiceConfig, validate
from areacheck_processor.config import MQTTConfig

SAMPLE_CONFIG = Path(__file__).resolve().parent.parent / "config" / "engine.yaml"


def test_sample_config_loads():
    config = ServiceConfig.from_yaml(SAMPLE_CONFIG)

    assert config.service_id == "lab_01"
    assert config.engine.allowed_r == (1.0, 1.5, 2.0, 2.5, 3.0)
    assert config.engine.response_history_limit == 100
    assert config.mqtt.topics_for(config.service_id) == (
        "areacheck/lab_01/requests",
        "areacheck/lab_01/responses",
    )


def test_minimal_yaml_uses_defaults(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text('service_id: "bench"\n')

    config = ServiceConfig.from_yaml(path)

    assert config.engine == EngineConfig()
    assert config.mqtt == MQTTConfig()
    assert config.max_workers == 8


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        ServiceConfig.from_yaml(Path("/nonexistent/engine.yaml"))


@pytest.mark.parametrize(
    "content",
    [
        "service_id: [unclosed",
        "- just\n- a list\n",
        'service_id: "x"\nengine:\n  x_minimum: 1\n',
        'service_id: ""\n',
        'service_id: "x"\nmax_workers: 0\n',
        'service_id: "x"\nengine:\n  x_min: 6\n',
        'service_id: "x"\nengine:\n  allowed_r: [0, 1]\n',
        'service_id: "x"\nengine:\n  response_history_limit: 0\n',
        'service_id: "x"\nmqtt:\n  qos: 3\n',
        'service_id: "x"\nmqtt:\n  port: 70000\n',
    ],
)
def test_invalid_config_raises_value_error(tmp_path, content):
    path = tmp_path / "engine.yaml"
    path.write_text(content)

    with pytest.raises(ValueError):
        ServiceConfig.from_yaml(path)


def test_engine_config_normalizes_sets():
    config = EngineConfig(allowed_y=[1, 2], allowed_r=[3])

    assert config.allowed_y == (1.0, 2.0)
    assert config.allowed_r == (3.0,)
    with pytest.raises(ValueError):
        EngineConfig(ledger_lock_timeout=0)


def test_quoted_bounds_are_coerced(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text('service_id: "x"\nengine:\n  x_min: "-3"\n  x_max: "5"\n  ledger_lock_timeout: "0.5"\n')

    engine = ServiceConfig.from_yaml(path).engine

    assert (engine.x_min, engine.x_max) == (-3.0, 5.0)
    assert engine.ledger_lock_timeout == 0.5
    assert validate("5", "0", "1", engine).is_valid


def test_non_numeric_bound_is_rejected(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text('service_id: "x"\nengine:\n  x_min: "low"\n')

    with pytest.raises(ValueError):
        ServiceConfig.from_yaml(path)
