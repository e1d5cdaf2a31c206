"""
Configuration schema for the hit check service.

This module defines the configuration structure for the engine, including
input domain bounds, history settings, MQTT transport settings and worker
pool sizing.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple
import yaml


@dataclass(frozen=True)
class EngineConfig:
    """
    Input domain and history configuration.

    Attributes:
        x_min, x_max: Closed interval accepted for X
        allowed_y: Finite set of accepted Y values
        allowed_r: Finite set of accepted radii
        response_history_limit: Newest N records returned per response
            (None = whole ledger). The ledger itself is never trimmed.
        ledger_lock_timeout: Seconds to wait for the ledger lock
    """

    x_min: float = -3.0
    x_max: float = 5.0
    allowed_y: Tuple[float, ...] = (-5.0, -4.0, -3.0, -2.0, -1.0, 0.0, 1.0, 2.0, 3.0, 4.0, 5.0)
    allowed_r: Tuple[float, ...] = (1.0, 1.5, 2.0, 2.5, 3.0)
    response_history_limit: Optional[int] = None
    ledger_lock_timeout: float = 1.0

    def __post_init__(self):
        """Validate engine configuration."""
        object.__setattr__(self, "x_min", float(self.x_min))
        object.__setattr__(self, "x_max", float(self.x_max))
        object.__setattr__(self, "ledger_lock_timeout", float(self.ledger_lock_timeout))
        object.__setattr__(self, "allowed_y", tuple(float(v) for v in self.allowed_y))
        object.__setattr__(self, "allowed_r", tuple(float(v) for v in self.allowed_r))

        if self.x_min > self.x_max:
            raise ValueError(
                f"x_min must be <= x_max, got [{self.x_min}, {self.x_max}]"
            )

        if not self.allowed_y:
            raise ValueError("allowed_y cannot be empty")

        if not self.allowed_r:
            raise ValueError("allowed_r cannot be empty")

        if any(r <= 0 for r in self.allowed_r):
            raise ValueError(
                f"allowed_r values must be > 0, got {self.allowed_r}"
            )

        if self.response_history_limit is not None and self.response_history_limit < 1:
            raise ValueError(
                f"response_history_limit must be >= 1 or null, got {self.response_history_limit}"
            )

        if self.ledger_lock_timeout <= 0:
            raise ValueError(
                f"ledger_lock_timeout must be > 0, got {self.ledger_lock_timeout}"
            )


DEFAULT_ENGINE_CONFIG = EngineConfig()


@dataclass(frozen=True)
class MQTTConfig:
    """MQTT broker configuration."""

    broker: str = "localhost"
    port: int = 1883
    username: Optional[str] = None
    password: Optional[str] = None
    qos: int = 1

    request_topic: str = "areacheck/{service_id}/requests"
    response_topic: str = "areacheck/{service_id}/responses"

    def __post_init__(self):
        """Validate MQTT configuration."""
        if not self.broker:
            raise ValueError("MQTT broker cannot be empty")

        if not 1 <= self.port <= 65535:
            raise ValueError(
                f"MQTT port must be in [1, 65535], got {self.port}"
            )

        if self.qos not in {0, 1, 2}:
            raise ValueError(
                f"MQTT QoS must be 0, 1, or 2, got {self.qos}"
            )

    def topics_for(self, service_id: str) -> Tuple[str, str]:
        """Resolve (request_topic, response_topic) for a service."""
        return (
            self.request_topic.format(service_id=service_id),
            self.response_topic.format(service_id=service_id),
        )


@dataclass(frozen=True)
class ServiceConfig:
    """
    Main configuration for the hit check service.

    This configuration is loaded from YAML and validated at startup.
    Immutable after construction (frozen dataclass).
    """

    service_id: str
    max_workers: int = 8
    engine: EngineConfig = field(default_factory=EngineConfig)
    mqtt: MQTTConfig = field(default_factory=MQTTConfig)

    def __post_init__(self):
        """Validate service configuration."""
        if not self.service_id:
            raise ValueError("service_id cannot be empty")

        if not 1 <= self.max_workers <= 256:
            raise ValueError(
                f"max_workers must be in [1, 256], got {self.max_workers}"
            )

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "ServiceConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            service_id: "lab_01"
            max_workers: 8

            engine:
              x_min: -3
              x_max: 5
              allowed_y: [-5, -4, -3, -2, -1, 0, 1, 2, 3, 4, 5]
              allowed_r: [1, 1.5, 2, 2.5, 3]
              response_history_limit: 100

            mqtt:
              broker: "localhost"
              port: 1883
              qos: 1

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the YAML is invalid or values fail validation
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        try:
            with open(yaml_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {yaml_path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping: {yaml_path}")

        try:
            engine = EngineConfig(**(data.get("engine") or {}))
            mqtt = MQTTConfig(**(data.get("mqtt") or {}))
        except TypeError as e:
            raise ValueError(f"Unknown configuration key in {yaml_path}: {e}")

        return cls(
            service_id=data.get("service_id", ""),
            max_workers=data.get("max_workers", 8),
            engine=engine,
            mqtt=mqtt,
        )
