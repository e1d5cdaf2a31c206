"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

This module defines typed event names for structured logging.

Design:
- Enum-based (prevents typos, enables autocomplete)
- Hierarchical naming (namespace.category.action)
- Searchable in log aggregators

Event Naming Convention:
    <component>.<category>.<action>

    component: request, point, ledger, response, mqtt, error
    category: received, rejected, evaluated, appended
    action: success, failed

Example Log Query (CloudWatch Insights):
    fields @timestamp, event, metadata.hit
    | filter event = "point.evaluated"
    | stats count() by metadata.hit
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - request.*: Request lifecycle in the service
    - point.*: Membership evaluation
    - ledger.*: History ledger mutations
    - response.*: Envelope assembly
    - mqtt.*: Broker interactions
    - error.*: Error conditions
    """

    # ========== Request Events ==========
    REQUEST_RECEIVED = "request.received"
    """Raw request accepted for processing."""

    REQUEST_REJECTED = "request.rejected"
    """Request failed validation; no record produced."""

    # ========== Evaluation Events ==========
    POINT_EVALUATED = "point.evaluated"
    """Membership predicate evaluated for a valid request."""

    # ========== Ledger Events ==========
    LEDGER_APPENDED = "ledger.appended"
    """Record appended to the history ledger."""

    # ========== Response Events ==========
    RESPONSE_BUILT = "response.built"
    """Response envelope assembled."""

    # ========== MQTT Events ==========
    MQTT_CONNECTED = "mqtt.connected"
    """MQTT broker connection established."""

    MQTT_DISCONNECTED = "mqtt.disconnected"
    """MQTT broker connection lost."""

    MQTT_REQUEST_RECEIVED = "mqtt.request.received"
    """Request message received from broker."""

    MQTT_PUBLISH_SUCCESS = "mqtt.publish.success"
    """Reply successfully published to broker."""

    MQTT_PUBLISH_FAILED = "mqtt.publish.failed"
    """Reply publication failed."""

    # ========== Error Events ==========
    DESERIALIZATION_ERROR = "error.deserialization"
    """Failed to decode a request payload."""

    LEDGER_UNAVAILABLE = "error.ledger_unavailable"
    """History ledger could not be locked in time."""

    INTERNAL_ERROR = "error.internal"
    """Unexpected failure while handling a request."""

    MQTT_CONNECTION_ERROR = "error.mqtt_connection"
    """Failed to connect to MQTT broker."""

    MQTT_PUBLISH_ERROR = "error.mqtt_publish"
    """Error during message publication."""
