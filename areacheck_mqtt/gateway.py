"""
MQTT Request Gateway
====================

Bounded Context: Transport Adapter

This module receives point check requests from an MQTT topic, hands the raw
fields to the service on a worker pool and publishes each response envelope
back verbatim.

Design:
- One task per inbound message (ThreadPoolExecutor)
- Callback-based reception (paho-mqtt network thread stays fast)
- Handler is any callable mapping raw fields to a ResponseEnvelope
- Shutdown drains the pool, so in-flight requests always finish

Message Flow:
    Client → MQTT → Gateway._on_message → worker → handler → publish reply

Topics:
    requests:  areacheck/{service_id}/requests
    responses: areacheck/{service_id}/responses (or the request's reply_to)

Example:
    >>> gateway = RequestGateway(
    ...     broker_host="localhost",
    ...     request_topic="areacheck/lab_01/requests",
    ...     response_topic="areacheck/lab_01/responses",
    ...     handler=service.handle_request,
    ...     logger=create_logger("gateway"),
    ... )
    >>> gateway.connect()
    >>> # ... until shutdown ...
    >>> gateway.disconnect()
"""

import json
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional

import paho.mqtt.client as mqtt

from .logging import LogEvent, StructuredLogger
from .schemas import RequestMessage, ResponseEnvelope

RequestHandler = Callable[[Any], ResponseEnvelope]


class RequestGateway:
    """
    MQTT adapter in front of the hit check service.

    Attributes:
        broker_host: MQTT broker hostname
        broker_port: MQTT broker port
        request_topic: Topic subscribed for requests
        response_topic: Default topic for replies
        client_id: MQTT client identifier
        logger: Structured logger instance
        qos: Quality of Service for subscribe and publish

    Thread Safety:
        Callbacks run in the paho network thread and only enqueue work.
        Handlers run in pool threads; paho's publish() is thread-safe.
    """

    def __init__(
        self,
        broker_host: str,
        request_topic: str,
        response_topic: str,
        handler: RequestHandler,
        logger: StructuredLogger,
        broker_port: int = 1883,
        client_id: str = "areacheck_gateway",
        username: Optional[str] = None,
        password: Optional[str] = None,
        qos: int = 1,
        max_workers: int = 8,
        executor: Optional[Executor] = None,
    ):
        """
        Initialize the gateway.

        Args:
            broker_host: MQTT broker hostname
            request_topic: Topic to subscribe for requests
            response_topic: Default reply topic
            handler: Callable(raw fields) -> ResponseEnvelope
            logger: Structured logger instance
            broker_port: MQTT broker port (default: 1883)
            client_id: MQTT client ID
            username: MQTT auth username (optional)
            password: MQTT auth password (optional)
            qos: Quality of Service (default: 1, requests must not be lost)
            max_workers: Worker pool size when no executor is given
            executor: Pre-built executor (tests inject their own)
        """
        self.broker_host = broker_host
        self.broker_port = broker_port
        self.request_topic = request_topic
        self.response_topic = response_topic
        self.client_id = client_id
        self.handler = handler
        self.logger = logger
        self.qos = qos

        self.executor = executor or ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="areacheck-worker",
        )

        # MQTT client setup
        self.client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=client_id)
        if username and password:
            self.client.username_pw_set(username, password)

        # Callbacks
        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect
        self.client.on_message = self._on_message

        # State
        self._connected = threading.Event()
        self._running = False
        self._stats_lock = threading.Lock()
        self._counts = {'received': 0, 'responded': 0, 'failed': 0}

    # ===== MQTT Callbacks (run in MQTT thread) =====

    def _on_connect(self, client, userdata, flags, reason_code, properties) -> None:
        if reason_code.is_failure:
            self.logger.error(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message=f"Failed to connect to broker ({reason_code})",
                metadata={'broker': f"{self.broker_host}:{self.broker_port}"}
            )
            self._connected.clear()
            return

        client.subscribe(self.request_topic, qos=self.qos)
        self._connected.set()
        self.logger.info(
            event=LogEvent.MQTT_CONNECTED,
            message="Connected to MQTT broker",
            metadata={
                'broker': f"{self.broker_host}:{self.broker_port}",
                'client_id': self.client_id,
                'request_topic': self.request_topic,
            }
        )

    def _on_disconnect(self, client, userdata, flags, reason_code, properties) -> None:
        self._connected.clear()
        self.logger.warning(
            event=LogEvent.MQTT_DISCONNECTED,
            message="Disconnected from MQTT broker",
            metadata={
                'broker': f"{self.broker_host}:{self.broker_port}",
                'reason_code': str(reason_code),
            }
        )

    def _on_message(self, client, userdata, msg) -> None:
        """Hand the payload to the worker pool. Keep this fast."""
        with self._stats_lock:
            self._counts['received'] += 1
        self.logger.debug(
            event=LogEvent.MQTT_REQUEST_RECEIVED,
            message="Request received",
            metadata={'topic': msg.topic, 'size': len(msg.payload)}
        )
        try:
            self.executor.submit(self.process_payload, msg.payload)
        except RuntimeError as e:
            # Executor already shut down
            with self._stats_lock:
                self._counts['failed'] += 1
            self.logger.warning(
                event=LogEvent.MQTT_PUBLISH_FAILED,
                message="Request dropped: gateway is shutting down",
                exc_info=e,
            )

    # ===== Request processing (runs in worker threads) =====

    def process_payload(self, payload: bytes) -> bool:
        """
        Decode one payload, run the handler and publish the reply.

        Returns:
            True if the reply was published
        """
        request: Optional[RequestMessage] = None
        try:
            data = json.loads(payload.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            self.logger.warning(
                event=LogEvent.DESERIALIZATION_ERROR,
                message="Undecodable request payload",
                exc_info=e,
            )
            fields: Any = None
        else:
            if isinstance(data, dict):
                request = RequestMessage.from_dict(data)
                fields = request.fields()
            else:
                fields = data

        try:
            envelope = self.handler(fields)
        except Exception as e:
            self.logger.error(
                event=LogEvent.INTERNAL_ERROR,
                message="Request handler raised",
                exc_info=e,
            )
            envelope = ResponseEnvelope.error([f"Internal error: {e}"], history=())

        topic = (request.reply_to if request else None) or self.response_topic
        reply = self.format_reply(envelope, request.request_id if request else None)
        return self.publish(topic, reply)

    @staticmethod
    def format_reply(envelope: ResponseEnvelope, request_id: Optional[str] = None) -> Dict[str, Any]:
        """Envelope dict, with the correlation id when the request had one."""
        reply = envelope.to_dict()
        if request_id is not None:
            reply['request_id'] = request_id
        return reply

    def publish(self, topic: str, reply: Dict[str, Any]) -> bool:
        """
        Publish a reply.

        Returns:
            True if published successfully, False otherwise
        """
        try:
            result = self.client.publish(topic=topic, payload=json.dumps(reply), qos=self.qos)
        except Exception as e:
            with self._stats_lock:
                self._counts['failed'] += 1
            self.logger.error(
                event=LogEvent.MQTT_PUBLISH_ERROR,
                message="Error publishing reply",
                exc_info=e,
                metadata={'topic': topic}
            )
            return False

        if result.rc != mqtt.MQTT_ERR_SUCCESS:
            with self._stats_lock:
                self._counts['failed'] += 1
            self.logger.warning(
                event=LogEvent.MQTT_PUBLISH_FAILED,
                message=f"Publish failed (rc={result.rc})",
                metadata={'topic': topic}
            )
            return False

        with self._stats_lock:
            self._counts['responded'] += 1
        self.logger.debug(
            event=LogEvent.MQTT_PUBLISH_SUCCESS,
            message="Reply published",
            metadata={'topic': topic, 'status': reply.get('status')}
        )
        return True

    # ===== Lifecycle =====

    def connect(self, timeout: float = 10.0) -> bool:
        """
        Connect to the broker and start the network loop.

        Returns:
            True if connected successfully, False otherwise
        """
        try:
            self.client.connect(self.broker_host, self.broker_port, keepalive=60)
            self.client.loop_start()
            self._running = True

            if self._connected.wait(timeout=timeout):
                return True

            self.logger.error(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message="Connection timeout",
                metadata={'timeout': timeout}
            )
            return False

        except Exception as e:
            self.logger.error(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message="Failed to connect to broker",
                exc_info=e,
                metadata={'broker': f"{self.broker_host}:{self.broker_port}"}
            )
            return False

    def disconnect(self) -> None:
        """
        Stop accepting requests, finish in-flight ones, then disconnect.

        Safe to call multiple times.
        """
        if self._running:
            self.client.unsubscribe(self.request_topic)
        self.executor.shutdown(wait=True)
        if self._running:
            self.client.loop_stop()
            self.client.disconnect()
            self._running = False
            self._connected.clear()
        self.logger.info(
            event=LogEvent.MQTT_DISCONNECTED,
            message="Gateway stopped",
            metadata=self.get_stats()
        )

    def is_connected(self) -> bool:
        """Check if currently connected to broker."""
        return self._connected.is_set()

    def get_stats(self) -> Dict[str, Any]:
        """Request counters and connection status."""
        with self._stats_lock:
            return {
                **self._counts,
                'connected': self._connected.is_set(),
                'request_topic': self.request_topic,
                'broker': f"{self.broker_host}:{self.broker_port}",
            }
