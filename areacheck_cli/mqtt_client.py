"""
MQTT client wrapper for sending point check requests to the gateway.

Handles connection, a private reply subscription, request publishing and
waiting for the correlated reply.
"""

import json
import threading
import uuid
from typing import Any, Dict, Optional

import paho.mqtt.client as mqtt

from areacheck_mqtt.schemas import RequestMessage, ResponseEnvelope


class MQTTRequestClient:
    """
    MQTT client for request/reply point checks.

    Each request gets a fresh request_id and a private reply topic; the
    first reply carrying that request_id is returned.
    """

    def __init__(
        self,
        broker: str = "localhost",
        port: int = 1883,
        username: Optional[str] = None,
        password: Optional[str] = None
    ):
        """
        Initialize MQTT request client.

        Args:
            broker: MQTT broker host
            port: MQTT broker port
            username: Optional MQTT username
            password: Optional MQTT password
        """
        self.broker = broker
        self.port = port

        self.client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2)
        if username and password:
            self.client.username_pw_set(username, password)

        self.client.on_connect = self._on_connect
        self.client.on_subscribe = self._on_subscribe
        self.client.on_message = self._on_message

        self._connected = threading.Event()
        self._subscribed = threading.Event()
        self._replied = threading.Event()
        self._request_id: Optional[str] = None
        self._reply: Optional[Dict[str, Any]] = None

    def _on_connect(self, client, userdata, flags, reason_code, properties):
        if not reason_code.is_failure:
            self._connected.set()

    def _on_subscribe(self, client, userdata, mid, reason_code_list, properties):
        self._subscribed.set()

    def _on_message(self, client, userdata, msg):
        try:
            reply = json.loads(msg.payload.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return
        if isinstance(reply, dict) and reply.get('request_id') == self._request_id:
            self._reply = reply
            self._replied.set()

    def request(
        self,
        request_topic: str,
        x: str,
        y: str,
        r: str,
        timeout: float = 5.0,
        qos: int = 1
    ) -> ResponseEnvelope:
        """
        Send one point check and wait for its reply.

        Args:
            request_topic: Gateway request topic (e.g., "areacheck/lab_01/requests")
            x, y, r: Raw field values, sent as typed by the user
            timeout: Seconds to wait for connection and for the reply
            qos: Quality of Service (default: 1)

        Returns:
            Decoded ResponseEnvelope

        Raises:
            ConnectionError: If unable to connect or subscribe
            TimeoutError: If no reply arrives within timeout
            ValueError: If the reply is not a valid envelope
        """
        self._request_id = uuid.uuid4().hex
        reply_topic = f"{request_topic.rsplit('/', 1)[0]}/replies/{self._request_id}"
        message = RequestMessage(
            x=x, y=y, r=r,
            request_id=self._request_id,
            reply_to=reply_topic,
        )

        try:
            self.client.connect(self.broker, self.port, keepalive=60)
        except (ConnectionRefusedError, OSError) as e:
            raise ConnectionError(
                f"Unable to connect to MQTT broker at {self.broker}:{self.port}. "
                f"Is mosquitto running? ({e})"
            )

        self.client.loop_start()
        try:
            if not self._connected.wait(timeout=timeout):
                raise ConnectionError(f"Connection timeout after {timeout}s")

            self.client.subscribe(reply_topic, qos=qos)
            if not self._subscribed.wait(timeout=timeout):
                raise ConnectionError(f"Subscription timeout after {timeout}s")

            self.client.publish(request_topic, json.dumps(message.to_dict()), qos=qos)

            if not self._replied.wait(timeout=timeout):
                raise TimeoutError(f"No reply within {timeout}s (request_id={self._request_id})")

            return ResponseEnvelope.from_dict(self._reply)
        finally:
            self.client.loop_stop()
            self.client.disconnect()
