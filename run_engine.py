#!/usr/bin/env python3
"""
Hit Check Engine - Entry Point
==============================

This script starts the areacheck service, which:
- Receives (x, y, R) requests on an MQTT topic
- Validates them and checks the point against the area
- Records every successful check in the in-memory history ledger
- Publishes the response envelope (verdict + history) back

Usage:
    python run_engine.py --config config/engine.yaml

Architecture:
    - HitCheckService: Per-request orchestrator (areacheck_processor)
    - HistoryLedger: Shared, thread-safe history (areacheck_processor)
    - RequestGateway: MQTT request/reply adapter (areacheck_mqtt)

Lifecycle:
    1. Load configuration from YAML
    2. Setup logging (console + file)
    3. Create ledger, service and gateway
    4. Connect gateway (non-blocking network loop)
    5. Wait for stop signal (Ctrl+C or SIGTERM)
    6. Graceful shutdown (in-flight requests finish first)

Logs:
    - Console: INFO level
    - File: logs/engine.log (INFO level)
"""

import argparse
import signal
import sys
import logging
import threading
from pathlib import Path
from typing import Optional

from areacheck_processor import HistoryLedger, HitCheckService, ServiceConfig
from areacheck_mqtt import RequestGateway, create_logger


# ─────────────────────────────────────────────────────────────────────────────
# Logging Setup
# ─────────────────────────────────────────────────────────────────────────────

def setup_logging(log_file: Optional[Path] = None) -> logging.Logger:
    """
    Setup logging for the engine.

    Args:
        log_file: Optional path to log file
    """
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            *(
                [logging.FileHandler(log_file)]
                if log_file
                else []
            )
        ]
    )

    return logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Main Service
# ─────────────────────────────────────────────────────────────────────────────

class EngineApp:
    """
    Main application wrapper for HitCheckService.

    Handles:
    - Configuration loading
    - Component initialization (ledger, service, gateway)
    - Signal handling (SIGTERM, SIGINT)
    - Graceful shutdown
    """

    def __init__(self, config_path: Path, log_file: Optional[Path] = None):
        self.config_path = config_path
        self.log_file = log_file
        self.logger = setup_logging(log_file)

        # Components (initialized in setup())
        self.config: Optional[ServiceConfig] = None
        self.ledger: Optional[HistoryLedger] = None
        self.service: Optional[HitCheckService] = None
        self.gateway: Optional[RequestGateway] = None

        self._stop_event = threading.Event()
        self._shutdown_requested = False

    def setup(self):
        """
        Setup all components.

        Steps:
        1. Load configuration from YAML
        2. Create history ledger (owned here, injected into the service)
        3. Create HitCheckService
        4. Create RequestGateway
        """
        self.logger.info("=" * 80)
        self.logger.info("🚀 Areacheck Engine - Starting")
        self.logger.info("=" * 80)

        self.logger.info(f"📄 Loading configuration: {self.config_path}")
        self.config = ServiceConfig.from_yaml(self.config_path)
        self.logger.info(f"✅ Configuration loaded (service_id={self.config.service_id})")

        engine = self.config.engine
        self.ledger = HistoryLedger(lock_timeout=engine.ledger_lock_timeout)
        self.service = HitCheckService(
            ledger=self.ledger,
            config=engine,
            logger=create_logger(component="service"),
        )
        self.logger.info(
            f"✅ Service created (x=[{engine.x_min}, {engine.x_max}], "
            f"r={list(engine.allowed_r)})"
        )

        mqtt_config = self.config.mqtt
        request_topic, response_topic = mqtt_config.topics_for(self.config.service_id)
        self.gateway = RequestGateway(
            broker_host=mqtt_config.broker,
            broker_port=mqtt_config.port,
            request_topic=request_topic,
            response_topic=response_topic,
            handler=self.service.handle_request,
            logger=create_logger(component="gateway"),
            client_id=f"areacheck_{self.config.service_id}",
            username=mqtt_config.username,
            password=mqtt_config.password,
            qos=mqtt_config.qos,
            max_workers=self.config.max_workers,
        )
        self.logger.info(f"  - Request topic: {request_topic}")
        self.logger.info(f"  - Response topic: {response_topic}")
        self.logger.info("✅ Gateway created")
        self.logger.info("=" * 80)

    def run(self):
        """
        Run the engine.

        Blocks until shutdown is requested (via signal or exception).
        """
        if not self.gateway:
            raise RuntimeError("Engine not initialized. Call setup() first.")

        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        try:
            if not self.gateway.connect():
                raise RuntimeError(
                    f"Could not connect to MQTT broker "
                    f"{self.config.mqtt.broker}:{self.config.mqtt.port}"
                )

            self.logger.info("✅ Engine started successfully")
            self.logger.info("Press Ctrl+C to stop")

            self._stop_event.wait()
        except KeyboardInterrupt:
            self.logger.info("⚠️  KeyboardInterrupt received")
        finally:
            self.shutdown()

    def shutdown(self):
        """
        Graceful shutdown.

        The gateway drains its worker pool before disconnecting, so every
        request already being handled still gets its record and reply.
        """
        if self._shutdown_requested:
            return
        self._shutdown_requested = True

        self.logger.info("=" * 80)
        self.logger.info("🛑 Shutting down engine")

        if self.gateway:
            try:
                self.gateway.disconnect()
                self.logger.info("✅ Gateway disconnected")
            except Exception as e:
                self.logger.error(f"❌ Error disconnecting gateway: {e}")

        if self.ledger:
            self.logger.info(f"📊 Final history stats: {self.ledger.get_stats()}")

        self.logger.info("✅ Shutdown complete")
        self.logger.info("=" * 80)

    def _signal_handler(self, signum, frame):
        signal_name = signal.Signals(signum).name
        self.logger.info(f"⚠️  Received signal {signal_name} ({signum})")
        self._stop_event.set()


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────

def parse_args():
    parser = argparse.ArgumentParser(
        description="Areacheck Engine - point hit checks over MQTT",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start with the sample config
  python run_engine.py --config config/engine.yaml

  # Console logging only
  python run_engine.py --config config/engine.yaml --no-log-file
        """
    )

    parser.add_argument(
        '--config',
        type=Path,
        required=True,
        help='Path to engine configuration YAML file'
    )

    parser.add_argument(
        '--log-file',
        type=Path,
        default=Path('logs/engine.log'),
        help='Path to log file (default: logs/engine.log)'
    )

    parser.add_argument(
        '--no-log-file',
        action='store_true',
        help='Disable file logging (console only)'
    )

    return parser.parse_args()


def main():
    args = parse_args()

    log_file = None if args.no_log_file else args.log_file

    if not args.config.exists():
        print(f"❌ Error: Configuration file not found: {args.config}", file=sys.stderr)
        sys.exit(1)

    app = EngineApp(config_path=args.config, log_file=log_file)

    try:
        app.setup()
        app.run()
    except Exception as e:
        print(f"❌ Fatal error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
