"""
Areacheck CLI - Main entry point.

Provides a command-line interface for point hit checks: remotely through
the MQTT gateway, in-process, or as an ASCII preview of the area.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from areacheck_zone import AreaDetector, MembershipArea, default_area
from areacheck_mqtt import create_logger
from areacheck_mqtt.schemas import ResponseEnvelope
from areacheck_processor import EngineConfig, HistoryLedger, HitCheckService, ServiceConfig

from .history_cache import HistoryCache
from .mqtt_client import MQTTRequestClient


def print_envelope(envelope: ResponseEnvelope, history: Optional[list] = None) -> None:
    """Print an envelope as JSON; ``history`` overrides the envelope's own."""
    output = envelope.to_dict()
    if history is not None:
        output['history'] = [record.to_dict() for record in history]
    print(json.dumps(output, indent=2, ensure_ascii=False))


def render_preview(area: MembershipArea, r: float, step: float = 0.25) -> str:
    """
    Render the area for radius ``r`` as ASCII art.

    Legend:
        '#' inside, '.' outside, '+' origin, '|' Y axis, '-' X axis

    The view spans [-R - step, R + step] on both axes.
    """
    bound = r + step
    xs, ys, grid = AreaDetector.raster(area, r, (-bound, bound, -bound, bound), step)

    lines = []
    for i, y in enumerate(ys):
        row = []
        for j, x in enumerate(xs):
            if grid[i, j]:
                row.append('#')
            elif abs(x) < step / 2 and abs(y) < step / 2:
                row.append('+')
            elif abs(x) < step / 2:
                row.append('|')
            elif abs(y) < step / 2:
                row.append('-')
            else:
                row.append('.')
        lines.append(' '.join(row))
    return '\n'.join(lines)


def load_engine_config(config_path: Optional[str]) -> EngineConfig:
    if config_path is None:
        return EngineConfig()
    return ServiceConfig.from_yaml(Path(config_path)).engine


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Areacheck CLI - Check whether a point falls inside the area",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Ask the running service (through the broker)
  areacheck-cli check 2 1 2
  areacheck-cli check 0,5 -1 1.5 --cache ~/.areacheck-history.json

  # Evaluate in-process, no broker needed
  areacheck-cli local 2 1 2

  # Show the area for R = 2
  areacheck-cli preview 2
"""
    )

    # Global arguments
    parser.add_argument(
        "--service-id",
        default="lab_01",
        help="Target service ID (default: lab_01)"
    )
    parser.add_argument(
        "--broker",
        default="localhost",
        help="MQTT broker host (default: localhost)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=1883,
        help="MQTT broker port (default: 1883)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show engine logs"
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    check = subparsers.add_parser('check', help='Check a point through the MQTT gateway')
    check.add_argument('x', help='X coordinate')
    check.add_argument('y', help='Y coordinate')
    check.add_argument('r', help='Radius R')
    check.add_argument('--timeout', type=float, default=5.0, help='Reply timeout in seconds')
    check.add_argument('--cache', help='Merge returned history into this JSON file')

    local = subparsers.add_parser('local', help='Check a point in-process')
    local.add_argument('x', help='X coordinate')
    local.add_argument('y', help='Y coordinate')
    local.add_argument('r', help='Radius R')
    local.add_argument('--config', help='Service YAML to read engine settings from')
    local.add_argument('--cache', help='Merge returned history into this JSON file')

    preview = subparsers.add_parser('preview', help='Print the area as ASCII art')
    preview.add_argument('r', type=float, help='Radius R')
    preview.add_argument('--step', type=float, default=0.25, help='Grid spacing (default: 0.25)')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        if args.command == 'check':
            client = MQTTRequestClient(broker=args.broker, port=args.port)
            envelope = client.request(
                f"areacheck/{args.service_id}/requests",
                args.x, args.y, args.r,
                timeout=args.timeout,
            )
            history = HistoryCache(Path(args.cache)).merge(envelope.history) if args.cache else None
            print_envelope(envelope, history)
            return 0 if envelope.is_ok else 2

        elif args.command == 'local':
            config = load_engine_config(args.config)
            service = HitCheckService(
                ledger=HistoryLedger(lock_timeout=config.ledger_lock_timeout),
                config=config,
                logger=create_logger("service", level=log_level),
            )
            envelope = service.handle(args.x, args.y, args.r)
            history = HistoryCache(Path(args.cache)).merge(envelope.history) if args.cache else None
            print_envelope(envelope, history)
            return 0 if envelope.is_ok else 2

        elif args.command == 'preview':
            print(render_preview(default_area(), args.r, args.step))
            return 0

    except Exception as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    return 1


if __name__ == '__main__':
    sys.exit(main())
