"""
Areacheck CLI - Command-line client for point hit checks.

Usage:
    areacheck-cli check 2 1 2
    areacheck-cli local 2 1 2
    areacheck-cli preview 2
"""

from .cli import main
from .history_cache import HistoryCache, merge_history
from .mqtt_client import MQTTRequestClient

__all__ = ['main', 'HistoryCache', 'merge_history', 'MQTTRequestClient']
