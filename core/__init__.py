"""
Core Module for Trip Planner

Provides the data-synchronization layer and essential utilities:
- invalidation: reload signal / bus raised after every mutation
- synchronizer: fetch/cache/invalidate unit per resource
- navigation: trip / tab state machine
- logger: Logging configuration
"""

from core.logger import setup_logger, get_logger

__all__ = [
    'setup_logger',
    'get_logger',
]
