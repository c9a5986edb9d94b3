"""
Configuration Package for Trip Planner

Provides centralized configuration for the application.

Usage:
    from config import settings

    # Access settings
    url = settings.SHEET_API_URL
    mode = settings.RELOAD_MODE
"""

from config import settings

__all__ = [
    'settings',
]
