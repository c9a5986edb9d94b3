"""
External API Integrations for Trip Planner

Modules:
- sheet_store: Google Apps Script / Sheets endpoint holding every trip record
"""

from integrations.sheet_store import SheetStoreClient, WriteResult, get_sheet_store

__all__ = [
    'SheetStoreClient',
    'WriteResult',
    'get_sheet_store',
]
