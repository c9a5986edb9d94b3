"""
Configuration settings for Trip Planner App

Centralizes all app configuration including:
- Remote sheet endpoint
- Sync behavior settings
- UI configuration
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# =============================================================================
# REMOTE STORE CONFIGURATION
# =============================================================================

# Google Apps Script web app backed by a spreadsheet.
# Deployed URL format: https://script.google.com/macros/s/<deployment-id>/exec
SHEET_API_URL = os.getenv("TRIP_SHEET_URL", "https://script.google.com/macros/s/YOUR_DEPLOYMENT_ID/exec")

# Seconds; unset, 0 or negative means requests wait indefinitely
SHEET_TIMEOUT = float(os.getenv("SHEET_TIMEOUT", "0"))
if SHEET_TIMEOUT <= 0:
    SHEET_TIMEOUT = None

# =============================================================================
# SYNC CONFIGURATION
# =============================================================================

# "resource": a mutation reloads only synchronizers watching that resource
# "global": every mutation reloads every synchronizer
RELOAD_MODE = os.getenv("RELOAD_MODE", "resource")

# Run synchronizer reads on a worker pool instead of inline
BACKGROUND_READS = os.getenv("BACKGROUND_READS", "false").lower() in ("1", "true", "yes")
READ_WORKERS = int(os.getenv("READ_WORKERS", "2"))

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() in ("1", "true", "yes")
LOGS_DIR = Path(__file__).parent.parent / "outputs" / "logs"

# =============================================================================
# UI CONFIGURATION
# =============================================================================

APP_TITLE = "My Trips"
APP_SUBTITLE = "Google Sheets edition"
APP_ICON = "🌴"
PAGE_LAYOUT = "centered"

# Theme colors
BACKGROUND_COLOR = "#F7F4EB"
TEXT_COLOR = "#5D5745"
PRIMARY_COLOR = "#88C9A1"

# =============================================================================
# RECORD DEFAULTS
# =============================================================================

COVER_EMOJIS = ["🇯🇵", "🇹🇭", "🇺🇸", "🇰🇷", "🇫🇷"]

DEFAULT_EVENT_TIME = "10:00"
DEFAULT_EVENT_TYPE = "spot"
DEFAULT_EVENT_LOCATION = "TBD"

DEFAULT_EXPENSE_ITEM = "Untitled"
DEFAULT_PAYER = "Me"
CURRENCY = "TWD"
