"""Configuration management for the StockBoard application."""
import os
from typing import Final, Optional
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('STOCKBOARD_DATA_DIR', str(BASE_DIR / 'data')))
SNAPSHOT_FILE: Final[Path] = Path(os.getenv('STOCKBOARD_SNAPSHOT_FILE', str(DATA_DIR / 'snapshot.json')))

# Google Sheets persistence (optional; sync is disabled when either value is missing)
SHEETS_API_URL: Final[str] = os.getenv('SHEETS_API_URL', 'https://sheets.googleapis.com/v4/spreadsheets')
SPREADSHEET_ID: Final[Optional[str]] = os.getenv('SPREADSHEET_ID') or None
SHEETS_ACCESS_TOKEN: Final[Optional[str]] = os.getenv('SHEETS_ACCESS_TOKEN') or None
SHEETS_TIMEOUT: Final[float] = float(os.getenv('SHEETS_TIMEOUT', '10'))

# Peer sharing
PEER_ID: Final[str] = os.getenv('PEER_ID', 'local')
