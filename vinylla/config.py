"""
Vinylla Configuration - All constants and settings.
"""
import os
from pathlib import Path

# ============================================
# SCREEN & LAYOUT (fixed geometry, no resize)
# ============================================

APP_COLS = 130
APP_ROWS = 40

# Header box occupies rows 0-2, footer box the last 4 rows
HEADER_ROWS = 3
FOOTER_ROWS = 4
CONTENT_TOP = HEADER_ROWS
CONTENT_BOTTOM = APP_ROWS - FOOTER_ROWS  # exclusive

# Left "My Records" box (borders included) and the gap before the info box
LIST_WIDTH = 40
PANEL_GAP = 1
INFO_LEFT = LIST_WIDTH + PANEL_GAP
INFO_WIDTH = APP_COLS - INFO_LEFT

# Label column inside the info box
INFO_LABEL_WIDTH = 9
INFO_VALUE_WIDTH = 24

# Cover art top-left corner on screen
ART_X = 82
ART_Y = 8

# ============================================
# ART
# ============================================

ART_WIDTH = 45
ART_HEIGHT = 20
ART_GLYPH = '█'
ART_BLANK_GLYPH = ' '
ART_SAMPLES = 3  # samples per textel edge (3x3 grid)

# ============================================
# DISCOGS
# ============================================

DISCOGS_API_URL = os.environ.get('VINYLLA_API_URL', 'https://api.discogs.com')
DISCOGS_AUTHORIZE_URL = 'https://discogs.com/oauth/authorize'
DISCOGS_CONSUMER_KEY = os.environ.get('VINYLLA_CONSUMER_KEY', '')
DISCOGS_CONSUMER_SECRET = os.environ.get('VINYLLA_CONSUMER_SECRET', '')
USER_AGENT = 'Vinylla/0.1'
REQUEST_TIMEOUT = 10  # seconds per HTTP call

# ============================================
# PATHS
# ============================================

DATA_DIR = Path(os.environ.get('VINYLLA_DATA_DIR', Path.home() / 'vinylla' / 'data'))
COLLECTION_PATH = DATA_DIR / 'collection.json'
SESSION_PATH = DATA_DIR / 'user_data.json'

# Logging directory
LOG_DIR = Path.home() / 'vinylla' / 'logs'
LOG_FILE = LOG_DIR / 'vinylla.log'
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5MB per file
LOG_BACKUP_COUNT = 5

# ============================================
# INPUT
# ============================================

INPUT_TIMEOUT = 0.5  # seconds to wait for a keystroke before polling again


def has_consumer_credentials() -> bool:
    """Check if Discogs consumer key and secret are configured."""
    return bool(DISCOGS_CONSUMER_KEY and DISCOGS_CONSUMER_SECRET)
