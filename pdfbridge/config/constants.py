"""Constants for pdfbridge."""

import tempfile
from pathlib import Path

from pdfbridge import __version__

# Application constants
APP_NAME = "pdfbridge"
APP_VERSION = __version__

# Default paths
DEFAULT_OUTPUT_DIR = "output"
DEFAULT_LOG_DIR = ".logs"
DEFAULT_CONFIG_FILE = "pdfbridge.yaml"
DEFAULT_FONT_DOWNLOAD_DIR = ".pdfbridge-fonts"

# Config file locations (in order of priority)
CONFIG_LOCATIONS = [
    Path.cwd() / DEFAULT_CONFIG_FILE,
    Path.home() / ".config" / APP_NAME / "config.yaml",
]

# InDesign document formats
INDESIGN_EXTENSIONS = {".indd", ".idml"}

# Font files picked up from a package's "Document fonts" folder
FONT_EXTENSIONS = {".ttf", ".otf", ".ttc", ".dfont", ".suit"}
DOCUMENT_FONTS_DIRNAME = "Document fonts"

# Default application locations
DEFAULT_INDESIGN_APP_NAME = "Adobe InDesign 2026"
DEFAULT_INDESIGN_PATHS = {
    "darwin": "/Applications/Adobe InDesign 2024/Adobe InDesign 2024.app/Contents/MacOS/Adobe InDesign 2024",
    "win32": r"C:\Program Files\Adobe\Adobe InDesign 2024\InDesign.exe",
}
DEFAULT_ACROBAT_APP_PATH = "/Applications/Adobe Acrobat DC/Adobe Acrobat.app"
DEFAULT_CLICLICK_PATH = "/opt/homebrew/bin/cliclick"
OSASCRIPT = "osascript"

# Timeout settings (seconds)
DEFAULT_AUTOMATION_TIMEOUT = 300  # 5 minutes
DEFAULT_KILL_GRACE = 5
DEFAULT_REPORT_SETTLE_DELAY = 10
DEFAULT_FONT_CACHE_SETTLE_DELAY = 5
DEFAULT_FONT_DOWNLOAD_TIMEOUT = 30

# Suppresses duplicate Objective-C class warnings from Adobe frameworks on macOS
AUTOMATION_ENV_OVERRIDES = {"OBJC_DISABLE_INITIALIZE_FORK_SAFETY": "YES"}

# Extra report names Acrobat has been seen to choose
DEFAULT_REPORT_CANDIDATES = [
    "[Compare Report] error.pdf",
    "[Compare Report] correct.pdf",
]
COMPARE_REPORT_PREFIX = "[Compare Report] "

# Google Fonts CSS2 endpoint used to resolve downloadable font files
GOOGLE_FONTS_CSS_URL = "https://fonts.googleapis.com/css2"

# Lock files shared by every pdfbridge process on the host
LOCK_DIR = Path(tempfile.gettempdir())
AUTOMATION_LOCK_FILE = LOCK_DIR / "pdfbridge-automation.lock"
FONT_LOCK_FILE = LOCK_DIR / "pdfbridge-fonts.lock"
LOCK_POLL_INTERVAL = 0.2
