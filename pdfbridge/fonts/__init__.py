"""Missing-font remediation for pdfbridge.

Components:
    - FontDownloader: Fetches known fonts from Google Fonts
    - FontInstaller: Installs font files for the current user and refreshes the font cache
    - HostFontRegistry: Serializes all host font changes
"""

from pdfbridge.fonts.downloader import FontDownloader, FontSource, normalize_font_name
from pdfbridge.fonts.installer import FontInstaller, InstalledResource
from pdfbridge.fonts.registry import HostFontRegistry, RemediationReport, get_font_registry

__all__ = [
    "FontDownloader",
    "FontInstaller",
    "FontSource",
    "HostFontRegistry",
    "InstalledResource",
    "RemediationReport",
    "get_font_registry",
    "normalize_font_name",
]
