"""Configuration module for pdfbridge."""

from pdfbridge.config.settings import (
    AcrobatConfig,
    AcrobatLayoutConfig,
    FontConfig,
    InDesignConfig,
    PdfBridgeSettings,
    get_settings,
    reload_settings,
)

__all__ = [
    "AcrobatConfig",
    "AcrobatLayoutConfig",
    "FontConfig",
    "InDesignConfig",
    "PdfBridgeSettings",
    "get_settings",
    "reload_settings",
]
