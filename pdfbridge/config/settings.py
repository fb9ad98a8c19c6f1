"""Configuration settings using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict, YamlConfigSettingsSource

from pdfbridge.config.constants import (
    DEFAULT_AUTOMATION_TIMEOUT,
    DEFAULT_CLICLICK_PATH,
    DEFAULT_CONFIG_FILE,
    DEFAULT_FONT_CACHE_SETTLE_DELAY,
    DEFAULT_FONT_DOWNLOAD_DIR,
    DEFAULT_FONT_DOWNLOAD_TIMEOUT,
    DEFAULT_INDESIGN_APP_NAME,
    DEFAULT_KILL_GRACE,
    DEFAULT_LOG_DIR,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_REPORT_CANDIDATES,
    DEFAULT_REPORT_SETTLE_DELAY,
)


class InDesignConfig(BaseModel):
    """InDesign conversion configuration."""

    app_path: str | None = None  # None uses the platform default
    app_name: str = DEFAULT_INDESIGN_APP_NAME  # Name used by the macOS AppleScript bridge
    timeout: int = Field(default=DEFAULT_AUTOMATION_TIMEOUT, ge=1)
    export_preset: str | None = None  # PDF export preset name, e.g. "[High Quality Print]"
    collect_document_fonts: bool = True


class AcrobatLayoutConfig(BaseModel):
    """Pixel offsets, keystroke counts and delays for the Acrobat compare UI.

    Offsets are relative to the Acrobat window frame.
    """

    launch_delay: float = 8
    activate_delay: float = 3
    window_wait_attempts: int = 15
    see_all_tools_right_offset: int = 120
    see_all_tools_top_offset: int = 140
    tools_panel_delay: float = 6
    search_box_top_offset: int = 150
    search_query: str = "compare"
    search_delay: float = 3
    tabs_to_compare_tool: int = 2
    compare_tool_delay: float = 5
    tabs_to_compare_button: int = 6
    compare_start_delay: float = 10
    compare_completion_delay: float = 30
    file_dialog_delay: float = 3


class AcrobatConfig(BaseModel):
    """Acrobat comparison configuration."""

    app_path: str | None = None
    timeout: int = Field(default=DEFAULT_AUTOMATION_TIMEOUT, ge=1)
    settle_delay: float = Field(default=DEFAULT_REPORT_SETTLE_DELAY, ge=0)
    cliclick_path: str = DEFAULT_CLICLICK_PATH
    report_candidates: list[str] = Field(default_factory=lambda: list(DEFAULT_REPORT_CANDIDATES))
    layout: AcrobatLayoutConfig = Field(default_factory=AcrobatLayoutConfig)


class FontMappingConfig(BaseModel):
    """A downloadable font variant (Google Fonts family + weight)."""

    family: str
    variant: str


class FontConfig(BaseModel):
    """Missing font remediation configuration."""

    auto_remediate: bool = True
    install_dir: str | None = None  # None uses the per-user platform font directory
    download_dir: str = DEFAULT_FONT_DOWNLOAD_DIR
    download_timeout: float = DEFAULT_FONT_DOWNLOAD_TIMEOUT
    cache_settle_delay: float = Field(default=DEFAULT_FONT_CACHE_SETTLE_DELAY, ge=0)
    # Keys are normalized "family-weight" names, e.g. "inter-bold"
    extra_mappings: dict[str, FontMappingConfig] = Field(default_factory=dict)


class SupervisorConfig(BaseModel):
    """Process supervision configuration."""

    kill_grace: float = Field(default=DEFAULT_KILL_GRACE, ge=0)


class OutputConfig(BaseModel):
    """Output configuration."""

    default_dir: str = DEFAULT_OUTPUT_DIR


class PdfBridgeSettings(BaseSettings):
    """Main configuration class for pdfbridge."""

    model_config = SettingsConfigDict(
        env_prefix="PDFBRIDGE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings sources to include YAML file."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=DEFAULT_CONFIG_FILE),
            file_secret_settings,
        )

    # Sub-configurations
    indesign: InDesignConfig = Field(default_factory=InDesignConfig)
    acrobat: AcrobatConfig = Field(default_factory=AcrobatConfig)
    fonts: FontConfig = Field(default_factory=FontConfig)
    supervisor: SupervisorConfig = Field(default_factory=SupervisorConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    # Global settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_dir: str = DEFAULT_LOG_DIR

    def get_output_dir(self, base_path: Path | None = None) -> Path:
        """Get the output directory path."""
        if base_path:
            return base_path / self.output.default_dir
        return Path(self.output.default_dir)


@lru_cache
def get_settings() -> PdfBridgeSettings:
    """Get cached settings instance."""
    return PdfBridgeSettings()


def reload_settings() -> PdfBridgeSettings:
    """Force reload settings (clear cache)."""
    get_settings.cache_clear()
    return get_settings()
