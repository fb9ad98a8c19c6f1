"""Tests for configuration module."""

from pathlib import Path

import pytest
from pydantic import ValidationError


class TestPdfBridgeSettings:
    """Tests for PdfBridgeSettings."""

    def test_default_settings(self, isolated_settings):  # noqa: ARG002
        """Test default settings values."""
        from pdfbridge.config.settings import PdfBridgeSettings

        settings = PdfBridgeSettings()

        assert settings.log_level == "INFO"
        assert settings.log_dir == ".logs"
        assert settings.output.default_dir == "output"

    def test_indesign_settings(self, isolated_settings):  # noqa: ARG002
        """Test InDesign configuration defaults."""
        from pdfbridge.config.settings import PdfBridgeSettings

        settings = PdfBridgeSettings()

        assert settings.indesign.app_path is None
        assert settings.indesign.app_name == "Adobe InDesign 2026"
        assert settings.indesign.timeout == 300
        assert settings.indesign.export_preset is None
        assert settings.indesign.collect_document_fonts is True

    def test_acrobat_settings(self, isolated_settings):  # noqa: ARG002
        """Test Acrobat configuration defaults."""
        from pdfbridge.config.settings import PdfBridgeSettings

        settings = PdfBridgeSettings()

        assert settings.acrobat.timeout == 300
        assert settings.acrobat.settle_delay == 10
        assert settings.acrobat.layout.see_all_tools_right_offset == 120
        assert settings.acrobat.layout.tabs_to_compare_button == 6
        assert "[Compare Report] correct.pdf" in settings.acrobat.report_candidates

    def test_font_settings(self, isolated_settings):  # noqa: ARG002
        """Test font remediation defaults."""
        from pdfbridge.config.settings import PdfBridgeSettings

        settings = PdfBridgeSettings()

        assert settings.fonts.auto_remediate is True
        assert settings.fonts.install_dir is None
        assert settings.fonts.cache_settle_delay == 5
        assert settings.fonts.extra_mappings == {}
        assert settings.supervisor.kill_grace == 5

    def test_env_override(self, isolated_settings, monkeypatch):  # noqa: ARG002
        """Nested values can be set with PDFBRIDGE_<SECTION>__<KEY>."""
        from pdfbridge.config.settings import PdfBridgeSettings

        monkeypatch.setenv("PDFBRIDGE_INDESIGN__TIMEOUT", "600")
        monkeypatch.setenv("PDFBRIDGE_FONTS__AUTO_REMEDIATE", "false")
        monkeypatch.setenv("PDFBRIDGE_LOG_LEVEL", "DEBUG")

        settings = PdfBridgeSettings()

        assert settings.indesign.timeout == 600
        assert settings.fonts.auto_remediate is False
        assert settings.log_level == "DEBUG"

    def test_yaml_file(self, isolated_settings):
        """pdfbridge.yaml in the working directory is loaded."""
        from pdfbridge.config.settings import PdfBridgeSettings

        (isolated_settings / "pdfbridge.yaml").write_text(
            "indesign:\n"
            "  timeout: 120\n"
            "  export_preset: '[Smallest File Size]'\n"
            "acrobat:\n"
            "  layout:\n"
            "    tabs_to_compare_button: 4\n"
            "fonts:\n"
            "  extra_mappings:\n"
            "    inter-bold:\n"
            "      family: Inter\n"
            "      variant: '700'\n",
            encoding="utf-8",
        )

        settings = PdfBridgeSettings()

        assert settings.indesign.timeout == 120
        assert settings.indesign.export_preset == "[Smallest File Size]"
        assert settings.acrobat.layout.tabs_to_compare_button == 4
        assert settings.fonts.extra_mappings["inter-bold"].family == "Inter"

    def test_env_beats_yaml(self, isolated_settings, monkeypatch):
        from pdfbridge.config.settings import PdfBridgeSettings

        (isolated_settings / "pdfbridge.yaml").write_text(
            "indesign:\n  timeout: 120\n", encoding="utf-8"
        )
        monkeypatch.setenv("PDFBRIDGE_INDESIGN__TIMEOUT", "90")

        assert PdfBridgeSettings().indesign.timeout == 90

    def test_invalid_timeout(self, isolated_settings):  # noqa: ARG002
        from pdfbridge.config.settings import InDesignConfig

        with pytest.raises(ValidationError):
            InDesignConfig(timeout=0)

    def test_get_output_dir(self, isolated_settings):  # noqa: ARG002
        """Test get_output_dir method."""
        from pdfbridge.config.settings import PdfBridgeSettings

        settings = PdfBridgeSettings()

        assert settings.get_output_dir() == Path("output")
        assert settings.get_output_dir(Path("/base")) == Path("/base/output")

    def test_get_settings_cached(self, isolated_settings):  # noqa: ARG002
        from pdfbridge.config.settings import get_settings, reload_settings

        first = get_settings()
        assert get_settings() is first
        assert reload_settings() is not first


class TestConstants:
    """Tests for constants module."""

    def test_indesign_extensions(self):
        from pdfbridge.config.constants import INDESIGN_EXTENSIONS

        assert INDESIGN_EXTENSIONS == {".indd", ".idml"}

    def test_default_paths(self):
        from pdfbridge.config.constants import DEFAULT_INDESIGN_PATHS

        assert set(DEFAULT_INDESIGN_PATHS) == {"darwin", "win32"}
        assert DEFAULT_INDESIGN_PATHS["win32"].endswith("InDesign.exe")
