"""
Unit tests for settings and logging setup
"""

import logging

import pytest

from src.common import Settings, setup_logging


class TestSettings:
    """Test application settings"""

    def test_defaults(self):
        config = Settings()
        assert config.default_layout == "3x3"
        assert config.default_aspect == "square"
        assert config.jpeg_quality == 90
        assert config.archive_filename == "instagram-grid.zip"
        assert config.resample_filter == "lanczos"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("GRID_JPEG_QUALITY", "80")
        monkeypatch.setenv("GRID_LOG_LEVEL", "debug")
        config = Settings()
        assert config.jpeg_quality == 80
        assert config.log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            Settings(log_level="LOUD")

    def test_invalid_max_workers(self):
        with pytest.raises(ValueError):
            Settings(max_workers=0)

    def test_jpeg_quality_range(self):
        """Settings accept the same 1-100 range as the tiler"""
        assert Settings(jpeg_quality=100).jpeg_quality == 100
        assert "1-100" in Settings.model_fields["jpeg_quality"].description

        with pytest.raises(ValueError):
            Settings(jpeg_quality=0)
        with pytest.raises(ValueError):
            Settings(jpeg_quality=101)


class TestLogging:
    """Test logging setup"""

    def test_setup_logging_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "grid.log"
        root = logging.getLogger()
        saved_handlers = root.handlers[:]
        saved_level = root.level

        try:
            logger = setup_logging(level="DEBUG", log_file=str(log_file))
            logger.info("hello")

            assert root.level == logging.DEBUG
            assert log_file.exists()
            assert any(isinstance(h, logging.FileHandler) for h in root.handlers)
        finally:
            for handler in root.handlers[:]:
                root.removeHandler(handler)
                handler.close()
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)
