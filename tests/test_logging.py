import logging
from unittest.mock import patch

from convite.logging import TEXT_FORMAT, configure_logging


class TestConfigureLogging:
    def test_text_format(self):
        with patch("convite.logging.settings") as mock_settings:
            mock_settings.log_level = "debug"
            mock_settings.log_json = False
            configure_logging()

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert root.handlers[0].formatter._fmt == TEXT_FORMAT

    def test_json_format(self):
        with patch("convite.logging.settings") as mock_settings:
            mock_settings.log_level = "INFO"
            mock_settings.log_json = True
            configure_logging()

        root = logging.getLogger()
        assert len(root.handlers) == 1
        handler = root.handlers[0]
        from pythonjsonlogger.json import JsonFormatter

        assert isinstance(handler.formatter, JsonFormatter)

    def test_unknown_level_falls_back_to_info(self):
        with patch("convite.logging.settings") as mock_settings:
            mock_settings.log_level = "verbose"
            mock_settings.log_json = False
            configure_logging()

        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_json_records_carry_service(self):
        import json

        with patch("convite.logging.settings") as mock_settings:
            mock_settings.log_level = "INFO"
            mock_settings.log_json = True
            configure_logging()

        formatter = logging.getLogger().handlers[0].formatter
        record = logging.LogRecord("convite.pix", logging.INFO, __file__, 1, "PIX payload generated", None, None)
        data = json.loads(formatter.format(record))
        assert data["service"] == "convite"
        assert data["level"] == "INFO"
        assert data["message"] == "PIX payload generated"

    def test_debug_keeps_pil_quiet(self):
        with patch("convite.logging.settings") as mock_settings:
            mock_settings.log_level = "DEBUG"
            mock_settings.log_json = False
            configure_logging()

        assert logging.getLogger("convite").getEffectiveLevel() == logging.DEBUG
        assert logging.getLogger("PIL").level == logging.INFO
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_quiet_level_applies_to_noisy_loggers(self):
        with patch("convite.logging.settings") as mock_settings:
            mock_settings.log_level = "ERROR"
            mock_settings.log_json = False
            configure_logging()

        assert logging.getLogger("PIL").level == logging.ERROR
