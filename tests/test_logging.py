"""Tests for the sanitising log formatter and log setup."""

from __future__ import annotations

import logging
import logging.handlers

from genpw.logging_setup import SecureFormatter, setup_secure_logging
from genpw.util.memory import SecureBuffer


def _record(msg: str, *args) -> logging.LogRecord:
    return logging.LogRecord("genpw.test", logging.INFO, __file__, 1, msg, args, None)


class TestSecureFormatter:
    def test_bytes_masked(self):
        out = SecureFormatter("%(message)s").format(_record("pool %s", bytearray(b"abc")))
        assert out == "pool <3 bytes>"

    def test_secure_buffer_masked(self):
        sb = SecureBuffer(b"abcdef")
        out = SecureFormatter("%(message)s").format(_record("pool %s", sb))
        assert out == "pool <secure buffer, 6 bytes>"
        sb.clear()

    def test_long_string_masked(self):
        out = SecureFormatter("%(message)s").format(_record("value %s", "x" * 41))
        assert out == "value <41 chars>"

    def test_numbers_untouched(self):
        out = SecureFormatter("%(message)s").format(
            _record("length %d, %.2f bits", 17, 80.4365604507374)
        )
        assert out == "length 17, 80.44 bits"


def _file_handlers(logger):
    return [
        h for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)
    ]


class TestSetup:
    def test_returns_namespace_logger(self, data_dir):
        logger = setup_secure_logging(data_dir, logging.DEBUG)
        assert logger.name == "genpw"
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        [handler] = _file_handlers(logger)
        assert handler.baseFilename == str(data_dir / "genpw.log")

    def test_repeated_setup_keeps_one_handler(self, data_dir):
        setup_secure_logging(data_dir)
        logger = setup_secure_logging(data_dir)
        assert len(_file_handlers(logger)) == 1

    def test_other_handlers_do_not_block_log_file(self, data_dir):
        logger = logging.getLogger("genpw")
        stream = logging.StreamHandler()
        logger.addHandler(stream)
        try:
            setup_secure_logging(data_dir)
            [handler] = _file_handlers(logger)
            assert handler.baseFilename == str(data_dir / "genpw.log")
        finally:
            logger.removeHandler(stream)

    def test_writes_to_log_file(self, data_dir):
        logger = setup_secure_logging(data_dir)
        logging.getLogger("genpw.test").info("length %d", 17)
        for handler in _file_handlers(logger):
            handler.flush()
        assert "genpw.test - INFO - length 17" in (data_dir / "genpw.log").read_text(
            encoding="utf-8"
        )
