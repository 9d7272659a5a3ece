import logging
import sys

from imageconv import logger as ic_logger


def test_setup_logger_idempotent_handlers():
    """Calling setup_logger() repeatedly should leave exactly one stderr StreamHandler."""
    base = ic_logger.setup_logger(level=logging.DEBUG)
    _ = ic_logger.setup_logger(level=logging.DEBUG)

    handlers = [
        h for h in base.handlers if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr
    ]

    assert len(handlers) == 1
    assert base.propagate is False


def test_env_level_overrides_argument(monkeypatch):
    monkeypatch.setenv("IMAGECONV_LOG_LEVEL", "error")
    base = ic_logger.setup_logger(level=logging.DEBUG)
    assert base.level == logging.ERROR
    monkeypatch.delenv("IMAGECONV_LOG_LEVEL")
    assert ic_logger.setup_logger().level == logging.INFO


def test_category_filter(monkeypatch):
    monkeypatch.setenv("IMAGECONV_LOG_CATS", "vips, filters")
    base = ic_logger.setup_logger()
    handler = next(h for h in base.handlers if getattr(h, "stream", None) is sys.stderr)

    def record(name):
        return logging.LogRecord(name, logging.INFO, __file__, 1, "msg", None, None)

    assert handler.filter(record("imageconv.vips"))
    assert not handler.filter(record("imageconv.pillow"))

    monkeypatch.delenv("IMAGECONV_LOG_CATS")
    ic_logger.setup_logger()
    assert handler.filter(record("imageconv.pillow"))


def test_get_logger_returns_child():
    assert ic_logger.get_logger("handlers").name == "imageconv.handlers"
    assert ic_logger.get_logger().name == "imageconv"
