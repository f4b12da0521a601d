import logging

from folio_toolkit.logging_config import setup_logging


def test_setup_logging_uses_log_dir(temp_dir, monkeypatch):
    log_dir = temp_dir / "logs"
    monkeypatch.setenv("FOLIO_LOG_DIR", str(log_dir))
    monkeypatch.setenv("FOLIO_DEBUG_MODULES", "folio_toolkit.core.archive")

    setup_logging()
    try:
        logging.getLogger("folio_toolkit").info("hello from the test")
        assert (log_dir / "app.log").is_file()
        assert logging.getLogger("folio_toolkit.core.archive").level == logging.DEBUG
    finally:
        for handler in logging.getLogger("folio_toolkit").handlers:
            handler.close()
        logging.getLogger("folio_toolkit").handlers.clear()
        logging.getLogger("folio_toolkit").propagate = True
        archive_logger = logging.getLogger("folio_toolkit.core.archive")
        archive_logger.handlers.clear()
        archive_logger.setLevel(logging.NOTSET)
