import logging
import logging.handlers
import os

from app.utils.logging_config import RequestContextFilter, setup_logging


def test_file_handlers_carry_request_context(app, tmp_path):
    app.config.update(LOG_TO_FILE=True, LOG_TO_CONSOLE=True, LOG_DIR=str(tmp_path))
    setup_logging(app)
    root = logging.getLogger()

    try:
        files = [
            h for h in root.handlers
            if isinstance(h, logging.handlers.RotatingFileHandler)
        ]
        assert sorted(os.path.basename(h.baseFilename) for h in files) == [
            "errors.log",
            "family_pickem.log",
        ]
        assert all(
            any(isinstance(f, RequestContextFilter) for f in h.filters) for h in files
        )

        console = [h for h in root.handlers if type(h) is logging.StreamHandler]
        assert len(console) == 1
        assert console[0].filters == []

        with app.test_request_context("/api/health"):
            logging.getLogger("app.test").error("boom")
        for handler in files:
            handler.flush()
        assert "/api/health" in (tmp_path / "errors.log").read_text()
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
