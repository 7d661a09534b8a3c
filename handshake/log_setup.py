"""Logging configuration for scripts (library modules only create loggers)."""

from pathlib import Path
import logging, logging.handlers, sys
from datetime import datetime


def setup_logging(log_dir="logs", level=logging.INFO):
    """Configure the root logger: stdout plus a rotating run log. Returns the log path."""
    logging.captureWarnings(True)  # route warnings (e.g., matplotlib) into logging
    fmt = logging.Formatter(
        "%(asctime)s | %(processName)s[%(process)d] | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Console
    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(fmt)
    sh.setLevel(level)
    handlers = [sh]

    run_log = None
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        run_log = log_dir / f"run-{datetime.now().strftime('%Y%m%d-%H%M%S')}.log"
        # Rotating file
        fh = logging.handlers.RotatingFileHandler(
            run_log, maxBytes=10_000_000, backupCount=5, encoding="utf-8"
        )
        fh.setFormatter(fmt)
        fh.setLevel(level)
        handlers.append(fh)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers[:] = handlers  # replace handlers for idempotency
    if run_log is not None:
        logging.getLogger(__name__).info("Logging to %s", run_log)
    return run_log
