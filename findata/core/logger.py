"""Package logger for findata.

Importing this module only attaches a ``NullHandler``, so library use and tests
never touch the filesystem. The CLI calls :func:`setup_logger` once the output
directory is known from config.yaml.
"""

import logging
from pathlib import Path
from typing import Union

LOGGER_NAME = "findata"
LOG_FILE_NAME = "findata.log"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(module)s.%(funcName)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(LOGGER_NAME)
logger.addHandler(logging.NullHandler())


def setup_logger(log_dir: Union[str, Path] = "output", level: int = logging.INFO) -> logging.Logger:
    """
    Send the package logger to ``<log_dir>/findata.log`` and the console.

    Calling it again replaces the handlers from the previous call, so switching the
    output directory never duplicates log lines.

    Args:
        log_dir (Union[str, Path]): Directory for the log file, usually ``Settings.output_dir``.
        level (int): Minimum level recorded by both handlers.

    Returns:
        logging.Logger: The configured ``findata`` logger.
    """
    log_path = Path(log_dir) / LOG_FILE_NAME
    log_path.parent.mkdir(parents=True, exist_ok=True)

    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()

    logger.setLevel(level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logger.debug(f"Logging to {log_path}")
    return logger
