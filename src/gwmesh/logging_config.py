"""
Logging Configuration
Sets up the package logger.
"""
import logging
import sys
from typing import Optional

# Loggers of dependencies that are noisy below WARNING
THIRD_PARTY_LOGGERS = ("numba", "matplotlib", "h5py")


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    capture_warnings: bool = True,
) -> None:
    """
    Configures the logger for the 'gwmesh' namespace.

    Point-location retries and their exhaustion are logged at DEBUG level, the
    recharge-weight dimension fallback at WARNING.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
        capture_warnings: Route ``warnings.warn`` messages (e.g. numba performance
            warnings) through logging.
    """
    logger = logging.getLogger("gwmesh")
    logger.setLevel(level)

    # Avoid duplicate handlers when called more than once
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.captureWarnings(capture_warnings)

    logger.info("Logging initialized.")
