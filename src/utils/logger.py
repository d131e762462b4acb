"""Logging configuration for the area suggestion tooling."""
import logging
import logging.handlers
from pathlib import Path
from typing import Optional
from src.config.settings import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(
    name: str,
    log_dir: Optional[Path] = None,
    console: bool = True,
) -> logging.Logger:
    """
    Configure console and rotating file logging for a logger.

    Calling it again for the same name does not add duplicate handlers.

    Args:
        name: Logger name (typically __name__ or a package name)
        log_dir: Directory for the log file (defaults to settings.LOG_DIR)
        console: Also attach a console handler

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(settings.LOG_LEVEL)

    if any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers):
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # File handler
    log_dir = Path(log_dir or settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        log_dir / f'{name}.log',
        maxBytes=10485760,  # 10MB
        backupCount=5,
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger
