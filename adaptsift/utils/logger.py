"""Logging utilities."""

import logging
import os
import sys
from pathlib import Path
from datetime import datetime


def setup_logger(name: str = 'adaptsift', log_level: int = logging.INFO,
                log_file: str = None) -> logging.Logger:
    """Setup logger with console and optional file handler."""
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if not any(getattr(h, '_adaptsift_console', False) for h in logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler._adaptsift_console = True
        logger.addHandler(console_handler)

    if log_file:
        log_path = os.path.abspath(log_file)
        if not any(isinstance(h, logging.FileHandler) and h.baseFilename == log_path
                   for h in logger.handlers):
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


def create_session_log_file(log_dir: str = 'logs') -> str:
    """Create timestamped log file for session."""
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return f"{log_dir}/adaptsift_{timestamp}.log"


def setup_from_config(config: dict) -> logging.Logger:
    """Configure the package logger from the ``logging`` config section."""
    section = config.get("logging", {})
    level = logging.getLevelName(str(section.get("level", "INFO")).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {section.get('level')}")
    log_dir = section.get("log_dir")
    log_file = create_session_log_file(log_dir) if log_dir else None
    return setup_logger('adaptsift', level, log_file)
