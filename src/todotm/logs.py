import logging
import os
import sys
from pathlib import Path
from typing import Optional

def setup_logging(log_dir: Optional[Path] = None):
    """Set up logging configuration for the todotm package with environment-based levels."""
    # Determine console log level from environment
    env_level = os.getenv('TODOTM_LOG_LEVEL', '').upper()
    is_debug = os.getenv('TODOTM_DEBUG', '').lower() in ('1', 'true', 'yes')

    # Standardized log format with more detail
    log_format = '[%(asctime)s] %(levelname)-8s [%(name)s:%(funcName)s:%(lineno)d] %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    logger = logging.getLogger('todotm')
    logger.setLevel(logging.DEBUG)  # Logger accepts all, handlers filter
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    # File handler (always detailed)
    if log_dir is not None:
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_dir / "todotm.log", encoding='utf-8')
        except OSError as e:
            sys.stderr.write(f"todotm: file logging disabled ({e})\n")
        else:
            file_handler.setFormatter(logging.Formatter(log_format, date_format))
            file_handler.setLevel(logging.DEBUG)
            logger.addHandler(file_handler)

    # Console handler only when asked for; the CLI reports errors itself
    if is_debug or env_level:
        level = logging.DEBUG if is_debug else getattr(logging, env_level, logging.WARNING)
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(
            '%(levelname)-8s [%(name)s] %(message)s' if is_debug
            else '%(levelname)s: %(message)s'
        ))
        console_handler.setLevel(level)
        logger.addHandler(console_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    # Prevent propagation to root logger
    logger.propagate = False

    return logger

def get_logger(name: str = None):
    """Get a logger instance for a specific module."""
    if name:
        return logging.getLogger(f'todotm.{name}')
    return logging.getLogger('todotm')
