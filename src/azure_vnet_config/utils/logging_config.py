"""Logging configuration for vnetcraft.

Provides configurable logging with:
- File-based logging with rotation
- Console output on stderr
- Timing decorator and context manager for remote calls and stages

Environment Variables:
    VNETCRAFT_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    VNETCRAFT_LOG_FILE: Path to log file (default: ~/.vnetcraft/vnetcraft.log)
    VNETCRAFT_LOG_MAX_SIZE: Max log file size in MB (default: 10)
    VNETCRAFT_LOG_BACKUPS: Number of backup files to keep (default: 5)

Usage:
    from azure_vnet_config.utils.logging_config import setup_logging, timed

    setup_logging()  # Call once at startup

    @timed("get_configuration")
    def get_configuration(self):
        ...

    with timed_section("merge", subscription_id, vnet="domainvlan"):
        ...
"""
import functools
import logging
import os
import time
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Callable, Any

# Performance logger - separate from main logger for easy filtering
perf_logger = logging.getLogger("vnetcraft.perf")


def get_log_level() -> int:
    """Get log level from environment."""
    level_str = os.environ.get("VNETCRAFT_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_str, logging.INFO)


def get_log_file() -> Path:
    """Get log file path from environment."""
    default_path = Path.home() / ".vnetcraft" / "vnetcraft.log"
    path_str = os.environ.get("VNETCRAFT_LOG_FILE", str(default_path))
    return Path(path_str)


def setup_logging(level: Optional[int] = None) -> None:
    """Configure logging for the application.

    Sets up:
    - Console handler (INFO+ by default, respects VNETCRAFT_LOG_LEVEL)
    - File handler with rotation (DEBUG level - captures everything)
    - Performance logger for timing metrics

    Args:
        level: Console level overriding VNETCRAFT_LOG_LEVEL
    """
    log_level = level if level is not None else get_log_level()
    log_file = get_log_file()
    max_size_mb = int(os.environ.get("VNETCRAFT_LOG_MAX_SIZE", "10"))
    backup_count = int(os.environ.get("VNETCRAFT_LOG_BACKUPS", "5"))

    log_file.parent.mkdir(parents=True, exist_ok=True)

    main_format = logging.Formatter(
        "%(asctime)s.%(msecs)03d | %(name)-25s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(main_format)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(main_format)

    # Package loggers and the vnetcraft.* loggers share the same handlers
    for name in ("vnetcraft", "azure_vnet_config"):
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
        logger.handlers.clear()
        logger.addHandler(console_handler)
        logger.addHandler(file_handler)
        logger.propagate = False

    logging.getLogger("vnetcraft").info(
        f"Logging initialized: level={logging.getLevelName(log_level)}, file={log_file}"
    )


def _log_timing(
    operation: str,
    subscription: Optional[str],
    vnet: Optional[str],
    start: float,
    error: Optional[BaseException] = None,
) -> None:
    """Write one perf line: operation, subscription, optional vnet, duration, outcome."""
    elapsed = (time.perf_counter() - start) * 1000
    target = f"subscription={subscription or '-'}"
    if vnet:
        target += f" vnet={vnet}"
    if error is None:
        perf_logger.info(f"{operation} {target} took {elapsed:.1f}ms: OK")
    else:
        perf_logger.warning(f"{operation} {target} took {elapsed:.1f}ms: FAIL {error}")


def timed(operation: str, subscription: Optional[str] = None):
    """Decorator logging how long a remote call took.

    The subscription defaults to self.subscription_id of the decorated method.
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            sub_id = subscription
            if sub_id is None and args:
                sub_id = getattr(args[0], "subscription_id", None)

            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _log_timing(operation, sub_id, None, start, e)
                raise
            _log_timing(operation, sub_id, None, start)
            return result

        return wrapper

    return decorator


@contextmanager
def timed_section(
    operation: str,
    subscription: Optional[str] = None,
    vnet: Optional[str] = None,
):
    """Context manager timing one pipeline stage.

    Usage:
        with timed_section("merge", subscription_id, vnet="domainvlan"):
            merged = merge_sections(new, existing)
    """
    start = time.perf_counter()
    try:
        yield
    except Exception as e:
        _log_timing(operation, subscription, vnet, start, e)
        raise
    _log_timing(operation, subscription, vnet, start)
