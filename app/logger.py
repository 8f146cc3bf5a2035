"""
Logging setup for the MindEase backend.

Console lines read ``09:14:02 │ INFO  │ 📋 todo_service │ message``: the
component is the last segment of the logger name and picks the icon. Colours
are only used on a TTY; the optional log file is always plain text.
"""
import logging
import sys
import time
from datetime import datetime
from functools import wraps
from typing import Any, Callable, Dict, Optional, Tuple

RESET = "\033[0m"
DIM = "\033[2m"
BOLD_RED = "\033[1m\033[91m"

COMPONENT_ICONS = {
    "main": "🌿",
    "db": "🗄️",
    "user_service": "👤",
    "volunteer_service": "🤝",
    "admin_service": "🛡️",
    "assessment_service": "📝",
    "scoring": "📊",
    "todo_service": "📋",
    "recommendation_parser": "🧩",
    "recurrence": "🔁",
    "places_client": "🏥",
    "scheduler": "⏰",
}
FALLBACK_ICON = "•"

# level -> (ANSI colour, fixed-width label)
LEVEL_STYLES: Dict[int, Tuple[str, str]] = {
    logging.DEBUG: (DIM, "DEBUG"),
    logging.INFO: ("\033[96m", "INFO "),
    logging.WARNING: ("\033[93m", "WARN "),
    logging.ERROR: ("\033[91m", "ERROR"),
    logging.CRITICAL: (BOLD_RED, "CRIT "),
}

COMPONENT_WIDTH = 22

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "apscheduler": logging.WARNING,
    "sqlalchemy": logging.WARNING,
    "passlib": logging.ERROR,
}


class MindEaseFormatter(logging.Formatter):
    """Single-line formatter with a per-component icon."""

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        color, label = LEVEL_STYLES.get(record.levelno, ("", record.levelname[:5]))
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        component = record.name.rsplit(".", 1)[-1] if record.name else "root"
        icon = COMPONENT_ICONS.get(component, FALLBACK_ICON)
        message = record.getMessage()

        if self.use_colors:
            line = (
                f"{DIM}{clock}{RESET} │ {color}{label}{RESET} │ "
                f"{icon} {component:<{COMPONENT_WIDTH}} │ {message}"
            )
        else:
            line = f"{clock} | {label} | {icon} {component:<{COMPONENT_WIDTH}} | {message}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    use_colors: bool = True
) -> None:
    """
    Configure the root logger for the application.

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Optional path of a plain-text log file
        use_colors: Colour console output when stdout is a terminal
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]
    handlers[0].setFormatter(MindEaseFormatter(use_colors=use_colors))
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(MindEaseFormatter(use_colors=False))
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(numeric_level)
    for handler in handlers:
        handler.setLevel(numeric_level)
        root.addHandler(handler)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def timed_operation(operation_name: Optional[str] = None):
    """
    Log the duration of the wrapped call at DEBUG, or a warning when it
    raises. Exceptions are always re-raised.
    """
    def decorator(func: Callable) -> Callable:
        name = operation_name or func.__name__
        op_logger = logging.getLogger(func.__module__)

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed_ms = (time.perf_counter() - started) * 1000
                op_logger.warning(f"✗ {name} failed after {elapsed_ms:.0f}ms: {e}")
                raise
            elapsed_ms = (time.perf_counter() - started) * 1000
            op_logger.debug(f"✓ {name} finished in {elapsed_ms:.0f}ms")
            return result

        return wrapper
    return decorator
