"""Logging for SmartFilter.

Loggers are bound to a ``SmartFilterSettings`` object so filter tracing
follows the settings a compiler or manager was built with. Module-level
loggers without explicit settings use the package defaults.
"""

import logging
from typing import Optional

from smartfilter.settings import SmartFilterSettings
from smartfilter.settings import settings as default_settings

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def level_for(name: Optional[str]) -> int:
    """Numeric level for a level name; unset or unknown names mean INFO."""
    return _LEVELS.get((name or "").strip().upper(), logging.INFO)


def setup_global_logging(level: str = "INFO") -> None:
    """Configure the root logger once.

    Args:
        level: Log level name (e.g., "DEBUG", "INFO")
    """
    global _configured
    if _configured:
        return
    logging.basicConfig(level=level_for(level), format=LOG_FORMAT)
    _configured = True


def get_logger(name: Optional[str] = None, settings: Optional[SmartFilterSettings] = None) -> "Logger":
    """Return a logger bound to ``settings`` (package defaults when omitted)."""
    return Logger(name or __name__, settings=settings)


class Logger:
    """Wrapper over ``logging`` bound to a settings object.

    ``.message()`` logs filter traces at the bound ``LOG_LEVEL``, so a
    compiler built with ``LOG_LEVEL="WARNING"`` traces at WARNING regardless
    of the package defaults.
    """

    def __init__(self, name: Optional[str] = None, settings: Optional[SmartFilterSettings] = None) -> None:
        self.settings = settings or default_settings
        if not _configured:
            setup_global_logging(self.settings.LOG_LEVEL)
        self._logger = logging.getLogger(name or __name__)

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def trace_level(self) -> int:
        return level_for(self.settings.LOG_LEVEL)

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._logger.error(msg, *args, **kwargs)

    def critical(self, msg: str, *args, **kwargs) -> None:
        self._logger.critical(msg, *args, **kwargs)

    def message(self, msg: str, *args, **kwargs) -> None:
        self._logger.log(self.trace_level, msg, *args, **kwargs)
