"""Per-component log context with its own level, layered over stdlib logging."""

import logging

TRACE = 5
SILENT = logging.CRITICAL + 10

LOG_LEVELS = {
    'trace': TRACE,
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warn': logging.WARNING,
    'error': logging.ERROR,
    'fatal': logging.CRITICAL,
    'silent': SILENT,
}

logging.addLevelName(TRACE, 'TRACE')

# Filtering happens per LogContext, so the package logger passes everything
# through to whatever handlers the application configures.
_package_logger = logging.getLogger('datahunter')
_package_logger.setLevel(TRACE)
_package_logger.addHandler(logging.NullHandler())

_CONSOLE_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def resolve_level(level: str) -> int:
    """Map a level name ('trace' .. 'silent') to a logging level number."""
    try:
        return LOG_LEVELS[level.lower()]
    except (KeyError, AttributeError):
        raise ValueError(f"Unknown log level: {level!r}") from None


def enable_console_output() -> None:
    """Attach one stderr handler to the package logger."""
    for handler in _package_logger.handlers:
        if getattr(handler, '_datahunter_console', False):
            return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT, '%Y-%m-%d %H:%M:%S'))
    handler._datahunter_console = True
    _package_logger.addHandler(handler)


class LogContext(logging.LoggerAdapter):
    """
    Logger handed to each component at construction.

    The level lives on the context rather than on a shared logger, so two
    clients configured with different levels do not interfere.
    """

    def __init__(self, name: str = 'datahunter', level: str = 'debug', debug: bool = False):
        super().__init__(logging.getLogger(name), {})
        self.level = level
        if debug:
            enable_console_output()

    @property
    def level(self) -> str:
        return self._level_name

    @level.setter
    def level(self, value: str) -> None:
        self._level_no = resolve_level(value)
        self._level_name = value.lower()

    def isEnabledFor(self, level: int) -> bool:
        return level >= self._level_no and self.logger.isEnabledFor(level)

    def trace(self, msg, *args, **kwargs):
        self.log(TRACE, msg, *args, **kwargs)
