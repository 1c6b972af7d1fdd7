import datetime
import inspect
import logging
import logging.config
import typing as t

TimestampProvider = t.Callable[[], datetime.datetime]

TRACE = 5


class TraceLogger(logging.Logger):
    """A logger with a level below DEBUG, for per-row detail."""

    def trace(self, message: str, *args: t.Any, **kwargs: t.Any) -> None:
        if self.isEnabledFor(TRACE):
            self._log(TRACE, message, args, **kwargs)


class LoggingProvider(object):
    """Applies the logging settings tree; held by the container as a Resource."""

    def __init__(self, config: dict[str, t.Any], debug: bool):
        logging.setLoggerClass(TraceLogger)
        logging.addLevelName(TRACE, "TRACE")
        logging.config.dictConfig(config)
        if debug:
            self.capture_warnings(True)

    @staticmethod
    def get_logger(name: str | None = None) -> TraceLogger:
        """The named logger, or the one for the calling module."""
        if name is None:
            caller = inspect.stack()[1].frame
            name = caller.f_globals["__name__"]
        return t.cast(TraceLogger, logging.getLogger(name))

    @staticmethod
    def capture_warnings(capture: bool) -> None:
        logging.captureWarnings(capture)
