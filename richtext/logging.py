import inspect
import logging
from pprint import pformat
from typing import Any

from pydantic import BaseModel


class PprintLogger:
    """A logger wrapper that adds pprint support to standard logging methods."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def _format_message(self, msg: Any, pprint: bool = True) -> str:
        """Format a message, optionally using pprint.

        If the message is a Pydantic model and pprint=True, uses model_dump_json()
        to show the model's internals. Otherwise uses pformat for complex objects
        or str() for simple conversion.
        """
        if not pprint:
            return str(msg)

        if isinstance(msg, BaseModel):
            return msg.model_dump_json(indent=2)

        if isinstance(msg, str):
            return msg

        return pformat(msg, width=120, depth=None)

    def debug(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log a debug message with optional pprint formatting."""
        if not self._logger.isEnabledFor(logging.DEBUG):
            return
        self._logger.debug(self._format_message(msg, pprint=pprint), *args, stacklevel=2, **kwargs)

    def info(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log an info message with optional pprint formatting."""
        self._logger.info(self._format_message(msg, pprint=pprint), *args, stacklevel=2, **kwargs)

    def warning(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log a warning message with optional pprint formatting."""
        self._logger.warning(self._format_message(msg, pprint=pprint), *args, stacklevel=2, **kwargs)

    def error(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log an error message with optional pprint formatting."""
        self._logger.error(self._format_message(msg, pprint=pprint), *args, stacklevel=2, **kwargs)

    def exception(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log an exception message with optional pprint formatting."""
        self._logger.exception(self._format_message(msg, pprint=pprint), *args, stacklevel=2, **kwargs)

    # Delegate other standard logger methods/attributes
    def __getattr__(self, name: str) -> Any:
        """Delegate any other attributes to the underlying logger."""
        return getattr(self._logger, name)


def setup_logging(name: str | None = None, level: int | None = None) -> PprintLogger:
    """Set up logging and return a PprintLogger instance.

    Args:
        name: Logger name. Defaults to the calling module's ``__name__``.
        level: Level for the logger and its handler. When None, the logger's
            level is left alone so application configuration wins.
    """
    if name is None:
        frame = inspect.currentframe().f_back  # type: ignore[union-attr]
        name = frame.f_globals.get("__name__", "richtext")  # type: ignore[union-attr]
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    if level is not None and not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        formatter = logging.Formatter("%(asctime)s - %(pathname)s:%(lineno)d - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return PprintLogger(logger)
