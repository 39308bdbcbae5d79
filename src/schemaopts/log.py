# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import atexit
import datetime
import logging
import os
import sys
import traceback
from enum import Enum, IntEnum, unique
from logging.handlers import QueueHandler, QueueListener
from queue import Queue
from typing import TYPE_CHECKING, Any, TextIO, cast

if TYPE_CHECKING:
    from logging import _ExcInfoType


LOGGER_NAME = "schemaopts"

_queue_listeners: dict[str, QueueListener] = {}


@unique
class ColorMode(Enum):
    """ColorMode is used as an argument to :func:`setup_logging`."""

    #: Colors are always turned on.
    ALWAYS = "always"
    #: Colors are turned off if the target
    #: stream (e.g. stderr) is not a tty.
    AUTO = "auto"
    #: No ANSI escape codes are emitted.
    NEVER = "never"


def resolve_color_mode(mode: ColorMode, stream: TextIO = sys.stderr) -> bool:
    if sys.platform == "win32":
        return False

    match mode:
        case ColorMode.ALWAYS:
            return True
        case ColorMode.AUTO:
            if os.getenv("NO_COLOR") is not None:
                return False
            return stream.isatty()
        case ColorMode.NEVER:
            return False


def _add_logging_level(level_name: str, level_num: int) -> None:
    if hasattr(logging, level_name):
        # Already registered, e.g. by a module reload.
        return

    logging.addLevelName(level_num, level_name)
    setattr(logging, level_name, level_num)


_add_logging_level("TRACE", 5)
_add_logging_level("NOTICE", 25)


@unique
class Loglevel(IntEnum):
    """Type safe access to the python loglevels, including
    the additional ``NOTICE`` and ``TRACE`` levels.
    ``TRACE`` is used for the step by step output of the
    schema resolver.
    """

    CRITICAL = logging.CRITICAL
    ERROR = logging.ERROR
    WARNING = logging.WARNING
    NOTICE = 25
    INFO = logging.INFO
    DEBUG = logging.DEBUG
    TRACE = 5

    @classmethod
    def from_str(cls, string: str) -> Loglevel:
        """Converts a string to a Loglevel. ``string`` can be
        a RFC3164 priority (0 to 8 inclusive, 8 being trace)
        or a case insensitive level name (e.g. ``debug``).
        """
        if string.isnumeric():
            match int(string, 0):
                case 0 | 1 | 2:
                    return cls.CRITICAL
                case 3:
                    return cls.ERROR
                case 4:
                    return cls.WARNING
                case 5:
                    return cls.NOTICE
                case 6:
                    return cls.INFO
                case 7:
                    return cls.DEBUG
                case 8:
                    return cls.TRACE
                case _:
                    raise ValueError(f"{string} not a valid priority")

        try:
            return cls[string.upper()]
        except KeyError:
            raise ValueError(f"{string} not a valid loglevel") from None


def setup_logging(
    level: Loglevel | None = None,
    color_mode: ColorMode = ColorMode.AUTO,
    logger_name: str = LOGGER_NAME,
) -> None:
    """Enable and configure the logging system.

    :param level: The loglevel to enable for the console handler.
                  If this argument is None, the env variable
                  ``SCHEMAOPTS_LOGLEVEL`` is read, falling back to ``NOTICE``.
    :param color_mode: The color mode to use for the console.
    :param logger_name: The logger which receives the handler.
    """
    if level is None:
        if (raw := os.getenv("SCHEMAOPTS_LOGLEVEL")) is not None:
            level = Loglevel.from_str(raw)
        else:
            level = Loglevel.NOTICE

    logging.logMultiprocessing = False
    logging.logThreads = False
    logging.logProcesses = False

    _stop_queue_listener(logger_name)

    logger = logging.getLogger(logger_name)
    # NOTSET would defer to the root logger
    logger.setLevel(1)

    while len(logger.handlers) > 0:
        logger.handlers[0].close()
        logger.removeHandler(logger.handlers[0])

    add_stderr_log_handler(logger_name, level, resolve_color_mode(color_mode))


def add_stderr_log_handler(logger_name: str, level: Loglevel, colored: bool) -> None:
    queue: Queue[Any] = Queue()
    logger = logging.getLogger(logger_name)
    logger.addHandler(QueueHandler(queue))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    console_formatter = _ConsoleFormatter()
    console_formatter.colored = colored
    stderr_handler.terminator = ""  # _format_record appends the newline
    stderr_handler.setFormatter(console_formatter)

    queue_listener = QueueListener(queue, stderr_handler, respect_handler_level=True)
    queue_listener.start()
    atexit.register(queue_listener.stop)
    _queue_listeners[logger_name] = queue_listener


def _stop_queue_listener(logger_name: str) -> None:
    if (queue_listener := _queue_listeners.pop(logger_name, None)) is not None:
        queue_listener.stop()
        atexit.unregister(queue_listener.stop)


@unique
class _Color(Enum):
    NOP = ""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    GRAY = "\033[0;38;5;245m"


def _colorize_msg(data: str, levelno: int) -> str:
    match levelno:
        case Loglevel.TRACE | Loglevel.DEBUG:
            style = _Color.GRAY.value
        case Loglevel.NOTICE:
            style = _Color.BOLD.value
        case Loglevel.WARNING:
            style = _Color.YELLOW.value
        case Loglevel.ERROR:
            style = _Color.RED.value
        case Loglevel.CRITICAL:
            style = _Color.RED.value + _Color.BOLD.value
        case _:
            style = _Color.NOP.value

    return f"{style}{data}{_Color.RESET.value}"


def _format_record(
    dt: datetime.datetime,
    name: str,
    data: str,
    levelno: int,
    stacktrace: str | None,
    colored: bool = False,
) -> str:
    msg = dt.strftime("%b %d %H:%M:%S.%f")[:-3]
    msg += f" {name}: "
    msg += _colorize_msg(data, levelno) if colored else data
    msg += "\n"

    if stacktrace is not None:
        msg += "\n"
        msg += stacktrace

    return msg


class _ConsoleFormatter(logging.Formatter):
    colored: bool = False

    def format(self, record: logging.LogRecord) -> str:
        stacktrace = None

        if record.exc_info:
            exc_type, exc_value, exc_traceback = record.exc_info
            stacktrace = "".join(traceback.format_exception(exc_type, exc_value, exc_traceback))

        return _format_record(
            dt=datetime.datetime.fromtimestamp(record.created),
            name=record.name,
            data=record.getMessage(),
            levelno=record.levelno,
            stacktrace=stacktrace,
            colored=self.colored,
        )


class Logger(logging.Logger):
    def trace(
        self,
        msg: Any,
        *args: Any,
        exc_info: _ExcInfoType = None,
        stack_info: bool = False,
        extra: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        if self.isEnabledFor(Loglevel.TRACE):
            self._log(
                Loglevel.TRACE,
                msg,
                args,
                exc_info=exc_info,
                extra=extra,
                stack_info=stack_info,
                **kwargs,
            )

    def notice(
        self,
        msg: Any,
        *args: Any,
        exc_info: _ExcInfoType = None,
        stack_info: bool = False,
        extra: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        if self.isEnabledFor(Loglevel.NOTICE):
            self._log(
                Loglevel.NOTICE,
                msg,
                args,
                exc_info=exc_info,
                extra=extra,
                stack_info=stack_info,
                **kwargs,
            )


logging.setLoggerClass(Logger)


def get_logger(name: str) -> Logger:
    return cast(Logger, logging.getLogger(name))
