# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

import datetime
import logging

import pytest

from schemaopts import log
from schemaopts.log import (
    ColorMode,
    Loglevel,
    _format_record,
    get_logger,
    resolve_color_mode,
    setup_logging,
)


@pytest.mark.parametrize(
    "string,expected",
    [
        ("0", Loglevel.CRITICAL),
        ("3", Loglevel.ERROR),
        ("5", Loglevel.NOTICE),
        ("7", Loglevel.DEBUG),
        ("8", Loglevel.TRACE),
        ("trace", Loglevel.TRACE),
        ("Notice", Loglevel.NOTICE),
        ("WARNING", Loglevel.WARNING),
    ],
)
def test_loglevel_from_str(string: str, expected: Loglevel) -> None:
    assert Loglevel.from_str(string) == expected


@pytest.mark.parametrize("string", ["9", "verbose", ""])
def test_loglevel_from_str_invalid(string: str) -> None:
    with pytest.raises(ValueError):
        Loglevel.from_str(string)


def test_color_mode() -> None:
    assert resolve_color_mode(ColorMode.NEVER) is False


def test_format_record() -> None:
    dt = datetime.datetime(2024, 3, 1, 12, 30, 45, 123456)

    msg = _format_record(dt, "schemaopts.resolver", "hello", Loglevel.INFO, None)

    assert msg == "Mar 01 12:30:45.123 schemaopts.resolver: hello\n"


def test_logger_levels(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(Loglevel.TRACE, logger="schemaopts.test")
    logger = get_logger("schemaopts.test")

    logger.trace("one")
    logger.notice("two")

    assert [(r.levelname, r.getMessage()) for r in caplog.records] == [
        ("TRACE", "one"),
        ("NOTICE", "two"),
    ]


def test_setup_logging_replaces_listener() -> None:
    logger_name = "schemaopts.setup"

    setup_logging(Loglevel.INFO, ColorMode.NEVER, logger_name)
    first = log._queue_listeners[logger_name]
    setup_logging(Loglevel.DEBUG, ColorMode.NEVER, logger_name)
    second = log._queue_listeners[logger_name]

    assert first is not second
    assert first._thread is None  # type: ignore[attr-defined]
    assert second._thread is not None  # type: ignore[attr-defined]
    assert len(logging.getLogger(logger_name).handlers) == 1

    log._stop_queue_listener(logger_name)
