# SPDX-FileCopyrightText: Hayden Richards
#
# SPDX-License-Identifier: MIT

"""Tests the `parser` module."""

import pytest

from schemaopts.commands import LoginOptions
from schemaopts.parser import OptionParser
from schemaopts.tokenizer import build_tokenizer_config
from schemaopts.validation import Failure, Success, Violation


@pytest.fixture
def parser() -> OptionParser[LoginOptions]:
    return OptionParser(LoginOptions, prog="login")


def test_parse(parser: OptionParser[LoginOptions]) -> None:
    result = parser.parse(["--authType", "password", "--userName", "u@x.com", "--password", "p1"])

    assert isinstance(result, Success)
    assert result.value.auth_type == "password"
    assert result.value.user_name == "u@x.com"
    assert result.value.password == "p1"


def test_parse_aliases(parser: OptionParser[LoginOptions]) -> None:
    result = parser.parse(["-t", "secret", "-s", "hunter2", "--dummyNumber", "2.5"])

    assert isinstance(result, Success)
    assert result.value.secret == "hunter2"
    assert result.value.dummy_number == 2.5


def test_invalid_value(parser: OptionParser[LoginOptions]) -> None:
    result = parser.parse(["--authType", "invalid"])

    assert isinstance(result, Failure)
    assert result.first.path == ("auth_type",)


def test_rules_in_order(parser: OptionParser[LoginOptions]) -> None:
    result = parser.parse(["--authType", "password"])

    assert isinstance(result, Failure)
    assert result.violations == (
        Violation(("user_name",), "Username is required when using password authentication"),
        Violation(("password",), "Password is required when using password authentication"),
    )


def test_universal_rule_only(parser: OptionParser[LoginOptions]) -> None:
    result = parser.parse(["--debug", "--verbose", "--authType", "password"])

    assert isinstance(result, Failure)
    assert result.violations == (Violation((), "Specify debug or verbose, but not both"),)


def test_unknown_option(parser: OptionParser[LoginOptions]) -> None:
    result = parser.parse(["--Title", "value"])

    assert isinstance(result, Failure)
    assert result.first.path == ("Title",)


def test_missing_value(parser: OptionParser[LoginOptions]) -> None:
    result = parser.parse(["--userName"])

    assert isinstance(result, Failure)
    assert result.first == Violation(("user_name",), "expected one argument")


def test_defaults(parser: OptionParser[LoginOptions]) -> None:
    defaults = {"auth_type": "secret", "secret": "from-config"}

    result = parser.parse([], defaults)
    assert isinstance(result, Success)
    assert result.value.secret == "from-config"

    result = parser.parse(["-s", "from-args"], defaults)
    assert isinstance(result, Success)
    assert result.value.secret == "from-args"


def test_tokenizer_config_override() -> None:
    parser = OptionParser(LoginOptions, aliases={"tenant": "T"})
    config = build_tokenizer_config(parser.options, parse_numbers=True)
    parser = OptionParser(LoginOptions, aliases={"tenant": "T"}, tokenizer_config=config)

    result = parser.parse(["-T", "contoso", "--dummy-number", "7"])

    assert isinstance(result, Success)
    assert result.value.tenant == "contoso"
    assert result.value.dummy_number == 7


def test_parse_typed_args(parser: OptionParser[LoginOptions]) -> None:
    options = parser.parse_typed_args(["-t", "identity"])

    assert isinstance(options, LoginOptions)
    assert options.auth_type == "identity"


def test_parse_typed_args_exits(
    parser: OptionParser[LoginOptions],
    capsys: pytest.CaptureFixture[str],
) -> None:
    with pytest.raises(SystemExit) as e:
        parser.parse_typed_args(["--authType", "password"])

    assert e.value.code == OptionParser.EXIT_ERROR
    assert capsys.readouterr().err == (
        "login: argument -u/--user-name/--userName: "
        "Username is required when using password authentication\n"
    )


def test_parse_typed_args_from_argv(
    parser: OptionParser[LoginOptions],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr("sys.argv", ["login", "--cloud", "China"])

    assert parser.parse_typed_args().cloud.name == "China"  # type: ignore[union-attr]


def test_explicit_boolean_value(parser: OptionParser[LoginOptions]) -> None:
    result = parser.parse(["--debug", "false", "--verbose"])

    assert isinstance(result, Success)
    assert result.value.debug is False
    assert result.value.verbose is True
