# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

import json
from pathlib import Path

import exitcode
import pytest
from pydantic import BaseModel

from schemaopts.cli import main, render
from schemaopts.commands import LoginOptions


@pytest.fixture(autouse=True)
def no_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.delenv("SCHEMAOPTS_CONFIG", raising=False)
    monkeypatch.delenv("SCHEMAOPTS_LOGLEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def run(argv: list[str]) -> int | str | None:
    with pytest.raises(SystemExit) as e:
        main(argv)
    return e.value.code


def test_dump_options(capsys: pytest.CaptureFixture[str]) -> None:
    assert run(["--dump-options", "login"]) == exitcode.OK

    options = json.loads(capsys.readouterr().out)
    assert options[4] == {
        "name": "auth_type",
        "alias": "t",
        "required": False,
        "autocomplete": [
            "certificate",
            "deviceCode",
            "password",
            "identity",
            "browser",
            "secret",
        ],
        "type": "string",
    }


def test_login(capsys: pytest.CaptureFixture[str]) -> None:
    argv = ["login", "--authType", "password", "--userName", "u@x.com", "--password", "p1"]
    assert run(argv) == exitcode.OK

    out = json.loads(capsys.readouterr().out)
    assert out["auth_type"] == "password"
    assert out["user_name"] == "u@x.com"
    assert out["cloud"] == 0


def test_login_failure(capsys: pytest.CaptureFixture[str]) -> None:
    assert run(["login", "--authType", "password"]) == exitcode.USAGE

    captured = capsys.readouterr()
    assert captured.out == ""
    assert (
        "argument -u/--user-name/--userName: "
        "Username is required when using password authentication"
    ) in captured.err


def test_unknown_command() -> None:
    assert run(["logout"]) == 2


def test_config_defaults(no_config: Path, capsys: pytest.CaptureFixture[str]) -> None:
    no_config.joinpath("schemaopts.toml").write_text(
        """[schemaopts.login]
auth-type = "secret"
secret = "s3cr3t"
output = "text"
"""
    )

    assert run(["login"]) == exitcode.OK

    lines = capsys.readouterr().out.splitlines()
    assert "auth_type: secret" in lines
    assert "secret: s3cr3t" in lines


def test_invalid_config(no_config: Path) -> None:
    no_config.joinpath("schemaopts.toml").write_text("[schemaopts.login\n")

    assert run(["login"]) == exitcode.CONFIG


def test_invalid_config_value(no_config: Path, capsys: pytest.CaptureFixture[str]) -> None:
    no_config.joinpath("schemaopts.toml").write_text('[schemaopts.login]\ncloud = ["USGov"]\n')

    assert run(["login"]) == exitcode.USAGE
    assert "argument --cloud: " in capsys.readouterr().err


def test_invalid_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SCHEMAOPTS_LOGLEVEL", "loud")

    assert run(["login"]) == exitcode.CONFIG


def test_show_config(no_config: Path, capsys: pytest.CaptureFixture[str]) -> None:
    no_config.joinpath("schemaopts.toml").write_text('[schemaopts.login]\ntenant = "x"\n')

    assert run(["--show-config", "login"]) == exitcode.OK
    assert "loaded config" in capsys.readouterr().err


@pytest.mark.parametrize(
    "output,expected",
    [
        ("text", "tenant: t1"),
        ("csv", "tenant\nt1"),
        ("md", "| option | value |\n| --- | --- |\n| tenant | t1 |"),
        ("none", ""),
    ],
)
def test_render(output: str, expected: str) -> None:
    class Tenant(BaseModel):
        tenant: str

    assert render(Tenant(tenant="t1"), output) == expected


def test_render_unsupported() -> None:
    with pytest.raises(ValueError):
        render(LoginOptions(), "yaml")
