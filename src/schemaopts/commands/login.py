# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

from enum import Enum
from pathlib import Path
from typing import Annotated, ClassVar, Literal

from pydantic import AfterValidator, Field

from schemaopts.alias import with_alias
from schemaopts.types import EnumArg
from schemaopts.validation import OptionsModel, Rule

OutputType = Literal["csv", "json", "md", "text", "none"]

AuthType = Literal["certificate", "deviceCode", "password", "identity", "browser", "secret"]


class CloudType(Enum):
    Public = 0
    USGov = 1
    USGovHigh = 2
    USGovDoD = 3
    China = 4


def existing_file(path: str | None) -> str | None:
    if path and not Path(path).exists():
        raise ValueError(f"Certificate file {path} does not exist")
    return path


class GlobalOptions(OptionsModel):
    query: str | None = Field(None, description="JMESPath query applied to the output")
    output: OutputType | None = Field(None, description="Output format")
    debug: bool = Field(False, description="Show debug output")
    verbose: bool = Field(False, description="Show additional information")

    universal_rules: ClassVar[tuple[Rule, ...]] = (
        Rule(
            lambda o: not o.debug or not o.verbose,
            "Specify debug or verbose, but not both",
        ),
    )


class LoginOptions(GlobalOptions):
    auth_type: with_alias("t", AuthType | None) = "deviceCode"  # type: ignore[valid-type]
    cloud: EnumArg[CloudType] | None = CloudType.Public
    user_name: with_alias("u", str | None) = None  # type: ignore[valid-type]
    password: with_alias("p", str | None) = None  # type: ignore[valid-type]
    certificate_file: with_alias(  # type: ignore[valid-type]
        "c", Annotated[str | None, AfterValidator(existing_file)]
    ) = None
    certificate_base64_encoded: str | None = None
    thumbprint: str | None = None
    app_id: str | None = None
    tenant: str | None = None
    secret: with_alias("s", str | None) = None  # type: ignore[valid-type]
    dummy_number: float | None = None
    dummy_boolean: bool | None = None

    command_rules: ClassVar[tuple[Rule, ...]] = (
        Rule(
            lambda o: o.auth_type != "password" or o.user_name,
            "Username is required when using password authentication",
            ("user_name",),
        ),
        Rule(
            lambda o: o.auth_type != "password" or o.password,
            "Password is required when using password authentication",
            ("password",),
        ),
        Rule(
            lambda o: o.auth_type != "certificate"
            or not (o.certificate_file and o.certificate_base64_encoded),
            "Specify either certificateFile or certificateBase64Encoded, but not both.",
            ("certificate_file",),
        ),
        Rule(
            lambda o: o.auth_type != "certificate"
            or o.certificate_file
            or o.certificate_base64_encoded,
            "Specify either certificateFile or certificateBase64Encoded",
            ("certificate_file",),
        ),
        Rule(
            lambda o: o.auth_type != "secret" or o.secret,
            "Secret is required when using secret authentication",
            ("secret",),
        ),
    )
