# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

from schemaopts.commands.login import CloudType, GlobalOptions, LoginOptions
from schemaopts.validation import OptionsModel

registry: dict[str, type[OptionsModel]] = {
    "login": LoginOptions,
}

__all__ = ["CloudType", "GlobalOptions", "LoginOptions", "registry"]
