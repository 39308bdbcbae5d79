# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations


class SchemaOptsError(Exception):
    pass


class SchemaShapeError(SchemaOptsError):
    """The schema cannot be projected onto command line options.

    Raised while deriving options; no partial option table is produced.
    """


class SchemaTooDeep(SchemaShapeError):
    def __init__(self, limit: int, message: str | None = None):
        self.limit = limit
        self.message = message

        super().__init__(message)

    def __str__(self) -> str:
        message = f"schema nesting exceeds the limit of {self.limit}"

        if self.message is not None:
            message = f"{message}; {self.message}"

        return message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({repr(str(self))})"


class TokenizeError(SchemaOptsError):
    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field

        super().__init__(message)
