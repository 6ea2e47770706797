from __future__ import annotations

from typing import Literal


LookupErrorCategory = Literal[
    "network_or_cors_blocked",
    "registration_not_found",
    "authentication_or_rate_limit",
    "other",
]


class ValuationError(Exception):
    """Base class for every error raised by the valuation package."""


class InvalidInput(ValuationError, ValueError):
    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class UnknownFactorKey(ValuationError, KeyError):
    """A categorical input is not present in its factor table.

    Inputs are constrained to the Literal vocabularies in ``data_models``, so
    this means a schema mismatch between caller and tables, not bad user input.
    """

    def __init__(self, table: str, key: object) -> None:
        self.table = table
        self.key = key
        super().__init__(f"unknown {table} key: {key!r}")

    def __str__(self) -> str:
        return self.args[0]


class LookupFailed(ValuationError):
    def __init__(self, category: LookupErrorCategory, message: str) -> None:
        self.category = category
        self.message = message
        super().__init__(f"{category}: {message}")


class LookupInProgress(ValuationError):
    """A registration lookup is already outstanding for this form."""
