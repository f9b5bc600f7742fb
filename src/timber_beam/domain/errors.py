from __future__ import annotations

from typing import Any


class CalcError(Exception):
    """Base class for errors raised by the calculation core."""


class InvalidInputError(CalcError, ValueError):
    """
    Input rejected before any analysis runs.

    field: path of the offending value (e.g. "spans[1].length_ft")
    value: the value received
    reason: human readable explanation
    """

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid input for '{field}': {value} - {reason}")
