"""Error taxonomy surfaced by jobgate components."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):
    """Error codes with their message templates."""

    E0603 = "SQL error in operation, {0}"
    E0738 = (
        "The following {0} parameters are required but were not defined "
        "and no default values are available: {1}"
    )
    E0739 = "Parameter declaration #{0} in <parameters> has no name"
    E0740 = "Invalid <parameters> section: {0}"

    def format(self, *args: Any) -> str:
        return self.value.format(*args)


class JobGateError(Exception):
    """Base class for errors carrying an :class:`ErrorCode`."""

    def __init__(self, code: ErrorCode, *params: Any) -> None:
        self.code = code
        self.params = params
        super().__init__(f"{code.name}: {code.format(*params)}")


class QueryExecutionError(JobGateError):
    """Building or running an action query failed.

    The original exception is kept as ``cause`` and is also chained as
    ``__cause__`` by the raiser.
    """

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(ErrorCode.E0603, f"{type(cause).__name__}: {cause}")


class ParameterVerifierError(JobGateError):
    """The ``<parameters>`` section of a definition could not be satisfied."""

    def __init__(
        self,
        code: ErrorCode,
        *params: Any,
        missing: Optional[list[str]] = None,
    ) -> None:
        self.missing = list(missing or [])
        super().__init__(code, *params)

    @classmethod
    def missing_parameters(cls, names: list[str]) -> "ParameterVerifierError":
        return cls(ErrorCode.E0738, len(names), ", ".join(names), missing=names)
