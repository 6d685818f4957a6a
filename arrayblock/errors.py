# arrayblock/errors.py
"""
Error types for the array-block abstract domain.

Architecture Overview:
─────────────────────
┌─────────────────────────────────────────────────────────────────────────────┐
│                          Error Hierarchy                                     │
├─────────────────────────────────────────────────────────────────────────────┤
│  ArrayBlockError (base)                                                      │
│  ├── ConfigError            - Bad configuration file / key (recoverable)     │
│  └── InternalError          - Analyzer bugs (should never happen)            │
│      ├── VariantMismatchError   - pointer arithmetic on a managed array      │
│      └── DegenerateStrideError  - stride conversion through zero             │
└─────────────────────────────────────────────────────────────────────────────┘

Error Codes:
────────────
Each error has a unique code following the pattern ABLK-XXXX:
  - 1000-1999: Configuration errors
  - 9000-9999: Internal errors

An ``InternalError`` means a transfer function handed the domain a value
of the wrong representation.  Nothing in this package catches it; it is
meant to abort the analysis of the current procedure.
"""

from __future__ import annotations

import logging
from enum import Enum, auto, unique
from typing import Any, NoReturn, Optional, Type, TypeVar

logger = logging.getLogger(__name__)


@unique
class ErrorSeverity(Enum):
    """Severity levels for array-block errors."""

    WARNING = auto()
    ERROR = auto()
    FATAL = auto()


@unique
class ErrorPhase(Enum):
    """Where the error was raised."""

    CONFIG = "config"
    INTERNAL = "internal"


class ErrorCode:
    """
    Structured error code, ``PREFIX-NNNN``.

    Ranges:
      - 1000-1999: Configuration errors
      - 9000-9999: Internal errors
    """

    __slots__ = ("prefix", "number", "phase", "default_severity")

    def __init__(
        self,
        prefix: str,
        number: int,
        phase: ErrorPhase,
        default_severity: ErrorSeverity = ErrorSeverity.ERROR,
    ) -> None:
        self.prefix = prefix
        self.number = number
        self.phase = phase
        self.default_severity = default_severity

    @property
    def code(self) -> str:
        return f"{self.prefix}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.phase.name})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


class ErrorCodes:
    """Predefined error codes."""

    INVALID_CONFIG = ErrorCode("ABLK", 1000, ErrorPhase.CONFIG)
    UNKNOWN_CONFIG_KEY = ErrorCode("ABLK", 1001, ErrorPhase.CONFIG)

    INTERNAL_ERROR = ErrorCode(
        "ABLK", 9000, ErrorPhase.INTERNAL, ErrorSeverity.FATAL
    )
    VARIANT_MISMATCH = ErrorCode(
        "ABLK", 9001, ErrorPhase.INTERNAL, ErrorSeverity.FATAL
    )
    DEGENERATE_STRIDE = ErrorCode(
        "ABLK", 9002, ErrorPhase.INTERNAL, ErrorSeverity.FATAL
    )


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTION CLASSES
# ═══════════════════════════════════════════════════════════════════════════════

class ArrayBlockError(Exception):
    """Base exception for all array-block errors."""

    default_code: ErrorCode = ErrorCodes.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.cause = cause

    @property
    def severity(self) -> ErrorSeverity:
        return self.code.default_severity

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigError(ArrayBlockError):
    """Malformed configuration file or unknown configuration key."""

    default_code = ErrorCodes.INVALID_CONFIG


class InternalError(ArrayBlockError):
    """An invariant of the domain was violated by its caller."""

    default_code = ErrorCodes.INTERNAL_ERROR


class VariantMismatchError(InternalError):
    """Pointer arithmetic, byte sizing or a cast was applied to a managed array."""

    default_code = ErrorCodes.VARIANT_MISMATCH


class DegenerateStrideError(InternalError):
    """Stride conversion with a current or requested stride of zero."""

    default_code = ErrorCodes.DEGENERATE_STRIDE


E = TypeVar("E", bound=InternalError)


def die(error_cls: Type[E], fmt: str, *args: Any) -> NoReturn:
    """Log *fmt* at CRITICAL and raise *error_cls*.

    Used on branches that well-formed callers can never reach.
    """
    message = fmt % args if args else fmt
    logger.critical("%s: %s", error_cls.default_code, message)
    raise error_cls(message)


__all__ = [
    "ErrorSeverity",
    "ErrorPhase",
    "ErrorCode",
    "ErrorCodes",
    "ArrayBlockError",
    "ConfigError",
    "InternalError",
    "VariantMismatchError",
    "DegenerateStrideError",
    "die",
]
