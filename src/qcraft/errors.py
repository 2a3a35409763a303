"""
Exception hierarchy for qcraft.

Structural problems in a user-built circuit are reported as data by
:func:`qcraft.validation.validate_circuit`. The exceptions below are for
programmer errors and broken invariants, which fail fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from qcraft.validation import ValidationResult


class QcraftError(Exception):
    """Base class for all qcraft errors."""


class CircuitValidationError(QcraftError, ValueError):
    """
    Raised when an invalid circuit is handed to the simulator.

    Attributes
    ----------
    result : ValidationResult
        The full validation result, so callers can display every problem.
    """

    def __init__(self, result: ValidationResult) -> None:
        self.result = result
        summary = "; ".join(result.errors) or "unknown error"
        super().__init__(f"Circuit failed validation: {summary}")


class QubitLimitError(QcraftError, ValueError):
    """Raised when a state or run would exceed the configured size limits."""


class NormalizationError(QcraftError, ArithmeticError):
    """Raised when a state vector drifts outside the normalization tolerance."""

    def __init__(self, total: float, tolerance: float, operation: str = "") -> None:
        self.total = total
        self.tolerance = tolerance
        where = f" after {operation}" if operation else ""
        super().__init__(
            f"State norm {total:.12f} deviates from 1 by more than {tolerance:g}{where}"
        )
