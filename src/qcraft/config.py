"""
Engine limits and thresholds.

The state vector of an n-qubit register holds 2^n complex128 amplitudes
(16 bytes each):
    20 qubits = 16 MB, 24 qubits = 256 MB, 30 qubits = 16 GB.

``max_qubits`` is the hard guardrail against unbounded allocation from a
user-supplied circuit. All values can be overridden per call, process-wide
with :func:`set_limits`, or from the environment with :meth:`Limits.from_env`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

# Environment variable -> Limits field
_ENV_FIELDS = {
    "QCRAFT_MAX_QUBITS": "max_qubits",
    "QCRAFT_MAX_SHOTS": "max_shots",
    "QCRAFT_LARGE_CIRCUIT_THRESHOLD": "large_circuit_threshold",
    "QCRAFT_DEEP_CIRCUIT_THRESHOLD": "deep_circuit_threshold",
}


@dataclass(frozen=True)
class Limits:
    """
    Size limits and numeric tolerances used across the engine.

    Attributes
    ----------
    max_qubits : int
        Largest register the simulator will allocate.
    max_shots : int
        Largest shot count accepted by the sampler.
    large_circuit_threshold : int
        Gate count above which validation emits a warning.
    deep_circuit_threshold : int
        Circuit depth above which validation emits a warning.
    probability_cutoff : float
        Probabilities at or below this are dropped from reports.
    norm_tolerance : float
        Allowed deviation of the total probability from 1.
    """

    max_qubits: int = 24
    max_shots: int = 1_000_000
    large_circuit_threshold: int = 100
    deep_circuit_threshold: int = 100
    probability_cutoff: float = 1e-10
    norm_tolerance: float = 1e-9

    def __post_init__(self) -> None:
        if self.max_qubits < 1:
            raise ValueError(f"max_qubits must be >= 1, got {self.max_qubits}")
        if self.max_shots < 0:
            raise ValueError(f"max_shots must be >= 0, got {self.max_shots}")
        if self.norm_tolerance <= 0:
            raise ValueError(f"norm_tolerance must be positive, got {self.norm_tolerance}")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Limits:
        """
        Build limits from ``QCRAFT_*`` environment variables.

        Unset variables keep their defaults. Non-integer values raise
        ``ValueError``.
        """
        if environ is None:
            environ = dict(os.environ)
        overrides = {}
        for var, field_name in _ENV_FIELDS.items():
            raw = environ.get(var)
            if raw is None or raw.strip() == "":
                continue
            try:
                overrides[field_name] = int(raw)
            except ValueError:
                raise ValueError(f"{var} must be an integer, got {raw!r}") from None
        return cls(**overrides)

    def with_overrides(self, **kwargs) -> Limits:
        """Return a copy with some fields replaced."""
        return replace(self, **kwargs)


_limits = Limits()


def get_limits() -> Limits:
    """Process-wide default limits used when a call passes none."""
    return _limits


def set_limits(limits: Limits) -> None:
    """Replace the process-wide default limits."""
    global _limits
    if not isinstance(limits, Limits):
        raise TypeError(f"Expected Limits, got {type(limits).__name__}")
    _limits = limits


def resolve(limits: Limits | None) -> Limits:
    """Return ``limits`` or the process default."""
    return _limits if limits is None else limits
