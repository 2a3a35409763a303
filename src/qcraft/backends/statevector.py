"""
Statevector simulation backend.

Replays a circuit's gates against |0...0> and samples measurement outcomes
from the final amplitudes. Shots model independent repeated preparations:
the state is never collapsed between shots, and measurement gates are
deferred to the end of the circuit.

Randomness always comes from an explicit ``numpy.random.Generator`` (passed
in, or built from a seed) so runs are reproducible.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from functools import cached_property
from typing import Optional

import numpy as np
from numpy import ndarray

from qcraft.analysis import StateReport, create_state_report
from qcraft.circuit import Circuit
from qcraft.config import Limits, resolve
from qcraft.errors import CircuitValidationError
from qcraft.logging import get_logger
from qcraft.state import StateVector, apply_gate, create_initial_state, get_probabilities
from qcraft.validation import validate_circuit

logger = get_logger(__name__)


def _check_shots(shots) -> int:
    """Shot count as an int; fractional values are rejected, not truncated."""
    try:
        return operator.index(shots)
    except TypeError:
        if isinstance(shots, float) and shots.is_integer():
            return int(shots)
        raise ValueError(f"Shots must be a whole number, got {shots!r}") from None


@dataclass
class SimulationResult:
    """
    Result of a circuit simulation.

    Attributes
    ----------
    final_state : StateVector
        State after every unitary gate.
    measurements : dict[str, int]
        Shot counts keyed by bitstring; values sum to ``shots``.
    shots : int
        Number of samples drawn.
    circuit_name : str
        Name of the simulated circuit.

    The diagnostic :attr:`report` is built on first access; it
    diagonalizes a reduced density matrix, which is costly near the qubit
    limit.
    """

    final_state: StateVector
    measurements: dict[str, int]
    shots: int
    circuit_name: str = ""

    @cached_property
    def report(self) -> StateReport:
        """Diagnostic summary of ``final_state``."""
        return create_state_report(self.final_state)

    @property
    def statevector(self) -> ndarray:
        return self.final_state.amplitudes

    def probabilities(self) -> dict[str, float]:
        """Exact probabilities of the final state."""
        return get_probabilities(self.final_state)

    def most_frequent(self) -> Optional[str]:
        """Most frequently measured bitstring, or None without shots."""
        if not self.measurements:
            return None
        return max(self.measurements, key=self.measurements.get)

    def frequency(self, bitstring: str) -> float:
        """Empirical frequency of ``bitstring``."""
        if self.shots == 0:
            return 0.0
        return self.measurements.get(bitstring, 0) / self.shots


class StatevectorBackend:
    """
    Exact statevector simulator.

    Parameters
    ----------
    seed : int, optional
        Seed for a fresh ``numpy.random.Generator``.
    rng : numpy.random.Generator, optional
        Generator to draw from. Mutually exclusive with ``seed``.
    limits : Limits, optional
        Size limits; defaults to the process-wide limits.

    Example
    -------
    >>> from qcraft import Circuit, StatevectorBackend
    >>> qc = Circuit(2).h(0).cx(0, 1)
    >>> result = StatevectorBackend(seed=42).run(qc, shots=1000)
    >>> sorted(result.measurements)
    ['00', '11']
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        limits: Optional[Limits] = None,
    ) -> None:
        if rng is not None and seed is not None:
            raise ValueError("Pass either seed or rng, not both")
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._limits = limits

    @property
    def limits(self) -> Limits:
        return resolve(self._limits)

    def sample(self, state: StateVector, shots: int) -> dict[str, int]:
        """
        Draw ``shots`` independent outcomes from ``state``.

        Returns counts for observed bitstrings only, in basis-index order.
        """
        shots = _check_shots(shots)
        if shots < 0:
            raise ValueError(f"Shots cannot be negative, got {shots}")
        if shots > self.limits.max_shots:
            raise ValueError(f"{shots} shots exceeds the limit of {self.limits.max_shots}")
        if shots == 0:
            return {}

        probs = state.probabilities()
        # Normalize to absorb floating point drift before sampling.
        probs = probs / probs.sum()
        counts = self._rng.multinomial(shots, probs)
        logger.debug("Sampled %d shots over %d outcomes", shots, np.count_nonzero(counts))
        return {state.bitstring(int(i)): int(counts[i]) for i in np.flatnonzero(counts)}

    def evolve(self, circuit: Circuit) -> StateVector:
        """
        Validate ``circuit`` and apply its unitary gates to |0...0>.

        Raises
        ------
        CircuitValidationError
            If validation reports any error. No state is allocated.
        """
        validation = validate_circuit(circuit, self._limits)
        if not validation.valid:
            raise CircuitValidationError(validation)

        state = create_initial_state(circuit.num_qubits, self._limits)
        applied = 0
        for gate in circuit.gates:
            if gate.is_measurement:
                continue
            state = apply_gate(state, gate)
            applied += 1
        logger.debug(
            "%s: applied %d gates on %d qubits", circuit.name, applied, circuit.num_qubits
        )
        return state

    def run(self, circuit: Circuit, shots: int = 1024) -> SimulationResult:
        """Simulate ``circuit`` and sample ``shots`` measurements."""
        state = self.evolve(circuit)
        return SimulationResult(
            final_state=state,
            measurements=self.sample(state, shots),
            shots=_check_shots(shots),
            circuit_name=circuit.name,
        )

    def statevector(self, circuit: Circuit) -> ndarray:
        """Convenience: run circuit and return just the amplitudes."""
        return self.evolve(circuit).amplitudes


# ---------------------------------------------------------------------------
# Function-style API
# ---------------------------------------------------------------------------

def simulate(
    state: StateVector,
    shots: int = 1000,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    limits: Optional[Limits] = None,
) -> dict[str, int]:
    """Sample ``shots`` measurements of ``state``; counts sum to ``shots``."""
    return StatevectorBackend(seed=seed, rng=rng, limits=limits).sample(state, shots)


def simulate_circuit(
    circuit: Circuit,
    shots: int = 1000,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    limits: Optional[Limits] = None,
) -> SimulationResult:
    """Validate, replay and sample ``circuit`` from a fresh |0...0> state."""
    return StatevectorBackend(seed=seed, rng=rng, limits=limits).run(circuit, shots)
