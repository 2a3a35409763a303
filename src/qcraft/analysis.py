"""
Quantities derived from a state vector.

Partial traces, von Neumann entanglement entropy, Bloch-sphere projection
of a single qubit, and the diagnostic report the dashboard renders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
from numpy import ndarray
from scipy import stats

from qcraft.config import get_limits
from qcraft.state import StateVector, get_probabilities


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BlochVector:
    """
    Single-qubit state as a point in the Bloch ball.

    ``x``, ``y``, ``z`` are the Pauli expectation values and ``purity`` is
    Tr(rho^2): 1 on the surface (pure), 0.5 at the centre (maximally mixed).
    """
    x: float
    y: float
    z: float
    purity: float

    @property
    def radius(self) -> float:
        return float(np.sqrt(self.x**2 + self.y**2 + self.z**2))

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z, "purity": self.purity}


@dataclass(frozen=True)
class BasisProbability:
    """A basis state and its probability."""
    bitstring: str
    probability: float

    @property
    def percent(self) -> float:
        return 100.0 * self.probability


@dataclass(frozen=True)
class StateReport:
    """Diagnostic summary of a state."""
    num_qubits: int
    num_amplitudes: int
    total_probability: float
    nonzero_amplitudes: int
    entropy: float
    max_probability: float
    top_states: list[BasisProbability] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Density matrices and entropy
# ---------------------------------------------------------------------------

def _check_subsystem(n: int, qubits: Sequence[int]) -> list[int]:
    qubits = [int(q) for q in qubits]
    for q in qubits:
        if not 0 <= q < n:
            raise ValueError(f"Qubit {q} out of range for {n}-qubit state")
    if len(set(qubits)) != len(qubits):
        raise ValueError(f"Duplicate qubits in {qubits}")
    return qubits


def reduced_density_matrix(state: StateVector, keep: Sequence[int]) -> ndarray:
    """
    Partial trace over every qubit not in ``keep``.

    Parameters
    ----------
    state : StateVector
        Pure state of n qubits.
    keep : sequence of int
        Qubits to keep. Bit ``j`` of the returned matrix's basis index is
        qubit ``keep[j]``.

    Returns
    -------
    ndarray
        Hermitian (2^k, 2^k) density matrix with unit trace.
    """
    n = state.num_qubits
    keep = _check_subsystem(n, keep)
    if not keep:
        raise ValueError("Need at least one qubit to keep")

    traced = [q for q in range(n) if q not in keep]
    # Most significant kept qubit first so the row index follows the bit convention.
    order = list(reversed(keep)) + traced
    psi = state.tensor().transpose(order).reshape(2 ** len(keep), -1)
    return psi @ psi.conj().T


def von_neumann_entropy(rho: ndarray) -> float:
    """S(rho) = -sum(l * log2 l) over the eigenvalues of ``rho``, in bits."""
    eigenvalues = np.clip(np.linalg.eigvalsh(rho), 0.0, None)
    if eigenvalues.sum() <= 0:
        return 0.0
    return max(0.0, float(stats.entropy(eigenvalues, base=2)))


def calculate_entanglement_entropy(
    state: StateVector, subsystem: Sequence[int] | None = None
) -> float:
    """
    Entanglement entropy across a bipartition of the qubits.

    Parameters
    ----------
    state : StateVector
        Pure state.
    subsystem : sequence of int, optional
        Qubits on one side of the cut. Defaults to the first
        ``max(1, n // 2)`` qubits.

    Returns
    -------
    float
        Von Neumann entropy in bits: 0 for a product state across the cut,
        at most ``min(|A|, |B|)``.
    """
    n = state.num_qubits
    if subsystem is None:
        subsystem = range(max(1, n // 2))
    subsystem = _check_subsystem(n, subsystem)
    if len(subsystem) in (0, n):
        return 0.0
    # The smaller side gives the smaller eigenproblem; both have the same spectrum.
    if len(subsystem) > n - len(subsystem):
        subsystem = [q for q in range(n) if q not in subsystem]
    return von_neumann_entropy(reduced_density_matrix(state, subsystem))


def purity(rho: ndarray) -> float:
    """Tr(rho^2)."""
    return float(np.real(np.trace(rho @ rho)))


def get_bloch_sphere_coordinates(state: StateVector, qubit: int = 0) -> BlochVector:
    """
    Bloch vector of one qubit.

    For a single-qubit state this is the usual point on the sphere. For
    larger states the other qubits are traced out first, so entangled
    qubits land inside the ball with purity below 1.
    """
    rho = reduced_density_matrix(state, [qubit])
    return BlochVector(
        x=float(2.0 * rho[0, 1].real),
        y=float(2.0 * rho[1, 0].imag),
        z=float((rho[0, 0] - rho[1, 1]).real),
        purity=purity(rho),
    )


# ---------------------------------------------------------------------------
# Distributions
# ---------------------------------------------------------------------------

def get_top_probability_states(state: StateVector, top_n: int = 10) -> list[BasisProbability]:
    """Most likely basis states, highest first (ties by basis index)."""
    probs = state.probabilities()
    cutoff = get_limits().probability_cutoff
    # Stable sort on -p keeps index order among equal probabilities.
    order = np.argsort(-probs, kind="stable")[:max(top_n, 0)]
    return [
        BasisProbability(state.bitstring(int(i)), float(probs[i]))
        for i in order
        if probs[i] > cutoff
    ]


def get_expectation_value(state: StateVector) -> float:
    """Mean basis index scaled to [0, 1]."""
    probs = state.probabilities()
    scale = max(state.dim - 1, 1)
    return float(np.dot(np.arange(state.dim) / scale, probs))


def calculate_fidelity(state1: StateVector, state2: StateVector) -> float:
    """|<psi1|psi2>|^2; 0 when the registers differ in size."""
    if state1.num_qubits != state2.num_qubits:
        return 0.0
    return float(np.abs(np.vdot(state1.amplitudes, state2.amplitudes)) ** 2)


def create_state_report(state: StateVector, top_n: int = 5) -> StateReport:
    """Summary used by the dashboard's state panel."""
    probabilities = get_probabilities(state)
    return StateReport(
        num_qubits=state.num_qubits,
        num_amplitudes=state.dim,
        total_probability=float(state.probabilities().sum()),
        nonzero_amplitudes=len(probabilities),
        entropy=calculate_entanglement_entropy(state),
        max_probability=max(probabilities.values(), default=0.0),
        top_states=get_top_probability_states(state, top_n),
    )
