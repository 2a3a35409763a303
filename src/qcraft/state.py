"""
State vectors and gate kernels.

Key insight: never build full 2^n x 2^n gate matrices. The flat amplitude
array is viewed as a (2, 2, ..., 2) tensor and a gate only touches the
slices selected by its control and target bits, so every application is
O(2^n).

Conventions
-----------
* Qubit ``q`` is bit ``q`` of the basis index (qubit 0 is least significant).
* Bitstrings print qubit ``n-1`` leftmost, so ``'01'`` means qubit 0 is |1>.
* Every function returns a fresh, read-only :class:`StateVector`; inputs
  are never modified, so several simulations can branch from one state.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np
from numpy import ndarray

from qcraft import gates as g
from qcraft.config import Limits, get_limits, resolve
from qcraft.errors import NormalizationError, QubitLimitError
from qcraft.gates import Gate, GateType
from qcraft.logging import get_logger
from qcraft.numeric import as_amplitudes, magnitude_squared, total_probability

logger = get_logger(__name__)

# Above this many qubits a state allocation is logged
_LARGE_STATE_QUBITS = 20


class StateVector:
    """
    Immutable pure state of ``num_qubits`` qubits.

    Memory usage: 2^n * 16 bytes (complex128)
    - 10 qubits: 16 KB
    - 20 qubits: 16 MB
    - 24 qubits: 256 MB

    Parameters
    ----------
    amplitudes : array_like
        2^n complex amplitudes. Copied on construction.
    normalize : bool
        Rescale to unit norm instead of rejecting an unnormalized vector.
    limits : Limits, optional
        Size limit and norm tolerance. Defaults to the process-wide limits.

    Raises
    ------
    ValueError
        If the length is not a power of two, or ``normalize`` is asked of a
        zero or non-finite vector.
    NormalizationError
        If the vector is not normalized (or not finite) and ``normalize`` is
        False.
    """

    __slots__ = ("num_qubits", "_amplitudes")

    def __init__(
        self, amplitudes, normalize: bool = False, limits: Limits | None = None
    ) -> None:
        limits = resolve(limits)
        amps = as_amplitudes(amplitudes)
        dim = amps.size
        n = dim.bit_length() - 1
        if dim < 2 or (1 << n) != dim:
            raise ValueError(f"State length must be a power of two >= 2, got {dim}")
        _check_size(n, limits)

        total = total_probability(amps)
        if normalize:
            if not (np.isfinite(total) and total > 0):
                raise ValueError(f"Cannot normalize a vector with total probability {total}")
            amps /= np.sqrt(total)
        elif not abs(total - 1.0) <= limits.norm_tolerance:
            # A NaN total fails this comparison.
            raise NormalizationError(total, limits.norm_tolerance, "construction")

        amps.setflags(write=False)
        self.num_qubits = n
        self._amplitudes = amps

    @classmethod
    def _wrap(cls, amps: ndarray, num_qubits: int) -> StateVector:
        """Take ownership of ``amps`` without copying or checking."""
        state = cls.__new__(cls)
        amps.setflags(write=False)
        state.num_qubits = num_qubits
        state._amplitudes = amps
        return state

    @property
    def amplitudes(self) -> ndarray:
        """Read-only view of the amplitudes."""
        return self._amplitudes

    @property
    def dim(self) -> int:
        return self._amplitudes.size

    def bitstring(self, index: int) -> str:
        """Basis-state label for ``index``."""
        return format(index, f"0{self.num_qubits}b")

    def probabilities(self) -> ndarray:
        """|amplitude|^2 for all basis states, in index order."""
        return magnitude_squared(self._amplitudes)

    def tensor(self) -> ndarray:
        """
        Amplitudes as a (2,)*n tensor whose axis ``q`` is qubit ``q``.

        Returns a read-only view.
        """
        n = self.num_qubits
        return self._amplitudes.reshape((2,) * n).transpose(tuple(range(n - 1, -1, -1)))

    def __len__(self) -> int:
        return self.dim

    def __repr__(self) -> str:
        return f"StateVector(num_qubits={self.num_qubits}, dim={self.dim})"


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------

def _check_size(num_qubits: int, limits: Limits) -> None:
    if num_qubits < 1:
        raise ValueError(f"Need at least 1 qubit, got {num_qubits}")
    if num_qubits > limits.max_qubits:
        raise QubitLimitError(
            f"{num_qubits} qubits exceeds the limit of {limits.max_qubits} "
            f"({2 ** num_qubits * 16 / 2**20:.0f} MB state vector)"
        )
    if num_qubits > _LARGE_STATE_QUBITS:
        logger.warning(
            "Allocating %d-qubit state (%.0f MB)", num_qubits, 2**num_qubits * 16 / 2**20
        )


def _check_qubits(state: StateVector, qubits: Sequence[int]) -> None:
    for q in qubits:
        if not 0 <= q < state.num_qubits:
            raise ValueError(
                f"Qubit {q} out of range for {state.num_qubits}-qubit state"
            )
    if len(set(qubits)) != len(qubits):
        raise ValueError(f"Duplicate qubits in {tuple(qubits)}")


def _finish(amps: ndarray, num_qubits: int, operation: str) -> StateVector:
    """Check the normalization invariant and wrap the result."""
    tol = get_limits().norm_tolerance
    total = total_probability(amps)
    if not abs(total - 1.0) <= tol:
        raise NormalizationError(total, tol, operation)
    return StateVector._wrap(amps, num_qubits)


def _selectors(
    n: int, target: int, controls: Iterable[int]
) -> tuple[tuple, tuple]:
    """Index tuples picking the target=0 / target=1 slices with all controls set."""
    sel = [slice(None)] * n
    for c in controls:
        sel[n - 1 - c] = 1
    sel0, sel1 = list(sel), list(sel)
    sel0[n - 1 - target] = 0
    sel1[n - 1 - target] = 1
    return tuple(sel0), tuple(sel1)


# ---------------------------------------------------------------------------
# Kernels
# ---------------------------------------------------------------------------

def _apply_controlled(
    state: StateVector,
    matrix: ndarray,
    target: int,
    controls: Sequence[int] = (),
    operation: str = "",
) -> StateVector:
    """
    Apply a 2x2 unitary to ``target`` on the subspace where every control is |1>.

    Amplitude pairs differing only in the target bit are mixed by ``matrix``;
    all other amplitudes are copied unchanged.
    """
    _check_qubits(state, (*controls, target))
    n = state.num_qubits
    amps = state.amplitudes.copy()
    tensor = amps.reshape((2,) * n)
    sel0, sel1 = _selectors(n, target, controls)

    a0 = np.array(tensor[sel0])
    a1 = np.array(tensor[sel1])
    tensor[sel0] = matrix[0, 0] * a0 + matrix[0, 1] * a1
    tensor[sel1] = matrix[1, 0] * a0 + matrix[1, 1] * a1
    return _finish(amps, n, operation)


def _controlled_flip(
    state: StateVector, target: int, controls: Sequence[int] = (), operation: str = ""
) -> StateVector:
    """Swap each control-set amplitude with its target-flipped partner."""
    _check_qubits(state, (*controls, target))
    n = state.num_qubits
    amps = state.amplitudes.copy()
    tensor = amps.reshape((2,) * n)
    sel0, sel1 = _selectors(n, target, controls)

    a0 = np.array(tensor[sel0])
    tensor[sel0] = tensor[sel1]
    tensor[sel1] = a0
    return _finish(amps, n, operation)


# ---------------------------------------------------------------------------
# State initialization
# ---------------------------------------------------------------------------

def create_initial_state(num_qubits: int, limits: Limits | None = None) -> StateVector:
    """|00...0>: amplitude 1 at index 0."""
    _check_size(num_qubits, resolve(limits))
    amps = np.zeros(2**num_qubits, dtype=np.complex128)
    amps[0] = 1.0
    return StateVector._wrap(amps, num_qubits)


def create_superposition_state(num_qubits: int, limits: Limits | None = None) -> StateVector:
    """|++...+>: every amplitude 1/sqrt(2^n)."""
    _check_size(num_qubits, resolve(limits))
    dim = 2**num_qubits
    amps = np.full(dim, 1.0 / np.sqrt(dim), dtype=np.complex128)
    return StateVector._wrap(amps, num_qubits)


def create_marked_state(
    num_qubits: int, marked_indices: Iterable[int], limits: Limits | None = None
) -> StateVector:
    """
    Equal superposition over the given basis indices.

    Raises
    ------
    ValueError
        If no index is given or one is outside ``[0, 2^n)``.
    """
    _check_size(num_qubits, resolve(limits))
    dim = 2**num_qubits
    marked = sorted(set(int(i) for i in marked_indices))
    if not marked:
        raise ValueError("At least one marked index is required")
    bad = [i for i in marked if not 0 <= i < dim]
    if bad:
        raise ValueError(f"Marked indices {bad} out of range for {num_qubits} qubits")
    amps = np.zeros(dim, dtype=np.complex128)
    amps[marked] = 1.0 / np.sqrt(len(marked))
    return StateVector._wrap(amps, num_qubits)


# ---------------------------------------------------------------------------
# Single-qubit gates
# ---------------------------------------------------------------------------

def apply_hadamard(state: StateVector, qubit: int) -> StateVector:
    return _apply_controlled(state, g.H, qubit, operation=f"H({qubit})")


def apply_pauli_x(state: StateVector, qubit: int) -> StateVector:
    return _controlled_flip(state, qubit, operation=f"X({qubit})")


def apply_pauli_y(state: StateVector, qubit: int) -> StateVector:
    return _apply_controlled(state, g.Y, qubit, operation=f"Y({qubit})")


def apply_pauli_z(state: StateVector, qubit: int) -> StateVector:
    return _apply_controlled(state, g.Z, qubit, operation=f"Z({qubit})")


def apply_phase(state: StateVector, qubit: int, angle: float) -> StateVector:
    return _apply_controlled(state, g.P(angle), qubit, operation=f"P({qubit})")


_ROTATIONS = {"X": g.Rx, "Y": g.Ry, "Z": g.Rz}


def apply_rotation(
    state: StateVector, qubit: int, angle: float, axis: str = "Z"
) -> StateVector:
    """Rotate ``qubit`` by ``angle`` about the X, Y or Z axis."""
    try:
        factory = _ROTATIONS[axis.upper()]
    except KeyError:
        raise ValueError(f"Unknown rotation axis '{axis}'. Use 'X', 'Y' or 'Z'") from None
    return _apply_controlled(state, factory(angle), qubit, operation=f"R{axis.upper()}({qubit})")


# ---------------------------------------------------------------------------
# Multi-qubit gates
# ---------------------------------------------------------------------------

def apply_cnot(state: StateVector, control: int, target: int) -> StateVector:
    """
    Controlled-NOT.

    Every basis index with the control bit set trades amplitudes with the
    index whose target bit is flipped; the rest are unchanged.
    """
    return _controlled_flip(state, target, (control,), operation=f"CNOT({control},{target})")


def apply_cz(state: StateVector, control: int, target: int) -> StateVector:
    return _apply_controlled(state, g.Z, target, (control,), operation=f"CZ({control},{target})")


def apply_controlled_phase(
    state: StateVector, control: int, target: int, angle: float
) -> StateVector:
    return _apply_controlled(
        state, g.P(angle), target, (control,), operation=f"CP({control},{target})"
    )


def apply_toffoli(
    state: StateVector, control1: int, control2: int, target: int
) -> StateVector:
    return _controlled_flip(
        state, target, (control1, control2), operation=f"CCX({control1},{control2},{target})"
    )


def apply_swap(state: StateVector, qubit1: int, qubit2: int) -> StateVector:
    """Exchange two qubits by permuting tensor axes."""
    _check_qubits(state, (qubit1, qubit2))
    n = state.num_qubits
    tensor = state.amplitudes.reshape((2,) * n)
    amps = np.array(tensor.swapaxes(n - 1 - qubit1, n - 1 - qubit2)).reshape(-1)
    return _finish(amps, n, f"SWAP({qubit1},{qubit2})")


_FLIP_GATES = frozenset({"X", "CNOT", "CCX"})


def apply_gate(state: StateVector, gate: Gate) -> StateVector:
    """
    Apply any unitary gate record.

    Raises
    ------
    KeyError
        Unknown gate name.
    ValueError
        Measurement gates (sampling is done by the backend), or bad qubits.
    """
    spec = g.lookup(gate.name)
    if spec is None:
        raise KeyError(f"Unknown gate: '{gate.name}'")
    if spec.type is GateType.MEASURE:
        raise ValueError("Measurement is not a unitary; sample with qcraft.simulate instead")
    if spec.name == "SWAP":
        return apply_swap(state, *gate.target_qubits)

    (target,) = gate.target_qubits
    label = f"{spec.name}{gate.qubits}"
    if spec.name in _FLIP_GATES:
        return _controlled_flip(state, target, gate.control_qubits, operation=label)
    return _apply_controlled(state, gate.matrix(), target, gate.control_qubits, operation=label)


# ---------------------------------------------------------------------------
# Readout
# ---------------------------------------------------------------------------

def get_probabilities(state: StateVector, cutoff: float | None = None) -> dict[str, float]:
    """
    Probability of each basis state, keyed by bitstring.

    Only states above ``cutoff`` (default: ``Limits.probability_cutoff``)
    are included, in basis-index order.
    """
    if cutoff is None:
        cutoff = get_limits().probability_cutoff
    probs = state.probabilities()
    return {state.bitstring(int(i)): float(probs[i]) for i in np.flatnonzero(probs > cutoff)}
