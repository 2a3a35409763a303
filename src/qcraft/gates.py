"""
Gate vocabulary.

Two layers live here:

* unitary matrices (numpy arrays) for the simulator kernels, and
* the :class:`Gate` record that circuits store, plus one constructor per gate.

Every gate name maps to a :class:`GateSpec` in ``GATE_REGISTRY``. Validation,
simulation and the OpenQASM exporter all read arity, parameters and
mnemonics from that one table.

Gate categories:
    - Single-qubit: I, X, Y, Z, H, S, T
    - Rotations: RX, RY, RZ, P (phase)
    - Two-qubit: CNOT, CZ, SWAP, CP (controlled phase), CRZ
    - Three-qubit: CCX (Toffoli)
    - MEASURE
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional

import numpy as np
from numpy import ndarray

# Type alias
Matrix = ndarray

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_SQRT2_INV = 1.0 / np.sqrt(2.0)

# ---------------------------------------------------------------------------
# Single-qubit fixed gates
# ---------------------------------------------------------------------------

I = np.eye(2, dtype=np.complex128)
"""Identity gate."""

X = np.array([[0, 1], [1, 0]], dtype=np.complex128)
"""Pauli-X (NOT) gate."""

Y = np.array([[0, -1j], [1j, 0]], dtype=np.complex128)
"""Pauli-Y gate."""

Z = np.array([[1, 0], [0, -1]], dtype=np.complex128)
"""Pauli-Z gate."""

H = np.array([[1, 1], [1, -1]], dtype=np.complex128) * _SQRT2_INV
"""Hadamard gate."""

S = np.array([[1, 0], [0, 1j]], dtype=np.complex128)
"""S (phase) gate: sqrt(Z)."""

T = np.array([[1, 0], [0, np.exp(1j * np.pi / 4)]], dtype=np.complex128)
"""T gate: sqrt(S)."""

# ---------------------------------------------------------------------------
# Single-qubit parameterized gates
# ---------------------------------------------------------------------------

def Rx(theta: float) -> Matrix:
    """Rotation around X-axis by angle theta."""
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return np.array([[c, -1j * s], [-1j * s, c]], dtype=np.complex128)


def Ry(theta: float) -> Matrix:
    """Rotation around Y-axis by angle theta."""
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return np.array([[c, -s], [s, c]], dtype=np.complex128)


def Rz(phi: float) -> Matrix:
    """Rotation around Z-axis by angle phi."""
    return np.array(
        [[np.exp(-1j * phi / 2), 0], [0, np.exp(1j * phi / 2)]],
        dtype=np.complex128,
    )


def P(lam: float) -> Matrix:
    """Phase gate: diagonal with entries [1, exp(i*lam)]."""
    return np.array([[1, 0], [0, np.exp(1j * lam)]], dtype=np.complex128)


def is_unitary(m: Matrix, tol: float = 1e-9) -> bool:
    """True if ``m @ m^dagger`` is the identity within ``tol``."""
    product = m @ m.conj().T
    return np.allclose(product, np.eye(len(m)), atol=tol)


# ---------------------------------------------------------------------------
# Gate records
# ---------------------------------------------------------------------------

class GateType(str, Enum):
    """Structural kind of a gate."""

    SINGLE = "single"
    TWO_QUBIT = "two-qubit"
    MULTI_QUBIT = "multi-qubit"
    MEASURE = "measure"


@dataclass(frozen=True)
class GateSpec:
    """
    Static description of a named gate.

    ``matrix`` / ``factory`` give the 2x2 unitary applied to the target
    qubit once every control is set. SWAP and MEASURE have neither.
    """

    name: str
    type: GateType
    n_targets: int
    n_controls: int
    qasm: str
    n_params: int = 0
    matrix: Optional[Matrix] = None
    factory: Optional[Callable[[float], Matrix]] = None

    @property
    def n_qubits(self) -> int:
        return self.n_targets + self.n_controls


GATE_REGISTRY: dict[str, GateSpec] = {
    spec.name: spec
    for spec in (
        # Fixed single-qubit
        GateSpec("I", GateType.SINGLE, 1, 0, "id", matrix=I),
        GateSpec("X", GateType.SINGLE, 1, 0, "x", matrix=X),
        GateSpec("Y", GateType.SINGLE, 1, 0, "y", matrix=Y),
        GateSpec("Z", GateType.SINGLE, 1, 0, "z", matrix=Z),
        GateSpec("H", GateType.SINGLE, 1, 0, "h", matrix=H),
        GateSpec("S", GateType.SINGLE, 1, 0, "s", matrix=S),
        GateSpec("T", GateType.SINGLE, 1, 0, "t", matrix=T),
        # Parameterized single-qubit
        GateSpec("P", GateType.SINGLE, 1, 0, "p", n_params=1, factory=P),
        GateSpec("RX", GateType.SINGLE, 1, 0, "rx", n_params=1, factory=Rx),
        GateSpec("RY", GateType.SINGLE, 1, 0, "ry", n_params=1, factory=Ry),
        GateSpec("RZ", GateType.SINGLE, 1, 0, "rz", n_params=1, factory=Rz),
        # Two-qubit
        GateSpec("CNOT", GateType.TWO_QUBIT, 1, 1, "cx", matrix=X),
        GateSpec("CZ", GateType.TWO_QUBIT, 1, 1, "cz", matrix=Z),
        GateSpec("SWAP", GateType.TWO_QUBIT, 2, 0, "swap"),
        GateSpec("CP", GateType.TWO_QUBIT, 1, 1, "cp", n_params=1, factory=P),
        GateSpec("CRZ", GateType.TWO_QUBIT, 1, 1, "crz", n_params=1, factory=Rz),
        # Three-qubit
        GateSpec("CCX", GateType.MULTI_QUBIT, 1, 2, "ccx", matrix=X),
        # Measurement
        GateSpec("MEASURE", GateType.MEASURE, 1, 0, "measure"),
    )
}

# Aliases accepted by lookup()
_ALIASES = {"CX": "CNOT", "TOFFOLI": "CCX", "ID": "I", "PHASE": "P", "M": "MEASURE"}


def lookup(name: str) -> Optional[GateSpec]:
    """Find the spec for a gate name (case-insensitive, aliases allowed)."""
    key = name.upper()
    key = _ALIASES.get(key, key)
    return GATE_REGISTRY.get(key)


@dataclass(frozen=True)
class Gate:
    """
    One operation in a circuit.

    Gates are immutable; range checks against a circuit's register happen in
    :func:`qcraft.validation.validate_circuit`, not here.

    Attributes
    ----------
    name : str
        Upper-case gate name, e.g. ``"H"`` or ``"CNOT"``.
    type : GateType
        Structural kind.
    target_qubits : tuple of int
        Qubits the gate acts on.
    control_qubits : tuple of int
        Qubits that must be |1> for the gate to act. Disjoint from targets.
    angle : float, optional
        Rotation / phase angle for parametric gates.
    classical_bit : int, optional
        Destination bit for measurements.
    """

    name: str
    type: GateType
    target_qubits: tuple[int, ...]
    control_qubits: tuple[int, ...] = ()
    angle: Optional[float] = None
    classical_bit: Optional[int] = None

    def __post_init__(self) -> None:
        # Accept lists / strings from callers building gates by hand.
        object.__setattr__(self, "type", GateType(self.type))
        object.__setattr__(self, "target_qubits", tuple(self.target_qubits))
        object.__setattr__(self, "control_qubits", tuple(self.control_qubits))

    @property
    def qubits(self) -> tuple[int, ...]:
        """Every qubit the gate touches, controls first."""
        return self.control_qubits + self.target_qubits

    @property
    def spec(self) -> Optional[GateSpec]:
        return lookup(self.name)

    @property
    def is_measurement(self) -> bool:
        return self.type is GateType.MEASURE

    def matrix(self) -> Matrix:
        """
        The 2x2 unitary applied to the target.

        Raises
        ------
        KeyError
            If the gate name is unknown.
        ValueError
            If the gate has no single-target unitary (SWAP, MEASURE) or a
            parametric gate is missing its angle.
        """
        spec = self.spec
        if spec is None:
            raise KeyError(f"Unknown gate: '{self.name}'. Available: {sorted(GATE_REGISTRY)}")
        if spec.n_params:
            if self.angle is None:
                raise ValueError(f"Gate '{self.name}' requires an angle")
            return spec.factory(self.angle)
        if spec.matrix is None:
            raise ValueError(f"Gate '{self.name}' has no single-target unitary")
        return spec.matrix


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------

def _single(name: str, qubit: int, angle: Optional[float] = None) -> Gate:
    return Gate(name, GateType.SINGLE, (qubit,), angle=angle)


def identity(qubit: int) -> Gate:
    return _single("I", qubit)


def pauli_x(qubit: int) -> Gate:
    """Pauli-X (NOT): flips |0> and |1>."""
    return _single("X", qubit)


def pauli_y(qubit: int) -> Gate:
    return _single("Y", qubit)


def pauli_z(qubit: int) -> Gate:
    """Pauli-Z: phase flip on |1>."""
    return _single("Z", qubit)


def hadamard(qubit: int) -> Gate:
    """Hadamard: |0> -> |+>, |1> -> |->."""
    return _single("H", qubit)


def s_gate(qubit: int) -> Gate:
    return _single("S", qubit)


def t_gate(qubit: int) -> Gate:
    return _single("T", qubit)


def phase(qubit: int, angle: float = np.pi / 4) -> Gate:
    """Phase gate adding e^(i*angle) to |1>."""
    return _single("P", qubit, float(angle))


def rx(qubit: int, angle: float) -> Gate:
    return _single("RX", qubit, float(angle))


def ry(qubit: int, angle: float) -> Gate:
    return _single("RY", qubit, float(angle))


def rz(qubit: int, angle: float) -> Gate:
    return _single("RZ", qubit, float(angle))


def cnot(control: int, target: int) -> Gate:
    """Controlled-NOT."""
    return Gate("CNOT", GateType.TWO_QUBIT, (target,), (control,))


def cz(control: int, target: int) -> Gate:
    return Gate("CZ", GateType.TWO_QUBIT, (target,), (control,))


def swap(qubit1: int, qubit2: int) -> Gate:
    return Gate("SWAP", GateType.TWO_QUBIT, (qubit1, qubit2))


def controlled_phase(control: int, target: int, angle: float) -> Gate:
    return Gate("CP", GateType.TWO_QUBIT, (target,), (control,), angle=float(angle))


def crz(control: int, target: int, angle: float) -> Gate:
    return Gate("CRZ", GateType.TWO_QUBIT, (target,), (control,), angle=float(angle))


def toffoli(control1: int, control2: int, target: int) -> Gate:
    """Controlled-controlled-NOT."""
    return Gate("CCX", GateType.MULTI_QUBIT, (target,), (control1, control2))


def measure(qubit: int, classical_bit: Optional[int] = None) -> Gate:
    """Measure ``qubit`` into ``classical_bit`` (defaults to the same index)."""
    return Gate(
        "MEASURE",
        GateType.MEASURE,
        (qubit,),
        classical_bit=qubit if classical_bit is None else classical_bit,
    )


def measure_all(num_qubits: int) -> list[Gate]:
    return [measure(q) for q in range(num_qubits)]


# Type labels used by older dashboard payloads
_TYPE_ALIASES = {
    "controlled": GateType.TWO_QUBIT,
    "multi-controlled": GateType.MULTI_QUBIT,
    "measurement": GateType.MEASURE,
}


def from_dict(data: dict) -> Gate:
    """
    Build a Gate from a plain mapping, as sent by a UI.

    Accepts either snake_case or camelCase keys (``targetQubits``). The
    ``type`` field is optional and filled in from the registry when the
    name is known.
    """
    name = str(data["name"]).upper()
    spec = lookup(name)
    if spec is not None:
        name = spec.name
    targets: Iterable[int] = data.get("target_qubits", data.get("targetQubits", ()))
    controls: Iterable[int] = data.get("control_qubits", data.get("controlQubits", ())) or ()
    targets = tuple(int(q) for q in targets)
    controls = tuple(int(q) for q in controls)

    gate_type = data.get("type")
    if spec is not None:
        gate_type = spec.type
    elif gate_type is None:
        gate_type = GateType.SINGLE
    else:
        gate_type = _TYPE_ALIASES.get(gate_type, gate_type)

    classical_bit = data.get("classical_bit", data.get("classicalBit"))
    if gate_type == GateType.MEASURE and classical_bit is None and targets:
        classical_bit = targets[0]
    angle = data.get("angle")
    return Gate(
        name=name,
        type=gate_type,
        target_qubits=targets,
        control_qubits=controls,
        angle=None if angle is None else float(angle),
        classical_bit=classical_bit,
    )
