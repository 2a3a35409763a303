"""
Quantum circuit representation.

A :class:`Circuit` is a mutable accumulator: a qubit count, an ordered list
of :class:`~qcraft.gates.Gate` records and some metadata. It is owned by one
caller at a time and mutated in place; nothing here copies implicitly.

Two equivalent APIs are provided:

Builder style
-------------
>>> from qcraft import Circuit
>>> qc = Circuit(2)
>>> qc.h(0).cx(0, 1).measure_all()

Function style
--------------
>>> from qcraft import create_circuit, add_gate, gates
>>> qc = create_circuit(2)
>>> add_gate(qc, gates.hadamard(0))
>>> add_gate(qc, gates.cnot(0, 1))
"""

from __future__ import annotations

import copy
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from qcraft import gates as g
from qcraft.gates import Gate


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CircuitMetadata:
    """Descriptive data carried alongside a circuit."""
    name: str
    description: str = ""
    created_at: datetime = field(default_factory=_now)
    modified_at: datetime = field(default_factory=_now)

    def touch(self) -> None:
        self.modified_at = _now()

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "description": self.description,
            "created_at": self.created_at.isoformat(),
            "modified_at": self.modified_at.isoformat(),
        }


# ---------------------------------------------------------------------------
# Circuit
# ---------------------------------------------------------------------------

class Circuit:
    """
    Quantum circuit over ``num_qubits`` qubits.

    Gate methods do not range-check their arguments; call
    :func:`qcraft.validation.validate_circuit` (or :meth:`validate`) to get
    every structural problem at once.

    Parameters
    ----------
    num_qubits : int
        Number of qubits. Must not be negative.
    name : str, optional
        Circuit name for display and QASM comments.
    description : str
        Free-form description.
    """

    def __init__(
        self, num_qubits: int, name: Optional[str] = None, description: str = ""
    ) -> None:
        if num_qubits < 0:
            raise ValueError(f"Qubit count cannot be negative, got {num_qubits}")
        self.num_qubits = int(num_qubits)
        self.gates: list[Gate] = []
        created = _now()
        self.metadata = CircuitMetadata(
            name=name or f"Circuit-{created.strftime('%Y%m%d%H%M%S%f')}",
            description=description,
            created_at=created,
            modified_at=created,
        )

    # -- Properties ---------------------------------------------------------

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def depth(self) -> int:
        return get_circuit_depth(self)

    @property
    def num_gates(self) -> int:
        return len(self.gates)

    def __len__(self) -> int:
        return len(self.gates)

    def __iter__(self):
        return iter(self.gates)

    # -- Mutation -----------------------------------------------------------

    def append(self, gate: Gate) -> Circuit:
        """Append a gate and return self for chaining."""
        if not isinstance(gate, Gate):
            raise TypeError(f"Expected Gate, got {type(gate).__name__}")
        self.gates.append(gate)
        self.metadata.touch()
        return self

    def extend(self, gates: Iterable[Gate]) -> Circuit:
        for gate in gates:
            self.append(gate)
        return self

    # -- Single-qubit gates -------------------------------------------------

    def i(self, qubit: int) -> Circuit:
        """Identity gate."""
        return self.append(g.identity(qubit))

    def x(self, qubit: int) -> Circuit:
        """Pauli-X gate."""
        return self.append(g.pauli_x(qubit))

    def y(self, qubit: int) -> Circuit:
        """Pauli-Y gate."""
        return self.append(g.pauli_y(qubit))

    def z(self, qubit: int) -> Circuit:
        """Pauli-Z gate."""
        return self.append(g.pauli_z(qubit))

    def h(self, qubit: int) -> Circuit:
        """Hadamard gate."""
        return self.append(g.hadamard(qubit))

    def s(self, qubit: int) -> Circuit:
        """S gate."""
        return self.append(g.s_gate(qubit))

    def t(self, qubit: int) -> Circuit:
        """T gate."""
        return self.append(g.t_gate(qubit))

    # -- Parameterized single-qubit gates -----------------------------------

    def p(self, angle: float, qubit: int) -> Circuit:
        """Phase gate."""
        return self.append(g.phase(qubit, angle))

    def rx(self, theta: float, qubit: int) -> Circuit:
        """Rotation around X-axis."""
        return self.append(g.rx(qubit, theta))

    def ry(self, theta: float, qubit: int) -> Circuit:
        """Rotation around Y-axis."""
        return self.append(g.ry(qubit, theta))

    def rz(self, phi: float, qubit: int) -> Circuit:
        """Rotation around Z-axis."""
        return self.append(g.rz(qubit, phi))

    # -- Two-qubit gates ----------------------------------------------------

    def cx(self, control: int, target: int) -> Circuit:
        """Controlled-NOT (CNOT) gate."""
        return self.append(g.cnot(control, target))

    def cnot(self, control: int, target: int) -> Circuit:
        """Alias for cx."""
        return self.cx(control, target)

    def cz(self, control: int, target: int) -> Circuit:
        """Controlled-Z gate."""
        return self.append(g.cz(control, target))

    def swap(self, q0: int, q1: int) -> Circuit:
        """SWAP gate."""
        return self.append(g.swap(q0, q1))

    def cp(self, angle: float, control: int, target: int) -> Circuit:
        """Controlled-Phase gate."""
        return self.append(g.controlled_phase(control, target, angle))

    def crz(self, phi: float, control: int, target: int) -> Circuit:
        """Controlled-Rz gate."""
        return self.append(g.crz(control, target, phi))

    # -- Three-qubit gates --------------------------------------------------

    def ccx(self, c0: int, c1: int, target: int) -> Circuit:
        """Toffoli (CCX) gate."""
        return self.append(g.toffoli(c0, c1, target))

    def toffoli(self, c0: int, c1: int, target: int) -> Circuit:
        """Alias for ccx."""
        return self.ccx(c0, c1, target)

    # -- Measurement --------------------------------------------------------

    def measure(self, qubit: int, clbit: Optional[int] = None) -> Circuit:
        """Measure a qubit into a classical bit (same index by default)."""
        return self.append(g.measure(qubit, clbit))

    def measure_all(self) -> Circuit:
        """Add measurements on all qubits."""
        return self.extend(g.measure_all(self.num_qubits))

    # -- Convenience --------------------------------------------------------

    def validate(self, limits=None):
        """Shortcut for :func:`qcraft.validation.validate_circuit`."""
        from qcraft.validation import validate_circuit
        return validate_circuit(self, limits)

    def to_qasm(self) -> str:
        """Export circuit as OpenQASM 2.0 string."""
        from qcraft.qasm import export_to_openqasm
        return export_to_openqasm(self)

    def copy(self) -> Circuit:
        """Return a deep copy of this circuit."""
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form for the dashboard."""
        return {
            "num_qubits": self.num_qubits,
            "gates": [
                {
                    "name": gate.name,
                    "type": gate.type.value,
                    "target_qubits": list(gate.target_qubits),
                    "control_qubits": list(gate.control_qubits),
                    "angle": gate.angle,
                    "classical_bit": gate.classical_bit,
                }
                for gate in self.gates
            ],
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Circuit:
        """
        Rebuild a circuit from :meth:`to_dict` output or a dashboard payload.

        Both ``num_qubits`` and ``numQubits`` are accepted. Gates go through
        :func:`qcraft.gates.from_dict`.
        """
        num_qubits = data.get("num_qubits", data.get("numQubits"))
        if num_qubits is None:
            raise ValueError("Circuit payload is missing 'num_qubits'")
        metadata = data.get("metadata") or {}
        circuit = cls(
            int(num_qubits),
            name=metadata.get("name"),
            description=metadata.get("description", ""),
        )
        circuit.gates.extend(g.from_dict(item) for item in data.get("gates", ()))
        return circuit

    def __repr__(self) -> str:
        return (
            f"Circuit(num_qubits={self.num_qubits}, gates={len(self.gates)}, "
            f"depth={self.depth}, name={self.name!r})"
        )


# ---------------------------------------------------------------------------
# Function-style API
# ---------------------------------------------------------------------------

def create_circuit(
    num_qubits: int, name: Optional[str] = None, description: str = ""
) -> Circuit:
    """Create an empty circuit."""
    return Circuit(num_qubits, name=name, description=description)


def add_gate(circuit: Circuit, gate: Gate) -> None:
    """Append ``gate`` to ``circuit`` in program order."""
    circuit.append(gate)


def add_gates(circuit: Circuit, gates: Iterable[Gate]) -> None:
    """Append several gates in order."""
    circuit.extend(gates)


def remove_gate(circuit: Circuit, index: int) -> None:
    """
    Delete the gate at ``index``; later gates shift down by one.

    Raises
    ------
    IndexError
        If ``index`` is outside ``[0, len(circuit.gates))``.
    """
    if not 0 <= index < len(circuit.gates):
        raise IndexError(
            f"Gate index {index} out of range for circuit with {len(circuit.gates)} gates"
        )
    del circuit.gates[index]
    circuit.metadata.touch()


def clear_circuit(circuit: Circuit) -> None:
    """Remove every gate."""
    circuit.gates.clear()
    circuit.metadata.touch()


def get_gate_count(circuit: Circuit) -> int:
    return len(circuit.gates)


def get_gate_counts_by_type(circuit: Circuit) -> dict[str, int]:
    """Occurrences of each gate name, in first-seen order."""
    return dict(Counter(gate.name for gate in circuit.gates))


def get_circuit_depth(circuit: Circuit) -> int:
    """
    Circuit depth accounting for parallelism.

    Each gate lands one step after the latest step of any qubit it touches
    (controls included). Gates on disjoint qubits share a step.
    """
    last_step: dict[int, int] = {}
    for gate in circuit.gates:
        qubits = gate.qubits
        if not qubits:
            continue
        step = max(last_step.get(q, 0) for q in qubits) + 1
        for q in qubits:
            last_step[q] = step
    return max(last_step.values(), default=0)
