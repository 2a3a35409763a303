"""
OpenQASM 2.0 exporter.

Renders a :class:`~qcraft.circuit.Circuit` as OpenQASM 2.0 text:

    OPENQASM 2.0;
    include "qelib1.inc";
    qreg q[n];
    creg c[n];
    <one instruction per gate>

Supported instructions:
    - id, x, y, z, h, s, t
    - p(θ), rx(θ), ry(θ), rz(θ)
    - cx, cz, swap, cp(θ), crz(θ), ccx
    - measure q[i] -> c[j]

Operands are written controls first, then targets. Angles are written as
plain decimals in radians.
"""

from __future__ import annotations

from qcraft.circuit import Circuit
from qcraft.gates import Gate, GateType, lookup

HEADER = 'OPENQASM 2.0;\ninclude "qelib1.inc";'


def _format_angle(angle: float) -> str:
    return format(float(angle), ".12g")


def format_instruction(gate: Gate) -> str:
    """
    Single QASM statement for ``gate``, including the trailing semicolon.

    Raises
    ------
    ValueError
        If the gate name has no mnemonic or a parameterised gate lacks its
        angle.
    """
    spec = lookup(gate.name)
    if spec is None:
        raise ValueError(f"Cannot export unknown gate {gate.name!r} to OpenQASM")

    if spec.type is GateType.MEASURE:
        qubit = gate.target_qubits[0]
        clbit = qubit if gate.classical_bit is None else gate.classical_bit
        return f"measure q[{qubit}] -> c[{clbit}];"

    mnemonic = spec.qasm
    if spec.n_params:
        if gate.angle is None:
            raise ValueError(f"Gate {gate.name} requires an angle")
        mnemonic = f"{mnemonic}({_format_angle(gate.angle)})"
    operands = ",".join(f"q[{q}]" for q in gate.qubits)
    return f"{mnemonic} {operands};"


def export_to_openqasm(circuit: Circuit) -> str:
    """
    Serialise ``circuit`` to OpenQASM 2.0.

    The classical register has one bit per qubit. The circuit is not
    modified and the output ends with a newline.
    """
    lines = [
        HEADER,
        f"qreg q[{circuit.num_qubits}];",
        f"creg c[{circuit.num_qubits}];",
    ]
    lines.extend(format_instruction(gate) for gate in circuit.gates)
    return "\n".join(lines) + "\n"
