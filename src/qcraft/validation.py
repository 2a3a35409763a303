"""
Structural checks for circuits.

Problems are returned as data so an interactive builder can show all of
them at once. Errors make a circuit unsimulatable; warnings never do.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from qcraft.circuit import Circuit, get_circuit_depth
from qcraft.config import Limits, resolve
from qcraft.gates import GateType, lookup
from qcraft.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ValidationResult:
    """Outcome of :func:`validate_circuit`."""
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.valid


def validate_circuit(circuit: Circuit, limits: Limits | None = None) -> ValidationResult:
    """
    Check every gate of ``circuit`` against its register and the gate table.

    Parameters
    ----------
    circuit : Circuit
        Circuit to check.
    limits : Limits, optional
        Thresholds to apply. Defaults to the process-wide limits.

    Returns
    -------
    ValidationResult
        ``valid`` is False only when ``errors`` is non-empty.
    """
    limits = resolve(limits)
    result = ValidationResult()
    n = circuit.num_qubits

    if n < 1:
        result.errors.append("Circuit must have at least 1 qubit")
    elif n > limits.max_qubits:
        result.errors.append(
            f"Circuit uses {n} qubits; the simulator supports at most {limits.max_qubits}"
        )

    measured: set[int] = set()
    for index, gate in enumerate(circuit.gates):
        label = f"Gate {index} ({gate.name})"

        for q in gate.target_qubits:
            if not 0 <= q < n:
                result.errors.append(f"{label} targets invalid qubit {q}")
        for q in gate.control_qubits:
            if not 0 <= q < n:
                result.errors.append(f"{label} has invalid control qubit {q}")

        if len(set(gate.target_qubits)) != len(gate.target_qubits):
            result.errors.append(f"{label} repeats a target qubit")
        if len(set(gate.control_qubits)) != len(gate.control_qubits):
            result.errors.append(f"{label} repeats a control qubit")
        overlap = set(gate.control_qubits) & set(gate.target_qubits)
        if overlap:
            result.errors.append(
                f"{label} uses qubit(s) {sorted(overlap)} as both control and target"
            )

        spec = lookup(gate.name)
        if spec is None:
            result.errors.append(f"{label} is not a known gate")
        else:
            if (len(gate.target_qubits), len(gate.control_qubits)) != (spec.n_targets, spec.n_controls):
                result.errors.append(
                    f"{label} expects {spec.n_targets} target(s) and {spec.n_controls} "
                    f"control(s), got {len(gate.target_qubits)} and {len(gate.control_qubits)}"
                )
            if spec.n_params and gate.angle is None:
                result.errors.append(f"{label} requires an angle")
            if gate.type is not spec.type:
                result.errors.append(
                    f"{label} is declared {gate.type.value!r} but {spec.name} is {spec.type.value!r}"
                )

        if gate.angle is not None and not math.isfinite(gate.angle):
            result.errors.append(f"{label} has non-finite angle {gate.angle}")
        if gate.type is GateType.MEASURE and gate.classical_bit is not None:
            if not 0 <= gate.classical_bit < n:
                result.errors.append(
                    f"{label} writes invalid classical bit {gate.classical_bit}"
                )

        if gate.type is GateType.MEASURE:
            measured.update(gate.target_qubits)
        else:
            after = measured.intersection(gate.qubits)
            if after:
                result.warnings.append(
                    f"{label} acts on measured qubit(s) {sorted(after)}; "
                    f"measurements are deferred to the end of the circuit"
                )

    if len(circuit.gates) > limits.large_circuit_threshold:
        result.warnings.append(
            f"Circuit has {len(circuit.gates)} gates "
            f"(more than {limits.large_circuit_threshold})"
        )
    depth = get_circuit_depth(circuit)
    if depth > limits.deep_circuit_threshold:
        result.warnings.append(
            f"Circuit depth is very large ({depth} > {limits.deep_circuit_threshold})"
        )

    if result.errors:
        logger.debug("%s: %d validation error(s)", circuit.name, len(result.errors))
    for warning in result.warnings:
        logger.warning("%s: %s", circuit.name, warning)
    return result
