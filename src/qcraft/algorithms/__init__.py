"""
Canonical Algorithm Circuits
============================
Ready-made circuits for the textbook algorithms, built only through the
:class:`~qcraft.circuit.Circuit` builder so they can be validated,
exported or simulated like any user circuit.

Usage:
    from qcraft.algorithms import grovers_algorithm, run_algorithm

    result = grovers_algorithm(3)
    print(result.gate_count, result.depth, result.parameters["iterations"])

    result = run_algorithm("shor", 15)
    print(result.parameters["expected_factors"])   # [3, 5]
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from qcraft.circuit import Circuit
from qcraft.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AlgorithmResult:
    """A generated circuit and the figures the dashboard shows beside it."""
    name: str
    circuit: Circuit
    parameters: Dict[str, Any] = field(default_factory=dict)
    gate_count: int = 0
    depth: int = 0
    description: str = ""


def _result(name: str, circuit: Circuit, parameters: Dict[str, Any],
            description: str) -> AlgorithmResult:
    logger.debug("Built %s: %d gates, depth %d", circuit.name, len(circuit), circuit.depth)
    return AlgorithmResult(
        name=name,
        circuit=circuit,
        parameters=parameters,
        gate_count=len(circuit),
        depth=circuit.depth,
        description=description,
    )


def _require_positive(value: int, what: str) -> int:
    value = int(value)
    if value < 1:
        raise ValueError(f"{what} must be at least 1, got {value}")
    return value


# ---------------------------------------------------------------------------
# Bell pairs
# ---------------------------------------------------------------------------

def bell_state_generator(pair_count: int) -> AlgorithmResult:
    """
    ``pair_count`` independent Bell pairs (|00> + |11>)/sqrt(2).

    Pair ``i`` lives on qubits ``2i`` and ``2i + 1``.
    """
    pair_count = _require_positive(pair_count, "Pair count")
    qc = Circuit(2 * pair_count, name=f"Bell States ({pair_count} pairs)")
    for i in range(pair_count):
        qc.h(2 * i).cx(2 * i, 2 * i + 1)
    qc.measure_all()
    return _result(
        "Bell State Generator", qc, {"num_pairs": pair_count},
        "Creates maximally entangled Bell pairs",
    )


# ---------------------------------------------------------------------------
# Grover search
# ---------------------------------------------------------------------------

def _multi_controlled_z(qc: Circuit, n: int) -> str:
    """Phase-flip |1...1>. Exact up to three qubits, a CNOT-chain outline above."""
    if n == 1:
        qc.z(0)
        return "exact"
    if n == 2:
        qc.cz(0, 1)
        return "exact"
    last = n - 1
    qc.h(last)
    if n == 3:
        qc.ccx(0, 1, last)
    else:
        for i in range(last):
            qc.cx(i, last)
    qc.h(last)
    return "exact" if n == 3 else "skeleton"


def grovers_algorithm(num_qubits: int, marked_count: int = 1) -> AlgorithmResult:
    """
    Grover search marking |1...1>.

    Parameters
    ----------
    num_qubits : int
        Search register size; the database holds ``2**num_qubits`` items.
    marked_count : int
        Number of marked items, used for the iteration count.

    Runs ``floor(pi/4 * sqrt(N/M))`` oracle + diffusion rounds. For three
    qubits or fewer the oracle is an exact multi-controlled Z, so the
    marked state is amplified as expected. Larger registers get a
    CNOT-chain outline of the oracle that shows the circuit's shape but
    is not a faithful reflection.
    """
    n = _require_positive(num_qubits, "Qubit count")
    marked_count = int(marked_count)
    size = 2 ** n
    if not 1 <= marked_count <= size:
        raise ValueError(f"Marked count must be in [1, {size}], got {marked_count}")

    iterations = int(math.floor(math.pi / 4 * math.sqrt(size / marked_count)))
    qc = Circuit(n, name=f"Grover's Algorithm (N={size}, marked={marked_count})")

    for q in range(n):
        qc.h(q)
    oracle = "exact"
    for _ in range(iterations):
        # Oracle
        oracle = _multi_controlled_z(qc, n)
        # Diffusion: reflect about the uniform superposition
        for q in range(n):
            qc.h(q)
        for q in range(n):
            qc.x(q)
        _multi_controlled_z(qc, n)
        for q in range(n):
            qc.x(q)
        for q in range(n):
            qc.h(q)
    qc.measure_all()

    parameters = {
        "num_qubits": n,
        "num_marked_items": marked_count,
        "iterations": iterations,
        "oracle": oracle,
        "speedup": math.sqrt(size / marked_count),
    }
    return _result(
        "Grover's Algorithm", qc, parameters,
        "Searches an unstructured database with a quadratic speedup",
    )


# ---------------------------------------------------------------------------
# Deutsch-Jozsa
# ---------------------------------------------------------------------------

def deutsch_jozsa_algorithm(num_qubits: int, oracle: str = "balanced") -> AlgorithmResult:
    """
    Deutsch-Jozsa on ``num_qubits`` data qubits plus one ancilla.

    The ancilla is qubit ``num_qubits``, prepared in |->. The ``"balanced"``
    oracle computes the parity of the input (a CNOT from every data qubit);
    ``"constant"`` is f(x) = 0. Measuring the data register gives all zeros
    exactly when the oracle is constant.
    """
    n = _require_positive(num_qubits, "Qubit count")
    if oracle not in ("balanced", "constant"):
        raise ValueError(f"Oracle must be 'balanced' or 'constant', got {oracle!r}")

    ancilla = n
    qc = Circuit(n + 1, name=f"Deutsch-Jozsa Algorithm (n={n})")
    qc.x(ancilla).h(ancilla)
    for q in range(n):
        qc.h(q)
    if oracle == "balanced":
        for q in range(n):
            qc.cx(q, ancilla)
    for q in range(n):
        qc.h(q)
    for q in range(n):
        qc.measure(q)

    return _result(
        "Deutsch-Jozsa Algorithm", qc, {"num_qubits": n, "oracle": oracle},
        "Decides whether a function is constant or balanced with one query",
    )


# ---------------------------------------------------------------------------
# Quantum Fourier Transform
# ---------------------------------------------------------------------------

def quantum_fourier_transform(num_qubits: int) -> AlgorithmResult:
    """
    QFT on ``num_qubits`` qubits.

    Each qubit ``j`` gets a Hadamard followed by controlled phases
    ``2*pi / 2**(k - j + 1)`` from every later qubit ``k``; a final SWAP
    layer reverses the qubit order. No measurements are added.
    """
    n = _require_positive(num_qubits, "Qubit count")
    qc = Circuit(n, name=f"Quantum Fourier Transform (n={n})")
    for j in range(n):
        qc.h(j)
        for k in range(j + 1, n):
            qc.cp(2 * math.pi / 2 ** (k - j + 1), k, j)
    for i in range(n // 2):
        qc.swap(i, n - 1 - i)

    return _result(
        "Quantum Fourier Transform", qc, {"num_qubits": n},
        "Maps computational basis states to the Fourier basis",
    )


# ---------------------------------------------------------------------------
# Shor (demonstration)
# ---------------------------------------------------------------------------

def prime_factors(number: int) -> List[int]:
    """Distinct prime factors of ``number`` by trial division, ascending."""
    number = int(number)
    factors: List[int] = []
    divisor = 2
    while divisor * divisor <= number:
        if number % divisor == 0:
            factors.append(divisor)
            while number % divisor == 0:
                number //= divisor
        divisor += 1
    if number > 1:
        factors.append(number)
    return factors


def shors_algorithm(number_to_factor: int) -> AlgorithmResult:
    """
    Outline of Shor's period-finding circuit for ``number_to_factor``.

    The circuit has the layout of phase estimation (Hadamards on the
    counting register, a CNOT chain standing in for modular
    exponentiation, an inverse-QFT Hadamard layer, then measurement) but
    does not compute the period. ``expected_factors`` comes from classical
    trial division.
    """
    N = int(number_to_factor)
    if N < 2:
        raise ValueError(f"Number to factor must be at least 2, got {N}")

    bits = (N - 1).bit_length()
    total = 2 * bits + 1
    counting = bits + 1
    qc = Circuit(total, name=f"Shor's Algorithm (N={N})")

    for q in range(counting):
        qc.h(q)
    for q in range(counting - 1):
        qc.cx(q, q + 1)
    for q in reversed(range(counting)):
        qc.h(q)
    for q in range(counting):
        qc.measure(q)

    parameters = {"number_to_factor": N, "expected_factors": prime_factors(N)}
    return _result(
        "Shor's Algorithm", qc, parameters,
        "Finds prime factors of large integers using quantum phase estimation",
    )


# ---------------------------------------------------------------------------
# Run by name
# ---------------------------------------------------------------------------

ALGORITHMS: Dict[str, Callable[..., AlgorithmResult]] = {
    "bell": bell_state_generator,
    "grover": grovers_algorithm,
    "deutsch_jozsa": deutsch_jozsa_algorithm,
    "qft": quantum_fourier_transform,
    "shor": shors_algorithm,
}


def run_algorithm(name: str, *args: Any, **kwargs: Any) -> AlgorithmResult:
    """
    Build an algorithm circuit by registry name.

    >>> run_algorithm("bell", 2).circuit.num_qubits
    4
    """
    key = name.strip().lower().replace("-", "_")
    try:
        generator = ALGORITHMS[key]
    except KeyError:
        raise ValueError(
            f"Unknown algorithm {name!r}. Available: {', '.join(sorted(ALGORITHMS))}"
        ) from None
    return generator(*args, **kwargs)


__all__ = [
    "AlgorithmResult",
    "ALGORITHMS",
    "bell_state_generator",
    "deutsch_jozsa_algorithm",
    "grovers_algorithm",
    "prime_factors",
    "quantum_fourier_transform",
    "run_algorithm",
    "shors_algorithm",
]
