"""Tests for the canonical algorithm circuits."""

import dataclasses

import numpy as np
import pytest

from qcraft import (
    ALGORITHMS,
    StatevectorBackend,
    bell_state_generator,
    deutsch_jozsa_algorithm,
    get_probabilities,
    grovers_algorithm,
    quantum_fourier_transform,
    run_algorithm,
    shors_algorithm,
    validate_circuit,
)
from qcraft.algorithms import prime_factors
from qcraft.gates import pauli_x


def final_state(result):
    return StatevectorBackend(seed=0).evolve(result.circuit)


def data_register_probability(state, num_data, value):
    """Marginal probability that the low ``num_data`` qubits read ``value``."""
    probs = state.probabilities()
    mask = (1 << num_data) - 1
    return float(sum(p for i, p in enumerate(probs) if i & mask == value))


# ---------------------------------------------------------------------------
# Bell pairs
# ---------------------------------------------------------------------------

def test_bell_generator_structure():
    result = bell_state_generator(2)
    assert result.name == "Bell State Generator"
    assert result.circuit.num_qubits == 4
    assert result.parameters == {"num_pairs": 2}
    assert result.gate_count == 8
    assert result.depth == 3


def test_bell_generator_outcomes():
    probs = get_probabilities(final_state(bell_state_generator(2)))
    assert set(probs) == {"0000", "0011", "1100", "1111"}
    for p in probs.values():
        assert p == pytest.approx(0.25)


def test_bell_generator_rejects_zero_pairs():
    with pytest.raises(ValueError):
        bell_state_generator(0)


# ---------------------------------------------------------------------------
# Grover
# ---------------------------------------------------------------------------

def test_grover_two_qubits_finds_marked_state():
    result = grovers_algorithm(2)
    assert result.parameters["iterations"] == 1
    assert result.parameters["oracle"] == "exact"
    assert result.parameters["speedup"] == pytest.approx(2.0)
    probs = get_probabilities(final_state(result))
    assert probs["11"] == pytest.approx(1.0)


def test_grover_three_qubits_amplifies_marked_state():
    result = grovers_algorithm(3)
    assert result.parameters["iterations"] == 2
    probs = get_probabilities(final_state(result))
    assert probs["111"] == pytest.approx(0.9453, abs=1e-3)


def test_grover_parameters():
    result = grovers_algorithm(4, marked_count=2)
    assert result.parameters["num_qubits"] == 4
    assert result.parameters["num_marked_items"] == 2
    assert result.parameters["iterations"] == int(np.floor(np.pi / 4 * np.sqrt(8)))
    assert result.parameters["oracle"] == "skeleton"


def test_grover_large_register_is_valid():
    result = grovers_algorithm(6)
    assert validate_circuit(result.circuit).valid
    assert result.circuit.num_qubits == 6


def test_grover_rejects_bad_arguments():
    with pytest.raises(ValueError):
        grovers_algorithm(0)
    with pytest.raises(ValueError):
        grovers_algorithm(2, marked_count=0)
    with pytest.raises(ValueError):
        grovers_algorithm(2, marked_count=5)


# ---------------------------------------------------------------------------
# Deutsch-Jozsa
# ---------------------------------------------------------------------------

def test_deutsch_jozsa_uses_ancilla():
    result = deutsch_jozsa_algorithm(3)
    assert result.circuit.num_qubits == 4
    measured = [g.target_qubits[0] for g in result.circuit if g.is_measurement]
    assert measured == [0, 1, 2]


def test_deutsch_jozsa_constant_reads_all_zero():
    state = final_state(deutsch_jozsa_algorithm(3, oracle="constant"))
    assert data_register_probability(state, 3, 0) == pytest.approx(1.0)


def test_deutsch_jozsa_balanced_never_reads_all_zero():
    state = final_state(deutsch_jozsa_algorithm(3, oracle="balanced"))
    assert data_register_probability(state, 3, 0) == pytest.approx(0.0, abs=1e-12)
    assert data_register_probability(state, 3, 0b111) == pytest.approx(1.0)


def test_deutsch_jozsa_bad_oracle():
    with pytest.raises(ValueError):
        deutsch_jozsa_algorithm(2, oracle="random")


# ---------------------------------------------------------------------------
# QFT
# ---------------------------------------------------------------------------

def test_qft_three_qubits_parallelism():
    result = quantum_fourier_transform(3)
    assert result.gate_count == 7
    assert result.depth == 6
    assert result.depth < result.gate_count


@pytest.mark.parametrize("n", [2, 3, 4, 5])
def test_qft_depth_below_gate_count(n):
    result = quantum_fourier_transform(n)
    assert result.depth < result.gate_count


def test_qft_rotation_angles():
    rotations = [g for g in quantum_fourier_transform(3).circuit if g.name == "CP"]
    angles = [g.angle for g in rotations]
    assert angles == pytest.approx([np.pi / 2, np.pi / 4, np.pi / 2])
    assert rotations[1].control_qubits == (2,)
    assert rotations[1].target_qubits == (0,)


def test_qft_of_zero_is_uniform():
    state = final_state(quantum_fourier_transform(3))
    np.testing.assert_allclose(state.amplitudes, np.full(8, 1 / np.sqrt(8)), atol=1e-12)


def test_qft_of_basis_state_has_flat_magnitudes():
    result = quantum_fourier_transform(3)
    result.circuit.gates.insert(0, pauli_x(0))
    state = final_state(result)
    np.testing.assert_allclose(np.abs(state.amplitudes), np.full(8, 1 / np.sqrt(8)), atol=1e-12)


def test_qft_has_no_measurements():
    assert not any(g.is_measurement for g in quantum_fourier_transform(4).circuit)


# ---------------------------------------------------------------------------
# Shor
# ---------------------------------------------------------------------------

def test_shor_fifteen():
    result = shors_algorithm(15)
    assert result.parameters["number_to_factor"] == 15
    assert result.parameters["expected_factors"] == [3, 5]
    assert result.circuit.num_qubits == 9
    assert result.gate_count == 19


@pytest.mark.parametrize("n,factors", [
    (2, [2]), (7, [7]), (12, [2, 3]), (21, [3, 7]), (77, [7, 11]), (97, [97]),
])
def test_prime_factors(n, factors):
    assert prime_factors(n) == factors
    assert shors_algorithm(n).parameters["expected_factors"] == factors


def test_shor_circuit_is_valid():
    assert validate_circuit(shors_algorithm(21).circuit).valid


def test_shor_rejects_small_numbers():
    with pytest.raises(ValueError):
        shors_algorithm(1)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def test_run_algorithm_by_name():
    result = run_algorithm("qft", 3)
    assert result.name == "Quantum Fourier Transform"
    assert run_algorithm("Deutsch-Jozsa", 2, oracle="constant").parameters["oracle"] == "constant"
    assert run_algorithm(" GROVER ", 2).parameters["iterations"] == 1


def test_run_algorithm_unknown():
    with pytest.raises(ValueError, match="Available"):
        run_algorithm("teleport", 3)


@pytest.mark.parametrize("name,arg", [
    ("bell", 2), ("grover", 3), ("deutsch_jozsa", 3), ("qft", 4), ("shor", 15),
])
def test_every_algorithm_builds_valid_circuit(name, arg):
    result = ALGORITHMS[name](arg)
    assert validate_circuit(result.circuit).valid
    assert result.gate_count == len(result.circuit)
    assert result.depth == result.circuit.depth
    assert result.description


def test_algorithm_result_is_frozen():
    result = bell_state_generator(1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.name = "other"
