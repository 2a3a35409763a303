"""Tests for state vectors and gate kernels."""

import numpy as np
import pytest

from qcraft import (
    Limits,
    NormalizationError,
    QubitLimitError,
    StateVector,
    apply_cnot,
    apply_controlled_phase,
    apply_cz,
    apply_gate,
    apply_hadamard,
    apply_pauli_x,
    apply_pauli_y,
    apply_pauli_z,
    apply_phase,
    apply_rotation,
    apply_swap,
    apply_toffoli,
    create_initial_state,
    create_marked_state,
    create_superposition_state,
    get_probabilities,
)
from qcraft import gates as g
from qcraft.gates import Gate, GateType
from qcraft.numeric import is_normalized, magnitude_squared, total_probability

SQ2 = 1 / np.sqrt(2)


def basis(n, index):
    amps = np.zeros(2**n, dtype=complex)
    amps[index] = 1.0
    return amps


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def test_initial_state():
    state = create_initial_state(3)
    assert state.num_qubits == 3
    assert len(state) == 8
    np.testing.assert_allclose(state.amplitudes, basis(3, 0))


def test_superposition_state():
    state = create_superposition_state(2)
    np.testing.assert_allclose(state.amplitudes, np.full(4, 0.5))


def test_marked_state():
    state = create_marked_state(2, [1, 3, 3])
    np.testing.assert_allclose(state.amplitudes, [0, SQ2, 0, SQ2], atol=1e-12)


def test_marked_state_rejects_bad_indices():
    with pytest.raises(ValueError):
        create_marked_state(2, [])
    with pytest.raises(ValueError):
        create_marked_state(2, [4])


def test_zero_qubits_rejected():
    with pytest.raises(ValueError):
        create_initial_state(0)


def test_qubit_guardrail():
    with pytest.raises(QubitLimitError):
        create_initial_state(25)
    with pytest.raises(QubitLimitError):
        create_initial_state(5, Limits(max_qubits=4))


def test_qubit_limit_error_is_value_error():
    assert issubclass(QubitLimitError, ValueError)


def test_state_from_amplitudes_is_copied():
    amps = np.array([1, 0], dtype=complex)
    state = StateVector(amps)
    amps[0] = 0
    assert state.amplitudes[0] == 1


def test_state_rejects_bad_length():
    with pytest.raises(ValueError):
        StateVector([1, 0, 0])
    with pytest.raises(ValueError):
        StateVector([1])


def test_state_rejects_unnormalized():
    with pytest.raises(NormalizationError):
        StateVector([1, 1])


def test_state_normalize_option():
    state = StateVector([1, 1], normalize=True)
    np.testing.assert_allclose(state.amplitudes, [SQ2, SQ2])


def test_state_is_read_only():
    state = create_initial_state(1)
    with pytest.raises(ValueError):
        state.amplitudes[0] = 0


def test_bitstring_convention():
    state = create_initial_state(3)
    assert state.bitstring(1) == "001"
    assert state.bitstring(4) == "100"


def test_tensor_axis_is_qubit():
    state = apply_pauli_x(create_initial_state(2), 0)
    tensor = state.tensor()
    assert tensor[1, 0] == 1
    assert tensor[0, 1] == 0


# ---------------------------------------------------------------------------
# Single-qubit kernels
# ---------------------------------------------------------------------------

def test_pauli_x_on_qubit_zero_sets_low_bit():
    state = apply_pauli_x(create_initial_state(2), 0)
    np.testing.assert_allclose(state.amplitudes, basis(2, 1))
    assert get_probabilities(state) == {"01": 1.0}


def test_pauli_x_on_high_qubit():
    state = apply_pauli_x(create_initial_state(3), 2)
    assert get_probabilities(state) == {"100": 1.0}


def test_hadamard_twice_is_identity():
    state = create_initial_state(1)
    twice = apply_hadamard(apply_hadamard(state, 0), 0)
    np.testing.assert_allclose(twice.amplitudes, [1, 0], atol=1e-12)


def test_pauli_y():
    state = apply_pauli_y(create_initial_state(1), 0)
    np.testing.assert_allclose(state.amplitudes, [0, 1j], atol=1e-12)


def test_pauli_z_on_plus():
    plus = apply_hadamard(create_initial_state(1), 0)
    minus = apply_pauli_z(plus, 0)
    np.testing.assert_allclose(minus.amplitudes, [SQ2, -SQ2], atol=1e-12)


def test_phase_quarter_turn_is_s():
    plus = apply_hadamard(create_initial_state(1), 0)
    state = apply_phase(plus, 0, np.pi / 2)
    np.testing.assert_allclose(state.amplitudes, [SQ2, 1j * SQ2], atol=1e-12)


@pytest.mark.parametrize("axis,expected", [
    ("X", [0, -1j]),
    ("y", [0, 1]),
    ("Z", [-1j, 0]),
])
def test_rotation_by_pi(axis, expected):
    state = apply_rotation(create_initial_state(1), 0, np.pi, axis)
    np.testing.assert_allclose(state.amplitudes, expected, atol=1e-12)


def test_rotation_bad_axis():
    with pytest.raises(ValueError, match="axis"):
        apply_rotation(create_initial_state(1), 0, 1.0, "W")


# ---------------------------------------------------------------------------
# Multi-qubit kernels
# ---------------------------------------------------------------------------

def test_cnot_control_set():
    state = apply_pauli_x(create_initial_state(2), 0)
    state = apply_cnot(state, 0, 1)
    np.testing.assert_allclose(state.amplitudes, basis(2, 3))


def test_cnot_control_clear_is_noop():
    state = apply_pauli_x(create_initial_state(2), 1)
    state = apply_cnot(state, 0, 1)
    np.testing.assert_allclose(state.amplitudes, basis(2, 2))


def test_bell_state():
    state = apply_cnot(apply_hadamard(create_initial_state(2), 0), 0, 1)
    np.testing.assert_allclose(state.amplitudes, [SQ2, 0, 0, SQ2], atol=1e-12)
    probs = get_probabilities(state)
    assert set(probs) == {"00", "11"}
    assert probs["00"] == pytest.approx(0.5)


def test_cz_on_eleven():
    state = create_marked_state(2, [3])
    np.testing.assert_allclose(apply_cz(state, 0, 1).amplitudes, -basis(2, 3), atol=1e-12)


def test_cz_is_symmetric():
    state = create_superposition_state(2)
    a = apply_cz(state, 0, 1).amplitudes
    b = apply_cz(state, 1, 0).amplitudes
    np.testing.assert_allclose(a, b, atol=1e-12)


def test_controlled_phase():
    theta = 0.7
    state = apply_controlled_phase(create_superposition_state(2), 0, 1, theta)
    expected = 0.5 * np.array([1, 1, 1, np.exp(1j * theta)])
    np.testing.assert_allclose(state.amplitudes, expected, atol=1e-12)


def test_toffoli_both_controls():
    state = create_marked_state(3, [3])
    np.testing.assert_allclose(apply_toffoli(state, 0, 1, 2).amplitudes, basis(3, 7))


def test_toffoli_one_control_is_noop():
    state = create_marked_state(3, [1])
    np.testing.assert_allclose(apply_toffoli(state, 0, 1, 2).amplitudes, basis(3, 1))


def test_swap():
    state = apply_pauli_x(create_initial_state(3), 0)
    swapped = apply_swap(state, 0, 2)
    assert get_probabilities(swapped) == {"100": 1.0}


def test_kernel_rejects_bad_qubits():
    state = create_initial_state(2)
    with pytest.raises(ValueError):
        apply_hadamard(state, 2)
    with pytest.raises(ValueError):
        apply_cnot(state, 0, 0)
    with pytest.raises(ValueError):
        apply_swap(state, 1, 1)


# ---------------------------------------------------------------------------
# Immutability
# ---------------------------------------------------------------------------

def test_apply_returns_fresh_state():
    state = create_initial_state(2)
    after = apply_hadamard(state, 0)
    assert after is not state
    np.testing.assert_allclose(state.amplitudes, basis(2, 0))


def test_branching_from_shared_state():
    shared = apply_hadamard(create_initial_state(2), 0)
    left = apply_cnot(shared, 0, 1)
    right = apply_pauli_z(shared, 0)
    np.testing.assert_allclose(shared.amplitudes, [SQ2, SQ2, 0, 0], atol=1e-12)
    np.testing.assert_allclose(left.amplitudes, [SQ2, 0, 0, SQ2], atol=1e-12)
    np.testing.assert_allclose(right.amplitudes, [SQ2, -SQ2, 0, 0], atol=1e-12)


# ---------------------------------------------------------------------------
# Gate dispatch
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("gate,kernel", [
    (g.hadamard(1), lambda s: apply_hadamard(s, 1)),
    (g.pauli_y(0), lambda s: apply_pauli_y(s, 0)),
    (g.rx(2, 0.4), lambda s: apply_rotation(s, 2, 0.4, "X")),
    (g.cnot(2, 0), lambda s: apply_cnot(s, 2, 0)),
    (g.cz(0, 2), lambda s: apply_cz(s, 0, 2)),
    (g.controlled_phase(1, 0, 0.3), lambda s: apply_controlled_phase(s, 1, 0, 0.3)),
    (g.swap(0, 1), lambda s: apply_swap(s, 0, 1)),
    (g.toffoli(2, 0, 1), lambda s: apply_toffoli(s, 2, 0, 1)),
])
def test_apply_gate_matches_kernel(gate, kernel, rng):
    amps = rng.normal(size=8) + 1j * rng.normal(size=8)
    state = StateVector(amps, normalize=True)
    np.testing.assert_allclose(
        apply_gate(state, gate).amplitudes, kernel(state).amplitudes, atol=1e-12
    )


def test_apply_gate_crz():
    state = create_marked_state(2, [3])
    out = apply_gate(state, g.crz(0, 1, np.pi))
    np.testing.assert_allclose(out.amplitudes, 1j * basis(2, 3), atol=1e-12)


def test_apply_gate_identity():
    state = create_superposition_state(2)
    np.testing.assert_allclose(apply_gate(state, g.identity(0)).amplitudes, state.amplitudes)


def test_apply_gate_rejects_measurement():
    with pytest.raises(ValueError):
        apply_gate(create_initial_state(1), g.measure(0))


def test_apply_gate_unknown():
    with pytest.raises(KeyError):
        apply_gate(create_initial_state(1), Gate("FOO", GateType.SINGLE, (0,)))


def test_random_gates_preserve_norm(rng):
    state = create_initial_state(4)
    builders = [
        lambda: g.hadamard(int(rng.integers(4))),
        lambda: g.ry(int(rng.integers(4)), float(rng.uniform(0, 6))),
        lambda: g.t_gate(int(rng.integers(4))),
        lambda: g.cnot(*(int(q) for q in rng.choice(4, 2, replace=False))),
        lambda: g.controlled_phase(*(int(q) for q in rng.choice(4, 2, replace=False)), 1.1),
        lambda: g.toffoli(*(int(q) for q in rng.choice(4, 3, replace=False))),
    ]
    for _ in range(200):
        state = apply_gate(state, builders[int(rng.integers(len(builders)))]())
    assert state.probabilities().sum() == pytest.approx(1.0, abs=1e-9)


# ---------------------------------------------------------------------------
# Probabilities
# ---------------------------------------------------------------------------

def test_probabilities_drop_zero_states():
    state = create_marked_state(3, [0, 5])
    probs = get_probabilities(state)
    assert list(probs) == ["000", "101"]
    assert sum(probs.values()) == pytest.approx(1.0)


def test_probabilities_custom_cutoff():
    state = apply_rotation(create_initial_state(1), 0, 0.01, "Y")
    assert set(get_probabilities(state)) == {"0", "1"}
    assert set(get_probabilities(state, cutoff=1e-3)) == {"0"}


# ---------------------------------------------------------------------------
# Amplitude helpers
# ---------------------------------------------------------------------------

def test_magnitude_squared():
    assert magnitude_squared(3 + 4j) == 25.0
    np.testing.assert_allclose(magnitude_squared(np.array([1j, 0.5])), [1.0, 0.25])


def test_is_normalized():
    assert is_normalized(np.array([SQ2, SQ2]))
    assert not is_normalized(np.array([1.0, 1.0]))
    assert total_probability(np.array([0.6, 0.8j])) == pytest.approx(1.0)


def test_single_qubit_hadamard_probabilities():
    probs = get_probabilities(apply_hadamard(create_initial_state(1), 0))
    assert probs == {"0": pytest.approx(0.5), "1": pytest.approx(0.5)}


def test_single_qubit_pauli_x_probabilities():
    probs = get_probabilities(apply_pauli_x(create_initial_state(1), 0))
    assert probs.get("1") == pytest.approx(1.0)
    assert probs.get("0", 0.0) == pytest.approx(0.0)


# ---------------------------------------------------------------------------
# Non-finite amplitudes
# ---------------------------------------------------------------------------

def test_nan_amplitudes_rejected():
    with pytest.raises(NormalizationError):
        StateVector([np.nan, 0])


def test_nan_amplitudes_cannot_be_normalized():
    with pytest.raises(ValueError):
        StateVector([np.nan, 1], normalize=True)
    with pytest.raises(ValueError):
        StateVector([np.inf, 1], normalize=True)


def test_nan_angle_breaks_normalization():
    with pytest.raises(NormalizationError):
        apply_rotation(create_initial_state(1), 0, np.nan, "X")
    with pytest.raises(NormalizationError):
        apply_phase(apply_hadamard(create_initial_state(1), 0), 0, np.inf)


def test_state_vector_honours_limits():
    with pytest.raises(QubitLimitError):
        StateVector(np.eye(1, 8).ravel(), limits=Limits(max_qubits=2))
    state = StateVector([1, 1e-6], limits=Limits(norm_tolerance=1e-3))
    assert state.num_qubits == 1
