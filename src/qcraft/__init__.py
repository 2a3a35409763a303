"""
qcraft: quantum circuit construction and exact state-vector simulation.

Features:
- Fluent builder: Circuit(2).h(0).cx(0, 1).measure_all()
- Structural validation, depth and gate counts
- Immutable state vectors with per-gate normalization checks
- Seeded measurement sampling, entanglement entropy, Bloch coordinates
- Textbook algorithm circuits: Bell, Grover, Deutsch-Jozsa, QFT, Shor
- OpenQASM 2.0 export

Quick Start:
    >>> from qcraft import Circuit, simulate_circuit
    >>> qc = Circuit(2).h(0).cx(0, 1).measure_all()
    >>> result = simulate_circuit(qc, shots=1000, seed=7)
    >>> print(result.measurements)  # {'00': ~500, '11': ~500}
    >>> print(qc.to_qasm())
"""
__version__ = "1.0.0"

from . import gates
from .algorithms import (
    ALGORITHMS,
    AlgorithmResult,
    bell_state_generator,
    deutsch_jozsa_algorithm,
    grovers_algorithm,
    quantum_fourier_transform,
    run_algorithm,
    shors_algorithm,
)
from .analysis import (
    BasisProbability,
    BlochVector,
    StateReport,
    calculate_entanglement_entropy,
    calculate_fidelity,
    create_state_report,
    get_bloch_sphere_coordinates,
    get_expectation_value,
    get_top_probability_states,
    reduced_density_matrix,
)
from .backends import SimulationResult, StatevectorBackend, simulate, simulate_circuit
from .circuit import (
    Circuit,
    add_gate,
    add_gates,
    clear_circuit,
    create_circuit,
    get_circuit_depth,
    get_gate_count,
    get_gate_counts_by_type,
    remove_gate,
)
from .config import Limits, get_limits, set_limits
from .errors import CircuitValidationError, NormalizationError, QcraftError, QubitLimitError
from .gates import Gate, GateType
from .logging import configure_logging, get_logger, set_log_level
from .qasm import export_to_openqasm
from .state import (
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
from .validation import ValidationResult, validate_circuit

__all__ = [
    # Circuit model
    'Circuit',
    'Gate',
    'GateType',
    'gates',
    'create_circuit',
    'add_gate',
    'add_gates',
    'remove_gate',
    'clear_circuit',
    'get_gate_count',
    'get_gate_counts_by_type',
    'get_circuit_depth',
    # Validation
    'ValidationResult',
    'validate_circuit',
    # State vectors
    'StateVector',
    'create_initial_state',
    'create_superposition_state',
    'create_marked_state',
    'apply_gate',
    'apply_hadamard',
    'apply_pauli_x',
    'apply_pauli_y',
    'apply_pauli_z',
    'apply_phase',
    'apply_rotation',
    'apply_cnot',
    'apply_cz',
    'apply_controlled_phase',
    'apply_toffoli',
    'apply_swap',
    'get_probabilities',
    # Analysis
    'BlochVector',
    'BasisProbability',
    'StateReport',
    'reduced_density_matrix',
    'calculate_entanglement_entropy',
    'calculate_fidelity',
    'get_bloch_sphere_coordinates',
    'get_expectation_value',
    'get_top_probability_states',
    'create_state_report',
    # Simulation
    'SimulationResult',
    'StatevectorBackend',
    'simulate',
    'simulate_circuit',
    # Algorithms
    'AlgorithmResult',
    'ALGORITHMS',
    'bell_state_generator',
    'grovers_algorithm',
    'deutsch_jozsa_algorithm',
    'quantum_fourier_transform',
    'shors_algorithm',
    'run_algorithm',
    # Export
    'export_to_openqasm',
    # Configuration and logging
    'Limits',
    'get_limits',
    'set_limits',
    'get_logger',
    'set_log_level',
    'configure_logging',
    # Errors
    'QcraftError',
    'CircuitValidationError',
    'QubitLimitError',
    'NormalizationError',
]
