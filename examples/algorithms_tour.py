"""Example: build, validate and simulate every bundled algorithm."""
import sys
sys.path.insert(0, 'src')

from qcraft import ALGORITHMS, simulate_circuit, validate_circuit

ARGS = {
    "bell": (2,),
    "grover": (3,),
    "deutsch_jozsa": (3,),
    "qft": (3,),
    "shor": (15,),
}

for key, args in ARGS.items():
    result = ALGORITHMS[key](*args)
    check = validate_circuit(result.circuit)
    print(f"{result.name}: {result.circuit.num_qubits} qubits, "
          f"{result.gate_count} gates, depth {result.depth}, valid={check.valid}")
    print(f"  parameters: {result.parameters}")

    sim = simulate_circuit(result.circuit, shots=512, seed=1)
    top = sorted(sim.measurements.items(), key=lambda kv: -kv[1])[:3]
    print(f"  top outcomes: {top}")
