"""Example: Bell state on qcraft."""
import sys
sys.path.insert(0, 'src')

from qcraft import (
    Circuit,
    calculate_entanglement_entropy,
    get_bloch_sphere_coordinates,
    simulate_circuit,
)

print("=" * 50)
print("qcraft: Bell State Example")
print("=" * 50)

qc = Circuit(2, name="bell").h(0).cx(0, 1).measure_all()
print("\nOpenQASM:")
print(qc.to_qasm())

result = simulate_circuit(qc, shots=1000, seed=7)

print("Measurement Results:")
for state, count in sorted(result.measurements.items()):
    print(f"  |{state}⟩: {count:4d} ({100*count/1000:5.1f}%)")

print(f"\nEntanglement entropy: {calculate_entanglement_entropy(result.final_state):.3f} bits")
bloch = get_bloch_sphere_coordinates(result.final_state, 0)
print(f"Qubit 0 Bloch vector: ({bloch.x:.2f}, {bloch.y:.2f}, {bloch.z:.2f}), purity {bloch.purity:.2f}")

print("\nExpected: ~50% |00⟩ and ~50% |11⟩ (entangled!)")
