"""Simulation backends for qcraft."""

from qcraft.backends.statevector import (
    SimulationResult,
    StatevectorBackend,
    simulate,
    simulate_circuit,
)

__all__ = ["SimulationResult", "StatevectorBackend", "simulate", "simulate_circuit"]
