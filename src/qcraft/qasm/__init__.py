"""OpenQASM exporter for qcraft."""

from qcraft.qasm.exporter import export_to_openqasm, format_instruction

__all__ = ["export_to_openqasm", "format_instruction"]
