"""Conflict-free replicated data types: ids, registers, sequences, intervals and marks."""

__version__ = "0.1.0"
__all__ = ["ids", "registers", "sequence", "intervals", "marks"]