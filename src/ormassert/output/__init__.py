"""Rendering of command results for humans (Rich) and machines (JSON)."""
