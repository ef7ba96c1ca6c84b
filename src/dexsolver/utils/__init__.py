"""Utility modules for dexsolver."""

from dexsolver.utils.http import Client, RoundtripError, roundtrip

__all__ = ["Client", "RoundtripError", "roundtrip"]
