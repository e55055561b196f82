# witnesskit/runtime/__init__.py
"""
Runtime support: in-process witness classes and the witness registry.
"""

from witnesskit.runtime.registry import (
    WitnessLookupTable,
    WitnessRegistry,
    WitnessTable,
    get_witness_registry,
    lookup,
    register,
)
from witnesskit.runtime.witness import Witness, build_witness_class

__all__ = [
    "Witness",
    "build_witness_class",
    "WitnessTable",
    "WitnessRegistry",
    "WitnessLookupTable",
    "get_witness_registry",
    "register",
    "lookup",
]
