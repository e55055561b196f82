# witnesskit/runtime/registry.py
"""
Process-wide witness registry.

Stores previously built witnesses keyed by subject-type identity and an
optional label, so code holding only a type can retrieve its witness later:

    register(int_sum, int, label="sum")
    lookup(CombinableWitness, int, label="sum")  # -> int_sum

Design:
    - One WitnessTable per witness type; each table has its own lock
    - Last write wins; registering twice under a key replaces the value
    - Lookup narrows with isinstance: a mismatch reads as "not found"
    - Entries never expire; the registry lives as long as the process

Identity is the subject type's qualified name (strings are used as-is), so
two distinct types with the same name share entries.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar, Union

from witnesskit.logging import tags
from witnesskit.logging.logger import get_logger

logger = get_logger(__name__)

W = TypeVar("W")

TableKey = Tuple[str, Optional[str]]


def type_identity(subject_type: Union[type, str]) -> str:
    """Identity string of a subject type."""
    if isinstance(subject_type, str):
        return subject_type
    name = getattr(subject_type, "__qualname__", None) or getattr(subject_type, "__name__", None)
    return name or str(subject_type)


# =============================================================================
# Witness Table
# =============================================================================


class WitnessTable:
    """
    Type-erased store for witnesses of a single witness type.

    All access goes through one lock.
    """

    def __init__(self, name: str = "witnesses"):
        self.name = name
        self._entries: Dict[TableKey, Any] = {}
        self._lock = threading.Lock()

    def write(self, value: Any, type: Union[type, str], label: Optional[str] = None) -> None:
        key = (type_identity(type), label)
        with self._lock:
            replaced = key in self._entries
            self._entries[key] = value
        logger.debug(
            f"{tags.REGISTRY} {'Replaced' if replaced else 'Registered'} "
            f"{self.name} witness for {key[0]!r} (label={label!r})"
        )

    def read(self, type: Union[type, str], label: Optional[str] = None) -> Optional[Any]:
        key = (type_identity(type), label)
        with self._lock:
            return self._entries.get(key)

    def remove(self, type: Union[type, str], label: Optional[str] = None) -> bool:
        key = (type_identity(type), label)
        with self._lock:
            return self._entries.pop(key, None) is not None

    def keys(self) -> List[TableKey]:
        with self._lock:
            return sorted(self._entries, key=lambda k: (k[0], k[1] or ""))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# =============================================================================
# Registry
# =============================================================================


class WitnessRegistry:
    """Tables of witnesses, one per witness type."""

    def __init__(self):
        self._tables: Dict[str, WitnessTable] = {}
        self._lock = threading.Lock()

    def table(self, witness_type: Union[type, str]) -> WitnessTable:
        """Get or create the table for a witness type."""
        name = type_identity(witness_type)
        with self._lock:
            table = self._tables.get(name)
            if table is None:
                table = WitnessTable(name)
                self._tables[name] = table
            return table

    def register(
        self,
        witness: Any,
        subject_type: Union[type, str],
        label: Optional[str] = None,
        witness_type: Optional[Union[type, str]] = None,
    ) -> None:
        """Store ``witness`` for ``subject_type``; overwrites an existing entry."""
        self.table(witness_type or type(witness)).write(witness, subject_type, label)

    def lookup(
        self,
        witness_type: Type[W],
        subject_type: Union[type, str],
        label: Optional[str] = None,
    ) -> Optional[W]:
        """
        Retrieve a witness, narrowed to ``witness_type``.

        Returns None when nothing is stored or the stored value is not a
        ``witness_type``.
        """
        with self._lock:
            table = self._tables.get(type_identity(witness_type))
        if table is None:
            return None
        value = table.read(subject_type, label)
        if value is None:
            return None
        if not isinstance(value, witness_type):
            logger.debug(
                f"{tags.REGISTRY} Stored value for {type_identity(subject_type)!r} "
                f"is {type(value).__name__}, not {type_identity(witness_type)}"
            )
            return None
        return value

    def clear(self) -> None:
        with self._lock:
            self._tables.clear()

    def list_tables(self) -> List[str]:
        with self._lock:
            return sorted(self._tables)


class WitnessLookupTable(Generic[W]):
    """
    Lookup helper bound to one witness type.

    Example:
        combining = WitnessLookupTable(CombinableWitness)
        combining.witness(int, label="sum")
    """

    def __init__(self, witness_type: Type[W], registry: Optional[WitnessRegistry] = None):
        self.witness_type = witness_type
        self.registry = registry or get_witness_registry()
        self.table = self.registry.table(witness_type)

    def witness(self, subject_type: Union[type, str], label: Optional[str] = None) -> Optional[W]:
        return self.registry.lookup(self.witness_type, subject_type, label)

    def register(self, witness: W, subject_type: Union[type, str], label: Optional[str] = None) -> None:
        self.registry.register(witness, subject_type, label, witness_type=self.witness_type)


# =============================================================================
# Global Registry
# =============================================================================

_global_registry: Optional[WitnessRegistry] = None
_global_lock = threading.Lock()


def get_witness_registry() -> WitnessRegistry:
    """Get or create the process-wide registry."""
    global _global_registry
    with _global_lock:
        if _global_registry is None:
            _global_registry = WitnessRegistry()
        return _global_registry


def register(
    witness: Any,
    subject_type: Union[type, str],
    label: Optional[str] = None,
    witness_type: Optional[Union[type, str]] = None,
) -> None:
    """Register a witness in the process-wide registry."""
    get_witness_registry().register(witness, subject_type, label, witness_type=witness_type)


def lookup(
    witness_type: Type[W],
    subject_type: Union[type, str],
    label: Optional[str] = None,
) -> Optional[W]:
    """Look a witness up in the process-wide registry."""
    return get_witness_registry().lookup(witness_type, subject_type, label)
