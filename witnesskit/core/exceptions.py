# witnesskit/core/exceptions.py
"""
Error hierarchy for witness generation.

Every generation error names the interface being processed and, where one is
involved, the offending requirement, so callers can render a diagnostic
without parsing messages.

Hierarchy:
    WitnessError
    ├── SchemaError                    malformed or unwalkable schema data
    └── UnsupportedRequirementError    requirement shape without an emit rule
"""

from __future__ import annotations

from typing import Optional


class WitnessError(Exception):
    """Base error for witness generation."""

    def __init__(
        self,
        message: str,
        interface: Optional[str] = None,
        requirement: Optional[str] = None,
    ):
        self.message = message
        self.interface = interface
        self.requirement = requirement
        super().__init__(self._format())

    def _format(self) -> str:
        where = []
        if self.interface:
            where.append(f"interface {self.interface!r}")
        if self.requirement:
            where.append(f"requirement {self.requirement!r}")
        if not where:
            return self.message
        return f"{', '.join(where)}: {self.message}"

    def with_context(
        self,
        interface: Optional[str] = None,
        requirement: Optional[str] = None,
    ) -> "WitnessError":
        """Return a copy of this error with missing context filled in."""
        return type(self)(
            self.message,
            interface=self.interface or interface,
            requirement=self.requirement or requirement,
        )


class SchemaError(WitnessError):
    """Raised when a schema or one of its type expressions cannot be walked."""

    pass


class UnsupportedRequirementError(WitnessError):
    """Raised when the emitter has no rule for a requirement's shape."""

    pass
