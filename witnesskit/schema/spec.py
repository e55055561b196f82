# witnesskit/schema/spec.py
"""
Pydantic models for interface documents.

These models validate YAML interface documents before any schema is built,
catching typos and missing fields early.

Document format:
    interfaces:
      - name: Comparable
        access: public
        options: [utilities]
        associated_types:
          - name: Format
            constraint: Diffable
        requirements:
          - kind: method
            name: compare
            params:
              - {label: _, name: other, type: Self}
            returns: Bool
          - kind: property
            name: pathExtension
            type: String
            static: true

A parameter may also be written as a bare type string.
"""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ParameterDoc(BaseModel):
    """One method parameter."""

    model_config = ConfigDict(extra="forbid")

    type: str = Field(..., description="Type expression, e.g. 'Self' or '[String: Self]'")
    label: str = Field(default="_", description="External argument label, '_' for none")
    name: Optional[str] = Field(default=None, description="Internal parameter name")


class RequirementDoc(BaseModel):
    """A method or property requirement."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["method", "property"] = "method"
    name: str = Field(..., min_length=1)
    params: List[ParameterDoc] = Field(default_factory=list)
    returns: Optional[str] = Field(default=None, description="Return type, omitted for Void")
    type: Optional[str] = Field(default=None, description="Property type")
    static: bool = False
    mutating: bool = False
    generics: List[str] = Field(default_factory=list, description="Method-level generic parameters")

    @field_validator("params", mode="before")
    @classmethod
    def expand_shorthand(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [{"type": item} if isinstance(item, str) else item for item in v]
        return v

    @model_validator(mode="after")
    def validate_kind_fields(self) -> "RequirementDoc":
        if self.kind == "property":
            if self.type is None:
                raise ValueError("property requirements need a 'type'")
            if self.params or self.returns is not None or self.mutating or self.generics:
                raise ValueError("property requirements take only 'name', 'type' and 'static'")
        elif self.type is not None:
            raise ValueError("method requirements use 'returns', not 'type'")
        return self


class AssociatedTypeDoc(BaseModel):
    """An associated type, optionally constrained by another interface."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    constraint: Optional[str] = None


class InterfaceDoc(BaseModel):
    """One interface to generate a witness for."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    access: List[str] = Field(default_factory=lambda: ["default"])
    options: List[str] = Field(default_factory=list)
    associated_types: List[AssociatedTypeDoc] = Field(default_factory=list)
    requirements: List[RequirementDoc] = Field(default_factory=list)

    @field_validator("access", mode="before")
    @classmethod
    def validate_access(cls, v: Any) -> Any:
        from witnesskit.core.schema import AccessLevel

        levels = [v] if isinstance(v, str) else v
        if not isinstance(levels, list):
            return levels
        allowed = {level.value for level in AccessLevel}
        for level in levels:
            if not isinstance(level, str) or level not in allowed:
                raise ValueError(f"access must be one of {sorted(allowed)}, got {level!r}")
        return levels


class SchemaDocument(BaseModel):
    """Top-level interface document."""

    model_config = ConfigDict(extra="forbid")

    interfaces: List[InterfaceDoc] = Field(default_factory=list)
