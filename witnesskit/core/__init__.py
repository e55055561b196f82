# witnesskit/core/__init__.py
"""
Core model: type expressions, interface schemas, errors and settings.
"""

from witnesskit.core.config import (
    DEFAULT_SETTINGS,
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    GeneratorSettings,
    load_settings,
    load_yaml,
)
from witnesskit.core.exceptions import SchemaError, UnsupportedRequirementError, WitnessError
from witnesskit.core.schema import (
    AccessLevel,
    AssociatedType,
    GenerationOption,
    InterfaceSchema,
    MethodRequirement,
    Parameter,
    PropertyRequirement,
    Requirement,
)
from witnesskit.core.types import (
    SELF,
    VOID,
    FunctionType,
    GenericType,
    OptionalType,
    TupleType,
    TypeExpr,
    TypeIdentifier,
)

__all__ = [
    # Types
    "TypeExpr",
    "TypeIdentifier",
    "GenericType",
    "FunctionType",
    "TupleType",
    "OptionalType",
    "SELF",
    "VOID",
    # Schema
    "AccessLevel",
    "GenerationOption",
    "Parameter",
    "MethodRequirement",
    "PropertyRequirement",
    "Requirement",
    "AssociatedType",
    "InterfaceSchema",
    # Errors
    "WitnessError",
    "SchemaError",
    "UnsupportedRequirementError",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    # Settings
    "GeneratorSettings",
    "DEFAULT_SETTINGS",
    "load_settings",
    "load_yaml",
]
