# witnesskit/schema/loader.py
"""
Interface document loader.

Loads YAML interface documents, validates them with the pydantic models in
witnesskit.schema.spec and builds InterfaceSchema values:

    schemas = load_schema_file("examples/witnesses.yaml")

Associated-type constraints naming another interface of the same document
link to that interface's schema (a witnessed constraint); any other name is
kept for documentation only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Union

from pydantic import ValidationError

from witnesskit.core.config import ConfigValidationError, format_validation_errors, load_yaml
from witnesskit.core.exceptions import SchemaError, WitnessError
from witnesskit.core.schema import (
    AccessLevel,
    AssociatedType,
    GenerationOption,
    InterfaceSchema,
    MethodRequirement,
    Parameter,
    PropertyRequirement,
    Requirement,
    check_unique_names,
)
from witnesskit.logging import tags
from witnesskit.logging.logger import get_logger
from witnesskit.schema.spec import InterfaceDoc, RequirementDoc, SchemaDocument
from witnesskit.schema.type_parser import parse_type

logger = get_logger(__name__)


class SchemaDocumentError(ConfigValidationError):
    """Interface document failed validation."""

    def __init__(self, errors: List[dict], path: Optional[Path] = None):
        self.errors = errors
        super().__init__(
            "Invalid interface document:\n" + format_validation_errors(errors),
            path=path,
        )


# =============================================================================
# Building
# =============================================================================


def _requirement(doc: RequirementDoc) -> Requirement:
    if doc.kind == "property":
        return PropertyRequirement(name=doc.name, type=parse_type(doc.type), is_static=doc.static)

    return MethodRequirement(
        name=doc.name,
        parameters=tuple(
            Parameter(type=parse_type(p.type), label=p.label, name=p.name) for p in doc.params
        ),
        return_type=parse_type(doc.returns) if doc.returns is not None else None,
        is_static=doc.static,
        is_mutating=doc.mutating,
        generic_parameters=tuple(doc.generics),
    )


class _Builder:
    """
    Builds schemas in dependency order, constraints first.

    A failing interface is recorded in ``errors`` and never stops the others;
    interfaces constrained by it fail with it.
    """

    def __init__(self, docs: List[InterfaceDoc]):
        self.docs = {doc.name: doc for doc in docs}
        self.built: Dict[str, InterfaceSchema] = {}
        self.errors: Dict[str, WitnessError] = {}
        self.visiting: Set[str] = set()

    def build(self, name: str) -> InterfaceSchema:
        if name in self.built:
            return self.built[name]
        if name in self.errors:
            raise self.errors[name]
        if name in self.visiting:
            raise SchemaError("associated type constraints form a cycle", interface=name)

        self.visiting.add(name)
        try:
            schema = self._build(self.docs[name])
        except WitnessError as e:
            self.errors[name] = e
            raise
        finally:
            self.visiting.discard(name)

        self.built[name] = schema
        return schema

    def _build(self, doc: InterfaceDoc) -> InterfaceSchema:
        associated = []
        for a in doc.associated_types:
            constraint = None
            if a.constraint in self.docs:
                try:
                    constraint = self.build(a.constraint)
                except WitnessError as e:
                    if e.interface == doc.name:
                        raise
                    raise SchemaError(
                        f"constraint {a.constraint!r} of associated type {a.name!r} failed: {e.message}",
                        interface=doc.name,
                    ) from e
            associated.append(
                AssociatedType(name=a.name, constraint=constraint, constraint_name=a.constraint)
            )

        requirements = []
        for r in doc.requirements:
            try:
                requirements.append(_requirement(r))
            except WitnessError as e:
                raise e.with_context(interface=doc.name, requirement=r.name) from e

        try:
            return InterfaceSchema(
                name=doc.name,
                requirements=tuple(requirements),
                associated_types=tuple(associated),
                access_level=AccessLevel.resolve(AccessLevel(level) for level in doc.access),
                options=GenerationOption.parse(doc.options),
            )
        except WitnessError as e:
            raise e.with_context(interface=doc.name) from e


@dataclass
class LoadedDocument:
    """
    Schemas built from a document, plus the interfaces that failed.

    ``errors`` maps interface name to the error that stopped it, in
    document order.
    """

    schemas: List[InterfaceSchema] = field(default_factory=list)
    errors: Dict[str, WitnessError] = field(default_factory=dict)
    path: Optional[Path] = None

    @property
    def success(self) -> bool:
        return not self.errors


def load_document(data: Dict[str, Any], path: Optional[Path] = None) -> LoadedDocument:
    """
    Build every interface of an already-parsed document that can be built.

    Raises:
        SchemaDocumentError: The document does not match the format
        SchemaError: Two interfaces share a name
    """
    try:
        document = SchemaDocument.model_validate(data)
    except ValidationError as e:
        raise SchemaDocumentError(e.errors(), path=path) from e

    check_unique_names(document.interfaces)

    builder = _Builder(document.interfaces)
    loaded = LoadedDocument(path=path)
    for doc in document.interfaces:
        try:
            loaded.schemas.append(builder.build(doc.name))
        except WitnessError as e:
            loaded.errors[doc.name] = e.with_context(interface=doc.name)
            logger.warning(f"{tags.SCHEMA} Skipping {doc.name}: {e}")

    logger.debug(
        f"{tags.SCHEMA} Loaded {len(loaded.schemas)} interface(s), {len(loaded.errors)} failed"
        f"{f' from {path}' if path else ''}"
    )
    return loaded


def load_document_file(path: Union[str, Path]) -> LoadedDocument:
    """
    Load a YAML document, keeping going past interfaces that fail to build.

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigParseError: If YAML is invalid
        SchemaDocumentError: If the document doesn't match the format
    """
    path = Path(path)
    return load_document(load_yaml(path), path=path)


def load_schemas(data: Dict[str, Any], path: Optional[Path] = None) -> List[InterfaceSchema]:
    """
    Build schemas from an already-parsed interface document.

    Returns schemas in document order. Unlike load_document, the first
    failing interface aborts the load.

    Raises:
        SchemaDocumentError: The document does not match the format
        SchemaError: Bad type expression, duplicate name or constraint cycle
    """
    loaded = load_document(data, path=path)
    if loaded.errors:
        raise next(iter(loaded.errors.values()))
    return loaded.schemas


def load_schema_file(path: Union[str, Path]) -> List[InterfaceSchema]:
    """
    Load every interface of a YAML document.

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigParseError: If YAML is invalid
        SchemaDocumentError: If the document doesn't match the format
        SchemaError: If a type expression or constraint is invalid
    """
    path = Path(path)
    return load_schemas(load_yaml(path), path=path)
