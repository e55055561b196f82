# witnesskit/schema/__init__.py
"""
Interface documents: YAML files describing interfaces to witness.

Usage:
    from witnesskit.schema import load_schema_file

    schemas = load_schema_file("examples/witnesses.yaml")
"""

from witnesskit.schema.loader import (
    LoadedDocument,
    SchemaDocumentError,
    load_document,
    load_document_file,
    load_schema_file,
    load_schemas,
)
from witnesskit.schema.type_parser import parse_type

__all__ = [
    "LoadedDocument",
    "SchemaDocumentError",
    "load_document",
    "load_document_file",
    "load_schema_file",
    "load_schemas",
    "parse_type",
]
