"""TypeScript code generation module for mysql-dto-cli.

This module renders DTO interfaces for tables, one module per schema, plus
the shared ``_types`` module.
"""

from .emitter import Module, Section, DocBlock, InterfaceDecl, FieldDecl, TypeAlias
from .generator import (
    ColumnRenderer,
    ModelEmitter,
    SchemaEmitter,
    DtoGenerator,
    GenerationStats,
    COMMON_TYPES_NAME,
)

__all__ = [
    "Module",
    "Section",
    "DocBlock",
    "InterfaceDecl",
    "FieldDecl",
    "TypeAlias",
    "ColumnRenderer",
    "ModelEmitter",
    "SchemaEmitter",
    "DtoGenerator",
    "GenerationStats",
    "COMMON_TYPES_NAME",
]
