"""
TypeScript declaration generation for GLSL shader variables.

This module provides the top-level interface for turning parsed shader
variables into a namespace of TypeScript interfaces.
"""

from glsl2ts.declarations.errors import (
    DeclarationError,
    EmptyBlockError,
    EmptyInterfaceMembers,
    MissingStructAliasError,
)
from glsl2ts.declarations.generator import (
    GenerateOptions,
    GenerationResult,
    declarations_from_variables,
    generate,
    generate_declarations,
)
from glsl2ts.declarations.glsl_types import GLSL_TYPES, GLSL_TYPES_DECLARATION
from glsl2ts.declarations.interfaces import (
    capitalize,
    write_interface,
    write_struct_interfaces,
)
from glsl2ts.declarations.models import GLSLVariable, Qualifier
from glsl2ts.declarations.writer import write_type, write_variable

__all__ = [
    "DeclarationError",
    "EmptyBlockError",
    "EmptyInterfaceMembers",
    "GLSLVariable",
    "GLSL_TYPES",
    "GLSL_TYPES_DECLARATION",
    "GenerateOptions",
    "GenerationResult",
    "MissingStructAliasError",
    "Qualifier",
    "capitalize",
    "declarations_from_variables",
    "generate",
    "generate_declarations",
    "write_interface",
    "write_struct_interfaces",
    "write_type",
    "write_variable",
]
