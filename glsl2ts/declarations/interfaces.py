"""
Interface assembly for the declaration generator.

This module wraps written variable lines into TypeScript interface blocks and
builds one interface per struct definition.
"""

from collections.abc import Sequence

from loguru import logger

from glsl2ts.declarations.errors import EmptyInterfaceMembers
from glsl2ts.declarations.models import GLSLVariable
from glsl2ts.declarations.writer import write_variable


def capitalize(word: str) -> str:
    """Upper-case the first character of a word, leaving the rest untouched.

    Unlike str.capitalize, the remainder keeps its case ("myStruct" becomes
    "MyStruct", not "Mystruct").
    """
    if not word:
        return word
    return word[0].upper() + word[1:]


def write_interface(
    name: str,
    variables: Sequence[GLSLVariable] | None,
    is_export: bool = False,
    diagnostics: list[EmptyInterfaceMembers] | None = None,
) -> str:
    """Write an interface declaring every variable as a member.

    Args:
        name: Interface name
        variables: Variables to declare, in order
        is_export: Whether to prefix the interface with "export"
        diagnostics: Optional list collecting non-fatal diagnostics

    Returns:
        The interface text, or an empty string when there are no variables
    """
    if not variables:
        diagnostic = EmptyInterfaceMembers(name)
        logger.warning(diagnostic.message)
        if diagnostics is not None:
            diagnostics.append(diagnostic)
        return ""

    members = "\n\t".join(write_variable(variable) for variable in variables)
    export = "export " if is_export else ""
    logger.debug(f"Writing interface {name} with {len(variables)} members")
    return f"\n{export}interface {name} {{\n\t{members}\n}}"


def write_struct_interfaces(
    structs: Sequence[GLSLVariable],
    diagnostics: list[EmptyInterfaceMembers] | None = None,
) -> str:
    """Write one non-exported interface per struct definition, in input order."""
    return "\n".join(
        write_interface(capitalize(struct.name), struct.block, diagnostics=diagnostics)
        for struct in structs
    )
