"""
TypeScript declaration generator.

Sequences struct interfaces, the inputs and outputs interfaces, the aggregate
interface, the optional parse result dump and the optional GLSL type aliases,
and wraps everything in a namespace.
"""

import dataclasses
import json
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from glsl2ts.declarations.errors import DeclarationError, EmptyInterfaceMembers
from glsl2ts.declarations.glsl_types import GLSL_TYPES_DECLARATION
from glsl2ts.declarations.interfaces import write_interface, write_struct_interfaces
from glsl2ts.declarations.models import (
    GLSLVariable,
    is_input_variable,
    is_output_variable,
    is_struct_definition,
)
from glsl2ts.parser import parse


@dataclass(frozen=True)
class GenerateOptions:
    """Options controlling what the generator emits.

    Attributes:
        generate_parse_result: Dump the parsed variables as an exported const
        generate_glsl_types: Append the GLSL type aliases
        inputs_interface_name: Name of the exported inputs interface
        outputs_interface_name: Name of the exported outputs interface
        interface_name: Name of the aggregate interface extending both
    """

    generate_parse_result: bool = True
    generate_glsl_types: bool = True
    inputs_interface_name: str = "Inputs"
    outputs_interface_name: str = "Outputs"
    interface_name: str = "Variables"

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "GenerateOptions":
        """Build options from a mapping, accepting snake_case or camelCase keys.

        Raises:
            TypeError: If a key does not name an option
        """
        known = {f.name for f in dataclasses.fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in values.items():
            name = _snake_case(key)
            if name not in known:
                raise TypeError(f"Unknown generator option: {key}")
            kwargs[name] = value
        return cls(**kwargs)


@dataclass
class GenerationResult:
    """Result of declaration generation.

    Attributes:
        text: The generated namespace declaration
        variables: Variables the declaration was generated from
        diagnostics: Non-fatal issues found while generating
    """

    text: str
    variables: list[GLSLVariable]
    diagnostics: list[EmptyInterfaceMembers] = field(default_factory=list)


def _snake_case(name: str) -> str:
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name).lower()


def _resolve_options(
    options: GenerateOptions | None, overrides: dict[str, Any]
) -> GenerateOptions:
    options = options or GenerateOptions()
    if overrides:
        options = dataclasses.replace(options, **overrides)
    return options


def declarations_from_variables(
    variables: Sequence[GLSLVariable],
    namespace: str,
    options: GenerateOptions | None = None,
    **overrides: Any,
) -> GenerationResult:
    """Generate the namespace declaration for already parsed variables.

    Args:
        variables: Variables declared by the shader, in declaration order
        namespace: Name of the wrapping namespace
        options: Generator options, defaults to GenerateOptions()
        **overrides: Individual options replacing those in `options`

    Returns:
        GenerationResult with the declaration text and diagnostics

    Raises:
        DeclarationError: If a variable descriptor is malformed
        TypeError: If an override does not name an option
    """
    options = _resolve_options(options, overrides)
    diagnostics: list[EmptyInterfaceMembers] = []
    variables = list(variables)

    try:
        structs = [v for v in variables if is_struct_definition(v)]
        logger.debug(f"Generating {len(structs)} struct interfaces")
        result = write_struct_interfaces(structs, diagnostics)

        inputs = [v for v in variables if is_input_variable(v)]
        result += write_interface(
            options.inputs_interface_name, inputs, True, diagnostics
        )

        outputs = [v for v in variables if is_output_variable(v)]
        result += write_interface(
            options.outputs_interface_name, outputs, True, diagnostics
        )
    except DeclarationError as e:
        logger.error(f"Cannot generate declarations for {namespace}: {e}")
        raise

    io_vars = f"{options.inputs_interface_name},{options.outputs_interface_name}"
    result += f"\nexport interface {options.interface_name} extends {io_vars} {{}}"

    if options.generate_parse_result:
        parse_result = json.dumps(
            [v.to_dict() for v in variables],
            separators=(",", ":"),
            ensure_ascii=False,
        )
        result += f"\nexport const vars = {parse_result};\n"

    if options.generate_glsl_types:
        result += GLSL_TYPES_DECLARATION

    return GenerationResult(
        text=f"\nnamespace {namespace} {{\n{result}\n}}",
        variables=variables,
        diagnostics=diagnostics,
    )


def generate_declarations(
    code: str,
    namespace: str,
    options: GenerateOptions | None = None,
    **overrides: Any,
) -> GenerationResult:
    """Parse shader code and generate its namespace declaration.

    Raises:
        GLSLParseError: If the shader code cannot be parsed
        DeclarationError: If a parsed variable is malformed
    """
    options = _resolve_options(options, overrides)
    variables = parse(code)
    logger.debug(f"Parsed {len(variables)} variables for namespace {namespace}")
    return declarations_from_variables(variables, namespace, options)


def generate(
    code: str,
    namespace: str,
    options: GenerateOptions | None = None,
    **overrides: Any,
) -> str:
    """Generate the TypeScript declarations for a shader.

    This is the main entry point of the generator. It produces a string with
    all the interfaces for the provided shader code.

    Args:
        code: GLSL shader source
        namespace: Name of the wrapping namespace
        options: Generator options, defaults to GenerateOptions()
        **overrides: Individual options replacing those in `options`

    Returns:
        The namespace declaration text
    """
    return generate_declarations(code, namespace, options, **overrides).text
