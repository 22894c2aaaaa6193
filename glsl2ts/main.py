"""Command line interface for glsl2ts.

This module provides a command-line interface for generating TypeScript
declarations from GLSL shader files, either once or whenever the shaders change.
"""

import dataclasses
import os
import re
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional, TypeVar, cast

import arrow
import typer
import watchdog.events
import watchdog.observers
import yaml
from loguru import logger
from watchdog.events import FileSystemEventHandler

from glsl2ts import __version__
from glsl2ts.declarations import (
    DeclarationError,
    GenerateOptions,
    declarations_from_variables,
)
from glsl2ts.parser import GLSLParseError, parse

# Define type variables for TypedCallable
F = TypeVar("F", bound=Callable[..., Any])


# TypedCommand decorator helper
def typed_command(app_command: Any) -> Callable[[F], F]:
    """Wrap typer command with proper typing for mypy."""

    def decorator(func: F) -> F:
        return cast(F, app_command(func))

    return decorator


app = typer.Typer(
    name="glsl2ts",
    help=(
        "Generate TypeScript declarations for GLSL shader variables. "
        "Commands: export, watch."
    ),
    add_completion=False,
)


def namespace_for(shader_file: Path) -> str:
    """Derive a PascalCase namespace from a shader file name.

    Example: "basic-shader.frag" becomes "BasicShader".
    """
    stem = shader_file.name.split(".")[0]
    parts = [part for part in re.split(r"[^0-9A-Za-z]+", stem) if part]
    namespace = "".join(part[0].upper() + part[1:] for part in parts)
    if not namespace or namespace[0].isdigit():
        namespace = f"Shader{namespace}"
    return namespace


def load_options(
    config_file: Path | None = None, **overrides: Any
) -> GenerateOptions:
    """Load generator options from an optional YAML file and CLI overrides.

    Args:
        config_file: YAML file whose top-level keys are option names
        **overrides: Options given on the command line, None means "not given"

    Returns:
        The resolved generator options
    """
    options = GenerateOptions()
    if config_file is not None:
        with open(config_file) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_file} must contain a mapping")
        options = GenerateOptions.from_mapping(data)
        logger.info(f"Loaded generator options from {config_file}")

    given = {name: value for name, value in overrides.items() if value is not None}
    return dataclasses.replace(options, **given)


def generate_files(
    shader_files: list[Path],
    options: GenerateOptions,
    namespace: str | None = None,
) -> str:
    """Generate declarations for several shaders into one text.

    The GLSL type aliases are emitted at most once, in the first namespace.

    Raises:
        OSError: If a shader file cannot be read
        GLSLParseError: If a shader cannot be parsed
        DeclarationError: If a shader declares a malformed variable
    """
    if namespace and len(shader_files) > 1:
        raise ValueError("A namespace can only be given for a single shader")

    chunks = []
    for index, shader_file in enumerate(shader_files):
        file_options = options
        if index > 0:
            file_options = dataclasses.replace(options, generate_glsl_types=False)

        logger.info(f"Generating declarations for {shader_file}")
        code = Path(shader_file).read_text()
        result = declarations_from_variables(
            parse(code), namespace or namespace_for(shader_file), file_options
        )
        for diagnostic in result.diagnostics:
            logger.warning(f"{os.path.basename(shader_file)}: {diagnostic}")
        chunks.append(result.text)

    return "".join(chunks)


def _add_header_comments(code: str, shader_files: list[Path]) -> str:
    """Add header comments to the generated declarations.

    Args:
        code: Generated declarations
        shader_files: Source shader files

    Returns:
        Code with header comments
    """
    timestamp = arrow.utcnow().format("YYYY-MM-DD HH:mm:ss UTC")
    header = f"// Generated by glsl2ts v{__version__}\n"
    header += f"// Generation time: {timestamp}\n"
    sources = ", ".join(os.path.basename(str(f)) for f in shader_files)
    header += f"// Source files: {sources}\n"
    return header + code


def _format_declarations(
    code: str, format_type: str, shader_files: list[Path]
) -> str:
    """Format generated declarations for export (plain or commented)."""
    if format_type == "commented":
        return _add_header_comments(code, shader_files)
    if format_type != "plain":
        logger.warning(f"Unknown format: {format_type}. Using plain.")
    return code


def _render(
    shader_files: list[Path],
    options: GenerateOptions,
    namespace: str | None,
    format_type: str,
) -> str:
    code = generate_files(shader_files, options, namespace)
    return _format_declarations(code, format_type, shader_files)


def _resolve_cli_options(config: Path | None, **overrides: Any) -> GenerateOptions:
    try:
        return load_options(config, **overrides)
    except (OSError, yaml.YAMLError, ValueError, TypeError) as e:
        logger.error(f"Invalid configuration: {e}")
        raise typer.Exit(1) from e


# Define reusable arguments and options to avoid B008 warnings
SHADER_FILES_ARG = typer.Argument(..., help="GLSL shader files")
NAMESPACE_OPT = typer.Option(
    None, "--namespace", "-n", help="Namespace name (defaults to the file name)"
)
PARSE_RESULT_OPT = typer.Option(
    None,
    "--parse-result/--no-parse-result",
    help="Dump the parsed variables as an exported const",
)
GLSL_TYPES_OPT = typer.Option(
    None, "--glsl-types/--no-glsl-types", help="Append the GLSL type aliases"
)
INPUTS_NAME_OPT = typer.Option(
    None, "--inputs-name", help="Name of the inputs interface"
)
OUTPUTS_NAME_OPT = typer.Option(
    None, "--outputs-name", help="Name of the outputs interface"
)
INTERFACE_NAME_OPT = typer.Option(
    None, "--interface-name", help="Name of the interface extending both"
)
FORMAT_OPT = typer.Option(
    "plain", "--format", "-f", help="Output format (plain, commented)"
)
CONFIG_OPT = typer.Option(None, "--config", "-c", help="YAML file with options")
OUTPUT_OPT = typer.Option(
    None, "--output", "-o", help="Output file path (stdout if omitted)"
)


@typed_command(app.command("export"))
def export_declarations(
    shader_files: list[Path] = SHADER_FILES_ARG,
    output: Optional[Path] = OUTPUT_OPT,
    namespace: Optional[str] = NAMESPACE_OPT,
    parse_result: Optional[bool] = PARSE_RESULT_OPT,
    glsl_types: Optional[bool] = GLSL_TYPES_OPT,
    inputs_name: Optional[str] = INPUTS_NAME_OPT,
    outputs_name: Optional[str] = OUTPUTS_NAME_OPT,
    interface_name: Optional[str] = INTERFACE_NAME_OPT,
    format: str = FORMAT_OPT,
    config: Optional[Path] = CONFIG_OPT,
) -> None:
    """Export TypeScript declarations for GLSL shaders.

    Each shader becomes one namespace. Several shaders can be combined into a
    single output file.

    Example: glsl2ts export shaders/basic.frag -o basic.d.ts
    """
    options = _resolve_cli_options(
        config,
        generate_parse_result=parse_result,
        generate_glsl_types=glsl_types,
        inputs_interface_name=inputs_name,
        outputs_interface_name=outputs_name,
        interface_name=interface_name,
    )

    try:
        code = _render(shader_files, options, namespace, format)
    except (OSError, ValueError) as e:
        logger.error(f"Cannot generate declarations: {e}")
        raise typer.Exit(1) from e
    except GLSLParseError as e:
        logger.error(f"Parse error: {e}")
        raise typer.Exit(1) from e
    except DeclarationError as e:
        logger.error(f"Declaration error: {e}")
        raise typer.Exit(1) from e

    if output is None:
        typer.echo(code)
        return

    logger.info(f"Exporting declarations to {output}...")
    with open(output, "w") as f:
        f.write(code)
    logger.info(f"Declarations exported to {output}")


class DeclarationsWatcher(FileSystemEventHandler):
    """Regenerates declarations when one of the watched shaders changes."""

    def __init__(
        self,
        shader_files: list[Path],
        output: Path,
        options: GenerateOptions,
        namespace: str | None = None,
        format_type: str = "plain",
    ):
        self.shader_files = [Path(f) for f in shader_files]
        self.watched = {f.resolve() for f in self.shader_files}
        self.output = output
        self.options = options
        self.namespace = namespace
        self.format_type = format_type

    def on_modified(self, event: watchdog.events.FileSystemEvent) -> None:
        """Handle file modification events."""
        if event.is_directory:
            return
        if Path(os.fsdecode(event.src_path)).resolve() in self.watched:
            logger.info(f"Detected changes in {event.src_path}")
            self.regenerate()

    def regenerate(self) -> bool:
        """Regenerate the output file, keeping the previous one on errors."""
        try:
            code = _render(
                self.shader_files, self.options, self.namespace, self.format_type
            )
        except (OSError, ValueError, GLSLParseError, DeclarationError) as e:
            logger.error(f"Error regenerating declarations: {e}")
            return False

        with open(self.output, "w") as f:
            f.write(code)
        logger.info(f"Declarations written to {self.output}")
        return True


WATCH_OUTPUT_OPT = typer.Option(..., "--output", "-o", help="Output file path")


@typed_command(app.command("watch"))
def watch_declarations(
    shader_files: list[Path] = SHADER_FILES_ARG,
    output: Path = WATCH_OUTPUT_OPT,
    namespace: Optional[str] = NAMESPACE_OPT,
    parse_result: Optional[bool] = PARSE_RESULT_OPT,
    glsl_types: Optional[bool] = GLSL_TYPES_OPT,
    inputs_name: Optional[str] = INPUTS_NAME_OPT,
    outputs_name: Optional[str] = OUTPUTS_NAME_OPT,
    interface_name: Optional[str] = INTERFACE_NAME_OPT,
    format: str = FORMAT_OPT,
    config: Optional[Path] = CONFIG_OPT,
) -> None:
    """Regenerate declarations whenever the shaders change.

    Example: glsl2ts watch shaders/basic.frag -o basic.d.ts
    """
    options = _resolve_cli_options(
        config,
        generate_parse_result=parse_result,
        generate_glsl_types=glsl_types,
        inputs_interface_name=inputs_name,
        outputs_interface_name=outputs_name,
        interface_name=interface_name,
    )
    handler = DeclarationsWatcher(shader_files, output, options, namespace, format)
    handler.regenerate()

    observer = watchdog.observers.Observer()
    for directory in {f.resolve().parent for f in handler.shader_files}:
        observer.schedule(handler, str(directory), recursive=False)
    observer.start()
    logger.info(f"Watching {len(handler.shader_files)} shaders (Ctrl+C to stop)...")

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received, stopping...")
    finally:
        observer.stop()
        observer.join()


if __name__ == "__main__":
    app()
