"""
Exceptions and diagnostics for the declaration generator.

Malformed variable descriptors raise a DeclarationError subclass and abort the
whole generation call. Interfaces without members are not errors: they are
reported as EmptyInterfaceMembers diagnostics next to the generated text.
"""

from dataclasses import dataclass
from typing import Any


class DeclarationError(Exception):
    """Exception raised when a variable cannot be written as a declaration.

    The offending variable is kept on the exception so callers can report
    which declaration broke the generation.

    Examples:
        >>> raise DeclarationError("No block members for variable")
        DeclarationError: No block members for variable
    """

    def __init__(self, message: str, variable: Any | None = None):
        """Initialize the exception with a message and optional variable.

        Args:
            message: The error message
            variable: The variable descriptor that caused the error
        """
        self.message = message
        self.variable = variable

        location_info = ""
        if variable is not None and getattr(variable, "name", None):
            location_info = f": {variable.name}"

        super().__init__(f"{message}{location_info}")


class MissingStructAliasError(DeclarationError):
    """A struct-typed variable does not name the struct it references."""


class EmptyBlockError(DeclarationError):
    """A block-typed variable has no members."""


@dataclass(frozen=True)
class EmptyInterfaceMembers:
    """Diagnostic emitted when an interface has no variables to declare."""

    interface_name: str

    @property
    def message(self) -> str:
        return f"The interface {self.interface_name} has no variables set"

    def __str__(self) -> str:
        return self.message
