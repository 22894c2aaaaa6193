"""
Data models for GLSL variable descriptors.

This module contains the dataclass definitions shared by the parser and the
declaration writer: the variable descriptor itself, the storage qualifier that
decides which interface a variable belongs to, and the tagged form of a
variable's type.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from glsl2ts.declarations.errors import EmptyBlockError, MissingStructAliasError

STRUCT_TYPE = "struct"
BLOCK_TYPE = "block"


class Qualifier(str, Enum):
    """Storage qualifier of a GLSL variable, used to partition variables."""

    IN = "in"
    OUT = "out"
    UNIFORM = "uniform"
    STRUCT = "struct"


@dataclass(frozen=True)
class ScalarType:
    """A base scalar, vector, matrix or sampler type, referenced by name."""

    name: str


@dataclass(frozen=True)
class StructType:
    """A reference to a named struct type."""

    alias: str


@dataclass(frozen=True)
class BlockType:
    """An inline aggregate of named fields (uniform block body)."""

    members: tuple["GLSLVariable", ...]


VariableType = ScalarType | StructType | BlockType


@dataclass(frozen=True)
class GLSLVariable:
    """A single variable declared by a shader.

    Attributes:
        name: Variable, block or struct name
        type: Base type name, "struct" or "block"
        qualifier: Storage qualifier or None for unqualified globals
        amount: Array length, 1 means "not an array"
        struct_name: Struct type referenced when type is "struct"
        block: Nested members of a uniform block or struct definition
    """

    name: str
    type: str
    qualifier: Qualifier | None = None
    amount: int = 1
    struct_name: str | None = None
    block: tuple["GLSLVariable", ...] | None = field(default=None)

    def __post_init__(self) -> None:
        if self.amount < 1:
            raise ValueError(
                f"Array length of variable {self.name} must be at least 1, "
                f"got {self.amount}"
            )
        if self.block is not None and not isinstance(self.block, tuple):
            object.__setattr__(self, "block", tuple(self.block))

    @property
    def is_array(self) -> bool:
        return self.amount > 1

    def variable_type(self) -> VariableType:
        """Convert the raw type tag into its tagged form.

        Returns:
            ScalarType, StructType or BlockType for this variable

        Raises:
            MissingStructAliasError: If a struct-typed variable has no struct name
            EmptyBlockError: If a block-typed variable has no members
        """
        if self.type == STRUCT_TYPE:
            if not self.struct_name:
                raise MissingStructAliasError(
                    "Cannot find struct name for variable", self
                )
            return StructType(self.struct_name)
        if self.type == BLOCK_TYPE:
            if not self.block:
                raise EmptyBlockError("No block members for variable", self)
            return BlockType(self.block)
        return ScalarType(self.type)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the variable with the camelCase keys of the vars dump."""
        data: dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "qualifier": self.qualifier.value if self.qualifier else None,
            "amount": self.amount,
        }
        if self.struct_name is not None:
            data["structName"] = self.struct_name
        if self.block is not None:
            data["block"] = [member.to_dict() for member in self.block]
        return data


def is_input_variable(variable: GLSLVariable) -> bool:
    return variable.qualifier in (Qualifier.IN, Qualifier.UNIFORM)


def is_output_variable(variable: GLSLVariable) -> bool:
    return variable.qualifier is Qualifier.OUT


def is_struct_definition(variable: GLSLVariable) -> bool:
    return variable.qualifier is Qualifier.STRUCT
