"""Declaration writer: turns one GLSL variable into a TypeScript member line."""

from glsl2ts.declarations.models import (
    BlockType,
    GLSLVariable,
    ScalarType,
    StructType,
)

# Arrays up to this length are written as fixed-size tuples
MAX_TUPLE_LENGTH = 4


def _array_type(type_name: str, amount: int) -> str:
    """Apply array shaping to an already written type."""
    if amount <= 1:
        return type_name
    if amount <= MAX_TUPLE_LENGTH:
        return f"[{','.join([type_name] * amount)}]"
    return f"{type_name}[]"


def write_type(variable: GLSLVariable) -> str:
    """Write the TypeScript type of a variable, including array shaping.

    Args:
        variable: Variable descriptor to write

    Returns:
        The type expression, e.g. "vec4", "[vec4,vec4]" or "{ a: float; }[]"

    Raises:
        MissingStructAliasError: If a struct-typed variable has no struct name
        EmptyBlockError: If a block-typed variable has no members
    """
    match variable.variable_type():
        case StructType(alias):
            type_name = alias
        case BlockType(members):
            type_name = f"{{ {' '.join(write_variable(m) for m in members)} }}"
        case ScalarType(name):
            type_name = name

    return _array_type(type_name, variable.amount)


def write_variable(variable: GLSLVariable) -> str:
    """Write a variable as an interface member line, e.g. "uv: vec2;"."""
    return f"{variable.name}: {write_type(variable)};"
