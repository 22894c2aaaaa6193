"""
TypeScript aliases for the GLSL basic types.

The list of basic types is taken from Section 4.1 of the GLSL ES 3.00
specification. Each entry maps a GLSL type name to its TypeScript
representation and a short description used as a doc comment.
"""

from collections.abc import Mapping
from types import MappingProxyType

GLSL_TYPES_VERSION = "3.00 es"

GLSL_TYPES: Mapping[str, tuple[str, str]] = MappingProxyType({
    # Scalars
    "bool": ("boolean", "A conditional type, taking on values of true or false"),
    "int": ("number", "A signed integer"),
    "uint": ("number", "An unsigned integer"),
    "float": ("number", "A single floating-point scalar"),
    # Vectors
    "vec2": ("[number, number]", "A two-component floating-point vector"),
    "vec3": ("[number, number, number]", "A three-component floating-point vector"),
    "vec4": (
        "[number, number, number, number]",
        "A four-component floating-point vector",
    ),
    "bvec2": ("[boolean, boolean]", "A two-component Boolean vector"),
    "bvec3": ("[boolean, boolean, boolean]", "A three-component Boolean vector"),
    "bvec4": (
        "[boolean, boolean, boolean, boolean]",
        "A four-component Boolean vector",
    ),
    "ivec2": ("[number, number]", "A two-component signed integer vector"),
    "ivec3": ("[number, number, number]", "A three-component signed integer vector"),
    "ivec4": (
        "[number, number, number, number]",
        "A four-component signed integer vector",
    ),
    "uvec2": ("[number, number]", "A two-component unsigned integer vector"),
    "uvec3": (
        "[number, number, number]",
        "A three-component unsigned integer vector",
    ),
    "uvec4": (
        "[number, number, number, number]",
        "A four-component unsigned integer vector",
    ),
    # Matrices
    "mat2": ("number[]", "A 2×2 floating-point matrix"),
    "mat3": ("number[]", "A 3×3 floating-point matrix"),
    "mat4": ("number[]", "A 4×4 floating-point matrix"),
    "mat2x2": ("number[]", "Same as mat2"),
    "mat2x3": ("number[]", "A floating-point matrix with 2 columns and 3 rows"),
    "mat2x4": ("number[]", "A floating-point matrix with 2 columns and 4 rows"),
    "mat3x2": ("number[]", "A floating-point matrix with 3 columns and 2 rows"),
    "mat3x3": ("number[]", "Same as mat3"),
    "mat3x4": ("number[]", "A floating-point matrix with 3 columns and 4 rows"),
    "mat4x2": ("number[]", "A floating-point matrix with 4 columns and 2 rows"),
    "mat4x3": ("number[]", "A floating-point matrix with 4 columns and 3 rows"),
    "mat4x4": ("number[]", "Same as mat4"),
    # Floating-point samplers
    "sampler2D": ("number", "A handle for accessing a 2D texture (opaque type)"),
    "sampler3D": ("number", "A handle for accessing a 3D texture (opaque type)"),
    "samplerCube": (
        "number",
        "A handle for accessing a cube mapped texture (opaque type)",
    ),
    "samplerCubeShadow": (
        "number",
        "A handle for accessing a cube map depth texture with comparison "
        "(opaque type)",
    ),
    "sampler2DShadow": (
        "number",
        "A handle for accessing a 2D depth texture with comparison (opaque type)",
    ),
    "sampler2DArray": (
        "number",
        "A handle for accessing a 2D array texture (opaque type)",
    ),
    "sampler2DArrayShadow": (
        "number",
        "A handle for accessing a 2D array depth texture with comparison "
        "(opaque type)",
    ),
    # Signed integer samplers
    "isampler2D": ("number", "A handle for accessing an integer 2D texture"),
    "isampler3D": ("number", "A handle for accessing an integer 3D texture"),
    "isamplerCube": (
        "number",
        "A handle for accessing an integer cube mapped texture",
    ),
    "isampler2DArray": (
        "number",
        "A handle for accessing an integer 2D array texture",
    ),
    # Unsigned integer samplers
    "usampler2D": (
        "number",
        "A handle for accessing an unsigned integer 2D texture",
    ),
    "usampler3D": (
        "number",
        "A handle for accessing an unsigned integer 3D texture",
    ),
    "usamplerCube": (
        "number",
        "A handle for accessing an unsigned integer cube mapped texture",
    ),
    "usampler2DArray": (
        "number",
        "A handle for accessing an unsigned integer 2D array texture",
    ),
})

_HEADER = f"""
/**
 * The list of Basic Types.
 * Taken from Section 4.1 of the GLSL {GLSL_TYPES_VERSION} Spec, available at:
 * https://www.khronos.org/registry/OpenGL/specs/es/3.0/GLSL_ES_Specification_3.00.pdf
 **/
"""


def _render_glsl_types() -> str:
    lines = [_HEADER]
    for name, (ts_type, description) in GLSL_TYPES.items():
        lines.append(f"/** {description} */")
        lines.append(f"type {name} = {ts_type};")
    return "\n".join(lines) + "\n"


# Must appear at most once per output file, repeated aliases clash in TypeScript
GLSL_TYPES_DECLARATION = _render_glsl_types()
