from glsl2ts.declarations import (
    DeclarationError,
    GenerateOptions,
    GenerationResult,
    GLSLVariable,
    Qualifier,
    generate,
    generate_declarations,
)
from glsl2ts.parser import GLSLParseError, parse

__version__ = "0.1.0"


__all__ = [
    "DeclarationError",
    "GLSLParseError",
    "GLSLVariable",
    "GenerateOptions",
    "GenerationResult",
    "Qualifier",
    "generate",
    "generate_declarations",
    "parse",
]
