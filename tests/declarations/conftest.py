"""
Pytest configuration and shared fixtures for declaration tests.

This module contains fixtures that are shared across multiple test modules.
"""

import pytest

from glsl2ts.declarations.models import GLSLVariable, Qualifier


@pytest.fixture
def material_struct():
    """Fixture providing the Material struct definition."""
    return GLSLVariable(
        name="Material",
        type="struct",
        qualifier=Qualifier.STRUCT,
        struct_name="Material",
        block=(
            GLSLVariable(name="ambient", type="vec3"),
            GLSLVariable(name="diffuse", type="vec3"),
            GLSLVariable(name="specular", type="vec3"),
            GLSLVariable(name="shininess", type="float"),
        ),
    )


@pytest.fixture
def matrices_block():
    """Fixture providing a Matrices uniform block."""
    return GLSLVariable(
        name="Matrices",
        type="block",
        qualifier=Qualifier.UNIFORM,
        block=(
            GLSLVariable(name="projection", type="mat4"),
            GLSLVariable(name="view", type="mat4"),
        ),
    )


@pytest.fixture
def texture_variables(material_struct):
    """Fixture providing the variables of a simple texturing shader."""
    return [
        material_struct,
        GLSLVariable(name="v_texcoord", type="vec2", qualifier=Qualifier.IN),
        GLSLVariable(name="u_texture", type="sampler2D", qualifier=Qualifier.UNIFORM),
        GLSLVariable(name="outColor", type="vec4", qualifier=Qualifier.OUT),
    ]
