import textwrap

import pytest

from glsl2ts.declarations.models import GLSLVariable, Qualifier
from glsl2ts.parser import (
    GLSLParseError,
    evaluate_constant,
    parse,
    strip_comments,
    strip_preprocessor,
    tokenize,
)


class TestParse:
    """Test cases for the parse function."""

    def test_inputs_outputs_and_uniforms(self):
        """Test collecting qualified global variables in order."""
        # Arrange
        code = textwrap.dedent(
            """
        #version 300 es

        precision highp float;
        in vec2 v_texcoord;

        uniform sampler2D u_texture;

        out vec4 outColor;

        void main() {
          outColor = texture(u_texture, v_texcoord);
        }
        """
        )

        # Act
        variables = parse(code)

        # Assert
        assert variables == [
            GLSLVariable(name="v_texcoord", type="vec2", qualifier=Qualifier.IN),
            GLSLVariable(
                name="u_texture", type="sampler2D", qualifier=Qualifier.UNIFORM
            ),
            GLSLVariable(name="outColor", type="vec4", qualifier=Qualifier.OUT),
        ]

    def test_struct_definition(self):
        """Test collecting a struct definition with its members."""
        code = textwrap.dedent(
            """
        struct Material
        {
            vec3 ambient;
            vec3 diffuse;
            vec3 specular;
            float shininess;
        };
        """
        )

        variables = parse(code)

        assert len(variables) == 1
        material = variables[0]
        assert material.name == "Material"
        assert material.type == "struct"
        assert material.qualifier is Qualifier.STRUCT
        assert material.struct_name == "Material"
        assert [(m.name, m.type) for m in material.block] == [
            ("ambient", "vec3"),
            ("diffuse", "vec3"),
            ("specular", "vec3"),
            ("shininess", "float"),
        ]

    def test_uniform_block_uses_block_name(self):
        """Test that blocks are named after the block, not the instance."""
        code = """
        layout (std140) uniform Matrices
        {
            mat4 projection;
            mat4 view;
        } some_local_name;"""

        (block,) = parse(code)

        assert block == GLSLVariable(
            name="Matrices",
            type="block",
            qualifier=Qualifier.UNIFORM,
            block=(
                GLSLVariable(name="projection", type="mat4"),
                GLSLVariable(name="view", type="mat4"),
            ),
        )

    def test_block_instance_array(self):
        """Test that an instance array sets the block array length."""
        code = "uniform Light { vec3 color; } u_lights[3];"

        (block,) = parse(code)

        assert block.amount == 3

    def test_struct_references(self):
        """Test that members typed with a known struct reference it."""
        code = textwrap.dedent(
            """
        struct Material { vec3 diffuse; };
        uniform PerScene
        {
            Material material;
            Material common[12];
        } u_perScene;
        uniform Material u_material;
        """
        )

        _, block, material = parse(code)

        assert block.block == (
            GLSLVariable(name="material", type="struct", struct_name="Material"),
            GLSLVariable(
                name="common", type="struct", struct_name="Material", amount=12
            ),
        )
        assert material == GLSLVariable(
            name="u_material",
            type="struct",
            qualifier=Qualifier.UNIFORM,
            struct_name="Material",
        )

    def test_struct_with_declarator(self):
        """Test a struct definition that also declares a variable."""
        code = "uniform struct Light { vec3 position; } u_light;"

        light, u_light = parse(code)

        assert light.qualifier is Qualifier.STRUCT
        assert u_light == GLSLVariable(
            name="u_light",
            type="struct",
            qualifier=Qualifier.UNIFORM,
            struct_name="Light",
        )

    @pytest.mark.parametrize(
        "declaration,amount",
        [
            ("in vec4 a_position[12];", 12),
            ("in vec4[4] a_position;", 4),
            ("in vec4 a_position[0x10];", 16),
            ("in vec4 a_position[3u];", 3),
            ("in vec4 a_position;", 1),
        ],
    )
    def test_array_sizes(self, declaration, amount):
        """Test the supported array size spellings."""
        (variable,) = parse(declaration)

        assert variable.name == "a_position"
        assert variable.amount == amount

    def test_array_size_from_constants(self):
        """Test array sizes given by integer consts and defines."""
        code = textwrap.dedent(
            """
        #define MAX_LIGHTS 8
        const int NUM_CASCADES = 4;
        uniform vec3 u_lights[MAX_LIGHTS];
        uniform mat4 u_cascades[NUM_CASCADES];
        """
        )

        num_cascades, lights, cascades = parse(code)

        assert num_cascades == GLSLVariable(name="NUM_CASCADES", type="int")
        assert lights.amount == 8
        assert cascades.amount == 4

    def test_unsized_array_with_constructor(self):
        """Test that an unsized array takes its length from the constructor."""
        code = textwrap.dedent(
            """
        const float weights[] = float[](0.1, 0.2, 0.3);
        const vec2 offsets[] = vec2[](vec2(0.0, 1.0), vec2(1.0, 0.0));
        float[] kernel = float[](1.0, 2.0, 1.0, 2.0, 1.0);
        out vec4 color;
        """
        )

        variables = parse(code)

        assert [(v.name, v.amount) for v in variables] == [
            ("weights", 3),
            ("offsets", 2),
            ("kernel", 5),
            ("color", 1),
        ]

    def test_unsized_array_with_initializer_list(self):
        (variable,) = parse("const int ids[] = {1, 2, 3, 4};")

        assert variable == GLSLVariable(name="ids", type="int", amount=4)

    def test_unsized_global_without_countable_initializer(self):
        """Test that globals outside the interfaces fall back to one element."""
        code = "const float table[] = makeTable();\nout vec4 color;"

        table, color = parse(code)

        assert table == GLSLVariable(name="table", type="float")
        assert color.qualifier is Qualifier.OUT

    @pytest.mark.parametrize(
        "size,amount",
        [
            ("N * 2", 4),
            ("N + 1", 3),
            ("(N + 1) * 2", 6),
            ("N << 2", 8),
            ("16 / N - 1", 7),
            ("-N + 5", 3),
            ("7 % N", 1),
        ],
    )
    def test_constant_expression_sizes(self, size, amount):
        """Test array sizes given by integral constant expressions."""
        code = f"const int N = 2;\nuniform vec4 u_values[{size}];"

        _, values = parse(code)

        assert values.amount == amount

    def test_expression_constants_and_defines(self):
        """Test consts and defines initialized with expressions."""
        code = textwrap.dedent(
            """
        #define BASE 4
        #define COUNT (BASE * 2)
        const int HALF = COUNT / 2;
        uniform float u_a[COUNT];
        uniform float u_b[HALF];
        """
        )

        _, u_a, u_b = parse(code)

        assert u_a.amount == 8
        assert u_b.amount == 4

    def test_multiple_declarators(self):
        """Test one variable per declarator, each with its own array size."""
        code = "uniform float u_near, u_far, u_weights[5];"

        variables = parse(code)

        assert [(v.name, v.amount) for v in variables] == [
            ("u_near", 1),
            ("u_far", 1),
            ("u_weights", 5),
        ]
        assert all(v.qualifier is Qualifier.UNIFORM for v in variables)

    def test_qualifiers(self):
        """Test interpolation, precision and legacy storage qualifiers."""
        code = textwrap.dedent(
            """
        layout(location = 0) in highp vec3 a_position;
        flat out int v_id;
        centroid in vec2 v_uv;
        attribute vec3 a_normal;
        varying vec3 v_normal;
        uniform lowp float u_alpha;
        """
        )

        variables = parse(code)

        assert [(v.name, v.type, v.qualifier) for v in variables] == [
            ("a_position", "vec3", Qualifier.IN),
            ("v_id", "int", Qualifier.OUT),
            ("v_uv", "vec2", Qualifier.IN),
            ("a_normal", "vec3", Qualifier.IN),
            ("v_normal", "vec3", Qualifier.IN),
            ("u_alpha", "float", Qualifier.UNIFORM),
        ]

    def test_unqualified_globals(self):
        """Test that consts and plain globals have no qualifier."""
        code = "const vec3 UP = vec3(0.0, 1.0, 0.0);\nfloat g_scale = 2.0;"

        variables = parse(code)

        assert variables == [
            GLSLVariable(name="UP", type="vec3"),
            GLSLVariable(name="g_scale", type="float"),
        ]

    def test_ignored_statements(self):
        """Test that prototypes, precision and default layouts are skipped."""
        code = textwrap.dedent(
            """
        precision mediump float;
        layout(std140) uniform;
        invariant gl_Position;
        vec4 shade(vec3 normal);
        vec4 shade(vec3 normal) {
            if (normal.x > 0.0) { return vec4(1.0); }
            return vec4(0.0);
        }
        out vec4 fragColor;
        """
        )

        variables = parse(code)

        assert variables == [
            GLSLVariable(name="fragColor", type="vec4", qualifier=Qualifier.OUT)
        ]

    def test_comments_are_ignored(self):
        """Test that commented-out declarations are not collected."""
        code = textwrap.dedent(
            """
        // uniform float u_old;
        /* uniform vec2 u_block;
           in vec3 a_unused; */
        uniform float u_time; // seconds
        """
        )

        variables = parse(code)

        assert [v.name for v in variables] == ["u_time"]


class TestParseErrors:
    """Test cases for malformed shader code."""

    def test_missing_semicolon(self):
        with pytest.raises(GLSLParseError, match="Missing ';'"):
            parse("uniform float u_time")

    def test_unbalanced_braces(self):
        code = "void main() {\n  if (true) {\n}\n"

        with pytest.raises(GLSLParseError, match="Unbalanced braces") as excinfo:
            parse(code)

        assert excinfo.value.lineno == 1

    def test_unexpected_closing_brace(self):
        with pytest.raises(GLSLParseError, match="Unexpected '}'"):
            parse("uniform float u_time;\n}")

    def test_unresolved_array_size(self):
        code = "\n\nuniform vec3 u_lights[MAX_LIGHTS];"

        with pytest.raises(GLSLParseError, match="MAX_LIGHTS") as excinfo:
            parse(code)

        assert excinfo.value.lineno == 3
        assert str(excinfo.value).endswith("at line 3")

    def test_unresolved_expression_size(self):
        code = "const int N = 2;\nuniform vec4 u_values[N * M];"

        with pytest.raises(GLSLParseError, match="N \\* M") as excinfo:
            parse(code)

        assert excinfo.value.lineno == 2

    def test_zero_sized_expression(self):
        with pytest.raises(GLSLParseError, match="Cannot resolve array size"):
            parse("uniform vec4 u_values[2 - 2];")

    def test_unsized_interface_variable(self):
        with pytest.raises(GLSLParseError, match="Cannot resolve array size of u_v"):
            parse("uniform vec4 u_v[];")

    def test_declaration_without_name(self):
        with pytest.raises(GLSLParseError, match="has no name"):
            parse("uniform vec4;")

    def test_anonymous_struct(self):
        with pytest.raises(GLSLParseError, match="needs a name"):
            parse("struct { float x; } s;")

    def test_missing_member_semicolon(self):
        with pytest.raises(GLSLParseError, match="Missing ';'"):
            parse("uniform Block { float x };")


def test_strip_comments_keeps_lines():
    """Test that removed comments leave line numbers unchanged."""
    code = "a /* one\ntwo */ b // three\nc"

    assert strip_comments(code).count("\n") == 2


def test_strip_preprocessor():
    """Test that directives are dropped and integer defines collected."""
    code = "#version 300 es\n#define COUNT 4\n#define NAME foo\nin float x;"

    stripped, defines = strip_preprocessor(code)

    assert stripped == "\n\n\nin float x;"
    assert defines == {"COUNT": 4}


def test_tokenize_line_numbers():
    tokens = tokenize("in vec2\nuv[2];")

    assert [(t.text, t.lineno) for t in tokens] == [
        ("in", 1),
        ("vec2", 1),
        ("uv", 2),
        ("[", 2),
        ("2", 2),
        ("]", 2),
        (";", 2),
    ]


@pytest.mark.parametrize(
    "expression,expected",
    [
        ("3", 3),
        ("0x10 | 1", 17),
        ("6 & 3 ^ 1", 3),
        ("1 << 3 >> 1", 4),
        ("2 + 3 * 4", 14),
        ("(2 + 3) * 4", 20),
        ("-7 / 2", -3),
        ("~0", -1),
        ("SIZE - 1", 7),
    ],
)
def test_evaluate_constant(expression, expected):
    assert evaluate_constant(tokenize(expression), {"SIZE": 8}) == expected


@pytest.mark.parametrize("expression", ["", "1.5", "N", "2 +", "(1", "1 / 0", "f(2)"])
def test_evaluate_constant_rejects(expression):
    """Test that non-constant or malformed expressions give None."""
    assert evaluate_constant(tokenize(expression), {}) is None
