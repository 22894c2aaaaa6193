"""Gold file based tests for declaration generation.

Gold files are organized by theme in tests/data/gold/:
    - interfaces.yaml: Structs, inputs/outputs, interface names, vars dump
    - blocks_arrays.yaml: Uniform blocks, array shapes, struct references

Test case format:
    - name: test_name
      namespace: MyShader  # optional, default: MyShader
      options:  # optional, camelCase generator options
        generateGLSLTypes: false
      glsl: |
        uniform float u_time;
      expected: |
        namespace MyShader {
        ...

Tabs in the generated output are compared as four spaces, and leading and
trailing newlines are ignored.
"""

import difflib
from pathlib import Path

import pytest
import yaml

from glsl2ts import GenerateOptions, generate
from glsl2ts.main import generate_files

GOLD_DIR = Path(__file__).parent / "data" / "gold"


def load_gold_file(filepath: Path) -> list[dict]:
    """Load test cases from a gold file."""
    with open(filepath) as f:
        return yaml.safe_load(f) or []


def load_all_gold_cases() -> list[tuple[str, dict, Path]]:
    """Load all test cases from all gold files."""
    cases = []
    for gold_file in sorted(GOLD_DIR.glob("*.yaml")):
        for case in load_gold_file(gold_file):
            cases.append((case["name"], case, gold_file))
    return cases


def case_options(case: dict) -> GenerateOptions:
    return GenerateOptions.from_mapping(case.get("options") or {})


def normalize(text: str) -> str:
    return text.replace("\t", "    ").strip("\n")


def assert_matches(actual: str, case: dict, name: str, gold_file: Path) -> None:
    expected = case["expected"].strip("\n")
    actual = normalize(actual)
    if actual != expected:
        diff = difflib.unified_diff(
            expected.splitlines(keepends=True),
            actual.splitlines(keepends=True),
            fromfile="expected",
            tofile="actual",
        )
        pytest.fail(
            f"Output mismatch for '{name}' in {gold_file.name}:\n{''.join(diff)}"
        )


GOLD_CASES = load_all_gold_cases()
GOLD_IDS = [name for name, _, _ in GOLD_CASES]


class TestGoldDeclarations:
    """Test generated declarations against gold outputs."""

    @pytest.mark.parametrize("name,case,gold_file", GOLD_CASES, ids=GOLD_IDS)
    def test_declarations(self, name, case, gold_file):
        actual = generate(
            case["glsl"], case.get("namespace", "MyShader"), case_options(case)
        )

        assert_matches(actual, case, name, gold_file)


class TestCLICodePath:
    """Test the CLI's file-loading code path using gold test cases."""

    @pytest.mark.parametrize("name,case,gold_file", GOLD_CASES, ids=GOLD_IDS)
    def test_cli_code_path(self, name, case, gold_file, tmp_path):
        """Test that reading a shader file matches direct generation."""
        shader_file = tmp_path / f"{name}.frag"
        shader_file.write_text(case["glsl"])

        actual = generate_files(
            [shader_file], case_options(case), case.get("namespace", "MyShader")
        )

        assert_matches(actual, case, name, gold_file)
