"""
GLSL variable parser.

This module collects the global variables, uniform blocks and struct
definitions declared by a GLSL shader. Only declaration syntax is understood:
comments and preprocessor directives are dropped (integer #defines are kept
for array sizes), precision statements and function prototypes are ignored
and function bodies are skipped.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from loguru import logger

from glsl2ts.declarations.models import (
    BLOCK_TYPE,
    STRUCT_TYPE,
    GLSLVariable,
    Qualifier,
)

# Storage qualifiers and the interface role they map to
STORAGE_QUALIFIERS: dict[str, Qualifier | None] = {
    "in": Qualifier.IN,
    "attribute": Qualifier.IN,
    "varying": Qualifier.IN,
    "out": Qualifier.OUT,
    "uniform": Qualifier.UNIFORM,
    "const": None,
    "buffer": None,
    "shared": None,
}

# Qualifiers that do not change which interface a variable belongs to
OTHER_QUALIFIERS = frozenset(
    {
        "highp",
        "mediump",
        "lowp",
        "flat",
        "smooth",
        "noperspective",
        "centroid",
        "sample",
        "patch",
        "invariant",
        "precise",
        "coherent",
        "volatile",
        "restrict",
        "readonly",
        "writeonly",
    }
)

# Binary operators of integral constant expressions, by precedence
OPERATOR_PRECEDENCE: dict[str, int] = {
    "|": 1,  # Bitwise OR
    "^": 2,  # Bitwise XOR
    "&": 3,  # Bitwise AND
    "<<": 4,  # Shift left
    ">>": 4,  # Shift right
    "+": 5,  # Addition
    "-": 5,  # Subtraction
    "*": 6,  # Multiplication
    "/": 6,  # Division
    "%": 6,  # Modulo
}

_COMMENT_RE = re.compile(r"//[^\n]*|/\*.*?\*/", re.DOTALL)
_DEFINE_RE = re.compile(r"^\s*#\s*define\s+([A-Za-z_]\w*)\s+(.+?)\s*$")
_TOKEN_RE = re.compile(r"[A-Za-z_]\w*|\d[\w.]*|\.\d[\w.]*|\S")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_]\w*$")


class GLSLParseError(Exception):
    """Exception raised when shader code cannot be parsed.

    Examples:
        >>> raise GLSLParseError("Unbalanced braces", 12)
        GLSLParseError: Unbalanced braces at line 12
    """

    def __init__(self, message: str, lineno: int | None = None):
        self.message = message
        self.lineno = lineno
        location_info = f" at line {lineno}" if lineno else ""
        super().__init__(f"{message}{location_info}")


@dataclass(frozen=True)
class Token:
    text: str
    lineno: int


def _int_literal(text: str) -> int | None:
    """Parse a GLSL integer literal (decimal, octal or hex, optional u suffix)."""
    text = text.rstrip("uU")
    try:
        if text.lower().startswith("0x"):
            return int(text, 16)
        if len(text) > 1 and text.startswith("0"):
            return int(text, 8)
        return int(text)
    except ValueError:
        return None


def strip_comments(code: str) -> str:
    """Replace comments with whitespace, keeping line numbers intact."""
    return _COMMENT_RE.sub(lambda m: " " + "\n" * m.group(0).count("\n"), code)


def strip_preprocessor(code: str) -> tuple[str, dict[str, int]]:
    """Remove preprocessor lines, returning the code and its integer defines."""
    defines: dict[str, int] = {}
    lines = []
    for line in code.split("\n"):
        if not line.lstrip().startswith("#"):
            lines.append(line)
            continue
        match = _DEFINE_RE.match(line)
        if match:
            value = evaluate_constant(tokenize(match.group(2)), defines)
            if value is not None:
                defines[match.group(1)] = value
        lines.append("")
    return "\n".join(lines), defines


def tokenize(code: str) -> list[Token]:
    """Split comment-free, preprocessed code into tokens with line numbers."""
    tokens = []
    lineno = 1
    pos = 0
    for match in _TOKEN_RE.finditer(code):
        lineno += code.count("\n", pos, match.start())
        pos = match.start()
        tokens.append(Token(match.group(0), lineno))
    return tokens


def _strip_layout(tokens: list[Token]) -> list[Token]:
    """Drop layout(...) qualifiers from a statement."""
    result = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token.text != "layout":
            result.append(token)
            index += 1
            continue
        index += 1
        if index >= len(tokens) or tokens[index].text != "(":
            raise GLSLParseError("Expected '(' after layout", token.lineno)
        depth = 0
        while index < len(tokens):
            if tokens[index].text == "(":
                depth += 1
            elif tokens[index].text == ")":
                depth -= 1
                if depth == 0:
                    break
            index += 1
        else:
            raise GLSLParseError("Unbalanced parentheses in layout", token.lineno)
        index += 1
    return result


def _split_top_level(tokens: list[Token], separator: str) -> list[list[Token]]:
    """Split tokens on a separator that is not nested in brackets."""
    parts: list[list[Token]] = [[]]
    depth = 0
    for token in tokens:
        if token.text in "([{":
            depth += 1
        elif token.text in ")]}":
            depth -= 1
        if token.text == separator and depth == 0:
            parts.append([])
        else:
            parts[-1].append(token)
    return parts


def _split_qualifiers(tokens: list[Token]) -> tuple[list[str], list[Token]]:
    """Split leading qualifier words from the rest of a statement."""
    index = 0
    while index < len(tokens) and (
        tokens[index].text in STORAGE_QUALIFIERS
        or tokens[index].text in OTHER_QUALIFIERS
    ):
        index += 1
    return [t.text for t in tokens[:index]], tokens[index:]


def _storage(words: list[str]) -> str | None:
    return next((word for word in words if word in STORAGE_QUALIFIERS), None)


def _operator_texts(tokens: list[Token]) -> list[str]:
    """Token texts with "<<" and ">>" joined back into single operators."""
    texts: list[str] = []
    for token in tokens:
        if token.text in ("<", ">") and texts and texts[-1] == token.text:
            texts[-1] += token.text
        else:
            texts.append(token.text)
    return texts


def _apply(operator: str, left: int, right: int) -> int:
    match operator:
        case "|":
            return left | right
        case "^":
            return left ^ right
        case "&":
            return left & right
        case "<<":
            return left << right
        case ">>":
            return left >> right
        case "+":
            return left + right
        case "-":
            return left - right
        case "*":
            return left * right
        case "/":
            # Integer division truncates toward zero
            quotient = abs(left) // abs(right)
            return quotient if (left < 0) == (right < 0) else -quotient
        case "%":
            return left - right * _apply("/", left, right)
    raise ValueError(f"Unsupported operator: {operator}")


def evaluate_constant(
    tokens: list[Token], constants: Mapping[str, int]
) -> int | None:
    """Evaluate an integral constant expression over known constants.

    Args:
        tokens: Expression tokens, e.g. those of "N * 2"
        constants: Integer values of previously declared consts and defines

    Returns:
        The value, or None if the tokens are not an integral constant expression
    """
    texts = _operator_texts(tokens)
    pos = 0

    def operand() -> int:
        nonlocal pos
        if pos == len(texts):
            raise ValueError("Unexpected end of expression")
        text = texts[pos]
        pos += 1
        match text:
            case "-":
                return -operand()
            case "+":
                return operand()
            case "~":
                return ~operand()
            case "(":
                value = expression(0)
                if pos == len(texts) or texts[pos] != ")":
                    raise ValueError("Missing ')'")
                pos += 1
                return value
        value = _int_literal(text)
        if value is None:
            value = constants.get(text)
        if value is None:
            raise ValueError(f"Not an integral constant: {text}")
        return value

    def expression(min_precedence: int) -> int:
        nonlocal pos
        left = operand()
        while pos < len(texts) and texts[pos] in OPERATOR_PRECEDENCE:
            operator = texts[pos]
            precedence = OPERATOR_PRECEDENCE[operator]
            if precedence < min_precedence:
                break
            pos += 1
            left = _apply(operator, left, expression(precedence + 1))
        return left

    try:
        value = expression(0)
    except (ValueError, ZeroDivisionError):
        return None
    return value if pos == len(texts) else None


def _initializer_length(tokens: list[Token]) -> int | None:
    """Count the elements of an array constructor or initializer list."""
    if not tokens or tokens[-1].text not in (")", "}"):
        return None
    texts = [t.text for t in tokens]
    opener = "(" if texts[-1] == ")" else "{"
    if opener not in texts:
        return None
    start = texts.index(opener)
    if opener == "(" and "[" not in texts[:start]:
        # A function call, not an array constructor
        return None
    if opener == "{" and start != 0:
        return None

    inner = tokens[start + 1 : -1]
    depth = 0
    for token in inner:
        if token.text in ("(", "[", "{"):
            depth += 1
        elif token.text in (")", "]", "}"):
            depth -= 1
            if depth < 0:
                return None
    if not inner or depth:
        return None
    return len(_split_top_level(inner, ","))


@dataclass
class _Parser:
    """Walks the token stream, collecting declared variables in order."""

    tokens: list[Token]
    constants: dict[str, int] = field(default_factory=dict)
    structs: set[str] = field(default_factory=set)
    variables: list[GLSLVariable] = field(default_factory=list)
    pos: int = 0

    def parse(self) -> list[GLSLVariable]:
        statement: list[Token] = []
        while self.pos < len(self.tokens):
            token = self.tokens[self.pos]
            self.pos += 1
            if token.text == ";":
                self._declaration(statement)
                statement = []
            elif token.text == "{":
                if any(t.text == "=" for t in _strip_layout(statement)):
                    # Initializer list, part of the declaration
                    body = self._block_body(token)
                    statement.extend([token, *body, Token("}", token.lineno)])
                else:
                    self._braced(statement, token)
                    statement = []
            elif token.text == "}":
                raise GLSLParseError("Unexpected '}'", token.lineno)
            else:
                statement.append(token)

        if statement:
            raise GLSLParseError(
                f"Missing ';' after '{statement[-1].text}'", statement[-1].lineno
            )
        return self.variables

    def _block_body(self, brace: Token) -> list[Token]:
        """Consume tokens up to the brace matching `brace`, returning them."""
        depth = 1
        start = self.pos
        while self.pos < len(self.tokens):
            text = self.tokens[self.pos].text
            self.pos += 1
            if text == "{":
                depth += 1
            elif text == "}":
                depth -= 1
                if depth == 0:
                    return self.tokens[start : self.pos - 1]
        raise GLSLParseError("Unbalanced braces", brace.lineno)

    def _statement_tail(self, brace: Token) -> list[Token]:
        """Consume the declarators following a closing brace, up to ';'."""
        start = self.pos
        while self.pos < len(self.tokens):
            self.pos += 1
            if self.tokens[self.pos - 1].text == ";":
                return self.tokens[start : self.pos - 1]
        raise GLSLParseError("Missing ';' after block", brace.lineno)

    def _braced(self, head: list[Token], brace: Token) -> None:
        head = _strip_layout(head)
        texts = [t.text for t in head]
        if "(" in texts:
            logger.debug(f"Skipping function body at line {brace.lineno}")
            self._block_body(brace)
            return
        if "struct" in texts:
            self._struct(head, brace)
            return

        words, rest = _split_qualifiers(head)
        storage = _storage(words)
        if storage is None or len(rest) != 1:
            raise GLSLParseError("Unexpected '{'", brace.lineno)
        self._interface_block(rest[0], STORAGE_QUALIFIERS[storage], brace)

    def _struct(self, head: list[Token], brace: Token) -> None:
        index = [t.text for t in head].index("struct")
        name_tokens = head[index + 1 :]
        if len(name_tokens) != 1 or not _IDENTIFIER_RE.match(name_tokens[0].text):
            raise GLSLParseError("Struct definition needs a name", brace.lineno)

        name = name_tokens[0].text
        members = self._members(self._block_body(brace))
        self.structs.add(name)
        self.variables.append(
            GLSLVariable(
                name=name,
                type=STRUCT_TYPE,
                qualifier=Qualifier.STRUCT,
                struct_name=name,
                block=members,
            )
        )
        logger.debug(f"Collected struct: {name}, members: {[m.name for m in members]}")

        tail = self._statement_tail(brace)
        if tail:
            words, _ = _split_qualifiers(_strip_layout(head[:index]))
            storage = _storage(words)
            qualifier = STORAGE_QUALIFIERS[storage] if storage else None
            self.variables.extend(self._declare(name_tokens[0], tail, qualifier))

    def _interface_block(
        self, name: Token, qualifier: Qualifier | None, brace: Token
    ) -> None:
        members = self._members(self._block_body(brace))
        amount = 1
        tail = self._statement_tail(brace)
        if tail:
            # Only the instance array size matters, the block name is used
            size, leftover = self._array_suffix(tail[1:], tail[0])
            if leftover:
                raise GLSLParseError(
                    f"Unexpected '{leftover[0].text}'", leftover[0].lineno
                )
            if size is None:
                raise GLSLParseError(
                    f"Cannot resolve array size of {tail[0].text}", tail[0].lineno
                )
            amount = size
        self.variables.append(
            GLSLVariable(
                name=name.text,
                type=BLOCK_TYPE,
                qualifier=qualifier,
                amount=amount,
                block=members,
            )
        )
        logger.debug(
            f"Collected block: {name.text}, members: {[m.name for m in members]}"
        )

    def _members(self, body: list[Token]) -> tuple[GLSLVariable, ...]:
        statements = _split_top_level(body, ";")
        if statements[-1]:
            last = statements[-1][-1]
            raise GLSLParseError(f"Missing ';' after '{last.text}'", last.lineno)

        members: list[GLSLVariable] = []
        for statement in statements[:-1]:
            _, rest = _split_qualifiers(_strip_layout(statement))
            if not rest:
                continue
            members.extend(self._declare(rest[0], rest[1:], None))
        return tuple(members)

    def _declaration(self, statement: list[Token]) -> None:
        tokens = _strip_layout(statement)
        if not tokens or tokens[0].text == "precision":
            return

        texts = [t.text for t in tokens]
        declared = texts[: texts.index("=")] if "=" in texts else texts
        if "(" in declared:
            # Function prototype
            return

        words, rest = _split_qualifiers(tokens)
        if not rest:
            # Default qualifier statement, e.g. "layout(std140) uniform;"
            return
        if "invariant" in words and len(rest) == 1:
            # Redeclaration of a built-in, e.g. "invariant gl_Position;"
            return

        storage = _storage(words)
        qualifier = STORAGE_QUALIFIERS[storage] if storage else None
        variables = self._declare(rest[0], rest[1:], qualifier, storage == "const")
        for variable in variables:
            logger.debug(
                f"Collected variable: {variable.name}, type: {variable.type}, "
                f"qualifier: {variable.qualifier}, amount: {variable.amount}"
            )
        self.variables.extend(variables)

    def _declare(
        self,
        type_token: Token,
        tokens: list[Token],
        qualifier: Qualifier | None,
        is_const: bool = False,
    ) -> list[GLSLVariable]:
        """Build one variable per declarator following a type."""
        if not _IDENTIFIER_RE.match(type_token.text):
            raise GLSLParseError(f"Unexpected '{type_token.text}'", type_token.lineno)
        type_amount, tokens = self._array_suffix(tokens, type_token)
        if not tokens:
            raise GLSLParseError(
                f"Declaration of type {type_token.text} has no name",
                type_token.lineno,
            )

        variables = []
        for declarator in _split_top_level(tokens, ","):
            parts = _split_top_level(declarator, "=")
            if not parts[0] or not _IDENTIFIER_RE.match(parts[0][0].text):
                lineno = declarator[0].lineno if declarator else type_token.lineno
                raise GLSLParseError("Expected a variable name", lineno)

            name = parts[0][0]
            amount, leftover = self._array_suffix(parts[0][1:], name)
            if leftover:
                raise GLSLParseError(
                    f"Unexpected '{leftover[0].text}'", leftover[0].lineno
                )
            initializer = parts[1] if len(parts) == 2 else []
            if amount is None or type_amount is None:
                length = self._unsized_length(initializer, name, qualifier)
                amount = length * (amount or type_amount or 1)
            else:
                amount *= type_amount

            if is_const and type_token.text in ("int", "uint") and initializer:
                value = evaluate_constant(initializer, self.constants)
                if value is not None:
                    self.constants[name.text] = value

            variables.append(self._variable(name.text, type_token.text, qualifier, amount))
        return variables

    def _array_suffix(
        self, tokens: list[Token], owner: Token
    ) -> tuple[int | None, list[Token]]:
        """Consume "[N]" suffixes, returning the total length and the rest.

        The length is None when a suffix is "[]", leaving the size to the
        initializer.
        """
        amount: int | None = 1
        while tokens and tokens[0].text == "[":
            try:
                end = [t.text for t in tokens].index("]")
            except ValueError:
                raise GLSLParseError(
                    f"Missing ']' in array size of {owner.text}", owner.lineno
                ) from None
            size = tokens[1:end]
            tokens = tokens[end + 1 :]
            if not size:
                amount = None
                continue
            value = evaluate_constant(size, self.constants)
            if value is None or value < 1:
                expression = " ".join(t.text for t in size)
                raise GLSLParseError(
                    f"Cannot resolve array size '{expression}' of {owner.text}",
                    owner.lineno,
                )
            if amount is not None:
                amount *= value
        return amount, tokens

    def _unsized_length(
        self, initializer: list[Token], name: Token, qualifier: Qualifier | None
    ) -> int:
        """Length of an array declared with "[]", taken from its initializer."""
        length = _initializer_length(initializer)
        if length is not None:
            return length
        if qualifier is not None:
            raise GLSLParseError(
                f"Cannot resolve array size of {name.text}", name.lineno
            )
        logger.debug(f"Array {name.text} has no known size, using one element")
        return 1

    def _variable(
        self, name: str, type_name: str, qualifier: Qualifier | None, amount: int
    ) -> GLSLVariable:
        if type_name in self.structs:
            return GLSLVariable(
                name=name,
                type=STRUCT_TYPE,
                qualifier=qualifier,
                amount=amount,
                struct_name=type_name,
            )
        return GLSLVariable(
            name=name, type=type_name, qualifier=qualifier, amount=amount
        )


def parse(code: str) -> list[GLSLVariable]:
    """Parse shader code and return its declared variables in order.

    Args:
        code: GLSL shader source

    Returns:
        Struct definitions, uniform blocks and global variables

    Raises:
        GLSLParseError: If a declaration cannot be parsed
    """
    code, defines = strip_preprocessor(strip_comments(code))
    parser = _Parser(tokenize(code), constants=dict(defines))
    return parser.parse()
