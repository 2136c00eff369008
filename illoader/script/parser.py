import ast
import os
from typing import Optional

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken, VisitError

from illoader.exceptions import ErrorCode, ScriptError

from .classes import *

LARK_PARSER = None

try:
    from importlib.resources import files as pkg_files

    script_grammar = (pkg_files("illoader.script") / "script.lark").read_text()
    LARK_PARSER = Lark(script_grammar, start="start", parser="lalr", propagate_positions=True)
except (ModuleNotFoundError, FileNotFoundError):
    # Fallback for source checkouts that are not installed as a package
    grammar_path = os.path.join(os.path.dirname(__file__), "script.lark")
    with open(grammar_path, "r", encoding="utf-8") as f:
        script_grammar = f.read()
    LARK_PARSER = Lark(script_grammar, start="start", parser="lalr", propagate_positions=True)


def _line(meta) -> int:
    # Rules made only of filtered keywords can carry an empty meta
    return getattr(meta, "line", 0)


TOKEN_FRIENDLY_NAMES = {
    "NAME": "a variable name",
    "NUMBER": "a number",
    "STRING": "a string in double quotes",
    "EQUAL": "an equals sign '='",
    "PLUS": "a plus sign '+'",
    "LPAR": "an opening parenthesis '('",
    "RPAR": "a closing parenthesis ')'",
    "$END": "the end of the file",
}


class ScriptTransformer(Transformer):
    """
    Transforms the Lark parse tree into the pydantic AST of `classes.py`.
    Rules are handled bottom-up; aliases in the grammar map onto the methods below.
    """

    def __init__(self, file_path: Optional[str] = None):
        self.file_path = file_path
        super().__init__()

    def _string_value(self, token) -> str:
        """Decodes a quoted string token. Invalid escape sequences are syntax errors."""
        try:
            return ast.literal_eval(token.value)
        except (SyntaxError, ValueError) as e:
            raise ScriptError(
                ErrorCode.SCRIPT_SYNTAX_ERROR,
                file_path=self.file_path,
                line=token.line,
                details=f"Invalid string literal {token.value}.",
            ) from e

    # --- Literals ---
    def number(self, items):
        token = items[0]
        text = token.value
        value = float(text) if any(c in text for c in ".eE") else int(text)
        return NumberLiteral(value=value, line=token.line)

    def string(self, items):
        token = items[0]
        return StringLiteral(value=self._string_value(token), line=token.line)

    @v_args(meta=True)
    def true(self, meta, items):
        return BooleanLiteral(value=True, line=_line(meta))

    @v_args(meta=True)
    def false(self, meta, items):
        return BooleanLiteral(value=False, line=_line(meta))

    @v_args(meta=True)
    def nil(self, meta, items):
        return NilLiteral(line=_line(meta))

    def name(self, items):
        token = items[0]
        return Name(value=token.value, line=token.line)

    # --- Expressions ---
    def add(self, items):
        left, right = items
        return Add(left=left, right=right, line=left.line)

    @v_args(meta=True)
    def load_call(self, meta, items):
        return LoadCall(path=self._string_value(items[0]), line=_line(meta))

    @v_args(meta=True)
    def require_call(self, meta, items):
        return LoadCall(path=self._string_value(items[0]), safe=True, line=_line(meta))

    # --- Statements ---
    @v_args(meta=True)
    def let_stmt(self, meta, items):
        target, value = items
        return LetStatement(target=target.value, value=value, line=_line(meta))

    @v_args(meta=True)
    def print_stmt(self, meta, items):
        return PrintStatement(value=items[0], line=_line(meta))

    @v_args(meta=True)
    def return_stmt(self, meta, items):
        return ReturnStatement(value=items[0], line=_line(meta))

    @v_args(meta=True)
    def fail_stmt(self, meta, items):
        return FailStatement(value=items[0], line=_line(meta))


def _translate_lark_error(e: UnexpectedInput, file_path: Optional[str]) -> ScriptError:
    """Turns a Lark error into a ScriptError with a readable description."""
    if isinstance(e, UnexpectedCharacters):
        details = f"Invalid character '{e.char}' found."
    elif isinstance(e, UnexpectedEOF):
        details = "Unexpected end of file."
    elif isinstance(e, UnexpectedToken):
        expected = sorted(TOKEN_FRIENDLY_NAMES.get(t, f"'{t.lower()}'") for t in e.expected)
        found = "the end of the file" if e.token.type == "$END" else f"'{e.token.value}'"
        details = f"Unexpected {found}. Expected one of: {', '.join(expected)}."
    else:
        details = str(e)
    line = getattr(e, "line", None)
    return ScriptError(ErrorCode.SCRIPT_SYNTAX_ERROR, file_path=file_path, line=line if line and line > 0 else None, details=details)


def parse_script(script_content: str, file_path: Optional[str] = None) -> Script:
    """Parses IL script source into a `Script`. Syntax problems raise ScriptError."""
    try:
        tree = LARK_PARSER.parse(script_content)
    except UnexpectedInput as e:
        raise _translate_lark_error(e, file_path) from e

    try:
        statements = ScriptTransformer(file_path).transform(tree).children
    except VisitError as e:
        # Lark wraps errors raised inside transformer callbacks
        if isinstance(e.orig_exc, ScriptError):
            raise e.orig_exc from None
        raise
    return Script(file_path=file_path, statements=statements)
