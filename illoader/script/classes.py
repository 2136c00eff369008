"""
Defines the data structures for the Abstract Syntax Tree (AST) of IL scripts,
the small language run by the reference host.

Every node records the line it starts on so runtime errors can point at it.
"""

from typing import List, Optional, Union

from pydantic import BaseModel


class ScriptNode(BaseModel):
    line: int = 0


# --- Literals and Names ---


class NumberLiteral(ScriptNode):
    value: Union[int, float]


class StringLiteral(ScriptNode):
    value: str


class BooleanLiteral(ScriptNode):
    value: bool


class NilLiteral(ScriptNode):
    pass


class Name(ScriptNode):
    value: str


class LoadCall(ScriptNode):
    """`load "file"` or, with `safe=True`, `require "file"`."""

    path: str
    safe: bool = False


# --- Expressions ---
Expression = Union[NumberLiteral, StringLiteral, BooleanLiteral, NilLiteral, Name, LoadCall, "Add"]


class Add(ScriptNode):
    left: Expression
    right: Expression


Add.model_rebuild()


# --- Statements ---


class LetStatement(ScriptNode):
    target: str
    value: Expression


class PrintStatement(ScriptNode):
    value: Expression


class ReturnStatement(ScriptNode):
    value: Expression


class FailStatement(ScriptNode):
    value: Expression


Statement = Union[LetStatement, PrintStatement, ReturnStatement, FailStatement, LoadCall]


class Script(BaseModel):
    file_path: Optional[str] = None
    statements: List[Statement] = []
