"""
The reference host for IL scripts: reads a file, parses it and evaluates it.

A `ScriptHost` instance is the executor handed to `Loader`. All scripts run by one
host share a single variable namespace, so a module can define values that the
script loading it reads afterwards.
"""

import sys
from typing import Any, Dict, Optional, TextIO

from illoader.core.loader import SKIPPED, Loader
from illoader.exceptions import ErrorCode, ScriptError

from .classes import *
from .parser import parse_script


def type_name(value: Any) -> str:
    if value is None:
        return "nil"
    if value is SKIPPED:
        return "skipped"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return "string"


def format_value(value: Any) -> str:
    """Renders a script value the way `print` shows it."""
    if value is None:
        return "nil"
    if value is SKIPPED:
        return "skipped"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ScriptHost:
    def __init__(self, output: Optional[TextIO] = None):
        self.output = output
        self.globals: Dict[str, Any] = {}

    def __call__(self, absolute_path: str, loader: Loader) -> Any:
        with open(absolute_path, "r", encoding="utf-8") as f:
            content = f.read()
        return self.run(parse_script(content, file_path=absolute_path), loader)

    def run(self, script: Script, loader: Loader) -> Any:
        """Executes the statements in order. The first `return` ends the script with its value."""
        for statement in script.statements:
            if isinstance(statement, ReturnStatement):
                return self.evaluate(statement.value, script, loader)
            self.execute(statement, script, loader)
        return None

    def execute(self, statement: Statement, script: Script, loader: Loader) -> None:
        if isinstance(statement, LetStatement):
            self.globals[statement.target] = self.evaluate(statement.value, script, loader)
        elif isinstance(statement, PrintStatement):
            print(format_value(self.evaluate(statement.value, script, loader)), file=self.output or sys.stdout)
        elif isinstance(statement, FailStatement):
            message = format_value(self.evaluate(statement.value, script, loader))
            raise ScriptError(ErrorCode.SCRIPT_FAIL, file_path=script.file_path, line=statement.line, message=message)
        elif isinstance(statement, LoadCall):
            self.evaluate(statement, script, loader)

    def evaluate(self, node: Expression, script: Script, loader: Loader) -> Any:
        if isinstance(node, (NumberLiteral, StringLiteral, BooleanLiteral)):
            return node.value
        if isinstance(node, NilLiteral):
            return None
        if isinstance(node, Name):
            if node.value not in self.globals:
                raise ScriptError(ErrorCode.SCRIPT_UNDEFINED_NAME, file_path=script.file_path, line=node.line, name=node.value)
            return self.globals[node.value]
        if isinstance(node, LoadCall):
            return loader.require(node.path) if node.safe else loader.load(node.path)
        if isinstance(node, Add):
            left = self.evaluate(node.left, script, loader)
            right = self.evaluate(node.right, script, loader)
            return self._add(left, right, node, script)
        raise TypeError(f"Unknown script node: {type(node).__name__}")

    @staticmethod
    def _add(left: Any, right: Any, node: Add, script: Script) -> Any:
        left_type, right_type = type_name(left), type_name(right)
        if left_type == right_type and left_type in ("number", "string"):
            return left + right
        raise ScriptError(
            ErrorCode.SCRIPT_OPERAND_MISMATCH,
            file_path=script.file_path,
            line=node.line,
            left_type=left_type,
            right_type=right_type,
        )
