"""
Custom exception types for the IL module loader.
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):

    # --- Resolution Errors ---
    FILE_NOT_FOUND = "Module '{requested}' not found (requested by {caller})."
    NOT_A_FILE = "Resolved path '{path}' is not a regular file."

    # --- Execution Errors ---
    EXECUTION_FAILED = "Error while loading '{path}' (requested by {caller}): {fault}"

    # --- Public Boundary ---
    MODULE_LOAD_FAILED = "Could not load module '{requested}' (requested by {caller}): {cause}"

    # --- IL Script Errors ---
    SCRIPT_SYNTAX_ERROR = "Syntax Error: {details}"
    SCRIPT_UNDEFINED_NAME = "Name '{name}' is not defined."
    SCRIPT_OPERAND_MISMATCH = "The '+' operator cannot combine a '{left_type}' and a '{right_type}'."
    SCRIPT_FAIL = "{message}"


def _describe_caller(caller: Optional[str]) -> str:
    return f"'{caller}'" if caller else "top level"


class ILError(Exception):
    """Base class of the package's errors. The message comes from the code's template; context is kept on `details`."""

    def __init__(self, code: ErrorCode, **kwargs: Any):
        self.code = code
        self.details = kwargs

        template_args = dict(kwargs)
        if "caller" in template_args:
            template_args["caller"] = _describe_caller(template_args["caller"])
        self.message = code.value.format(**template_args)

        super().__init__(self.message)


class LoaderError(ILError):
    """Raised by the loader itself: resolution, file-type, execution and boundary failures."""


class ModuleFileNotFoundError(LoaderError, FileNotFoundError):
    """The requested name matched no search-path entry, or nothing exists at its absolute location."""

    def __init__(self, requested: str, caller: str = ""):
        self.requested = requested
        self.caller = caller
        super().__init__(ErrorCode.FILE_NOT_FOUND, requested=requested, caller=caller)


class NotAFileError(LoaderError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(ErrorCode.NOT_A_FILE, path=path)


class LoadExecutionError(LoaderError):
    """The host executor faulted while running `path`. The original exception is `fault`."""

    def __init__(self, path: str, fault: BaseException, caller: str = ""):
        self.path = path
        self.fault = fault
        self.caller = caller
        super().__init__(ErrorCode.EXECUTION_FAILED, path=path, caller=caller, fault=fault)


class ModuleLoadError(LoaderError):
    """
    The only error type raised by `Loader.require`. It always names the module
    that was originally requested; the internal failure is kept on `cause`.
    """

    def __init__(self, requested: str, cause: BaseException, caller: str = ""):
        self.requested = requested
        self.cause = cause
        self.caller = caller
        super().__init__(ErrorCode.MODULE_LOAD_FAILED, requested=requested, caller=caller, cause=cause)

    @property
    def root_cause(self) -> BaseException:
        """Follows nested `ModuleLoadError` causes down to the first non-wrapper error."""
        cause = self.cause
        while isinstance(cause, ModuleLoadError):
            cause = cause.cause
        return cause


class ScriptError(ILError):
    """Raised by the reference IL host for syntax and runtime faults."""

    def __init__(self, code: ErrorCode, file_path: Optional[str] = None, line: Optional[int] = None, **kwargs: Any):
        self.file_path = file_path
        self.line = line
        super().__init__(code, **kwargs)

        location_prefix = ""
        if file_path and line:
            location_prefix = f"Error in '{file_path}' (Line: {line}): "
        elif file_path:
            location_prefix = f"Error in '{file_path}': "
        self.message = location_prefix + self.message
        self.args = (self.message,)


class InternalLoaderError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
