"""
Module loader for IL scripts: resolves names against a search path, runs each
module at most once per content signature, and keeps load state restorable.
"""

from .config import LoaderConfig
from .core.load_stack import LoadStack
from .core.loader import SKIPPED, Executor, Loader, LoaderState
from .core.module_cache import ModuleCache
from .core.path_resolver import PathResolver, directory_of
from .core.search_path import SearchPath, SearchPathManager, SearchPathState
from .exceptions import (
    ErrorCode,
    ILError,
    InternalLoaderError,
    LoaderError,
    LoadExecutionError,
    ModuleFileNotFoundError,
    ModuleLoadError,
    NotAFileError,
    ScriptError,
)

__version__ = "1.0.0"
