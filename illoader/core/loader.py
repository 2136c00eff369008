import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional

from illoader.config import LoaderConfig
from illoader.exceptions import LoadExecutionError, LoaderError, ModuleLoadError, NotAFileError

from .load_stack import LoadStack
from .module_cache import ModuleCache
from .path_resolver import PathResolver
from .search_path import SearchPathManager

logger = logging.getLogger(__name__)


class _Skipped:
    """Type of `SKIPPED`, the value `Loader.load` returns when a module is already up to date."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "SKIPPED"


SKIPPED = _Skipped()

# Runs the module at the given absolute path and returns whatever the module produced.
# Faults are reported by raising. The loader is passed so the module can load others.
Executor = Callable[[str, "Loader"], Any]


class LoaderState:
    """
    The process-wide mutable state of loading: the module cache, the load stack and
    the search path. Build one per process (or per test); `reset()` makes every
    module count as unloaded again and empties the load stack.
    """

    def __init__(self, config: Optional[LoaderConfig] = None):
        self.config = config or LoaderConfig()
        self.cache = ModuleCache(self.config.hash_algorithm)
        self.stack = LoadStack()
        self.search_paths = SearchPathManager(self.config.search_path)

    def reset(self) -> None:
        self.cache.reset()
        self.stack.clear()


class Loader:
    """
    The single entry point for loading modules.

    Each call to `load` walks Resolving -> CacheCheck -> (Skipped | Executing) -> Cleanup.
    Cleanup pops the load stack and restores the search path on every exit path, so a
    failing nested load never leaves state behind for its parents or siblings.
    """

    def __init__(self, executor: Executor, state: Optional[LoaderState] = None, resolver: Optional[PathResolver] = None):
        self.executor = executor
        self.state = state or LoaderState()
        self.resolver = resolver or PathResolver()

    @property
    def caller(self) -> str:
        """The module currently being loaded, or "" at top level."""
        return self.state.stack.top()

    def resolve(self, requested: str) -> str:
        return self.resolver.resolve(requested, self.state.search_paths.directories, self.caller)

    def load(self, requested: str) -> Any:
        """
        Loads `requested` unless its content is unchanged since the last check.

        Returns the executor's result, or SKIPPED when the module was already loaded.
        Resolution, file-type and execution errors propagate as the LoaderError
        subclass of the phase that failed.
        """
        absolute_path = self.resolve(requested)

        if not self.resolver.is_file(absolute_path):
            raise NotAFileError(absolute_path)

        if self.state.cache.is_loaded(absolute_path):
            logger.debug("Skipping '%s': content unchanged", absolute_path)
            return SKIPPED

        caller = self.caller
        with self._loading(absolute_path):
            logger.debug("Loading '%s' (depth %d)", absolute_path, self.state.stack.depth)
            try:
                return self.executor(absolute_path, self)
            except LoaderError:
                # A nested load failed; it already describes itself and its caller.
                raise
            except Exception as fault:
                raise LoadExecutionError(absolute_path, fault, caller=caller) from fault

    def require(self, requested: str) -> Any:
        """Same as `load`, but every failure surfaces as a ModuleLoadError naming `requested`."""
        caller = self.caller
        try:
            return self.load(requested)
        except LoaderError as e:
            raise ModuleLoadError(requested, e, caller=caller) from e

    def is_loaded(self, requested: str) -> bool:
        """Whether `requested` resolves to a module recorded with its current content. Does not update the cache."""
        try:
            absolute_path = self.resolve(requested)
        except LoaderError:
            return False
        stored = self.state.cache.signature_of(absolute_path)
        return stored is not None and stored == self.state.cache.compute_signature(absolute_path)

    def forget(self, requested: str) -> bool:
        """Drops one module from the cache so its next load executes it again."""
        return self.state.cache.forget(self.resolve(requested))

    def loaded_modules(self) -> List[str]:
        return self.state.cache.paths()

    def reset(self) -> None:
        self.state.reset()

    @contextmanager
    def _loading(self, absolute_path: str) -> Iterator[None]:
        stack = self.state.stack
        stack.push(absolute_path)
        try:
            with self.state.search_paths.augmented(absolute_path):
                yield
        finally:
            stack.pop()
