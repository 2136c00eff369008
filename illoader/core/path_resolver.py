import logging
import os
from typing import Callable, Iterable

from illoader.config import HOME_MARKER
from illoader.exceptions import ModuleFileNotFoundError

logger = logging.getLogger(__name__)


def directory_of(path: str) -> str:
    """
    Returns the text before the last path separator, or "." when there is none.
    A path whose only separator is the leading root keeps the root ("/x" -> "/").
    """
    separators = [os.sep] + ([os.altsep] if os.altsep else [])
    cut = max(path.rfind(sep) for sep in separators)
    if cut < 0:
        return "."
    if cut == 0:
        return path[0]
    return path[:cut]


def is_anchored(requested: str) -> bool:
    """True for names that bypass the search path: absolute paths and home-relative paths."""
    return os.path.isabs(requested) or requested.startswith(HOME_MARKER)


def canonicalize(path: str) -> str:
    return os.path.abspath(os.path.expanduser(path))


class PathResolver:
    """
    Turns a requested module name plus a search path into one canonical absolute path.
    The file-existence predicate is injectable so the resolver can be driven without a disk.
    """

    def __init__(self, is_file: Callable[[str], bool] = os.path.isfile, exists: Callable[[str], bool] = os.path.exists):
        self.is_file = is_file
        self.exists = exists

    def resolve(self, requested: str, search_path: Iterable[str], current_caller: str = "") -> str:
        """
        Resolves `requested` to an absolute path.

        Anchored names (absolute or starting with the home marker) are canonicalised and
        returned directly; the search path is never consulted for them. Any other name is
        joined to each search-path entry in order and the first existing regular file wins.

        Raises ModuleFileNotFoundError carrying `requested` and `current_caller`.
        """
        if is_anchored(requested):
            absolute_path = canonicalize(requested)
            if not self.exists(absolute_path):
                raise ModuleFileNotFoundError(requested, current_caller)
            return absolute_path

        for directory in search_path:
            candidate = os.path.join(directory, requested)
            if self.is_file(candidate):
                absolute_path = canonicalize(candidate)
                logger.debug("Resolved '%s' to '%s' via '%s'", requested, absolute_path, directory)
                return absolute_path

        raise ModuleFileNotFoundError(requested, current_caller)
