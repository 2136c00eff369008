from contextlib import contextmanager
from typing import Iterable, Iterator, List, NamedTuple, Tuple

from .path_resolver import directory_of


class SearchPathState(NamedTuple):
    """A full copy of both search-path segments, as taken by `SearchPathManager.snapshot`."""

    injected: Tuple[str, ...]
    baseline: Tuple[str, ...]

    @property
    def directories(self) -> Tuple[str, ...]:
        return self.injected + self.baseline


class SearchPath:
    """
    The ordered directories consulted during resolution.

    It is made of two segments: an immutable baseline configured from outside,
    and an injected segment holding one directory per active load, newest first.
    Resolution sees the injected segment ahead of the baseline.
    """

    def __init__(self, baseline: Iterable[str] = ()):
        self._baseline: Tuple[str, ...] = tuple(baseline)
        self._injected: List[str] = []

    @property
    def baseline(self) -> Tuple[str, ...]:
        return self._baseline

    @property
    def injected(self) -> Tuple[str, ...]:
        return tuple(self._injected)

    @property
    def directories(self) -> Tuple[str, ...]:
        return tuple(self._injected) + self._baseline

    def replace(self, injected: Iterable[str], baseline: Iterable[str]) -> None:
        self._injected = list(injected)
        self._baseline = tuple(baseline)

    def __iter__(self) -> Iterator[str]:
        return iter(self.directories)

    def __repr__(self) -> str:
        return f"SearchPath(injected={self._injected!r}, baseline={list(self._baseline)!r})"


class SearchPathManager:
    """Owns the `SearchPath` and scopes caller-directory injection to a single load."""

    def __init__(self, baseline: Iterable[str] = ()):
        self.search_path = SearchPath(baseline)

    @property
    def directories(self) -> Tuple[str, ...]:
        return self.search_path.directories

    def set_baseline(self, directories: Iterable[str]) -> None:
        self.search_path.replace(self.search_path.injected, directories)

    def append_baseline(self, directory: str) -> None:
        self.set_baseline(self.search_path.baseline + (directory,))

    def prepend_baseline(self, directory: str) -> None:
        self.set_baseline((directory,) + self.search_path.baseline)

    def inject(self, caller_file: str) -> None:
        """Puts the directory of `caller_file` at the head of the injected segment."""
        injected = (directory_of(caller_file),) + self.search_path.injected
        self.search_path.replace(injected, self.search_path.baseline)

    def snapshot(self) -> SearchPathState:
        return SearchPathState(self.search_path.injected, self.search_path.baseline)

    def restore(self, state: SearchPathState) -> None:
        self.search_path.replace(state.injected, state.baseline)

    @contextmanager
    def augmented(self, caller_file: str) -> Iterator[SearchPathState]:
        """Injects the directory of `caller_file` for the body of the `with` block only."""
        state = self.snapshot()
        self.inject(caller_file)
        try:
            yield state
        finally:
            self.restore(state)
