from typing import Iterator, List, Tuple


class LoadStack:
    """The modules currently being loaded. Plain stack discipline, duplicates allowed."""

    def __init__(self):
        self._paths: List[str] = []

    def push(self, path: str) -> None:
        self._paths.append(path)

    def pop(self) -> str:
        """Removes and returns the most recent path, or "" if the stack is empty."""
        if not self._paths:
            return ""
        return self._paths.pop()

    def top(self) -> str:
        return self._paths[-1] if self._paths else ""

    def clear(self) -> None:
        self._paths.clear()

    def chain(self) -> Tuple[str, ...]:
        """Oldest first, i.e. the order in which the nested loads were started."""
        return tuple(self._paths)

    @property
    def depth(self) -> int:
        return len(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[str]:
        return reversed(self._paths)

    def __repr__(self) -> str:
        return f"LoadStack({list(self)!r})"
