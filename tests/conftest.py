import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from illoader.config import LoaderConfig
from illoader.core.loader import Loader, LoaderState


class RecordingExecutor:
    """
    A fake host executor. It records every execution and what the loader looked like
    during it, and runs an optional per-file action (keyed by base name) that may
    load other modules or raise.
    """

    def __init__(self):
        self.calls = []
        self.stacks = {}
        self.search_paths = {}
        self.actions = {}

    def on(self, file_name, action):
        self.actions[file_name] = action

    def __call__(self, absolute_path, loader):
        name = os.path.basename(absolute_path)
        self.calls.append(absolute_path)
        self.stacks[name] = loader.state.stack.chain()
        self.search_paths[name] = loader.state.search_paths.directories
        action = self.actions.get(name)
        if action is not None:
            return action(loader)
        return f"ran {name}"

    def count(self, file_name):
        return sum(1 for path in self.calls if os.path.basename(path) == file_name)


@pytest.fixture
def create_files(tmp_path):
    """A factory fixture to create a temporary file structure for loader tests."""

    def _create_files(file_dict):
        for file_path, content in file_dict.items():
            path = tmp_path / file_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return tmp_path

    return _create_files


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def make_loader(executor):
    """Builds a Loader around the recording executor with the given baseline search path."""

    def _make_loader(search_path):
        state = LoaderState(LoaderConfig(search_path=[str(p) for p in search_path]))
        return Loader(executor, state)

    return _make_loader
