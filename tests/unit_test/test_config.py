import os

import pytest
from pydantic import ValidationError

from illoader.config import DEFAULT_HASH_ALGORITHM, SEARCH_PATH_ENV_VAR, LoaderConfig
from illoader.core.loader import LoaderState


def test_defaults():
    config = LoaderConfig()
    assert config.search_path == ["."]
    assert config.hash_algorithm == DEFAULT_HASH_ALGORITHM


def test_unknown_hash_algorithm_is_rejected():
    with pytest.raises(ValidationError):
        LoaderConfig(hash_algorithm="not-a-hash")


@pytest.mark.parametrize(
    "algorithm",
    [
        pytest.param("shake_128", id="shake_128"),
        pytest.param("SHAKE_256", id="shake_256_upper_case"),
    ],
)
def test_variable_length_hash_algorithms_are_rejected(algorithm):
    with pytest.raises(ValidationError):
        LoaderConfig(hash_algorithm=algorithm)


def test_hash_algorithm_is_normalised():
    assert LoaderConfig(hash_algorithm="SHA512").hash_algorithm == "sha512"


def test_from_env_splits_search_path():
    environ = {SEARCH_PATH_ENV_VAR: os.pathsep.join(["/libA", "", "/libB"])}
    assert LoaderConfig.from_env(environ).search_path == ["/libA", "/libB"]


def test_from_env_without_variable_keeps_default():
    assert LoaderConfig.from_env({}).search_path == ["."]


def test_explicit_search_path_wins_over_env():
    environ = {SEARCH_PATH_ENV_VAR: "/from-env"}
    assert LoaderConfig.from_env(environ, search_path=["/explicit"]).search_path == ["/explicit"]


def test_state_is_built_from_config():
    state = LoaderState(LoaderConfig(search_path=["/libA", "/libB"], hash_algorithm="sha512"))
    assert state.search_paths.directories == ("/libA", "/libB")
    assert state.cache.hash_algorithm == "sha512"
    assert len(state.stack) == 0
