import hashlib

import pytest

from illoader.core.module_cache import ModuleCache
from illoader.exceptions import InternalLoaderError


@pytest.fixture
def module_file(tmp_path):
    path = tmp_path / "util.il"
    path.write_text("let x = 1")
    return path


def test_signature_is_sha256_of_file_bytes(module_file):
    cache = ModuleCache()
    assert cache.compute_signature(str(module_file)) == hashlib.sha256(b"let x = 1").hexdigest()


def test_signature_uses_configured_algorithm(module_file):
    cache = ModuleCache(hash_algorithm="sha512")
    assert cache.compute_signature(str(module_file)) == hashlib.sha512(b"let x = 1").hexdigest()


def test_signature_of_unreadable_file_is_absent(tmp_path):
    assert ModuleCache().compute_signature(str(tmp_path / "missing.il")) is None


def test_first_check_is_a_miss_second_is_a_hit(module_file):
    cache = ModuleCache()

    assert cache.is_loaded(str(module_file)) is False
    assert cache.is_loaded(str(module_file)) is True


def test_changed_content_is_a_miss(module_file):
    cache = ModuleCache()
    cache.is_loaded(str(module_file))

    module_file.write_text("let x = 2")

    assert cache.is_loaded(str(module_file)) is False
    assert cache.is_loaded(str(module_file)) is True


def test_is_loaded_always_stores_current_signature(module_file):
    cache = ModuleCache()
    cache.is_loaded(str(module_file))
    module_file.write_text("changed")

    cache.is_loaded(str(module_file))

    assert cache.signature_of(str(module_file)) == hashlib.sha256(b"changed").hexdigest()


def test_unreadable_file_never_counts_as_loaded(tmp_path):
    cache = ModuleCache()
    missing = str(tmp_path / "missing.il")

    assert cache.is_loaded(missing) is False
    assert cache.is_loaded(missing) is False
    assert missing not in cache


def test_reset_forgets_everything(module_file):
    cache = ModuleCache()
    cache.is_loaded(str(module_file))

    cache.reset()

    assert len(cache) == 0
    assert cache.is_loaded(str(module_file)) is False


def test_forget_drops_one_entry(tmp_path, module_file):
    other = tmp_path / "other.il"
    other.write_text("x")
    cache = ModuleCache()
    cache.is_loaded(str(module_file))
    cache.is_loaded(str(other))

    assert cache.forget(str(module_file)) is True
    assert cache.forget(str(module_file)) is False
    assert cache.paths() == [str(other)]
    assert cache.is_loaded(str(module_file)) is False


@pytest.mark.parametrize(
    "key",
    [
        pytest.param("util.il", id="relative"),
        pytest.param("/lib/../lib/util.il", id="not_normalised"),
    ],
)
def test_non_canonical_keys_are_rejected(key):
    with pytest.raises(InternalLoaderError):
        ModuleCache().is_loaded(key)


@pytest.mark.parametrize(
    "algorithm",
    [
        pytest.param("shake_128", id="variable_length"),
        pytest.param("not-a-hash", id="unknown"),
    ],
)
def test_unusable_hash_algorithm_fails_at_construction(algorithm):
    with pytest.raises(ValueError):
        ModuleCache(hash_algorithm=algorithm)


def test_unreadable_entries_are_not_counted(tmp_path, module_file):
    cache = ModuleCache()
    missing = str(tmp_path / "missing.il")
    cache.is_loaded(missing)

    assert len(cache) == 0
    assert cache.paths() == []

    cache.is_loaded(str(module_file))

    assert len(cache) == 1
    assert cache.paths() == [str(module_file)]
    assert missing not in cache
