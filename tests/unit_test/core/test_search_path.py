import pytest

from illoader.core.search_path import SearchPath, SearchPathManager, SearchPathState


def test_injected_segment_precedes_baseline():
    manager = SearchPathManager(["/libA", "/libB"])

    manager.inject("/project/main.il")

    assert manager.directories == ("/project", "/libA", "/libB")


def test_latest_injection_is_the_head():
    manager = SearchPathManager(["/lib"])

    manager.inject("/project/main.il")
    manager.inject("/project/sub/helper.il")

    assert manager.directories == ("/project/sub", "/project", "/lib")
    assert manager.search_path.injected == ("/project/sub", "/project")
    assert manager.search_path.baseline == ("/lib",)


def test_inject_bare_name_uses_current_directory():
    manager = SearchPathManager([])
    manager.inject("main.il")
    assert manager.directories == (".",)


def test_snapshot_and_restore_round_trip_exactly():
    manager = SearchPathManager(["/libA", "/libB"])
    manager.inject("/outer/a.il")
    state = manager.snapshot()

    manager.inject("/inner/b.il")
    manager.set_baseline(["/other"])
    manager.restore(state)

    assert manager.directories == ("/outer", "/libA", "/libB")
    assert manager.snapshot() == state


def test_snapshot_is_independent_of_later_changes():
    manager = SearchPathManager(["/lib"])
    state = manager.snapshot()

    manager.inject("/x/y.il")

    assert state == SearchPathState(injected=(), baseline=("/lib",))
    assert state.directories == ("/lib",)


def test_augmented_restores_after_body():
    manager = SearchPathManager(["/lib"])

    with manager.augmented("/project/main.il") as before:
        assert manager.directories == ("/project", "/lib")
        assert before.directories == ("/lib",)

    assert manager.directories == ("/lib",)


def test_augmented_restores_when_body_raises():
    manager = SearchPathManager(["/lib"])

    with pytest.raises(RuntimeError):
        with manager.augmented("/project/main.il"):
            manager.append_baseline("/added-during-load")
            raise RuntimeError("boom")

    assert manager.directories == ("/lib",)


def test_baseline_helpers_keep_injected_segment():
    manager = SearchPathManager(["/b"])
    manager.inject("/project/main.il")

    manager.prepend_baseline("/a")
    manager.append_baseline("/c")

    assert manager.directories == ("/project", "/a", "/b", "/c")


def test_search_path_iterates_in_resolution_order():
    search_path = SearchPath(["/a", "/b"])
    search_path.replace(["/x"], search_path.baseline)
    assert list(search_path) == ["/x", "/a", "/b"]
