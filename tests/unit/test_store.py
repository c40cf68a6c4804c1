"""Tests for the view state store."""

import threading

import pytest

from screenkit.state import ViewStateStore


@pytest.mark.unit
class TestViewStateStore:

    def test_initial_state(self):
        store = ViewStateStore({"a": 1})
        assert store.get("a") == 1
        assert store.get("missing", "dflt") == "dflt"
        assert "a" in store
        assert len(store) == 1

    def test_set_returns_changed_keys(self, store):
        assert store.set({"a": 1, "b": 2}) == {"a", "b"}
        assert store.set({"a": 1, "b": 3}) == {"b"}
        assert store.set({"a": 1}) == frozenset()
        assert store.version == 2

    def test_snapshot_is_immutable_and_stable(self, store):
        store.set({"a": 1})
        snapshot = store.snapshot()
        store.set({"a": 2})

        assert snapshot["a"] == 1
        with pytest.raises(TypeError):
            snapshot["a"] = 3  # type: ignore[index]

    def test_subscribe_filters_by_key(self, store):
        seen = []
        store.subscribe({"a"}, lambda snapshot, changed: seen.append((dict(snapshot), changed)))

        store.set({"b": 1})
        store.set({"a": 1, "c": 2})

        assert seen == [({"a": 1, "b": 1, "c": 2}, frozenset({"a", "c"}))]

    def test_subscribe_all_and_unsubscribe(self, store):
        seen = []
        unsubscribe = store.subscribe(None, lambda snapshot, changed: seen.append(changed))

        store.set({"x": 1})
        unsubscribe()
        unsubscribe()
        store.set({"x": 2})

        assert seen == [frozenset({"x"})]

    def test_listener_may_write_back(self, store):
        def derive(snapshot, changed):
            store.set({"double": snapshot["n"] * 2})

        store.subscribe({"n"}, derive)
        store.set({"n": 4})

        assert store.get("double") == 8

    def test_failing_listener_does_not_block_others(self, store):
        seen = []

        def broken(snapshot, changed):
            raise RuntimeError("listener bug")

        store.subscribe(None, broken)
        store.subscribe(None, lambda snapshot, changed: seen.append(changed))
        store.set({"k": 1})

        assert seen == [frozenset({"k"})]

    def test_remove_and_clear(self, store):
        store.set({"a": 1, "b": 2, "c": 3})

        assert store.remove(["a", "zzz"]) == {"a"}
        assert store.clear() == {"b", "c"}
        assert len(store) == 0

    def test_dispose_ignores_writes(self, store):
        seen = []
        store.subscribe(None, lambda snapshot, changed: seen.append(changed))
        store.dispose()

        assert store.disposed
        assert store.set({"a": 1}) == frozenset()
        assert store.remove(["a"]) == frozenset()
        assert "a" not in store
        assert seen == []

    def test_concurrent_writes_to_same_key(self):
        """Racing writers leave one of the written values, never a mix."""
        for _ in range(20):
            store = ViewStateStore()
            barrier = threading.Barrier(2)

            def writer(value):
                barrier.wait()
                store.set({"a": value})

            threads = [threading.Thread(target=writer, args=(v,)) for v in (1, 2)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

            assert store.get("a") in (1, 2)

    def test_concurrent_commits_are_atomic(self):
        store = ViewStateStore({"x": 0, "y": 0})
        torn = []
        stop = threading.Event()

        def reader():
            while not stop.is_set():
                snapshot = store.snapshot()
                if snapshot["x"] != snapshot["y"]:
                    torn.append(dict(snapshot))

        thread = threading.Thread(target=reader)
        thread.start()
        for i in range(1, 500):
            store.set({"x": i, "y": i})
        stop.set()
        thread.join()

        assert torn == []
