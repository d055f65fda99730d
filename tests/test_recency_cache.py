from cursor_tracker.cache import CACHE_CAPACITY, CacheEntry, CursorPosition, RecencyCache


def make_cache(*keys: str) -> RecencyCache:
    cache = RecencyCache()
    for index, key in enumerate(keys):
        cache.set(key, CursorPosition(index, index))
    return cache


def test_capacity_is_fifty() -> None:
    assert CACHE_CAPACITY == 50
    assert RecencyCache().capacity == 50


def test_inserting_51_keys_evicts_the_first() -> None:
    keys = [f"doc-{i}.md" for i in range(51)]
    cache = make_cache(*keys)

    assert len(cache) == 50
    assert not cache.has("doc-0.md")
    for index, key in enumerate(keys[1:], start=1):
        assert cache.get(key) == CursorPosition(index, index)


def test_size_never_exceeds_capacity() -> None:
    cache = RecencyCache()
    for i in range(200):
        cache.set(f"doc-{i % 73}.md", CursorPosition(i, 0))
        assert len(cache) <= CACHE_CAPACITY


def test_get_promotes_key_out_of_eviction() -> None:
    cache = make_cache("A", "B", "C", *[f"filler-{i}" for i in range(47)])
    assert len(cache) == 50

    cache.get("A")
    cache.set("newcomer", CursorPosition(9, 9))

    assert cache.has("A")
    assert not cache.has("B")
    assert cache.has("C")


def test_has_does_not_promote() -> None:
    cache = make_cache(*[f"doc-{i}" for i in range(50)])

    assert cache.has("doc-0")
    cache.set("doc-50", CursorPosition(1, 1))

    assert not cache.has("doc-0")


def test_overwrite_promotes_without_growing() -> None:
    cache = make_cache("a", "b", "c")

    cache.set("a", CursorPosition(7, 3))

    assert len(cache) == 3
    assert [entry.key for entry in cache.entries_oldest_first()] == ["b", "c", "a"]
    assert cache.get("a") == CursorPosition(7, 3)


def test_get_missing_returns_none() -> None:
    assert RecencyCache().get("nope") is None


def test_delete_missing_is_noop() -> None:
    cache = make_cache("a")

    assert cache.delete("missing") is False
    assert cache.delete("a") is True
    assert len(cache) == 0


def test_entries_oldest_first_is_restartable() -> None:
    cache = make_cache("a", "b")
    cache.get("a")

    first = cache.entries_oldest_first()
    second = cache.entries_oldest_first()

    assert first == second == (
        CacheEntry("b", CursorPosition(1, 1)),
        CacheEntry("a", CursorPosition(0, 0)),
    )
    assert [entry.key for entry in cache.entries_oldest_first()] == ["b", "a"]


def test_cursor_position_helpers() -> None:
    assert CursorPosition().is_origin
    assert not CursorPosition(0, 1).is_origin
    assert CursorPosition.from_tuple((4, 2)).as_tuple() == (4, 2)
