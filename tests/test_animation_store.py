import asyncio

import pytest

from models.errors import MalformedMetadataError, NoFramesFoundError
from services.asset_source import AssetSource
from services.animation_store import AnimationStore, coerce_loop, parse_metadata, split_frames


@pytest.fixture
def store(frames_root):
    return AnimationStore(AssetSource(frames_root))


# ---------------------------------------------------------------------------
# Metadata parsing
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("value, expected", [
    (True, True),
    (False, False),
    (None, False),
    (0, False),
    (0.0, False),
    (float("nan"), False),
    (2, True),
    (-1, True),
    ("", False),
    ("no", True),
    ([], True),
    ({}, True),
])
def test_coerce_loop(value, expected):
    assert coerce_loop(value) is expected


def test_parse_metadata_normalizes_fields():
    meta = parse_metadata('{"name": "fire", "loop": 1, "fps": 12.5, "interval": 40.9}', "dir")

    assert meta.name == "fire"
    assert meta.loop is True
    assert meta.fps == 12.5
    assert meta.interval == 40


def test_parse_metadata_name_falls_back_to_directory():
    assert parse_metadata('{"name": "   "}', "dir").name == "dir"
    assert parse_metadata('{"name": 5}', "dir").name == "dir"
    assert parse_metadata("{}", "dir").name == "dir"


def test_parse_metadata_drops_unusable_timing():
    meta = parse_metadata('{"fps": -5, "interval": "40"}', "dir")
    assert meta.fps is None
    assert meta.interval is None

    meta = parse_metadata('{"fps": "12", "interval": true}', "dir")
    assert meta.fps is None
    assert meta.interval is None


def test_parse_metadata_invalid_json():
    with pytest.raises(MalformedMetadataError, match="Invalid JSON in metadata.json"):
        parse_metadata("{not json", "dir")


@pytest.mark.parametrize("raw", ["[1, 2]", "null", "42", '"text"'])
def test_parse_metadata_non_object(raw):
    with pytest.raises(MalformedMetadataError, match="Invalid metadata content"):
        parse_metadata(raw, "dir")


# ---------------------------------------------------------------------------
# Frame splitting
# ---------------------------------------------------------------------------

def test_split_frames_keeps_order():
    assert split_frames("one\n====FRAME====\ntwo\n====FRAME====\nthree") == ("one", "two", "three")


def test_split_frames_normalizes_crlf():
    assert split_frames("A\r\n====FRAME====\r\nB\r\n") == ("A", "B\n")


def test_split_frames_single_frame_without_separator():
    assert split_frames("  ___\n (o o)") == ("  ___\n (o o)",)


def test_split_frames_keeps_empty_frames_when_one_has_content():
    assert split_frames("A\n====FRAME====\n") == ("A", "")


@pytest.mark.parametrize("raw", ["", "\n====FRAME====\n", "\r\n====FRAME====\r\n"])
def test_split_frames_all_empty(raw):
    with pytest.raises(NoFramesFoundError, match="No frames found in art.txt"):
        split_frames(raw)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_load_parses_animation(store):
    animation = await store.load("wave")

    assert animation.ok
    assert animation.frames == ("A", "B", "C")
    assert animation.metadata.fps == 20
    assert animation.loop is False
    assert store.parse_count == 1
    assert "wave" in store


@pytest.mark.asyncio
async def test_load_is_cached(store):
    first = await store.load("spin")
    second = await store.load("spin")

    assert first is second
    assert store.parse_count == 1
    assert store.get("spin") is first


@pytest.mark.asyncio
async def test_name_comes_from_metadata(frames_root, animation_factory, store):
    animation_factory(frames_root, "alias", {"name": "Fancy Name"}, ["x"])

    animation = await store.load("alias")

    assert animation.name == "Fancy Name"
    assert store.cached_names() == ["alias"]


@pytest.mark.asyncio
@pytest.mark.parametrize("name, message", [
    ("broken", "Invalid JSON in metadata.json"),
    ("blank", "No frames found in art.txt"),
])
async def test_load_failure_is_reported(store, name, message):
    animation = await store.load(name)

    assert not animation.ok
    assert animation.error == message
    assert animation.metadata is None
    assert animation.frames == ()


@pytest.mark.asyncio
async def test_missing_metadata_file(store):
    animation = await store.load("nometa")

    assert not animation.ok
    assert animation.error.startswith("Cannot read metadata.json")


@pytest.mark.asyncio
async def test_failures_are_cached(frames_root, store):
    first = await store.load("broken")
    (frames_root / "broken" / "metadata.json").write_text('{"loop": true}', encoding="utf-8")

    second = await store.load("broken")

    assert second is first
    assert second.error == "Invalid JSON in metadata.json"
    assert store.parse_count == 1


@pytest.mark.asyncio
async def test_entries_are_never_refreshed(frames_root, store):
    await store.load("wave")
    (frames_root / "wave" / "art.txt").write_text("changed", encoding="utf-8")

    animation = await store.load("wave")

    assert animation.frames == ("A", "B", "C")


@pytest.mark.asyncio
async def test_concurrent_first_loads_parse_once(store):
    results = await asyncio.gather(*(store.load("wave") for _ in range(10)))

    assert store.parse_count == 1
    assert all(result is results[0] for result in results)
    assert len(store) == 1


@pytest.mark.asyncio
async def test_concurrent_loads_of_different_names(store):
    wave, spin = await asyncio.gather(store.load("wave"), store.load("spin"))

    assert wave.frames == ("A", "B", "C")
    assert spin.frames == ("|", "/")
    assert store.parse_count == 2


class StallingSource:
    """Asset source whose reads hang or blow up with a non-asset error."""

    metadata_file = "metadata.json"
    art_file = "art.txt"

    def __init__(self, error=None):
        self.error = error
        self.reads = 0

    async def read(self, name):
        self.reads += 1
        if self.error is not None:
            raise self.error
        await asyncio.sleep(10)


@pytest.mark.asyncio
async def test_unexpected_read_error_releases_lock():
    source = StallingSource(error=RuntimeError("disk gone"))
    store = AnimationStore(source)

    with pytest.raises(RuntimeError):
        await store.load("wave")
    with pytest.raises(RuntimeError):
        await store.load("wave")

    assert source.reads == 2
    assert store.get("wave") is None
    assert store._locks == {}


@pytest.mark.asyncio
async def test_cancelled_load_releases_lock():
    store = AnimationStore(StallingSource())
    first = asyncio.create_task(store.load("wave"))
    second = asyncio.create_task(store.load("wave"))
    await asyncio.sleep(0.01)

    first.cancel()
    second.cancel()
    results = await asyncio.gather(first, second, return_exceptions=True)

    assert all(isinstance(result, asyncio.CancelledError) for result in results)
    assert store._locks == {}
    assert "wave" not in store


@pytest.mark.asyncio
async def test_waiter_parses_when_lock_holder_left_nothing_cached(frames_root):
    store = AnimationStore(AssetSource(frames_root))
    lock = asyncio.Lock()
    await lock.acquire()
    store._locks["wave"] = lock
    store._lock_users["wave"] = 1

    waiter = asyncio.create_task(store.load("wave"))
    await asyncio.sleep(0.01)
    store._lock_users["wave"] -= 1
    lock.release()
    animation = await asyncio.wait_for(waiter, timeout=1.0)

    assert animation.frames == ("A", "B", "C")
    assert store.parse_count == 1
    assert store._locks == {}


# ---------------------------------------------------------------------------
# Asset source
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_names_returns_directories_only(frames_root):
    names = await AssetSource(frames_root).list_names()

    assert sorted(names) == ["blank", "broken", "nometa", "spin", "wave"]


@pytest.mark.asyncio
async def test_list_names_missing_root(tmp_path):
    assert await AssetSource(tmp_path / "missing").list_names() == []


@pytest.mark.asyncio
@pytest.mark.parametrize("name, expected", [
    ("wave", True),
    ("README.txt", False),
    ("unknown", False),
    ("", False),
    (".", False),
    ("..", False),
    ("../frames", False),
    ("wave/extra", False),
])
async def test_exists(frames_root, name, expected):
    assert await AssetSource(frames_root).exists(name) is expected
