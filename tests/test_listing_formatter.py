import pytest

from models.animation import Animation, AnimationMetadata
from services.asset_source import AssetSource
from services.animation_store import AnimationStore
from services.listing_formatter import ListingFormatter, format_entry, format_number


@pytest.fixture
def store(frames_root):
    return AnimationStore(AssetSource(frames_root))


@pytest.mark.parametrize("value, expected", [
    (20, "20"),
    (12.0, "12"),
    (12.5, "12.5"),
])
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_format_entry_with_fps():
    animation = Animation(
        name="wave",
        metadata=AnimationMetadata(name="wave", fps=20, loop=False),
        frames=("A", "B", "C"),
    )
    assert format_entry("wave", animation) == "- wave (fps 20, loop false, frames 3)"


def test_format_entry_with_interval_only():
    animation = Animation(
        name="spin",
        metadata=AnimationMetadata(name="spin", interval=15, loop=True),
        frames=("|", "/"),
    )
    assert format_entry("spin", animation) == "- spin (no fps, interval 15ms, loop true, frames 2)"


def test_format_entry_hides_non_positive_interval():
    animation = Animation(
        name="x",
        metadata=AnimationMetadata(name="x", interval=0, fps=12.0),
        frames=("a",),
    )
    assert format_entry("x", animation) == "- x (fps 12, loop false, frames 1)"


def test_format_entry_uses_metadata_name():
    animation = Animation(
        name="Pretty",
        metadata=AnimationMetadata(name="Pretty"),
        frames=("a",),
    )
    assert format_entry("dir-name", animation) == "- Pretty (no fps, loop false, frames 1)"


def test_format_entry_error_uses_directory_name():
    animation = Animation.failed("broken", "Invalid JSON in metadata.json")
    assert format_entry("broken", animation) == "- broken (error: Invalid JSON in metadata.json)"


@pytest.mark.asyncio
async def test_format_listing(store):
    listing = await ListingFormatter(store).format(["wave", "spin", "broken"])

    assert listing == (
        "Available animations:\n"
        "- wave (fps 20, loop false, frames 3)\n"
        "- spin (no fps, interval 15ms, loop true, frames 2)\n"
        "- broken (error: Invalid JSON in metadata.json)\n"
    )


@pytest.mark.asyncio
async def test_format_empty_listing(store):
    assert await ListingFormatter(store).format([]) == "Available animations:\n(none found in frames/)\n"


@pytest.mark.asyncio
async def test_listing_warms_cache(store):
    await ListingFormatter(store).format(["wave", "spin"])
    await store.load("wave")

    assert "wave" in store
    assert "spin" in store
    assert store.parse_count == 2
