import json

import pytest
from fastapi.testclient import TestClient

from api.dependencies import set_service_container
from api.main import create_app
from lifecycle.task_registry import TaskRegistry
from models.config import AppConfig
from services.service_container import ServiceContainer


SEPARATOR = "\n====FRAME====\n"


def make_animation(root, name, metadata=None, art=None):
    """
    Create <root>/<name>/ with optional metadata.json and art.txt.

    `metadata` may be a dict (dumped as JSON) or a raw string; `art` may be a
    list of frames (joined with the separator) or a raw string.
    """
    directory = root / name
    directory.mkdir(parents=True, exist_ok=True)
    if metadata is not None:
        text = metadata if isinstance(metadata, str) else json.dumps(metadata)
        (directory / "metadata.json").write_text(text, encoding="utf-8")
    if art is not None:
        text = art if isinstance(art, str) else SEPARATOR.join(art)
        (directory / "art.txt").write_text(text, encoding="utf-8")
    return directory


@pytest.fixture(autouse=True)
def reset_registry():
    TaskRegistry.reset()
    yield
    TaskRegistry.reset()
    set_service_container(None)


@pytest.fixture
def animation_factory():
    return make_animation


@pytest.fixture
def frames_root(tmp_path):
    """
    Asset tree:
      wave    3 frames, fps 20, no loop
      spin    2 frames, interval 15, loop
      broken  metadata is not JSON
      blank   art has no frames
      nometa  art only
    """
    root = tmp_path / "frames"
    root.mkdir()
    make_animation(root, "wave", {"name": "wave", "fps": 20, "loop": False}, ["A", "B", "C"])
    make_animation(root, "spin", {"loop": True, "interval": 15}, ["|", "/"])
    make_animation(root, "broken", "{not json", ["x"])
    make_animation(root, "blank", {}, "")
    make_animation(root, "nometa", None, ["x"])
    (root / "README.txt").write_text("not an animation", encoding="utf-8")
    return root


@pytest.fixture
def services(frames_root):
    return ServiceContainer.build(AppConfig(), frames_root)


@pytest.fixture
def client(services):
    app = create_app(services)
    with TestClient(app) as test_client:
        yield test_client
