import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from catacomb.chunk_store import ChunkStore  # noqa: E402
from catacomb.dungeon.config import DungeonConfig  # noqa: E402


def pytest_configure(config):  # register custom marker
    config.addinivalue_line("markers", "structure: seed sweeps over full generation (slower)")


@pytest.fixture(autouse=True)
def _clean_catacomb_env(monkeypatch):
    """Keep developer CATACOMB_* settings from leaking into tests."""
    for key in list(os.environ):
        if key.startswith("CATACOMB_"):
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture()
def config():
    return DungeonConfig(size=32, seed=1234)


@pytest.fixture()
def store():
    return ChunkStore(DungeonConfig(size=32), seed=20240607)
