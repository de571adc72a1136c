"""Test configuration: repo root on sys.path so tests import ``src.srtrack...`` and ``tests.fakes``."""

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.srtrack.srtrack.main import create_app  # noqa: E402
from tests.fakes import FixedClock, Settings, build_world, sgt  # noqa: E402


@pytest.fixture
def clock():
    return FixedClock(sgt(2026, 3, 2, 9, 0))


@pytest.fixture
def world(clock):
    return build_world(clock)


@pytest.fixture
def client(world):
    app = create_app(settings=Settings, container=world.container)
    return app.test_client()
