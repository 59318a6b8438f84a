import sys, os

# Ensure src is on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, 'src')
for path in (SRC, ROOT):
    if path not in sys.path:
        sys.path.insert(0, path)

import pytest

from ecs.events.bus import EventBus
from tests.helpers import make_session

__all__ = [
    "make_session",
]


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def session(bus):
    """Level 1 session on a freshly populated, seeded board."""
    return make_session(bus, seed=7)
