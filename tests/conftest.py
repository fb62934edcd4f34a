import pytest

from gestures.config import GestureConfig
from gestures.landmarks import HandLandmarks


def build_hand(pinch=0.1, center=(0.5, 0.5, 0.0), handedness=None):
    """
    Synthetic hand: every landmark at `center`, except thumb and index tips
    which sit `pinch` apart along x, centered on `center`.
    """
    cx, cy, cz = center
    points = [(cx, cy, cz)] * 21
    points[HandLandmarks.THUMB_TIP] = (cx - pinch / 2, cy, cz)
    points[HandLandmarks.INDEX_TIP] = (cx + pinch / 2, cy, cz)
    return HandLandmarks(landmarks=points, handedness=handedness)


@pytest.fixture
def config():
    return GestureConfig()


@pytest.fixture
def make_hand():
    return build_hand
