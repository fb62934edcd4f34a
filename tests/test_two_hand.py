import pytest

from gestures.geometry import Point3
from gestures.pinch_filter import GestureState
from gestures.two_hand import NO_HANDS, TwoHandAggregator, assign_roles


def hand(x=0.0, y=0.0, z=0.0, grabbing=True):
    return GestureState(is_grabbing=grabbing, hand_position=Point3(x, y, z),
                        pinch_distance=0.02, confidence=1)


@pytest.fixture
def aggregator(config):
    return TwoHandAggregator(config)


class TestAssignRoles:
    def test_labels_assign_directly(self):
        a, b = hand(x=-0.5), hand(x=0.5)
        assert assign_roles(a, b, "Right", "Left") == (b, a)

    def test_labels_beat_geometry(self):
        # Crossed hands: the "Left" hand is further right
        a, b = hand(x=0.6), hand(x=-0.6)
        left, right = assign_roles(a, b, "Left", "Right")
        assert left is a
        assert right is b

    def test_unlabelled_hands_ordered_by_x(self):
        a, b = hand(x=0.4), hand(x=-0.2)
        left, right = assign_roles(a, b)
        assert left is b
        assert right is a

        left, right = assign_roles(b, a)
        assert left is b
        assert right is a

    def test_equal_x_second_hand_becomes_left(self):
        a, b = hand(x=0.1), hand(x=0.1)
        left, right = assign_roles(a, b)
        # hand 0 is not strictly smaller, so it goes right and hand 1 takes left
        assert left is b
        assert right is a

    def test_single_unlabelled_hand_is_left(self):
        a = hand(x=0.3)
        assert assign_roles(a, None) == (a, None)
        assert assign_roles(None, a) == (a, None)

    def test_hand_without_position_falls_back_to_right(self):
        a = GestureState(is_grabbing=True, hand_position=None, pinch_distance=0.02, confidence=1)
        b = hand(x=0.9)
        left, right = assign_roles(a, b)
        assert right is a
        assert left is b

    def test_unlabelled_second_hand_takes_free_role(self):
        a, b = hand(x=-0.5), hand(x=-0.9)
        left, right = assign_roles(a, b, "Left", None)
        assert left is a
        assert right is b

    def test_duplicate_labels_keep_the_later_hand(self):
        a, b = hand(x=-0.5), hand(x=0.5)
        assert assign_roles(a, b, "Left", "Left") == (b, None)

    def test_unknown_label_uses_geometry(self):
        a, b = hand(x=0.5), hand(x=-0.5)
        assert assign_roles(a, b, "Unknown", None) == (b, a)


def test_pull_requires_both_pinching_and_separation(aggregator):
    state = aggregator.update(hand(x=-0.1), hand(x=0.1), "Left", "Right")
    assert state.both_pinching is True
    assert state.pull_distance == pytest.approx(0.2)
    assert state.is_pulling is True


def test_no_pull_when_close_together(aggregator):
    state = aggregator.update(hand(x=-0.05), hand(x=0.05), "Left", "Right")
    assert state.both_pinching is True
    assert state.pull_distance == pytest.approx(0.1)
    assert state.is_pulling is False


def test_no_pull_when_one_hand_open(aggregator):
    state = aggregator.update(hand(x=-0.5), hand(x=0.5, grabbing=False), "Left", "Right")
    assert state.both_pinching is False
    assert state.pull_distance == pytest.approx(1.0)
    assert state.is_pulling is False


def test_single_hand_never_pulls(aggregator):
    state = aggregator.update(hand(x=0.5), None, "Right", None)
    assert state.right_hand is not None
    assert state.left_hand is None
    assert state.both_pinching is False
    assert state.pull_distance == 0.0
    assert state.center_position is None
    assert state.is_pulling is False


def test_no_hands(aggregator):
    assert aggregator.update(None, None) == NO_HANDS


def test_pull_distance_ignores_depth(aggregator):
    state = aggregator.update(hand(x=-0.1, z=-0.5), hand(x=0.1, z=0.5), "Left", "Right")
    assert state.pull_distance == pytest.approx(0.2)


def test_center_position_is_midpoint(aggregator):
    state = aggregator.update(hand(x=-0.4, y=0.2), hand(x=0.2, y=-0.6), "Left", "Right")
    assert state.center_position.x == pytest.approx(-0.1)
    assert state.center_position.y == pytest.approx(-0.2)


def test_pulling_hands_apart(aggregator):
    separations = [0.10, 0.12, 0.14, 0.17, 0.20]
    states = [
        aggregator.update(hand(x=-d / 2), hand(x=d / 2), "Left", "Right")
        for d in separations
    ]

    assert [s.is_pulling for s in states] == [False, False, False, True, True]
    assert all(s.both_pinching for s in states)
    assert states[-1].pull_distance == pytest.approx(0.20)


def test_custom_min_pull_distance():
    from gestures.config import GestureConfig

    aggregator = TwoHandAggregator(GestureConfig(min_pull_distance=0.5))
    state = aggregator.update(hand(x=-0.2), hand(x=0.2), "Left", "Right")
    assert state.is_pulling is False
