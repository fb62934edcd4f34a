"""
Two-hand aggregation: left/right role assignment and the pull gesture.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import GestureConfig
from .geometry import Point2, distance_2d, midpoint_2d
from .pinch_filter import GestureState


@dataclass(frozen=True)
class TwoHandGestureState:
    """Snapshot of the two-hand gesture for one frame."""
    both_pinching: bool = False
    pull_distance: float = 0.0
    center_position: Optional[Point2] = None
    left_hand: Optional[GestureState] = None
    right_hand: Optional[GestureState] = None
    is_pulling: bool = False


NO_HANDS = TwoHandGestureState()


def assign_roles(
    hand0: Optional[GestureState],
    hand1: Optional[GestureState],
    handedness0: Optional[str] = None,
    handedness1: Optional[str] = None,
) -> Tuple[Optional[GestureState], Optional[GestureState]]:
    """
    Decide which hand is left and which is right for this frame.

    Detector labels win whenever present, even against the hands' relative
    x position. An unlabelled first hand falls back to comparing centered x;
    an unlabelled second hand takes whichever role is still free, left first.

    Returns:
        (left_hand, right_hand), either may be None
    """
    left: Optional[GestureState] = None
    right: Optional[GestureState] = None

    if hand0 is not None:
        if handedness0 == "Left":
            left = hand0
        elif handedness0 == "Right":
            right = hand0
        elif hand0.hand_position is not None and (
            hand1 is None
            or hand1.hand_position is None
            or hand0.hand_position.x < hand1.hand_position.x
        ):
            left = hand0
        else:
            right = hand0

    if hand1 is not None:
        if handedness1 == "Left":
            left = hand1
        elif handedness1 == "Right":
            right = hand1
        elif left is None:
            left = hand1
        else:
            right = hand1

    return left, right


class TwoHandAggregator:
    """
    Combines two per-hand snapshots into a TwoHandGestureState.

    Stateless between frames: no debounce happens here because both inputs
    are already smoothed and debounced.
    """

    def __init__(self, config: GestureConfig):
        self._config = config

    def update(
        self,
        hand0: Optional[GestureState],
        hand1: Optional[GestureState],
        handedness0: Optional[str] = None,
        handedness1: Optional[str] = None,
    ) -> TwoHandGestureState:
        left, right = assign_roles(hand0, hand1, handedness0, handedness1)

        both_pinching = bool(
            left is not None and right is not None
            and left.is_grabbing and right.is_grabbing
        )

        pull_distance = 0.0
        center_position = None
        if (left is not None and right is not None
                and left.hand_position is not None and right.hand_position is not None):
            pull_distance = distance_2d(left.hand_position, right.hand_position)
            center_position = midpoint_2d(left.hand_position, right.hand_position)

        is_pulling = both_pinching and pull_distance > self._config.min_pull_distance

        return TwoHandGestureState(
            both_pinching=both_pinching,
            pull_distance=pull_distance,
            center_position=center_position,
            left_hand=left,
            right_hand=right,
            is_pulling=is_pulling,
        )
