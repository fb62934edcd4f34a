"""
Per-hand pinch filter.

Turns one hand's raw landmarks into a debounced grab state and a smoothed
anchor point (midpoint of thumb tip and index tip).

The filter itself holds only configuration. All memory lives in a PinchState
owned by the caller, one per tracked slot, so several hands can share one
filter.
"""
from dataclasses import dataclass
from typing import Optional
import logging

from .config import GestureConfig
from .geometry import Point3, distance_3d, ema, ema_point, midpoint_3d, to_centered
from .landmarks import HandLandmarks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GestureState:
    """Snapshot of one hand's gesture for one frame."""
    is_grabbing: bool = False
    hand_position: Optional[Point3] = None
    pinch_distance: float = 1.0
    confidence: int = 0  # 0 only when no hand is present


NO_HAND = GestureState()


@dataclass
class PinchState:
    """Smoothing and debounce memory for one tracked hand slot."""
    smoothed_position: Optional[Point3] = None
    smoothed_pinch_distance: float = 1.0
    is_grabbing: bool = False
    pending_target: Optional[bool] = None
    pending_count: int = 0

    def reset(self) -> None:
        self.smoothed_position = None
        self.smoothed_pinch_distance = 1.0
        self.is_grabbing = False
        self.clear_pending()

    def clear_pending(self) -> None:
        self.pending_target = None
        self.pending_count = 0


class PinchFilter:
    """
    Smoothing, hysteresis and debounce for the thumb-index pinch.

    Per frame:
    1. Raw pinch distance and anchor from thumb tip / index tip
    2. Anchor mapped to centered coordinates
    3. EMA on anchor and pinch distance
    4. Hysteresis: close below pinch_threshold, open above pinch_release
    5. Debounce: a new state must hold for debounce_frames frames
    """

    def __init__(self, config: GestureConfig):
        """
        Initialize pinch filter.

        Args:
            config: Gesture thresholds and smoothing factors
        """
        self._config = config

    def update(self, state: PinchState, landmarks: HandLandmarks) -> Optional[GestureState]:
        """
        Advance `state` by one frame of landmarks.

        Returns:
            GestureState for this frame, or None when the hand is incomplete.
            An incomplete hand leaves `state` untouched.
        """
        if landmarks is None or not landmarks.is_complete():
            logger.debug("Incomplete hand skipped, keeping smoothed state")
            return None

        thumb = tuple(float(v) for v in landmarks.thumb_tip[:3])
        index = tuple(float(v) for v in landmarks.index_tip[:3])

        raw_pinch = distance_3d(thumb, index)
        raw_position = to_centered(midpoint_3d(thumb, index))

        # First frame for a slot seeds the anchor instead of easing in from zero
        if state.smoothed_position is None:
            state.smoothed_position = raw_position
        else:
            state.smoothed_position = ema_point(
                state.smoothed_position, raw_position, self._config.position_smoothing
            )

        state.smoothed_pinch_distance = ema(
            state.smoothed_pinch_distance, raw_pinch, self._config.pinch_smoothing
        )

        target = self._hysteresis_target(state.is_grabbing, state.smoothed_pinch_distance)
        self._debounce(state, target)

        return GestureState(
            is_grabbing=state.is_grabbing,
            hand_position=state.smoothed_position,
            pinch_distance=state.smoothed_pinch_distance,
            confidence=1,
        )

    def _hysteresis_target(self, is_grabbing: bool, pinch_distance: float) -> bool:
        if not is_grabbing and pinch_distance < self._config.pinch_threshold:
            return True
        if is_grabbing and pinch_distance > self._config.pinch_release:
            return False
        return is_grabbing

    def _debounce(self, state: PinchState, target: bool) -> None:
        if target == state.is_grabbing:
            # Signal came back before the change was confirmed
            state.clear_pending()
            return

        if state.pending_target == target:
            state.pending_count += 1
        else:
            state.pending_target = target
            state.pending_count = 1

        if state.pending_count >= self._config.debounce_frames:
            state.is_grabbing = target
            state.clear_pending()
            logger.debug("Pinch %s (distance %.3f)",
                         "closed" if target else "released",
                         state.smoothed_pinch_distance)
