"""
Per-frame gesture pipeline.

Runs the pinch filter for every hand the detector reported, then the two-hand
aggregator, and produces one snapshot pair per frame.
"""
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence
import logging

from .config import GestureConfig
from .landmarks import HandLandmarks
from .pinch_filter import NO_HAND, GestureState, PinchFilter, PinchState
from .two_hand import NO_HANDS, TwoHandAggregator, TwoHandGestureState

logger = logging.getLogger(__name__)

MAX_HANDS = 2


@dataclass(frozen=True)
class FrameResult:
    """Snapshot pair emitted once per processed frame."""
    gesture: GestureState            # Slot 0, for single-hand consumers
    two_hand: TwoHandGestureState


class GestureTracker:
    """
    Owns the per-slot pinch state and turns detector frames into gestures.

    Slot state is keyed by the detector's reporting order, which is only a
    best-effort identity: if hands swap order, or a different hand shows up
    in a slot, smoothing carries over.

    Observers are plain callables invoked synchronously, once per frame:
        tracker = GestureTracker(config.gestures, on_two_hand=handle_pull)
        result = tracker.process_frame(hands)
    """

    def __init__(
        self,
        config: GestureConfig,
        on_gesture: Optional[Callable[[GestureState], None]] = None,
        on_two_hand: Optional[Callable[[TwoHandGestureState], None]] = None,
    ):
        self._config = config
        self._filter = PinchFilter(config)
        self._aggregator = TwoHandAggregator(config)
        self._slots: Dict[int, PinchState] = {}
        self._on_gesture = on_gesture
        self._on_two_hand = on_two_hand
        self._frame_count = 0

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def active_slots(self) -> List[int]:
        return sorted(self._slots)

    def slot_state(self, slot: int) -> Optional[PinchState]:
        """Current memory for a slot, or None if the slot is not tracked."""
        return self._slots.get(slot)

    def process_frame(self, hands: Sequence[HandLandmarks]) -> FrameResult:
        """
        Process one detector frame.

        Args:
            hands: Hands in detector order, at most MAX_HANDS. Callers with a
                   larger feed must truncate before calling.

        Returns:
            FrameResult with the slot 0 gesture and the two-hand gesture.

        Raises:
            ValueError: If more than MAX_HANDS hands are passed. This guards
                the caller contract above; detector frames never take this path
                because the frame sources truncate first.
        """
        hands = list(hands or [])
        if len(hands) > MAX_HANDS:
            raise ValueError(f"At most {MAX_HANDS} hands per frame, got {len(hands)}")

        self._frame_count += 1

        if not hands:
            if self._slots:
                logger.debug("No hands reported, resetting %d slot(s)", len(self._slots))
            self.reset()
            return self._emit(FrameResult(gesture=NO_HAND, two_hand=NO_HANDS))

        # Slots the detector stopped reporting lose their memory
        for slot in [s for s in self._slots if s >= len(hands)]:
            logger.debug("Slot %d disappeared, discarding its state", slot)
            del self._slots[slot]

        gestures: List[Optional[GestureState]] = []
        for slot, hand in enumerate(hands):
            state = self._slots.get(slot)
            if state is None:
                state = PinchState()
            gesture = self._filter.update(state, hand)
            if gesture is not None and slot not in self._slots:
                self._slots[slot] = state
            gestures.append(gesture)

        while len(gestures) < MAX_HANDS:
            gestures.append(None)

        two_hand = self._aggregator.update(
            gestures[0],
            gestures[1],
            hands[0].label if hands[0] is not None else None,
            hands[1].label if len(hands) > 1 and hands[1] is not None else None,
        )

        single = gestures[0] if gestures[0] is not None else NO_HAND
        return self._emit(FrameResult(gesture=single, two_hand=two_hand))

    def reset(self) -> None:
        """Discard all per-slot state (hands lost, or tracking stopped)."""
        self._slots.clear()

    def _emit(self, result: FrameResult) -> FrameResult:
        if self._on_gesture is not None:
            self._on_gesture(result.gesture)
        if self._on_two_hand is not None:
            self._on_two_hand(result.two_hand)
        return result
