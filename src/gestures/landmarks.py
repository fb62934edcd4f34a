"""
Hand landmark container and detector result conversion.
"""
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple
import math

NUM_LANDMARKS = 21
HANDEDNESS_LABELS = ("Left", "Right")


@dataclass
class HandLandmarks:
    """
    Normalized hand landmarks for one detected hand in one frame.

    Attributes:
        landmarks: 21 (x, y, z) tuples; x, y normalized 0-1, z relative depth
        handedness: 'Left', 'Right' or None when the detector gave no label
        confidence: Detection confidence 0-1 (informational)
    """
    landmarks: Sequence[Tuple[float, float, float]]
    handedness: Optional[str] = None
    confidence: float = 1.0

    # MediaPipe landmark indices for convenience
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20

    def get(self, index: int) -> Tuple[float, float, float]:
        """Get landmark by index."""
        return self.landmarks[index]

    @property
    def thumb_tip(self) -> Tuple[float, float, float]:
        return self.landmarks[self.THUMB_TIP]

    @property
    def index_tip(self) -> Tuple[float, float, float]:
        return self.landmarks[self.INDEX_TIP]

    @property
    def label(self) -> Optional[str]:
        """Handedness if it is one of the recognised labels, else None."""
        if self.handedness in HANDEDNESS_LABELS:
            return self.handedness
        return None

    def is_complete(self) -> bool:
        """
        True when the hand has all 21 landmarks and usable thumb and index
        tips. Incomplete hands are treated as absent for the frame.
        """
        if self.landmarks is None or len(self.landmarks) < NUM_LANDMARKS:
            return False
        return _is_point(self.thumb_tip) and _is_point(self.index_tip)


def _is_point(value: Any) -> bool:
    if value is None:
        return False
    try:
        if len(value) < 3:
            return False
        return all(math.isfinite(float(v)) for v in value[:3])
    except (TypeError, ValueError):
        return False


# Hand connections for drawing (same as MediaPipe's HAND_CONNECTIONS)
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),      # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),      # Index
    (0, 9), (9, 10), (10, 11), (11, 12), # Middle
    (0, 13), (13, 14), (14, 15), (15, 16), # Ring
    (0, 17), (17, 18), (18, 19), (19, 20), # Pinky
    (5, 9), (9, 13), (13, 17),           # Palm
]


def hands_from_result(result: Any, max_hands: int = 2) -> List[HandLandmarks]:
    """
    Convert a MediaPipe HandLandmarkerResult into HandLandmarks, keeping the
    detector's reporting order and at most `max_hands` entries.

    Only duck-typed attributes are used (`hand_landmarks`, `handedness`), so
    this works on any object shaped like the Tasks API result.
    """
    if result is None or not result.hand_landmarks:
        return []

    handedness_lists = getattr(result, 'handedness', None) or []
    hands = []
    for i, hand_landmarks in enumerate(result.hand_landmarks[:max_hands]):
        label = None
        score = 1.0
        if i < len(handedness_lists) and handedness_lists[i]:
            category = handedness_lists[i][0]
            label = category.category_name
            score = category.score

        hands.append(HandLandmarks(
            landmarks=[(lm.x, lm.y, lm.z) for lm in hand_landmarks],
            handedness=label,
            confidence=score,
        ))
    return hands
