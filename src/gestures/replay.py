"""
Recorded landmark frames in JSON Lines form.

One JSON object per line:
    {"hands": [{"landmarks": [[x, y, z], ...], "handedness": "Left"}]}

Replaying a recording through GestureTracker reproduces the live gesture
stream without a camera.
"""
from pathlib import Path
from typing import Iterator, List, Sequence, Union
import json
import logging

from .landmarks import HandLandmarks

logger = logging.getLogger(__name__)


class ReplayError(ValueError):
    """Raised when a recording line cannot be parsed."""


def _hand_from_dict(data: dict) -> HandLandmarks:
    landmarks = [tuple(float(v) for v in point) for point in data["landmarks"]]
    return HandLandmarks(
        landmarks=landmarks,
        handedness=data.get("handedness"),
        confidence=float(data.get("confidence", 1.0)),
    )


def parse_frame(line: str) -> List[HandLandmarks]:
    """Parse one recorded frame."""
    data = json.loads(line)
    if not isinstance(data, dict):
        raise TypeError("frame must be a JSON object")
    return [_hand_from_dict(hand) for hand in data.get("hands") or []]


def load_frames(path: Union[str, Path]) -> Iterator[List[HandLandmarks]]:
    """
    Yield recorded frames from a JSON Lines file, skipping blank lines.

    Raises:
        ReplayError: On the first line that is not a valid frame.
    """
    path = Path(path)
    with open(path, 'rb') as f:
        for line_no, raw in enumerate(f, start=1):
            try:
                line = raw.decode('utf-8')
                if not line.strip():
                    continue
                hands = parse_frame(line)
            except (ValueError, TypeError, KeyError) as e:
                # UnicodeDecodeError is a ValueError
                raise ReplayError(f"{path}:{line_no}: invalid frame ({e})") from e
            yield hands


def frame_to_dict(hands: Sequence[HandLandmarks]) -> dict:
    return {
        "hands": [
            {
                "landmarks": [list(point) for point in hand.landmarks],
                "handedness": hand.handedness,
                "confidence": hand.confidence,
            }
            for hand in hands
        ]
    }


class FrameRecorder:
    """
    Appends frames to a JSON Lines recording.

    Usage:
        with FrameRecorder("session.jsonl") as recorder:
            recorder.write(hands)
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._file = None
        self._count = 0

    def __enter__(self) -> "FrameRecorder":
        self._file = open(self._path, 'w', encoding='utf-8')
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def write(self, hands: Sequence[HandLandmarks]) -> None:
        if self._file is None:
            raise RuntimeError("FrameRecorder is not open")
        self._file.write(json.dumps(frame_to_dict(hands)) + "\n")
        self._count += 1

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
            logger.info("Recorded %d frames to %s", self._count, self._path)

    @property
    def frame_count(self) -> int:
        return self._count
