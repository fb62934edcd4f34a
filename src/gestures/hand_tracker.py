"""
MediaPipe Hand Tracker wrapper using the Tasks API.
Captures camera frames and reports up to two hands per frame as the
landmark source for the gesture pipeline.
"""
from pathlib import Path
from typing import List, Optional, TYPE_CHECKING
import logging
import time
import cv2
import numpy as np
import mediapipe as mp

from .config import Config, CameraConfig, MediaPipeConfig
from .geometry import to_screen
from .landmarks import HAND_CONNECTIONS, HandLandmarks, hands_from_result

if TYPE_CHECKING:
    from .tracker import FrameResult

logger = logging.getLogger(__name__)

# MediaPipe Tasks API imports
BaseOptions = mp.tasks.BaseOptions
HandLandmarker = mp.tasks.vision.HandLandmarker
HandLandmarkerOptions = mp.tasks.vision.HandLandmarkerOptions
VisionRunningMode = mp.tasks.vision.RunningMode

MODEL_URL = "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"

# BGR colors
OPEN_COLOR = (246, 130, 59)
GRAB_COLOR = (94, 197, 34)
PULL_COLOR = (11, 158, 245)


class HandTracker:
    """
    MediaPipe hand tracking wrapper with camera management.
    Uses the MediaPipe Tasks API (0.10+) in VIDEO mode, so the detector can
    track hands between frames instead of re-detecting every frame.
    """

    # Default model path relative to project root
    DEFAULT_MODEL_PATH = Path(__file__).parent.parent.parent / "models" / "hand_landmarker.task"

    def __init__(self, config: Config, model_path: Optional[Path] = None):
        """
        Initialize hand tracker.

        Args:
            config: Application configuration
            model_path: Path to hand_landmarker.task model file
        """
        self._camera_config: CameraConfig = config.camera
        self._mp_config: MediaPipeConfig = config.mediapipe
        if model_path is None and self._mp_config.model_path:
            model_path = Path(self._mp_config.model_path)
        self._model_path = Path(model_path or self.DEFAULT_MODEL_PATH)

        # Lazy initialization
        self._cap: Optional[cv2.VideoCapture] = None
        self._landmarker: Optional[HandLandmarker] = None

        # State
        self._is_running = False
        self._last_frame: Optional[np.ndarray] = None
        self._frame_count = 0
        self._start_perf: float = 0
        self._last_timestamp_ms: int = -1

    def start(self) -> bool:
        """
        Start camera capture and MediaPipe.

        Returns:
            True if started successfully, False otherwise.
        """
        if self._is_running:
            return True

        if not self._model_path.exists():
            logger.error("Model file not found: %s", self._model_path)
            logger.error("Download from: %s", MODEL_URL)
            return False

        self._cap = cv2.VideoCapture(self._camera_config.device_id)
        if not self._cap.isOpened():
            logger.error("Could not open camera %d", self._camera_config.device_id)
            self._cap = None
            return False

        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._camera_config.width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._camera_config.height)
        self._cap.set(cv2.CAP_PROP_FPS, self._camera_config.fps)

        options = HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(self._model_path)),
            running_mode=VisionRunningMode.VIDEO,
            num_hands=self._mp_config.max_num_hands,
            min_hand_detection_confidence=self._mp_config.min_detection_confidence,
            min_tracking_confidence=self._mp_config.min_tracking_confidence,
        )

        self._landmarker = HandLandmarker.create_from_options(options)
        self._start_perf = time.perf_counter()
        self._last_timestamp_ms = -1
        self._is_running = True
        logger.info("Hand tracker started (camera %d, %d hands max)",
                    self._camera_config.device_id, self._mp_config.max_num_hands)
        return True

    def stop(self) -> None:
        """Stop camera capture and release resources."""
        self._is_running = False

        if self._landmarker:
            self._landmarker.close()
            self._landmarker = None

        if self._cap:
            self._cap.release()
            self._cap = None

        self._last_frame = None
        logger.info("Hand tracker stopped after %d frames", self._frame_count)

    def read_hands(self) -> Optional[List[HandLandmarks]]:
        """
        Capture one frame and detect hands in it.

        Returns:
            Hands in detector order (possibly empty), or None when no frame
            could be read.
        """
        if not self._is_running or self._cap is None or self._landmarker is None:
            return None

        ret, frame = self._cap.read()
        if not ret:
            return None

        self._frame_count += 1

        if self._camera_config.mirror:
            frame = cv2.flip(frame, 1)
        self._last_frame = frame

        # Convert BGR to RGB for MediaPipe
        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        rgb_frame.flags.writeable = False
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

        # VIDEO mode needs strictly monotonic timestamps
        timestamp_ms = int((time.perf_counter() - self._start_perf) * 1000)
        if timestamp_ms <= self._last_timestamp_ms:
            timestamp_ms = self._last_timestamp_ms + 1
        self._last_timestamp_ms = timestamp_ms

        result = self._landmarker.detect_for_video(mp_image, timestamp_ms)
        return hands_from_result(result, self._mp_config.max_num_hands)

    def get_frame_with_landmarks(
        self,
        hands: Optional[List[HandLandmarks]] = None,
        result: Optional["FrameResult"] = None,
    ) -> Optional[np.ndarray]:
        """
        Get last frame, flipped to a selfie view, with debug overlay.

        Args:
            hands: If provided, draw their skeletons.
            result: If provided, draw the smoothed anchors and pull line.

        Returns:
            Frame with overlay drawn, or None if no frame available.
        """
        if self._last_frame is None:
            return None

        frame = self._last_frame.copy()

        h, w = frame.shape[:2]
        for hand in hands or []:
            if not hand.is_complete():
                continue
            for start_idx, end_idx in HAND_CONNECTIONS:
                start = hand.get(start_idx)
                end = hand.get(end_idx)
                cv2.line(frame, (int(start[0] * w), int(start[1] * h)),
                         (int(end[0] * w), int(end[1] * h)), OPEN_COLOR, 2)
            for x, y, _ in hand.landmarks:
                cv2.circle(frame, (int(x * w), int(y * h)), 4, OPEN_COLOR, -1)

        # Centered coordinates line up with the flipped view
        frame = cv2.flip(frame, 1)

        if result is not None:
            two_hand = result.two_hand
            anchors = []
            for gesture in (two_hand.left_hand, two_hand.right_hand):
                if gesture is None or gesture.hand_position is None:
                    continue
                point = to_screen(gesture.hand_position, w, h)
                color = GRAB_COLOR if gesture.is_grabbing else OPEN_COLOR
                cv2.circle(frame, point, 10, color, -1)
                cv2.circle(frame, point, 10, (255, 255, 255), 2)
                anchors.append(point)
            if two_hand.is_pulling and len(anchors) == 2:
                cv2.line(frame, anchors[0], anchors[1], PULL_COLOR, 3)

        return frame

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def frame_count(self) -> int:
        return self._frame_count
