"""
Background worker for hand tracking and gesture filtering.
Runs in a separate QThread to avoid blocking the UI.
"""
from typing import List
import logging
import time
from PyQt5.QtCore import QObject, pyqtSignal

from .config import Config
from .landmarks import HandLandmarks
from .tracker import FrameResult, GestureTracker

logger = logging.getLogger(__name__)


class GestureWorker(QObject):
    """
    Worker class that runs capture -> filter -> aggregate once per camera
    frame and emits the snapshots as signals.

    All pipeline state belongs to the worker's thread; only immutable
    snapshots cross the signal boundary.
    """
    # Signals
    gesture_updated = pyqtSignal(object)    # Emits GestureState (slot 0)
    two_hand_updated = pyqtSignal(object)   # Emits TwoHandGestureState
    hands_lost = pyqtSignal()
    frame_ready = pyqtSignal(object)        # Emits numpy array (BGR frame with overlay)
    error = pyqtSignal(str)

    def __init__(self, config: Config, preview: bool = False, parent=None):
        super().__init__(parent)
        self._config = config
        self._preview = preview
        self._gestures = GestureTracker(config.gestures)
        self._tracker = None
        self._is_running = False
        self._had_hands = False

    def handle_hands(self, hands: List[HandLandmarks]) -> FrameResult:
        """Run one frame through the pipeline and emit its snapshots."""
        result = self._gestures.process_frame(hands)

        self.gesture_updated.emit(result.gesture)
        self.two_hand_updated.emit(result.two_hand)

        if hands:
            self._had_hands = True
        elif self._had_hands:
            self._had_hands = False
            self.hands_lost.emit()

        return result

    def start_process(self):
        """Main processing loop. Paced by the camera's frame rate."""
        # Camera stack is only loaded once the loop actually starts
        from .hand_tracker import HandTracker

        self._tracker = HandTracker(self._config)
        if not self._tracker.start():
            self.error.emit("Could not start hand tracker")
            return

        self._is_running = True
        try:
            while self._is_running:
                hands = self._tracker.read_hands()
                if hands is None:
                    # Camera returned no frame; back off briefly
                    time.sleep(0.01)
                    continue

                result = self.handle_hands(hands)

                if self._preview:
                    frame = self._tracker.get_frame_with_landmarks(hands, result)
                    if frame is not None:
                        self.frame_ready.emit(frame)

        except Exception as e:
            logger.exception("Worker loop failed")
            self.error.emit(f"Worker Exception: {str(e)}")
        finally:
            self._is_running = False
            self._gestures.reset()
            if self._tracker:
                self._tracker.stop()

    def stop_process(self):
        """Signal the loop to stop; resources are released in the worker thread."""
        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running
