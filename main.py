"""
pinchpull - Pinch and two-hand pull gestures from webcam hand tracking

Entry point for the application.
"""
import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="pinchpull - pinch and pull gesture tracking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--debug",
        action="store_true",
        help="Show camera feed with landmarks and gesture overlay",
    )
    source.add_argument(
        "--replay",
        type=Path,
        default=None,
        metavar="FILE",
        help="Replay recorded landmark frames (JSON Lines) instead of the camera",
    )
    source.add_argument(
        "--record",
        type=Path,
        default=None,
        metavar="FILE",
        help="Record landmark frames from the camera to a JSON Lines file",
    )

    parser.add_argument(
        "--camera",
        type=int,
        default=None,
        help="Camera device id (overrides config)",
    )

    parser.add_argument(
        "--mirror",
        action="store_true",
        help="Mirror camera frames before detection (overrides config)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (overrides config)",
    )

    return parser.parse_args(argv)


class TransitionPrinter:
    """Prints gesture changes; consumers are expected to diff snapshots themselves."""

    def __init__(self):
        self._grabbing = False
        self._pulling = False
        self._hands = 0

    def __call__(self, frame_no, result):
        gesture = result.gesture
        two_hand = result.two_hand
        hands = (two_hand.left_hand is not None) + (two_hand.right_hand is not None)

        if hands != self._hands:
            print(f"[{frame_no:5d}] Hands: {hands}")
            self._hands = hands

        if gesture.is_grabbing != self._grabbing:
            self._grabbing = gesture.is_grabbing
            state = "GRAB" if gesture.is_grabbing else "RELEASE"
            print(f"[{frame_no:5d}] {state} at {_format_point(gesture.hand_position)}")

        if two_hand.is_pulling != self._pulling:
            self._pulling = two_hand.is_pulling
            state = "PULL START" if two_hand.is_pulling else "PULL END"
            print(f"[{frame_no:5d}] {state} distance={two_hand.pull_distance:.3f} "
                  f"center={_format_point(two_hand.center_position)}")


def _format_point(point):
    if point is None:
        return "-"
    return "(" + ", ".join(f"{v:+.2f}" for v in point) + ")"


def run_replay(config, path):
    """Feed recorded frames through the gesture pipeline and print transitions."""
    from gestures import GestureTracker, ReplayError, load_frames

    tracker = GestureTracker(config.gestures)
    printer = TransitionPrinter()

    try:
        for hands in load_frames(path):
            result = tracker.process_frame(hands[:config.mediapipe.max_num_hands])
            printer(tracker.frame_count, result)
    except FileNotFoundError:
        print(f"ERROR: Recording not found: {path}")
        return 1
    except ReplayError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Replayed {tracker.frame_count} frames")
    return 0


def run_record(config, path):
    """Record raw landmark frames from the camera until interrupted."""
    from gestures import FrameRecorder
    from gestures.hand_tracker import HandTracker

    tracker = HandTracker(config)
    if not tracker.start():
        print("ERROR: Could not start hand tracker")
        return 1

    print(f"Recording to {path}, press Ctrl+C to stop")
    try:
        with FrameRecorder(path) as recorder:
            while True:
                hands = tracker.read_hands()
                if hands is not None:
                    recorder.write(hands)
    except KeyboardInterrupt:
        pass
    finally:
        tracker.stop()

    return 0


def run_debug(config):
    """
    Run in debug mode - shows camera feed with landmarks and anchors.
    Useful for tuning thresholds.
    """
    import cv2
    from gestures import GestureTracker
    from gestures.hand_tracker import HandTracker

    tracker = HandTracker(config)
    gestures = GestureTracker(config.gestures)
    printer = TransitionPrinter()

    print("Starting debug mode...")
    print("Press 'q' to quit")
    print("-" * 40)

    if not tracker.start():
        print("ERROR: Could not start hand tracker")
        return 1

    try:
        while True:
            hands = tracker.read_hands()
            if hands is None:
                continue

            result = gestures.process_frame(hands)
            printer(tracker.frame_count, result)

            frame = tracker.get_frame_with_landmarks(hands, result)
            if frame is not None:
                gesture = result.gesture
                two_hand = result.two_hand
                info_lines = [
                    f"Grabbing: {gesture.is_grabbing}",
                    f"Pinch dist: {gesture.pinch_distance:.3f}",
                    f"Position: {_format_point(gesture.hand_position)}",
                    f"Both pinching: {two_hand.both_pinching}",
                    f"Pull dist: {two_hand.pull_distance:.3f}",
                    f"Pulling: {two_hand.is_pulling}",
                ]
                for i, line in enumerate(info_lines):
                    cv2.putText(
                        frame, line, (10, 30 + i * 25),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1
                    )

                cv2.imshow("pinchpull Debug", frame)

            if cv2.waitKey(1) & 0xFF == ord('q'):
                break

    finally:
        gestures.reset()
        tracker.stop()
        cv2.destroyAllWindows()

    return 0


def run_headless(config):
    """Run the gesture worker on a background thread and print transitions."""
    import signal
    import atexit
    from PyQt5.QtCore import QCoreApplication, QThread, Qt
    from gestures.worker import GestureWorker
    from gestures.pinch_filter import NO_HAND
    from gestures.tracker import FrameResult

    app = QCoreApplication(sys.argv)

    thread = QThread()
    worker = GestureWorker(config)
    worker.moveToThread(thread)

    printer = TransitionPrinter()
    frame_no = [0]
    latest = {}

    def cleanup():
        """Ensure camera is released on exit."""
        print("\nCleaning up camera resources...")
        worker.stop_process()
        thread.quit()
        thread.wait(2000)
        print("Cleanup complete.")

    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        print(f"\nReceived signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    def handle_gesture(state):
        latest['gesture'] = state

    def handle_two_hand(state):
        # two_hand_updated is emitted after gesture_updated for the same frame
        frame_no[0] += 1
        printer(frame_no[0], FrameResult(gesture=latest.get('gesture', NO_HAND), two_hand=state))

    def handle_error(msg):
        print(f"WORKER ERROR: {msg}")
        app.exit(1)

    # Queued connections deliver snapshots on the main thread
    thread.started.connect(worker.start_process)
    worker.gesture_updated.connect(handle_gesture, Qt.QueuedConnection)
    worker.two_hand_updated.connect(handle_two_hand, Qt.QueuedConnection)
    worker.hands_lost.connect(lambda: print("Hands lost"), Qt.QueuedConnection)
    worker.error.connect(handle_error, Qt.QueuedConnection)

    thread.start()

    try:
        result = app.exec_()
    finally:
        cleanup()
        atexit.unregister(cleanup)  # Avoid double cleanup

    return result


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    from gestures import ConfigError, load_config
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"ERROR: Invalid configuration: {e}")
        return 2

    # Apply CLI overrides
    if args.camera is not None:
        config.camera.device_id = args.camera
    if args.mirror:
        config.camera.mirror = True
    if args.log_level:
        config.logging.level = args.log_level

    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("pinchpull starting...")
    print(f"  Pinch close/open: {config.gestures.pinch_threshold} / {config.gestures.pinch_release}")
    print(f"  Min pull distance: {config.gestures.min_pull_distance}")
    print()

    if args.replay is not None:
        return run_replay(config, args.replay)
    if args.record is not None:
        return run_record(config, args.record)
    if args.debug:
        return run_debug(config)
    return run_headless(config)


if __name__ == "__main__":
    sys.exit(main())
