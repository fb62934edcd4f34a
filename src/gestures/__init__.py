"""
pinchpull gesture core

Pinch/grab and two-hand pull detection from hand landmarks.
The camera source (gestures.hand_tracker) and the Qt worker
(gestures.worker) are imported on demand, since they need MediaPipe and PyQt5.
"""
from .config import Config, ConfigError, GestureConfig, load_config
from .geometry import Point2, Point3
from .landmarks import HandLandmarks
from .pinch_filter import GestureState, PinchFilter, PinchState
from .two_hand import TwoHandAggregator, TwoHandGestureState, assign_roles
from .tracker import FrameResult, GestureTracker
from .replay import FrameRecorder, ReplayError, load_frames

__all__ = [
    'Config',
    'ConfigError',
    'GestureConfig',
    'load_config',
    'Point2',
    'Point3',
    'HandLandmarks',
    'GestureState',
    'PinchFilter',
    'PinchState',
    'TwoHandAggregator',
    'TwoHandGestureState',
    'assign_roles',
    'FrameResult',
    'GestureTracker',
    'FrameRecorder',
    'ReplayError',
    'load_frames',
]
