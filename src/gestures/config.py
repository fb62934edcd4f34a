"""
Config loader for pinchpull.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


class ConfigError(ValueError):
    """Raised when a configuration value is out of range."""


def _check_unit_interval(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ConfigError(f"{name} must be within [0, 1], got {value}")


@dataclass
class CameraConfig:
    device_id: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30
    mirror: bool = False  # Flip frames horizontally before detection


@dataclass
class MediaPipeConfig:
    max_num_hands: int = 2
    min_detection_confidence: float = 0.7
    min_tracking_confidence: float = 0.5
    model_path: Optional[str] = None  # Defaults to models/hand_landmarker.task

    def __post_init__(self):
        if not 1 <= self.max_num_hands <= 2:
            raise ConfigError(f"max_num_hands must be 1 or 2, got {self.max_num_hands}")
        _check_unit_interval("min_detection_confidence", self.min_detection_confidence)
        _check_unit_interval("min_tracking_confidence", self.min_tracking_confidence)


@dataclass
class GestureConfig:
    pinch_threshold: float = 0.055   # Smoothed distance below which a pinch starts
    pinch_release: float = 0.16      # Smoothed distance above which a pinch ends
    debounce_frames: int = 2         # Consecutive agreeing frames before committing
    position_smoothing: float = 0.4  # EMA factor for the anchor (1 = raw, 0 = frozen)
    pinch_smoothing: float = 0.5     # EMA factor for the pinch distance itself
    min_pull_distance: float = 0.15  # Hand separation needed for a pull

    def __post_init__(self):
        if self.pinch_release <= self.pinch_threshold:
            raise ConfigError(
                f"pinch_release ({self.pinch_release}) must be greater than "
                f"pinch_threshold ({self.pinch_threshold})"
            )
        if self.debounce_frames < 1:
            raise ConfigError(f"debounce_frames must be at least 1, got {self.debounce_frames}")
        _check_unit_interval("position_smoothing", self.position_smoothing)
        _check_unit_interval("pinch_smoothing", self.pinch_smoothing)
        if self.min_pull_distance < 0:
            raise ConfigError(f"min_pull_distance must not be negative, got {self.min_pull_distance}")


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class Config:
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigError(f"Section for {cls.__name__} must be a mapping, got {type(data).__name__}")
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings.

    Raises:
        ConfigError: If a value fails validation.
    """
    if config_path is None:
        # Default to config.yaml in project root
        config_path = Path(__file__).parent.parent.parent / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        # Return defaults if no config file
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    return Config(
        camera=_dict_to_dataclass(CameraConfig, data.get('camera')),
        mediapipe=_dict_to_dataclass(MediaPipeConfig, data.get('mediapipe')),
        gestures=_dict_to_dataclass(GestureConfig, data.get('gestures')),
        logging=_dict_to_dataclass(LoggingConfig, data.get('logging')),
    )
