import pytest

from gestures.config import (
    Config, ConfigError, GestureConfig, MediaPipeConfig, load_config,
)


def test_gesture_defaults():
    config = GestureConfig()
    assert config.pinch_threshold == 0.055
    assert config.pinch_release == 0.16
    assert config.debounce_frames == 2
    assert config.position_smoothing == 0.4
    assert config.pinch_smoothing == 0.5
    assert config.min_pull_distance == 0.15


@pytest.mark.parametrize("kwargs", [
    {"pinch_threshold": 0.2, "pinch_release": 0.1},
    {"pinch_threshold": 0.1, "pinch_release": 0.1},
    {"position_smoothing": 1.5},
    {"pinch_smoothing": -0.1},
    {"debounce_frames": 0},
    {"min_pull_distance": -0.01},
])
def test_invalid_gesture_config_rejected(kwargs):
    with pytest.raises(ConfigError):
        GestureConfig(**kwargs)


def test_invalid_hand_count_rejected():
    with pytest.raises(ConfigError):
        MediaPipeConfig(max_num_hands=3)


def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)


def test_missing_file_returns_defaults(tmp_path):
    config = load_config(tmp_path / "absent.yaml")
    assert config == Config()


def test_load_overrides_and_ignores_unknown_keys(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "gestures:\n"
        "  pinch_threshold: 0.04\n"
        "  min_pull_distance: 0.2\n"
        "  not_a_setting: 1\n"
        "camera:\n"
        "  device_id: 2\n"
        "logging:\n"
        "  level: DEBUG\n"
    )
    config = load_config(path)

    assert config.gestures.pinch_threshold == 0.04
    assert config.gestures.min_pull_distance == 0.2
    assert config.gestures.pinch_release == 0.16
    assert config.camera.device_id == 2
    assert config.logging.level == "DEBUG"
    assert config.mediapipe.max_num_hands == 2


def test_empty_file_returns_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == Config()


def test_invalid_value_in_file_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("gestures:\n  pinch_release: 0.01\n")
    with pytest.raises(ConfigError):
        load_config(path)


def test_non_mapping_file_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        load_config(path)
