import json

import pytest

from gestures.replay import FrameRecorder, ReplayError, load_frames, parse_frame
from gestures.tracker import GestureTracker


def pinching_pair(make_hand):
    return [
        make_hand(pinch=0.0, center=(0.6, 0.5, 0.0), handedness="Left"),
        make_hand(pinch=0.0, center=(0.4, 0.5, 0.0), handedness="Right"),
    ]


def test_parse_frame():
    line = json.dumps({"hands": [{"landmarks": [[0.1, 0.2, 0.0]] * 21, "handedness": "Right"}]})
    hands = parse_frame(line)

    assert len(hands) == 1
    assert hands[0].handedness == "Right"
    assert hands[0].confidence == 1.0
    assert hands[0].thumb_tip == (0.1, 0.2, 0.0)


def test_parse_empty_frame():
    assert parse_frame('{"hands": []}') == []
    assert parse_frame('{}') == []


def test_load_skips_blank_lines(tmp_path):
    path = tmp_path / "session.jsonl"
    path.write_text('{"hands": []}\n\n   \n{"hands": []}\n')
    assert list(load_frames(path)) == [[], []]


@pytest.mark.parametrize("bad_line", [
    "not json",
    "[1, 2, 3]",
    '{"hands": [{"handedness": "Left"}]}',
    '{"hands": [{"landmarks": [["a", 0, 0]]}]}',
])
def test_bad_line_reports_line_number(tmp_path, bad_line):
    path = tmp_path / "session.jsonl"
    path.write_text('{"hands": []}\n' + bad_line + "\n")

    frames = load_frames(path)
    assert next(frames) == []
    with pytest.raises(ReplayError, match=r"session\.jsonl:2:"):
        next(frames)


def test_recorder_round_trip(tmp_path, make_hand):
    path = tmp_path / "session.jsonl"
    frames = [pinching_pair(make_hand), [], [make_hand(handedness=None)]]

    with FrameRecorder(path) as recorder:
        for hands in frames:
            recorder.write(hands)
    assert recorder.frame_count == 3

    loaded = list(load_frames(path))
    assert [len(hands) for hands in loaded] == [2, 0, 1]
    assert loaded[0][0].handedness == "Left"
    assert loaded[2][0].handedness is None
    assert loaded[0][1].landmarks == [tuple(p) for p in frames[0][1].landmarks]


def test_write_requires_open_recorder(tmp_path, make_hand):
    recorder = FrameRecorder(tmp_path / "session.jsonl")
    with pytest.raises(RuntimeError):
        recorder.write([make_hand()])


def test_replay_matches_live_processing(tmp_path, config, make_hand):
    path = tmp_path / "session.jsonl"
    live_frames = [pinching_pair(make_hand)] * 7 + [[]]

    live = GestureTracker(config)
    expected = [live.process_frame(hands) for hands in live_frames]

    with FrameRecorder(path) as recorder:
        for hands in live_frames:
            recorder.write(hands)

    replayed = GestureTracker(config)
    results = [replayed.process_frame(hands) for hands in load_frames(path)]

    assert [r.two_hand.is_pulling for r in results] == [r.two_hand.is_pulling for r in expected]
    assert [r.gesture.is_grabbing for r in results] == [r.gesture.is_grabbing for r in expected]
    assert results[-1].gesture.confidence == 0


def test_undecodable_line_reports_line_number(tmp_path):
    path = tmp_path / "session.jsonl"
    path.write_bytes(b'{"hands": []}\n\xff\xfe garbage\n')

    frames = load_frames(path)
    assert next(frames) == []
    with pytest.raises(ReplayError, match=r"session\.jsonl:2:"):
        next(frames)


def test_nan_landmarks_replay_as_malformed(tmp_path, config):
    path = tmp_path / "session.jsonl"
    point = '[NaN, 0.5, 0.0]'
    path.write_text('{"hands": [{"landmarks": [' + ", ".join([point] * 21) + ']}]}\n')

    hands = next(load_frames(path))
    assert not hands[0].is_complete()
    assert GestureTracker(config).process_frame(hands).gesture.confidence == 0
