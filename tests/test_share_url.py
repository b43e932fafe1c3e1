from __future__ import annotations

import base64
import json
import zlib

import pytest

from zwobuilder.workout.errors import MalformedInput
from zwobuilder.workout.model import SteadyState, Workout
from zwobuilder.workout.share import (
    decode_token,
    encode_token,
    share_query,
    share_url,
    workout_from_query,
)


def _token_for(payload: object) -> str:
    raw = json.dumps(payload).encode("utf-8")
    return base64.urlsafe_b64encode(zlib.compress(raw)).decode("ascii").rstrip("=")


def test_token_round_trip(full_workout: Workout) -> None:
    token = encode_token(full_workout)
    assert decode_token(token) == full_workout
    assert set(token) <= set("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_")


def test_share_url_round_trip(full_workout: Workout) -> None:
    url = share_url(full_workout, "https://workouts.example/editor")
    assert url.startswith("https://workouts.example/editor?n=zwb1&w=")
    assert workout_from_query(url) == full_workout
    assert workout_from_query(share_query(full_workout)) == full_workout


def test_share_url_appends_to_existing_query() -> None:
    url = share_url(Workout(name="x"), "https://workouts.example/?lang=en")
    assert "?lang=en&n=zwb1&w=" in url
    assert workout_from_query(url) == Workout(name="x")


def test_distinct_workouts_get_distinct_tokens() -> None:
    a = Workout(segments=[SteadyState(duration=60, power=0.8)])
    b = Workout(segments=[SteadyState(duration=60, power=0.8, show_avg=False)])
    c = Workout(name="a", description="b")
    d = Workout(name="ab")
    tokens = {encode_token(w) for w in (a, b, c, d)}
    assert len(tokens) == 4


@pytest.mark.parametrize("query", ["", "?n=zwb1", "?w=abc", "?other=1"])
def test_missing_parameters_mean_no_shared_workout(query: str) -> None:
    assert workout_from_query(query) is None


def test_wrong_discriminator_fails(full_workout: Workout) -> None:
    token = encode_token(full_workout)
    with pytest.raises(MalformedInput):
        workout_from_query({"n": "zwb0", "w": token})


def test_truncated_token_fails(full_workout: Workout) -> None:
    token = encode_token(full_workout)
    for cut in (1, 2, 3, 4, 10, len(token) // 2):
        with pytest.raises(MalformedInput):
            decode_token(token[:-cut])


@pytest.mark.parametrize("token", ["", "!!!!", "not base64 at all", "QUJD"])
def test_garbage_token_fails(token: str) -> None:
    with pytest.raises(MalformedInput):
        decode_token(token)


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "x"},
        ["x", "", "", [], []][:4],
        ["x", "", "", "tags", []],
        ["x", "", "", [], [["s", 60, 0.8, None, None]]],
        ["x", "", "", [], [["s", 60, "0.8", None, None, []]]],
        ["x", "", "", [], [["s", 0, 0.8, None, None, []]]],
        ["x", "", "", [], [["s", 60.0, 0.8, None, None, []]]],
        ["x", "", "", [], [["s", 60, 0.8, None, 1, []]]],
        ["x", "", "", [], [["s", 60, 10**400, None, None, []]]],
        ["x", "", "", [], [["i", 2, 30, 1.2, 30, 10**400, None, None, []]]],
        ["x", "", "", [], [["i", 0, 30, 1.2, 30, 0.5, None, None, []]]],
        ["x", "", "", [], [["f", 60, None, None, [["10", "go"]]]]],
        ["x", "", "", [], [["z", 60]]],
        ["x", "", "", [], [[]]],
    ],
)
def test_structurally_invalid_payload_fails(payload: object) -> None:
    with pytest.raises(MalformedInput):
        decode_token(_token_for(payload))


def test_valid_handwritten_payload_decodes() -> None:
    token = _token_for(["Short", "", "me", ["a"], [["s", 60, 0.8, 90, True, [[5, "go"]]]]])
    workout = decode_token(token)
    assert workout.name == "Short"
    assert workout.author == "me"
    assert workout.tags == ["a"]
    segment = workout.segments[0]
    assert isinstance(segment, SteadyState)
    assert (segment.duration, segment.power, segment.cadence, segment.show_avg) == (60, 0.8, 90, True)
    assert [(event.offset, event.text) for event in segment.text_events] == [(5, "go")]
