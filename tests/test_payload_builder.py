import json
from datetime import date

import pytest
from pydantic import ValidationError

from hole_stats import STAT_CHANNELS
from payload_builder import (
    assemble_payload,
    build_post_score_payload,
    date_to_iso_no_ms,
    format_to_enum,
    hole_stats_from_payload,
    round_metadata,
    sum_gross,
)


def _form_values(**overrides):
    values = {
        "gc_id": "1001",
        "gc_facility_id": "22",
        "gc_course_id": "333",
        "gc_tee_id": "0",
        "played_date": "2025-06-01",
        "holes_mode": "front9",
        "format": "stroke",
        "played_alone": "no",
        "attestor": "  ",
        "scores_table": {
            "front": {"score": {"1": "4", "2": "5"}},
            "back": {"score": {}},
        },
    }
    values.update(overrides)
    return values


def test_sum_gross():
    assert sum_gross({1: 4, 3: 5}, [1, 2, 3]) == 9
    assert sum_gross({1: 4, 12: 5}, list(range(1, 10))) == 4
    assert sum_gross({}, list(range(1, 19))) is None
    assert sum_gross({10: 0}, [10]) == 0


def test_date_and_format_helpers():
    assert date_to_iso_no_ms("2025-06-01") == "2025-06-01T00:00:00"
    assert date_to_iso_no_ms(" 2025-06-01 ") == "2025-06-01T00:00:00"
    assert date_to_iso_no_ms(date(2025, 6, 1)) == "2025-06-01T00:00:00"
    assert date_to_iso_no_ms("") == ""
    assert date_to_iso_no_ms(None) == ""
    assert format_to_enum("match") == "MatchPlay"
    assert format_to_enum("stroke") == "StrokePlay"
    assert format_to_enum(None) == "StrokePlay"


def test_front_nine_form_submission_end_to_end():
    payload = build_post_score_payload(_form_values()).as_dict()

    assert payload["holesPlayed"] == "FrontNine"
    assert [hole["number"] for hole in payload["holeScores"]] == [float(h) for h in range(1, 10)]
    assert payload["esc"] == 9
    assert payload["holeScores"][2]["gross"] is None
    assert payload["holeScores"][0]["gross"] == 4
    assert payload["individualId"] == 1001
    assert payload["facilityId"] == 22
    assert payload["courseId"] == 333
    assert payload["teeId"] is None
    assert payload["date"] == "2025-06-01T00:00:00"
    assert payload["formatPlayed"] == "StrokePlay"
    assert payload["attestor"] is None
    assert payload["isPlayedAlone"] is False
    assert payload["isTournament"] is False
    assert payload["isTrackingStats"] is True
    assert payload["isHoleByHole"] is True
    assert payload["isHoleByHoleRequired"] is False
    assert payload["isPenalty"] is False
    assert payload["id"] is None


def test_blank_round_has_no_esc():
    values = _form_values(holes_mode="18", scores_table={})
    payload = build_post_score_payload(values).as_dict()
    assert payload["esc"] is None
    assert len(payload["holeScores"]) == 18
    assert all(hole["gross"] is None for hole in payload["holeScores"])


def test_metadata_flags():
    values = _form_values(
        format="match",
        played_alone="yes",
        tournament_score="1",
        attestor=" Pat Doe ",
        played_date=None,
        scorecard_date="2024-05-05",
    )
    payload = build_post_score_payload(values).as_dict()
    assert payload["formatPlayed"] == "MatchPlay"
    assert payload["isPlayedAlone"] is True
    assert payload["isTournament"] is True
    assert payload["attestor"] == "Pat Doe"
    assert payload["date"] == "2024-05-05T00:00:00"

    assert round_metadata({"tournament_score": "0"})["is_tournament"] is False


def test_scores_table_found_in_raw_request():
    values = _form_values()
    del values["scores_table"]
    raw = {"form": {"scores_table": {"back": {"score": {"1": "6"}}}}}
    payload = build_post_score_payload(dict(values, holes_mode="back9"), raw_request=raw).as_dict()
    assert payload["esc"] == 6
    assert payload["holeScores"][0]["number"] == 10.0


def test_up_down_and_sand_save_serialize_as_int_or_null():
    values = _form_values(scores_table={
        "front": {"updown": {"1": True, "2": False}, "sandsave": {"1": "on"}},
    })
    payload = build_post_score_payload(values)
    encoded = json.loads(json.dumps(payload.as_dict()))
    first, second = encoded["holeScores"][0], encoded["holeScores"][1]
    assert first["upDown"] == 1 and first["upDown"] is not True
    assert first["sandSave"] == 1
    assert second["upDown"] is None
    assert second["sandSave"] is None


def test_round_trip_full_card_is_lossless():
    fir_cycle = ["Hit", "MissedRight", "MissedLeft", "MissedShort", "MissedLong", "MissedUnspecified"]
    holes = list(range(1, 19))
    stats = {
        "gross": {h: 3 + h % 3 for h in holes},
        "putts": {h: h % 3 for h in holes},
        "fir": {h: fir_cycle[h % 6] for h in holes},
        "upDown": {h: 1 for h in holes},
        "sandSave": {h: 1 for h in holes},
        "penalty": {h: h % 2 for h in holes},
    }
    payload = assemble_payload(holes, "EighteenHoles", stats, {"played_date": "2025-01-01"})
    assert hole_stats_from_payload(payload) == stats
    assert hole_stats_from_payload(payload.as_dict()) == stats
    assert set(hole_stats_from_payload(payload)) == set(STAT_CHANNELS)


def test_only_resolved_holes_are_emitted():
    stats = {"gross": {1: 4, 12: 5}}
    payload = assemble_payload(list(range(10, 19)), "BackNine", stats, {})
    assert [hole.number for hole in payload.holeScores] == [float(h) for h in range(10, 19)]
    assert payload.esc == 5


def test_payload_is_frozen():
    payload = assemble_payload([1], "EighteenHoles", {}, {})
    with pytest.raises(ValidationError):
        payload.esc = 3
