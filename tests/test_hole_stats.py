from hole_stats import STAT_CHANNELS, extract_hole_stats, hole_stats_from_table


def test_front_indices_outside_one_to_nine_are_dropped():
    table = {"front": {"score": {"0": "3", "1": "4", "9": "5", "10": "6", "abc": "7"}}}
    stats = hole_stats_from_table(table)
    assert stats["gross"] == {1: 4, 9: 5}


def test_back_side_maps_to_holes_ten_to_eighteen():
    table = {"back": {"score": {1: "4", "9": "5", "10": "6"}, "putts": {"3": "2"}}}
    stats = hole_stats_from_table(table)
    assert stats["gross"] == {10: 4, 18: 5}
    assert stats["putts"] == {12: 2}


def test_each_channel_uses_its_own_coercion():
    table = {
        "front": {
            "score": {"1": "4", "2": "", "3": "x"},
            "putts": {"1": "0"},
            "fir": {"1": "Hit", "2": "hit", "3": "MissedLeft"},
            "updown": {"1": "1", "2": 0, "3": "on"},
            "sandsave": {"1": True, "2": False},
            "penalty": {"1": "2", "2": ""},
        },
        "back": {
            "fir": {"1": "MissedUnspecified"},
            "penalty": {"2": "0"},
        },
    }
    stats = hole_stats_from_table(table)
    assert stats["gross"] == {1: 4}
    assert stats["putts"] == {1: 0}
    assert stats["fir"] == {1: "Hit", 3: "MissedLeft", 10: "MissedUnspecified"}
    assert stats["upDown"] == {1: 1, 3: 1}
    assert stats["sandSave"] == {1: 1}
    assert stats["penalty"] == {1: 2, 11: 0}


def test_list_channels_are_indexed_by_position():
    table = {"front": {"score": [None, "4", "5"]}}
    assert hole_stats_from_table(table)["gross"] == {1: 4, 2: 5}


def test_missing_table_gives_empty_channels():
    stats = extract_hole_stats({"holes_mode": "18"})
    assert set(stats) == set(STAT_CHANNELS)
    assert all(by_hole == {} for by_hole in stats.values())


def test_nested_form_values_are_normalized():
    values = {"container": {"scores_table": {"front": {"score": {"1": "4"}}}}}
    assert extract_hole_stats(values)["gross"] == {1: 4}
