import pytest

from tomorrow_architect.services.time_labels import (
    UNPARSEABLE_TIME,
    format_minutes,
    parse_time_label,
)


@pytest.mark.parametrize(
    "label, expected",
    [
        ("14:30", 870),
        ("02:15 PM", 855),
        ("02:30 PM", 870),
        ("12:00 AM", 0),
        ("12:30 PM", 750),
        ("09:05 am", 545),
        ("00:00", 0),
        ("9:30", 570),
    ],
)
def test_parses_24h_and_12h_labels(label, expected):
    assert parse_time_label(label) == expected


@pytest.mark.parametrize("label", ["", None, "bad", "14", "ab:cd", "PM", "2:15PM", "xx:10 PM"])
def test_unparseable_labels_return_sentinel(label):
    assert parse_time_label(label) == UNPARSEABLE_TIME


def test_out_of_range_labels_pass_through_arithmetically():
    # Lenient on purpose: historical data may carry such labels
    assert parse_time_label("25:99") == 25 * 60 + 99
    assert parse_time_label("11:75 PM") == 23 * 60 + 75


def test_extra_components_are_ignored():
    assert parse_time_label("14:30:45") == 870


def test_format_minutes_zero_pads():
    assert format_minutes(0) == "00:00"
    assert format_minutes(570) == "09:30"
    assert format_minutes(1439) == "23:59"
