from datetime import datetime

from swiftlink.models.chat import parse_ts, sort_roster, sort_transcript


def test_parse_ts_normalises_to_naive_utc():
    assert parse_ts("2024-05-01T10:00:00Z") == datetime(2024, 5, 1, 10)
    assert parse_ts("2024-05-01T12:00:00+02:00") == datetime(2024, 5, 1, 10)
    assert parse_ts("2024-05-01T10:00:00") == datetime(2024, 5, 1, 10)


def test_parse_ts_unparseable_is_oldest():
    assert parse_ts("yesterday") == datetime.min
    assert parse_ts(None) == datetime.min


def test_roster_out_of_order_is_sorted_newest_first():
    roster = [
        {"userId": "a", "lastCreatedAt": "2024-05-01T10:00:00Z"},
        {"userId": "b", "lastCreatedAt": "2024-05-03T10:00:00.000Z"},
        {"userId": "c"},
        {"userId": "d", "lastCreatedAt": "2024-05-02T10:00:00"},
    ]
    assert [e["userId"] for e in sort_roster(roster)] == ["b", "d", "a", "c"]


def test_transcript_sorted_oldest_first():
    msgs = [
        {"message": "3", "createdAt": "2024-05-01T10:00:03Z"},
        {"message": "1", "createdAt": "2024-05-01T10:00:01Z"},
        {"message": "2", "createdAt": "2024-05-01T10:00:02Z"},
    ]
    assert [m["message"] for m in sort_transcript(msgs)] == ["1", "2", "3"]
