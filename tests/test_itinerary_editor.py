"""
行程编辑操作测试
"""

import pytest

from tourcms.core import itinerary_editor as editor
from tourcms.core.errors import (
    ContentError, DayNotFoundError, DocumentNotFoundError, DuplicateDayError, SegmentNotFoundError,
)


@pytest.fixture
def itinerary():
    data = editor.create_empty_itinerary()
    editor.add_day(data, 2, "Beijing")
    editor.add_day(data, 1, "Xi'an")
    return data


def test_empty_itinerary_shape():
    data = editor.create_empty_itinerary()
    assert data["days"] == []
    assert data["metadata"]["version"] == 2
    assert data["settings"] == {"startDate": None}
    assert data["tripInfo"]["costs"]["currency"] == "GBP"


@pytest.mark.parametrize("day, expected", [
    (0, "Fri, 8 May 2026"),
    (1, "Sat, 9 May 2026"),
    (24, "Mon, 1 Jun 2026"),
])
def test_calculate_date(day, expected):
    assert editor.calculate_date(day, "2026-05-08") == expected


def test_calculate_date_without_start():
    assert editor.calculate_date(3, None) is None


def test_add_day_keeps_days_sorted(itinerary):
    assert [d["day"] for d in itinerary["days"]] == [1, 2]
    assert itinerary["days"][0]["original"]["title"] == "Xi'an"
    assert itinerary["days"][0]["status"] == "draft"


def test_add_duplicate_day(itinerary):
    with pytest.raises(DuplicateDayError) as exc:
        editor.add_day(itinerary, 1)
    assert exc.value.status_code == 409


def test_move_day(itinerary):
    editor.move_day(itinerary, 1, 5)
    assert [d["day"] for d in itinerary["days"]] == [2, 5]

    with pytest.raises(DuplicateDayError):
        editor.move_day(itinerary, 2, 5)
    with pytest.raises(DayNotFoundError):
        editor.move_day(itinerary, 9, 10)


def test_renumber_days(itinerary):
    editor.move_day(itinerary, 2, 7)
    editor.renumber_days(itinerary, start_from=0)
    assert [d["day"] for d in itinerary["days"]] == [0, 1]


def test_update_and_delete_day(itinerary):
    updated = editor.update_day(itinerary, 2, {"title": "Great Wall"})
    assert updated["title"] == "Great Wall"
    assert editor.find_day(itinerary, 2)["title"] == "Great Wall"

    editor.delete_day(itinerary, 2)
    assert [d["day"] for d in itinerary["days"]] == [1]
    with pytest.raises(DayNotFoundError):
        editor.update_day(itinerary, 2, {})


def test_segment_lifecycle(itinerary):
    first = editor.add_segment(itinerary, 1, {"title": "Terracotta Army", "type": "activity"})
    second = editor.add_segment(itinerary, 1, {"title": "Train", "type": "transfer"})
    assert first["id"] != second["id"]
    assert first["highlights"] == []

    editor.update_segment(itinerary, 1, first["id"], {"duration": "3h"})
    assert editor.find_day(itinerary, 1)["segments"][0]["duration"] == "3h"

    segments = editor.reorder_segments(itinerary, 1, [second["id"], first["id"], "unknown"])
    assert [s["title"] for s in segments] == ["Train", "Terracotta Army"]

    editor.delete_segment(itinerary, 1, second["id"])
    assert [s["id"] for s in editor.find_day(itinerary, 1)["segments"]] == [first["id"]]

    with pytest.raises(SegmentNotFoundError):
        editor.update_segment(itinerary, 1, "missing", {})


def test_import_days_replaces_existing_day(itinerary):
    parsed = [
        {
            "day": 1,
            "date": "9 May",
            "title": "Terracotta Warriors",
            "location": "Xi'an",
            "accommodation": {"name": "Bell Tower Hotel", "rating": "4*"},
            "segments": [
                {"type": "activity", "title": "Army Museum", "description": "Pits 1-3.",
                 "highlights": ["Pit 1"]},
                {"type": "transfer", "title": "Coach", "mode": "coach", "description": "Return."},
            ],
        },
        {"day": 3, "title": "Free day", "accommodation": "Hutong Inn"},
    ]
    editor.import_days(itinerary, parsed)

    assert [d["day"] for d in itinerary["days"]] == [1, 2, 3]
    day1 = itinerary["days"][0]
    assert day1["title"] == "Terracotta Warriors"
    assert day1["accommodation"]["name"] == "Bell Tower Hotel"
    assert day1["accommodation"]["bookingUrl"] == ""
    assert day1["enhanced"]["description"] == "Pits 1-3.\n\nReturn."
    assert day1["enhanced"]["highlights"] == ["Pit 1"]
    assert [s["id"].split("-")[:2] for s in day1["segments"]] == [["1", "0"], ["1", "1"]]
    assert day1["segments"][1]["mode"] == "coach"

    day3 = itinerary["days"][2]
    assert day3["accommodation"]["name"] == "Hutong Inn"
    assert day3["original"]["accommodation"] == "Hutong Inn"
    assert day3["segments"] == []


def test_import_days_uses_activity_titles_without_highlights():
    data = editor.create_empty_itinerary()
    editor.import_days(data, [{"day": 4, "segments": [
        {"type": "activity", "title": "Bell Tower"},
        {"type": "meal", "title": "Dumplings"},
    ]}])
    assert data["days"][0]["enhanced"]["highlights"] == ["Bell Tower"]


def test_import_days_requires_day_number():
    with pytest.raises(ContentError):
        editor.import_days(editor.create_empty_itinerary(), [{"title": "No number"}])


def test_import_trip_info_merges_into_template():
    data = editor.create_empty_itinerary()
    info = editor.import_trip_info(data, {
        "tripName": "China Hiking",
        "costs": {"perPerson": "3995"},
        "visa": None,
    })
    assert data["tripInfo"] is info
    assert info["tripName"] == "China Hiking"
    assert info["costs"]["perPerson"] == "3995"
    assert info["costs"]["currency"] == "GBP"
    assert info["visa"]["required"] is True


def test_import_trip_info_ignores_non_object_sections():
    data = editor.create_empty_itinerary()
    info = editor.import_trip_info(data, {"tripName": "China Hiking", "dates": "May 8-20", "costs": ["3995"]})
    assert info["tripName"] == "China Hiking"
    assert info["dates"] == {"start": "", "end": ""}
    assert info["costs"]["currency"] == "GBP"


def test_get_trip_info_defaults_to_template():
    assert editor.get_trip_info({"days": []})["costs"]["currency"] == "GBP"
    data = editor.create_empty_itinerary()
    data["tripInfo"]["tripName"] = "Spring"
    assert editor.get_trip_info(data)["tripName"] == "Spring"


class TestSettings:

    def test_defaults(self):
        assert editor.get_settings({"days": []}) == {"startDate": None}
        assert editor.get_settings(editor.create_empty_itinerary()) == {"startDate": None}

    def test_update_merges_and_recomputes_dates(self, itinerary):
        settings = editor.update_settings(itinerary, {"startDate": "2026-05-08", "currency": "GBP"})
        assert settings == {"startDate": "2026-05-08", "currency": "GBP"}
        assert itinerary["settings"] is settings
        assert [d["date"] for d in itinerary["days"]] == ["Sat, 9 May 2026", "Sun, 10 May 2026"]

        editor.update_settings(itinerary, {"startDate": "2026-06-01"})
        assert itinerary["settings"]["currency"] == "GBP"
        assert itinerary["days"][0]["date"] == "Tue, 2 Jun 2026"

    def test_clearing_start_date_keeps_dates(self, itinerary):
        editor.update_settings(itinerary, {"startDate": "2026-05-08"})
        editor.update_settings(itinerary, {"startDate": None})
        assert itinerary["settings"]["startDate"] is None
        assert itinerary["days"][0]["date"] == "Sat, 9 May 2026"

    def test_invalid_start_date(self, itinerary):
        with pytest.raises(ContentError) as exc:
            editor.update_settings(itinerary, {"startDate": "next spring"})
        assert exc.value.status_code == 400
        assert itinerary["settings"] == {"startDate": None}

    def test_add_day_uses_start_date(self):
        data = editor.create_empty_itinerary()
        assert editor.add_day(data, 1)["date"] == ""

        editor.update_settings(data, {"startDate": "2026-05-08"})
        assert editor.add_day(data, 0)["date"] == "Fri, 8 May 2026"
        assert editor.add_day(data, 24)["date"] == "Mon, 1 Jun 2026"


def test_touch_metadata_keeps_extra_fields():
    data = {"metadata": {"exportedFrom": "CMS1", "version": 1}}
    editor.touch_metadata(data)
    assert data["metadata"]["version"] == 2
    assert data["metadata"]["exportedFrom"] == "CMS1"
    assert data["metadata"]["lastModified"]


class TestSavedTripRegistry:

    def test_save_load_update_rename_delete(self):
        registry = editor.SavedTripRegistry()
        current = {"days": [{"day": 1}]}
        trip = registry.save_current_as("Spring", current)

        current["days"].append({"day": 2})
        assert registry.load(trip["id"]) == {"days": [{"day": 1}]}

        registry.update(trip["id"], current)
        assert len(registry.load(trip["id"])["days"]) == 2

        assert registry.rename(trip["id"], "Autumn")["name"] == "Autumn"
        assert registry.delete(trip["id"]) is True
        assert registry.delete(trip["id"]) is False
        assert registry.trips == []

    def test_ids_are_unique(self):
        registry = editor.SavedTripRegistry()
        ids = {registry.save_current_as(f"trip {i}", {})["id"] for i in range(5)}
        assert len(ids) == 5

    def test_missing_trip(self):
        with pytest.raises(DocumentNotFoundError):
            editor.SavedTripRegistry([]).load("nope")
