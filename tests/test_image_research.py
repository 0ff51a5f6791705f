"""
每日图片研究测试
"""

import json

import pytest

from tourcms.agents.image_research import ImageResearcher, get_search_terms, segment_search_term
from tourcms.core.site_builder import transform_itinerary


@pytest.mark.parametrize("highlight, location, expected", [
    ("Terracotta Warriors (Pit 1)", "Xi'an", "terracotta warriors xian china"),
    ("Check in at hotel", "Beijing", "Beijing china hotel lobby"),
    ("Lama Temple", "Beijing", "Lama Temple Beijing china tourism"),
    ("Hiking to the summit (6km)", "Lushan", "Lushan china hiking trail"),
])
def test_get_search_terms(highlight, location, expected):
    assert get_search_terms(highlight, location) == expected


@pytest.mark.parametrize("segment, day_location, expected", [
    ({"title": "Bell & Drum Towers (evening)", "location": "Xi'an, Shaanxi"}, "", "Bell and Drum Towers Xi'an China"),
    ({"title": "Beijing Hutongs"}, "Beijing", "Beijing Hutongs China"),
    ({"title": "Great Wall of China"}, "", "Great Wall of China"),
    ({"title": "Train"}, "Qu", "Train"),
    ({"title": {"en": "Cable car ride", "cn": "缆车"}}, "Huangshan > Tunxi", "Cable car ride Huangshan China"),
])
def test_segment_search_term(segment, day_location, expected):
    assert segment_search_term(segment, day_location) == expected


def test_research_day(search_service, fake_providers, site_itinerary, tmp_path):
    researcher = ImageResearcher(search_service, tmp_path, delay=0)
    day = transform_itinerary(site_itinerary)[0]

    research = researcher.research_day(day)

    assert research["accommodation"] == "Bell Tower Hotel"
    assert research["hotelSearch"] == "https://www.tripadvisor.com/Search?q=Bell%20Tower%20Hotel%20Xi%27an"
    assert [a["name"] for a in research["activities"]] == ["Terracotta Army", "Airport transfer"]
    first = research["activities"][0]
    assert first["searchTerm"] == "Terracotta Army Xi'an china tourism"
    assert len(first["images"]) == 8
    assert {img["source"] for img in first["images"]} == {"unsplash", "pexels"}
    assert first["suggestedAlt"][0] == "Terracotta Army in Xi'an, China"
    assert fake_providers["pixabay"].calls == []

    json_path, html_path = researcher.save_day(research)
    assert json_path.name == "day-1-research.json"
    assert "Search on TripAdvisor" in html_path.read_text(encoding="utf-8")


def test_regenerate_research_skips_logistics_segments(search_service, tmp_path):
    researcher = ImageResearcher(search_service, tmp_path, delay=0)
    itinerary = {"days": [{
        "day": 3,
        "title": "Mount Tai",
        "location": "Tai'an",
        "segments": [
            {"type": "check-in", "title": "Hotel check-in"},
            {"type": "activity", "title": "Jade Emperor Peak"},
            {"type": "meal", "title": "Lunch"},
            {"type": "transfer", "title": "Cable car down"},
        ],
    }]}

    totals = researcher.regenerate_research(itinerary)

    assert totals == {"days": 1, "activities": 2, "images": 16}
    saved = json.loads((tmp_path / "day-3-research.json").read_text(encoding="utf-8"))
    assert saved["title"] == {"en": "Mount Tai", "cn": "Mount Tai"}
    assert saved["providers"] == ["unsplash", "pexels", "pixabay", "wikimedia"]
    assert [a["activity"] for a in saved["activities"]] == ["Jade Emperor Peak", "Cable car down"]
    assert saved["activities"][0]["searchTerm"] == "Jade Emperor Peak Tai'an China"
    assert len(saved["sampleImages"]) == 2


def test_regenerate_research_empty_itinerary(search_service, tmp_path):
    assert ImageResearcher(search_service, tmp_path).regenerate_research(None) == {
        "days": 0, "activities": 0, "images": 0,
    }
