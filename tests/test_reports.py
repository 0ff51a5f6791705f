"""
HTML 审阅页测试
"""

import pytest

from tourcms.reports.html_report import confidence_class, render_image_research, render_poi_review, write_report


@pytest.mark.parametrize("confidence, expected", [
    (0.9, "confidence-high"),
    (0.8, "confidence-high"),
    (0.7, "confidence-medium"),
    (0.3, "confidence-low"),
    (0, "confidence-low"),
])
def test_confidence_class(confidence, expected):
    assert confidence_class(confidence) == expected


def test_poi_review_escapes_content():
    research = {
        "day": 4,
        "date": "Tue, 12 May 2026",
        "title": {"en": "Xi'an Museums", "cn": "西安博物馆"},
        "location": "Xi'an",
        "pois": [{
            "id": "beilin",
            "name": "Beilin <Forest> of Steles",
            "summary": "Stone tablets.",
            "historicalContext": "Song dynasty.",
            "practicalTips": "Allow two hours.",
            "confidence": 0.9,
            "links": [],
            "wikiTitle": "Beilin Museum",
        }],
    }
    html = render_poi_review(research, "http://localhost:9000")

    assert "Day 4: Xi&#39;an Museums" in html
    assert "Beilin &lt;Forest&gt; of Steles" in html
    assert "confidence-high" in html
    assert "90%" in html
    assert "http://localhost:9000" in html
    assert "/api/poi/" in html


def test_poi_review_without_pois():
    html = render_poi_review({"day": 0, "title": "Departure", "location": "London", "pois": []})
    assert "Day 0: Departure" in html


def test_image_research_page(tmp_path):
    research = {
        "day": 1,
        "title": "Arrival",
        "location": "Xi'an",
        "accommodation": "Bell Tower Hotel",
        "hotelSearch": "https://www.tripadvisor.com/Search?q=Bell",
        "activities": [{
            "name": "City Wall",
            "searchTerm": "xian ancient city wall china",
            "images": [{"id": "unsplash-1", "url": "https://u/1.jpg", "source": "unsplash", "alt": "Wall"}],
            "suggestedAlt": ["City Wall in Xi'an, China"],
        }],
    }
    path = write_report(render_image_research(research), tmp_path / "out" / "day-1-research.html")

    html = path.read_text(encoding="utf-8")
    assert "Bell Tower Hotel" in html
    assert "https://u/1.jpg" in html
    assert "xian ancient city wall china" in html
