"""
PDF 行程和路线地图测试
"""

import pytest

from tourcms.core.errors import ContentError
from tourcms.core.pdf_builder import ItineraryPdfBuilder, day_range_label, pdf_filename
from tourcms.core.route_map import render_route_map
from tourcms.core.site_builder import transform_itinerary


INFO = {
    "price": {"amount": "£3,995", "perPerson": {"en": "per person"}, "dates": {"en": "8-22 May 2026"}},
    "included": {"title": {"en": "Included"}, "items": [{"text": {"en": "All hotels"}}]},
    "notIncluded": {"title": {"en": "Not included"}, "items": [{"text": {"en": "Flights"}}]},
}


@pytest.mark.parametrize("language", ["en", "cn"])
def test_build_pdf(site_itinerary, language):
    builder = ItineraryPdfBuilder(language)
    pdf = builder.build(transform_itinerary(site_itinerary), INFO)
    assert pdf.startswith(b"%PDF")
    assert builder.filename == pdf_filename(language)


def test_unknown_language_falls_back_to_english():
    assert ItineraryPdfBuilder("fr").language == "en"


def test_day_range_label():
    assert day_range_label([1, 2, 3, 4]) == "Days 1-4"
    assert day_range_label([11]) == "Day 11"
    assert day_range_label([12, 13, 14], "cn", spaced=True) == "第12 - 14天"
    assert day_range_label([]) == ""


def test_route_map_html():
    html = render_route_map()
    assert "leaflet" in html.lower()
    assert "Beijing" in html
    assert "#D84315" in html


def test_route_map_language():
    assert "北京" in render_route_map(language="cn")


def test_route_map_without_coordinates():
    with pytest.raises(ContentError):
        render_route_map(regions=[], route=[])
