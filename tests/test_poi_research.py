"""
景点研究代理测试
"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from tourcms.agents.poi_research import PoiResearchAgent, WikipediaClient, extract_pois, is_poi
from tourcms.core.site_builder import transform_itinerary
from tourcms.models.data_models import PointOfInterest, WikiSummary

from conftest import FakeWikipedia, fake_llm


WIKI = WikiSummary(title="Terracotta Army", extract="Sculptures of the army of Qin Shi Huang.",
                   url="https://en.wikipedia.org/wiki/Terracotta_Army")

SYNTHESIS = json.dumps({
    "summary": "Thousands of life-size soldiers.",
    "historicalContext": "Built for the first emperor.",
    "practicalTips": "Arrive at opening time.",
})


def poi(name="Terracotta Army"):
    return PointOfInterest(id="terracotta-army", name=name, day=1, location="Xi'an",
                           search_query=f"{name} Xi'an China")


@pytest.mark.parametrize("highlight, expected", [
    ("Terracotta Army", True),
    ("Airport transfer to hotel", False),
    ("High-Speed Train to Beijing", False),
    ("Peking Duck dinner", False),
    ("Temple of Heaven", True),
])
def test_is_poi(highlight, expected):
    assert is_poi(highlight) is expected


def test_extract_pois(site_itinerary):
    day = transform_itinerary(site_itinerary)[0]
    pois = extract_pois(day)
    assert [p.to_dict() for p in pois] == [{
        "id": "terracotta-army",
        "name": "Terracotta Army",
        "day": 1,
        "location": "Xi'an",
        "searchQuery": "Terracotta Army Xi'an China",
    }]


def test_extract_pois_from_bilingual_highlights():
    day = {"day": 3, "location": {"en": "Beijing", "cn": "北京"},
           "highlights": {"en": ["Forbidden City", "Flight to Xi'an"], "cn": ["故宫"]}}
    assert [p.name for p in extract_pois(day)] == ["Forbidden City"]


class TestWikipediaClient:

    @staticmethod
    def response(payload):
        resp = MagicMock()
        resp.json.return_value = payload
        return resp

    def test_search_returns_summary(self):
        session = MagicMock()
        session.get.side_effect = [
            self.response({"query": {"search": [{"title": "Temple of Heaven"}]}}),
            self.response({"query": {"pages": {"42": {"title": "Temple of Heaven", "extract": "x" * 3000}}}}),
        ]
        summary = WikipediaClient(session=session).search("Temple of Heaven Beijing China")

        assert summary.title == "Temple of Heaven"
        assert len(summary.extract) == 2000
        assert summary.url == "https://en.wikipedia.org/wiki/Temple_of_Heaven"
        _, kwargs = session.get.call_args
        assert kwargs["params"]["exintro"] == "true"
        assert kwargs["params"]["format"] == "json"

    def test_no_results(self):
        session = MagicMock()
        session.get.return_value = self.response({"query": {"search": []}})
        assert WikipediaClient(session=session).search("nothing") is None

    def test_missing_page(self):
        session = MagicMock()
        session.get.side_effect = [
            self.response({"query": {"search": [{"title": "Gone"}]}}),
            self.response({"query": {"pages": {"-1": {"title": "Gone", "missing": ""}}}}),
        ]
        assert WikipediaClient(session=session).search("gone") is None

    def test_network_error(self):
        session = MagicMock()
        session.get.side_effect = requests.Timeout("slow")
        assert WikipediaClient(session=session).search("anything") is None


class TestSynthesis:

    def test_placeholder_without_api_key(self, config, tmp_path):
        agent = PoiResearchAgent(config, output_dir=tmp_path, wiki=FakeWikipedia())
        assert not agent.llm_configured

        synthesis = agent.synthesize(poi(), None)
        assert synthesis.confidence == 0
        assert synthesis.summary.startswith("[Placeholder] Terracotta Army")

    def test_llm_with_wikipedia(self, config, tmp_path):
        agent = PoiResearchAgent(config, output_dir=tmp_path, llm=fake_llm(f"```json\n{SYNTHESIS}\n```"))
        synthesis = agent.synthesize(poi(), WIKI)
        assert synthesis.confidence == 0.9
        assert synthesis.practical_tips == "Arrive at opening time."

    def test_llm_without_wikipedia(self, config, tmp_path):
        agent = PoiResearchAgent(config, output_dir=tmp_path, llm=fake_llm(SYNTHESIS))
        assert agent.synthesize(poi(), None).confidence == 0.7

    def test_unparseable_response_falls_back(self, config, tmp_path):
        agent = PoiResearchAgent(config, output_dir=tmp_path, llm=fake_llm("Sorry, I cannot help."))
        synthesis = agent.synthesize(poi(), WIKI)
        assert synthesis.confidence == 0.3
        assert synthesis.summary == "Terracotta Army is a notable destination in Xi'an."


def test_research_day_and_save(config, tmp_path):
    wiki = FakeWikipedia(WIKI)
    agent = PoiResearchAgent(config, output_dir=tmp_path, wiki=wiki, llm=fake_llm(SYNTHESIS), serial_delay=0)
    day = {"day": 2, "date": "Sun, 10 May 2026", "title": "City Walls", "location": "Xi'an",
           "highlights": ["Ancient City Wall", "Big Wild Goose Pagoda", "Welcome dinner"]}

    research = agent.research_day(day)

    assert [p["name"] for p in research["pois"]] == ["Ancient City Wall", "Big Wild Goose Pagoda"]
    first = research["pois"][0]
    assert first["summary"] == "Thousands of life-size soldiers."
    assert first["confidence"] == 0.9
    assert first["links"] == [{"type": "wikipedia", "url": WIKI.url, "title": "Wikipedia"}]
    assert first["wikiTitle"] == "Terracotta Army"
    assert sorted(wiki.queries) == ["Ancient City Wall Xi'an China", "Big Wild Goose Pagoda Xi'an China"]

    json_path, html_path = agent.save(research, api_base="http://cms.local")
    assert json_path == tmp_path / "day-2-poi.json"
    assert json.loads(json_path.read_text(encoding="utf-8"))["pois"][1]["name"] == "Big Wild Goose Pagoda"
    html = html_path.read_text(encoding="utf-8")
    assert "Big Wild Goose Pagoda" in html
    assert "http://cms.local" in html


def test_parallel_failure_falls_back_to_serial(config, tmp_path, monkeypatch):
    agent = PoiResearchAgent(config, output_dir=tmp_path, wiki=FakeWikipedia(), serial_delay=0)

    class Boom:
        def __init__(self, *args, **kwargs):
            pass

        def invoke(self, *_):
            raise RuntimeError("executor unavailable")

    monkeypatch.setattr("tourcms.agents.poi_research.RunnableParallel", Boom)
    results = agent.research_pois([poi("Forbidden City"), poi("Summer Palace")])
    assert [r["name"] for r in results] == ["Forbidden City", "Summer Palace"]
