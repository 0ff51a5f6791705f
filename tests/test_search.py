"""
多来源图片搜索测试
"""

import pytest

from tourcms.core.errors import ContentError
from tourcms.search.aggregator import ImageSearchService, ResearchSearch
from tourcms.search.session_store import SearchSessionStore

from conftest import FakeProvider, make_record


class TestImageSearchService:

    def test_all_providers_split_count_rounding_up(self, search_service, fake_providers):
        images = search_service.search("pagoda", "all", 15)

        assert len(images) == 16
        for provider in fake_providers.values():
            assert provider.calls == [("pagoda", 4)]
        assert [img.source for img in images[::4]] == ["unsplash", "pexels", "pixabay", "wikimedia"]

    def test_both_means_unsplash_and_pexels(self, search_service, fake_providers):
        images = search_service.search("pagoda", "both", 5)

        assert {img.source for img in images} == {"unsplash", "pexels"}
        assert fake_providers["unsplash"].calls == [("pagoda", 3)]
        assert fake_providers["pixabay"].calls == []

    def test_single_provider(self, search_service):
        images = search_service.search("pagoda", "pixabay", 2)
        assert [img.id for img in images] == ["pixabay-1", "pixabay-2"]

    def test_unknown_provider(self, search_service):
        with pytest.raises(ContentError, match="Unknown image provider"):
            search_service.search("pagoda", "flickr", 5)

    def test_query_required(self, search_service):
        with pytest.raises(ContentError, match="Query is required"):
            search_service.search("", "all", 5)

    def test_from_config_registers_every_provider(self, config):
        service = ImageSearchService.from_config(config)
        assert sorted(service.providers) == ["pexels", "pixabay", "unsplash", "wikimedia"]
        assert not service.providers["unsplash"].available
        assert service.providers["wikimedia"].available


class TestResearchSearch:

    @pytest.fixture
    def sessions(self, tmp_path):
        return SearchSessionStore(tmp_path / "sessions.json")

    def test_dedups_scores_sorts_and_records_history(self, sessions):
        shared = "https://shared.example.com/same.jpg"
        providers = {
            "wikimedia": FakeProvider("wikimedia", [make_record("wikimedia", 1, src=shared, alt="Bell Tower")]),
            "unsplash": FakeProvider("unsplash", [
                make_record("unsplash", 1, src=shared),
                make_record("unsplash", 2, width=300, height=300),
            ]),
            "pexels": FakeProvider("pexels", []),
            "pixabay": FakeProvider("pixabay", [make_record("pixabay", 1, alt="bell tower xian")]),
        }
        sessions.rate("Bell Tower", "pixabay-1", "veryRelevant")
        research = ResearchSearch(ImageSearchService(providers), sessions)

        result = research.search("bell tower", 30)

        ids = [img["id"] for img in result["images"]]
        assert sorted(ids) == ["pixabay-1", "unsplash-2", "wikimedia-1"]
        relevances = [img["relevance"] for img in result["images"]]
        assert relevances == sorted(relevances, reverse=True)
        assert ids[-1] == "unsplash-2"
        assert providers["wikimedia"].calls == [("bell tower", 8)]
        assert result["sources"] == {"wikimedia": 1, "unsplash": 2, "pexels": 0, "pixabay": 1}

        by_id = {img["id"]: img for img in result["images"]}
        assert by_id["pixabay-1"]["userRating"] == "veryRelevant"
        assert by_id["wikimedia-1"]["userRating"] is None

        history = sessions.sessions()["searches"]
        assert history[0]["id"] == result["searchId"]
        assert history[0]["resultCount"] == 3

    def test_query_required(self, sessions, search_service):
        with pytest.raises(ContentError):
            ResearchSearch(search_service, sessions).search("")
