"""
测试公共夹具
数据目录全部指向临时目录，外部服务用假实现替代
"""

import os
import tempfile

import pytest

# 导入 app 模块前先把数据目录指向临时目录
_IMPORT_DIR = tempfile.mkdtemp(prefix="tourcms-tests-")
for _name, _sub in (("CONTENT_DATA_DIR", "content"), ("SITE_DATA_DIR", "site"),
                    ("RESEARCH_DIR", "research"), ("POI_RESEARCH_DIR", "poi-research"),
                    ("SITE_IMAGES_DIR", "images"), ("SESSIONS_FILE", "content/sessions.json")):
    os.environ.setdefault(_name, os.path.join(_IMPORT_DIR, _sub))
os.environ["OPENAI_API_KEY"] = ""

from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda

from tourcms.agents.llm_parser import ItineraryLLMParser
from tourcms.agents.poi_research import PoiResearchAgent
from tourcms.api.service import ContentService
from tourcms.config.config import Config
from tourcms.models.data_models import ImageRecord
from tourcms.search.aggregator import ImageSearchService
from tourcms.search.providers import ImageProvider


def make_record(source, number, width=1600, height=1000, alt="", src=None):
    return ImageRecord(
        id=f"{source}-{number}",
        src=src or f"https://{source}.example.com/{number}.jpg",
        thumb=f"https://{source}.example.com/{number}-thumb.jpg",
        full=f"https://{source}.example.com/{number}-full.jpg",
        alt=alt or f"{source} photo {number}",
        photographer="Someone",
        photographer_url="https://example.com/someone",
        source=source,
        source_url=f"https://{source}.example.com/photos/{number}",
        width=width,
        height=height,
    )


class FakeProvider(ImageProvider):
    """返回预置结果的服务商，记录每次调用"""

    def __init__(self, name, records=None):
        super().__init__(api_key="test-key")
        self.name = name
        self.records = records if records is not None else [make_record(name, i) for i in range(1, 11)]
        self.calls = []

    def _search(self, query, count):
        self.calls.append((query, count))
        return self.records[:count]


class FakeWikipedia:
    def __init__(self, summary=None):
        self.summary = summary
        self.queries = []

    def search(self, query):
        self.queries.append(query)
        return self.summary


def fake_llm(content):
    """总是返回固定内容的聊天模型替身"""
    return RunnableLambda(lambda _: AIMessage(content=content))


@pytest.fixture
def fake_providers():
    return {name: FakeProvider(name) for name in ("unsplash", "pexels", "pixabay", "wikimedia")}


@pytest.fixture
def search_service(fake_providers):
    return ImageSearchService(fake_providers)


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.setenv("CONTENT_DATA_DIR", str(tmp_path / "content"))
    monkeypatch.setenv("SITE_DATA_DIR", str(tmp_path / "site"))
    monkeypatch.setenv("RESEARCH_DIR", str(tmp_path / "research"))
    monkeypatch.setenv("POI_RESEARCH_DIR", str(tmp_path / "poi-research"))
    monkeypatch.setenv("SITE_IMAGES_DIR", str(tmp_path / "images"))
    monkeypatch.setenv("SESSIONS_FILE", str(tmp_path / "content" / "sessions.json"))
    for key in ("OPENAI_API_KEY", "UNSPLASH_ACCESS_KEY", "PEXELS_API_KEY", "PIXABAY_API_KEY"):
        monkeypatch.setenv(key, "")
    monkeypatch.setenv("DEBUG_REQUEST_BODY", "false")
    return Config()


@pytest.fixture
def service(config, search_service):
    return ContentService(
        config,
        search=search_service,
        parser=ItineraryLLMParser(config),
        poi_agent=PoiResearchAgent(config, wiki=FakeWikipedia(), serial_delay=0),
    )


@pytest.fixture
def client(service, monkeypatch):
    from fastapi.testclient import TestClient
    import importlib

    app_module = importlib.import_module("tourcms.api.app")

    monkeypatch.setattr(app_module, "content_service", service)
    return TestClient(app_module.app)


@pytest.fixture
def site_itinerary():
    """CMS2 网站行程样例"""
    return {
        "metadata": {"version": 2},
        "days": [
            {
                "day": 1,
                "date": "Sat, 9 May 2026",
                "title": "Terracotta Warriors",
                "location": "Xi'an",
                "description": "A full day with the warriors.",
                "meals": "Breakfast, Dinner",
                "accommodation": {"name": "Bell Tower Hotel", "rating": "4*"},
                "segments": [
                    {
                        "id": "1-0",
                        "time": "Morning",
                        "type": "activity",
                        "title": "Terracotta Army Museum",
                        "description": "Explore the pits.",
                        "highlights": ["Terracotta Army", "Airport transfer"],
                        "images": [{"src": "https://example.com/warriors.jpg", "alt": "Warriors"}],
                    },
                    {
                        "id": "1-1",
                        "time": "Afternoon",
                        "type": "transfer",
                        "title": "Back to the city",
                        "mode": "coach",
                        "from": "Lintong",
                        "to": "Xi'an",
                        "duration": "1h",
                    },
                ],
            },
            {
                "day": 5,
                "date": "Wed, 13 May 2026",
                "title": "Great Wall Hike",
                "location": "Beijing",
                "accommodation": {"name": "Bell Tower Hotel"},
                "segments": [
                    {
                        "id": "5-0",
                        "time": "Full Day",
                        "type": "activity",
                        "title": "Great Wall at Jinshanling",
                        "highlights": ["Jinshanling Great Wall"],
                    },
                ],
            },
        ],
    }
