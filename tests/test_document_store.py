"""
JSON文档存储测试
"""

import json

from tourcms.core.document_store import JsonDocumentStore


def test_load_missing_returns_none(tmp_path):
    store = JsonDocumentStore(tmp_path / "missing")
    assert store.load("itinerary") is None
    assert store.list_days("research") == []


def test_save_creates_directory_and_writes_utf8(tmp_path):
    store = JsonDocumentStore(tmp_path / "nested" / "dir")
    path = store.save("home-page", {"title": "西安"})

    assert path == tmp_path / "nested" / "dir" / "home-page.json"
    raw = path.read_text(encoding="utf-8")
    assert "西安" in raw
    assert json.loads(raw) == {"title": "西安"}


def test_save_replaces_whole_document_without_temp_leftovers(tmp_path):
    store = JsonDocumentStore(tmp_path)
    store.save("doc", {"a": 1, "b": 2})
    store.save("doc.json", {"c": 3})

    assert store.load("doc") == {"c": 3}
    assert [p.name for p in tmp_path.iterdir()] == ["doc.json"]


def test_day_documents_are_listed_in_numeric_order(tmp_path):
    store = JsonDocumentStore(tmp_path)
    for day in (10, 2, 0):
        store.save_day("selections", day, {"day": day})
    store.save_day("poi", 3, {"day": 3})
    (tmp_path / "day-x-selections.json").write_text("{}", encoding="utf-8")

    assert store.list_days("selections") == [0, 2, 10]
    assert store.list_days("poi") == [3]
    assert store.load_day("selections", 2) == {"day": 2}


def test_delete(tmp_path):
    store = JsonDocumentStore(tmp_path)
    store.save("doc", {})
    assert store.delete("doc") is True
    assert store.delete("doc") is False
    assert not store.exists("doc")
