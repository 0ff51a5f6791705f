"""
大模型行程解析测试（模型用 RunnableLambda 替身）
"""

import json

import pytest

from tourcms.agents.llm_parser import ItineraryLLMParser
from tourcms.core.errors import ContentError, LLMNotConfiguredError, LLMResponseError

from conftest import fake_llm


DAY = {"day": 1, "date": "9 May", "title": "Xi'an", "segments": [{"type": "activity", "title": "City Wall"}]}


def test_not_configured(config):
    parser = ItineraryLLMParser(config)
    assert not parser.is_configured
    with pytest.raises(LLMNotConfiguredError) as exc:
        parser.parse_itinerary("9th May: Xi'an")
    assert exc.value.status_code == 400


def test_placeholder_key_is_not_configured(config, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "your-key-here")
    assert not ItineraryLLMParser(config).is_configured


def test_raw_text_required(config):
    parser = ItineraryLLMParser(config, llm=fake_llm("[]"))
    with pytest.raises(ContentError, match="Raw text required"):
        parser.parse_itinerary("")


def test_parse_itinerary_list_in_code_fence(config):
    content = f"```json\n{json.dumps([DAY, {**DAY, 'day': 2}])}\n```"
    days = ItineraryLLMParser(config, llm=fake_llm(content)).parse_itinerary("text")
    assert [d["day"] for d in days] == [1, 2]
    assert days[0]["segments"][0]["title"] == "City Wall"


def test_single_object_is_wrapped(config):
    content = f"Here you go: {json.dumps(DAY)}"
    days = ItineraryLLMParser(config, llm=fake_llm(content)).parse_itinerary("text")
    assert days == [DAY]


def test_invalid_json_keeps_raw_output(config):
    parser = ItineraryLLMParser(config, llm=fake_llm("I could not parse that."))
    with pytest.raises(LLMResponseError) as exc:
        parser.parse_itinerary("text")
    assert exc.value.raw == "I could not parse that."
    assert exc.value.status_code == 500


def test_parse_trip_info(config):
    info = {"tripName": "China Hiking", "costs": {"perPerson": "3995", "currency": "GBP"}}
    result = ItineraryLLMParser(config, llm=fake_llm(json.dumps(info))).parse_trip_info("Trip: China Hiking")
    assert result == info


def test_prompt_receives_raw_text(config):
    seen = []

    def capture(prompt_value):
        seen.append(prompt_value.to_messages()[-1].content)
        return fake_llm("[]").invoke(prompt_value)

    from langchain_core.runnables import RunnableLambda
    ItineraryLLMParser(config, llm=RunnableLambda(capture)).parse_itinerary("8th May: Beijing")
    assert seen[0].endswith("8th May: Beijing")
