"""
基于大模型的行程解析器
将原始行程文本解析为带分段的每日结构，或提取行程概要信息（费用、签证、航班等）
"""

import json
import logging
from typing import Any, Dict, List, Optional

from langchain_openai import ChatOpenAI
from langchain_core.prompts import ChatPromptTemplate

from ..config.config import Config
from ..core.errors import ContentError, LLMNotConfiguredError, LLMResponseError
from ..utils.text_utils import parse_llm_json

logger = logging.getLogger(__name__)


DAYS_MAX_TOKENS = 8000
TRIP_INFO_MAX_TOKENS = 4000


class ItineraryLLMParser:
    """行程文本的大模型解析"""

    def __init__(self, config: Optional[Config] = None, llm: Optional[Any] = None):
        self.config = config or Config()
        self._llm = llm

        # 创建提示模板
        self.days_prompt = ChatPromptTemplate.from_messages([
            ("system", self._get_days_system_prompt()),
            ("human", "Parse this itinerary into days with segments. "
                      "Return ONLY valid JSON (no markdown, no explanation):\n\n{raw_text}")
        ])
        self.trip_info_prompt = ChatPromptTemplate.from_messages([
            ("system", self._get_trip_info_system_prompt()),
            ("human", "Extract trip information from this text. "
                      "Return ONLY valid JSON (no markdown, no explanation):\n\n{raw_text}")
        ])

    @property
    def is_configured(self) -> bool:
        return self._llm is not None or self.config.llm_configured

    def _create_llm(self, max_tokens: int):
        if self._llm is not None:
            return self._llm
        return ChatOpenAI(
            model=self.config.llm_model_name,  # type:ignore
            temperature=0.1,
            max_tokens=max_tokens,  # type:ignore
            api_key=self.config.openai_api_key,  # type:ignore
            base_url=self.config.openai_base_url or None,
        )

    def _get_days_system_prompt(self) -> str:
        return """You are an expert at parsing travel itineraries. Extract structured data with SEGMENTS for each day.

Return a JSON array of days. Each day should have SEGMENTS that break down the day's activities, transfers, meals, etc.

Structure for each day:
{{
  "day": 1,
  "date": "May 17",
  "title": "Short descriptive title (e.g., 'Xi'an to Beijing' or 'Exploring the Great Wall')",
  "location": "Primary location(s) for the day",
  "rawText": "ONLY the lines from the input that describe THIS day, between where this day starts and where the next day begins.",
  "segments": [
    {{
      "time": "Morning/Midday/Afternoon/Evening/Night",
      "type": "activity|transfer|check-in|check-out|meal|free-time",
      "title": "Segment title",
      "location": "Location for this segment",
      "description": "Details about this segment",
      "duration": "Estimated duration (e.g., '2 hours', '4-6 hours')",
      "from": "For transfers: departure location",
      "to": "For transfers: arrival location",
      "mode": "For transfers: train|flight|bus|coach|walk|cable-car|boat",
      "highlights": ["Key points for activities"],
      "walkDetails": {{
        "distance": "e.g., 13.7km",
        "elevation": "e.g., 500m gain",
        "difficulty": "easy|moderate|challenging"
      }}
    }}
  ],
  "meals": "Breakfast, Lunch, Dinner",
  "accommodation": {{
    "name": "Hotel name",
    "rating": "4-star",
    "location": "City"
  }}
}}

IMPORTANT:
- Break each day into logical segments (morning activity, lunch, afternoon activity, transfer, dinner, etc.)
- Mark transfers clearly with type="transfer" and include from/to/mode/duration
- For hiking/walking activities, include walkDetails
- Day 0 should be departure day (flight from origin)
- Capture all activities and transitions
- rawText must hold only the text for that specific day, never the entire document"""

    def _get_trip_info_system_prompt(self) -> str:
        return """You are an expert at extracting trip information from travel documents. Extract NON-ITINERARY information like costs, visa requirements, what's included, flights, etc.

Return a JSON object with this structure:
{{
  "tripName": "Name of the trip",
  "duration": "e.g., 14 days and 13 nights",
  "dates": {{
    "start": "Start date if mentioned",
    "end": "End date if mentioned"
  }},
  "costs": {{
    "perPerson": "Price per person (e.g., £1,600)",
    "singleSupplement": "Single room supplement if mentioned",
    "currency": "GBP/USD/EUR",
    "included": ["What's included (accommodation, meals, transport, guides, tickets, etc.)"],
    "excluded": ["What's NOT included (flights, single supplement, personal expenses, etc.)"]
  }},
  "flights": {{
    "outbound": {{"from": "Departure airport", "to": "Arrival airport", "date": "Date", "time": "Time", "airline": "Airline name"}},
    "return": {{"from": "Departure airport", "to": "Arrival airport", "date": "Date", "time": "Time", "airline": "Airline name"}},
    "notes": "Any flight-related notes"
  }},
  "visa": {{
    "required": true,
    "type": "Visa type if mentioned",
    "notes": "Visa-related notes"
  }},
  "insurance": {{
    "included": true,
    "notes": "Insurance details"
  }},
  "packingList": ["Items to bring if mentioned"],
  "healthSafety": {{
    "vaccinations": "Vaccination advice",
    "altitude": "Altitude notes",
    "notes": "Other health and safety notes"
  }},
  "hotelStandard": "e.g., 4-star hotels, mountain lodges",
  "groupSize": "If mentioned",
  "guides": "Guide information",
  "notes": "Any other general trip notes"
}}

Only include fields that have actual information. Use null for missing data."""

    def _invoke(self, prompt: ChatPromptTemplate, raw_text: str, max_tokens: int) -> Any:
        if not self.is_configured:
            raise LLMNotConfiguredError()
        if not raw_text:
            raise ContentError("Raw text required")

        chain = prompt | self._create_llm(max_tokens)
        logger.info(f"🤖 调用大模型解析 ({len(raw_text)} 字符)")
        response = chain.invoke({"raw_text": raw_text})
        content = response.content if hasattr(response, "content") else str(response)

        try:
            return parse_llm_json(content)
        except json.JSONDecodeError as e:
            logger.error(f"❌ 大模型返回内容不是有效JSON: {e}")
            raise LLMResponseError(content, e)

    def parse_itinerary(self, raw_text: str) -> List[Dict[str, Any]]:
        """
        解析行程文本为天列表

        Args:
            raw_text: 原始行程文本

        Returns:
            天列表；模型只返回单个对象时包装为列表

        Raises:
            LLMNotConfiguredError: 未配置 API Key
            ContentError: 文本为空
            LLMResponseError: 模型返回无法解析为JSON
        """
        parsed = self._invoke(self.days_prompt, raw_text, DAYS_MAX_TOKENS)
        days = parsed if isinstance(parsed, list) else [parsed]
        logger.info(f"✅ 解析得到 {len(days)} 天")
        return days

    def parse_trip_info(self, raw_text: str) -> Dict[str, Any]:
        """提取行程概要信息"""
        parsed = self._invoke(self.trip_info_prompt, raw_text, TRIP_INFO_MAX_TOKENS)
        logger.info("✅ 行程概要信息提取完成")
        return parsed
