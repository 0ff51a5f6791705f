"""
景点(POI)研究代理
从每日亮点中提取景点，检索维基百科，再由大模型生成介绍、历史背景和游览建议
使用 RunnableParallel 并行研究同一天的多个景点
"""

import re
import time
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
from urllib.parse import quote

import requests
from langchain_openai import ChatOpenAI
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import RunnableLambda, RunnableParallel

from ..config.config import Config
from ..core.document_store import JsonDocumentStore
from ..models.data_models import PoiSynthesis, PointOfInterest, WikiSummary
from ..reports.html_report import DEFAULT_API_BASE, render_poi_review, write_report
from ..utils.text_utils import get_text, parse_llm_json, slugify

logger = logging.getLogger(__name__)


SKIP_PATTERNS = [
    re.compile(p, re.IGNORECASE) for p in (
        r"airport transfer",
        r"welcome dinner",
        r"welcome meeting",
        r"high-speed train",
        r"high-speed rail",
        r"sleeper train",
        r"overnight train",
        r"flight to",
        r"departure",
        r"overnight",
        r"dumpling banquet",
        r"peking duck",
        r"acclimatization",
        r"warm-up",
    )
]

WIKI_EXTRACT_LIMIT = 2000
SERIAL_DELAY = 0.5


def is_poi(highlight: str) -> bool:
    """过滤交通、餐食等非景点亮点"""
    return not any(p.search(highlight) for p in SKIP_PATTERNS)


def day_highlights(day: Dict[str, Any]) -> List[str]:
    """读取英文亮点列表，兼容 {en: [...], cn: [...]} 和普通列表"""
    highlights = day.get("highlights") or []
    if isinstance(highlights, dict):
        highlights = highlights.get("en") or []
    return [str(h) for h in highlights]


def extract_pois(day: Dict[str, Any]) -> List[PointOfInterest]:
    location = get_text(day.get("location"))
    return [
        PointOfInterest(
            id=slugify(h),
            name=h,
            day=day.get("day"),
            location=location,
            search_query=f"{h} {location} China",
        )
        for h in day_highlights(day)
        if is_poi(h)
    ]


class WikipediaClient:
    """英文维基百科：先搜索条目，再取导语摘要"""

    API_URL = "https://en.wikipedia.org/w/api.php"

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 15):
        self.session = session or requests.Session()
        self.timeout = timeout

    def _query(self, params: Dict[str, Any]) -> Dict[str, Any]:
        response = self.session.get(self.API_URL, params={**params, "action": "query", "format": "json"},
                                    timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def search(self, query: str) -> Optional[WikiSummary]:
        try:
            results = (self._query({"list": "search", "srsearch": query}).get("query") or {}).get("search") or []
            if not results:
                return None

            data = self._query({
                "titles": results[0]["title"],
                "prop": "extracts",
                "exintro": "true",
                "explaintext": "true",
            })
            pages = (data.get("query") or {}).get("pages") or {}
            page = next(iter(pages.values()), None)
            if not page or "missing" in page:
                return None

            title = page["title"]
            return WikiSummary(
                title=title,
                extract=(page.get("extract") or "")[:WIKI_EXTRACT_LIMIT],
                url=f"https://en.wikipedia.org/wiki/{quote(title.replace(' ', '_'))}",
            )
        except Exception as e:
            logger.warning(f"⚠️ 维基百科检索失败 '{query}': {e}")
            return None


class PoiResearchAgent:
    """景点研究代理"""

    def __init__(self, config: Optional[Config] = None, output_dir: Optional[Union[str, Path]] = None,
                 wiki: Optional[WikipediaClient] = None, llm: Optional[Any] = None,
                 serial_delay: float = SERIAL_DELAY):
        self.config = config or Config()
        self.store = JsonDocumentStore(output_dir or self.config.poi_research_dir)
        self.wiki = wiki or WikipediaClient(timeout=self.config.http_timeout)
        self._llm = llm
        self.serial_delay = serial_delay

        self.prompt = ChatPromptTemplate.from_messages([
            ("system", "You are an expert travel writer. Return ONLY valid JSON, no markdown or explanation."),
            ("human", self._get_human_prompt())
        ])

    @property
    def llm_configured(self) -> bool:
        return self._llm is not None or self.config.llm_configured

    def _get_llm(self):
        if self._llm is None:
            self._llm = ChatOpenAI(
                model=self.config.llm_model_name,  # type:ignore
                temperature=0.7,
                max_tokens=1500,  # type:ignore
                api_key=self.config.openai_api_key,  # type:ignore
                base_url=self.config.openai_base_url or None,
            )
        return self._llm

    def _get_human_prompt(self) -> str:
        return """You are a travel content writer creating engaging descriptions for a hiking tour website.

POI Name: {name}
Location: {location}, China
Wikipedia Content: {wiki_extract}

Generate a JSON response with engaging, accurate content:
{{
  "summary": "1-2 paragraphs (150-250 words). Marketing-style description of what makes this place special, what visitors will experience and why it's worth the visit.",
  "historicalContext": "2-4 sentences of key historical facts. When was it built or established? Why is it significant?",
  "practicalTips": "3-5 practical tips for visitors: best times to visit, how long to spend there, what to wear, insider tips."
}}

IMPORTANT:
- Only include verifiable facts
- This is marketing content for tourists, keep it engaging
- Be concise but informative"""

    def synthesize(self, poi: PointOfInterest, wiki: Optional[WikiSummary]) -> PoiSynthesis:
        """
        生成景点介绍

        未配置密钥时返回占位内容（置信度 0）；调用或解析失败时返回兜底内容（置信度 0.3）。
        """
        if not self.llm_configured:
            logger.warning("⚠️ 未配置 OpenAI API Key，使用占位内容")
            return PoiSynthesis(
                summary=f"[Placeholder] {poi.name} is a fascinating destination in {poi.location}, China.",
                historical_context="[Placeholder] Historical information to be added.",
                practical_tips="[Placeholder] Practical visitor tips to be added.",
                confidence=0,
            )

        try:
            chain = self.prompt | self._get_llm()
            response = chain.invoke({
                "name": poi.name,
                "location": poi.location,
                "wiki_extract": wiki.extract if wiki else "No Wikipedia data available",
            })
            content = response.content if hasattr(response, "content") else str(response)
            parsed = parse_llm_json(content)
            return PoiSynthesis(
                summary=parsed.get("summary") or "",
                historical_context=parsed.get("historicalContext") or "",
                practical_tips=parsed.get("practicalTips") or "",
                confidence=0.9 if wiki else 0.7,
            )
        except Exception as e:
            logger.error(f"❌ 景点内容生成失败 {poi.name}: {e}")
            return PoiSynthesis(
                summary=f"{poi.name} is a notable destination in {poi.location}.",
                historical_context="Historical information unavailable.",
                practical_tips="Please research visitor tips before your visit.",
                confidence=0.3,
            )

    def research_poi(self, poi: PointOfInterest) -> Dict[str, Any]:
        logger.info(f"  🔍 研究景点: {poi.name}")
        wiki = self.wiki.search(poi.search_query)
        if wiki:
            logger.info(f"     📚 维基百科: {wiki.title}")
        synthesis = self.synthesize(poi, wiki)

        return {
            **poi.to_dict(),
            **synthesis.to_dict(),
            "links": [{"type": "wikipedia", "url": wiki.url, "title": "Wikipedia"}] if wiki else [],
            "wikiTitle": wiki.title if wiki else None,
            "researchedAt": datetime.now().isoformat(),
        }

    def research_pois(self, pois: List[PointOfInterest]) -> List[Dict[str, Any]]:
        """并行研究多个景点，失败时回退到串行"""
        if not pois:
            return []

        start_time = time.time()

        def create_poi_processor(poi: PointOfInterest):
            return RunnableLambda(lambda _: self.research_poi(poi))

        parallel_tasks = {f"poi_{idx}": create_poi_processor(poi) for idx, poi in enumerate(pois)}
        parallel_runner = RunnableParallel(parallel_tasks)

        try:
            results = parallel_runner.invoke({})
            researched = [results[f"poi_{idx}"] for idx in range(len(pois))]
            logger.info(f"⚡ 并行研究 {len(pois)} 个景点，耗时 {time.time() - start_time:.2f} 秒")
            return researched
        except Exception as e:
            logger.error(f"❌ 并行研究失败: {e}")
            return self._fallback_serial_research(pois)

    def _fallback_serial_research(self, pois: List[PointOfInterest]) -> List[Dict[str, Any]]:
        """回退的串行处理方案"""
        logger.info("🔄 回退到串行处理...")
        researched = []
        for poi in pois:
            researched.append(self.research_poi(poi))
            time.sleep(self.serial_delay)
        return researched

    def research_day(self, day: Dict[str, Any]) -> Dict[str, Any]:
        """
        研究某一天的所有景点

        Args:
            day: 网站格式的一天（title/location 可为双语字典）

        Returns:
            {day, date, title, location, pois}
        """
        pois = extract_pois(day)
        logger.info(f"🏛️ Day {day.get('day')}: {get_text(day.get('title'))}，共 {len(pois)} 个景点")
        return {
            "day": day.get("day"),
            "date": day.get("date"),
            "title": day.get("title"),
            "location": day.get("location"),
            "pois": self.research_pois(pois),
        }

    def save(self, research: Dict[str, Any], api_base: str = DEFAULT_API_BASE) -> Tuple[Path, Path]:
        """保存 day-N-poi.json 和审阅页 day-N-poi.html"""
        day = research["day"]
        json_path = self.store.save_day("poi", day, research)
        html = render_poi_review(research, api_base)
        html_path = write_report(html, self.store.root / f"day-{day}-poi.html")
        logger.info(f"✅ Day {day} 景点研究已保存")
        return json_path, html_path
