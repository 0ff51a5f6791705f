"""
内容管理核心服务
整合文档存储、行程编辑、图片搜索、研究代理和导出功能，为API层提供统一接口
耗时操作（外部请求、大模型、PDF生成）在线程池中执行
"""

import time
import uuid
import logging
import asyncio
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple
from concurrent.futures import ThreadPoolExecutor

from ..config.config import Config
from ..core import itinerary_editor as editor
from ..core.cms_export import export_selections
from ..core.document_store import JsonDocumentStore
from ..core.errors import ContentError, DayNotFoundError, DocumentNotFoundError
from ..core.image_migration import IMAGE_EXTENSIONS
from ..core.pdf_builder import ItineraryPdfBuilder
from ..core.route_map import render_route_map
from ..core.site_builder import transform_itinerary
from ..core.text_parser import parse_itinerary_text
from ..agents.llm_parser import ItineraryLLMParser
from ..agents.poi_research import PoiResearchAgent
from ..search.aggregator import ImageSearchService, ResearchSearch
from ..search.session_store import SearchSessionStore

logger = logging.getLogger(__name__)


# 网站数据文档
SITE_ITINERARY = "itinerary-v2"
SITE_INFO = "info-page"
SITE_HOME = "home-page"

# 内容管理数据文档
CONTENT_ITINERARY = "itinerary"
SAVED_TRIPS = "saved-trips"
INTEREST_SUBMISSIONS = "interest-submissions"


class ContentService:
    """内容管理服务"""

    def __init__(self, config: Optional[Config] = None,
                 search: Optional[ImageSearchService] = None,
                 parser: Optional[ItineraryLLMParser] = None,
                 poi_agent: Optional[PoiResearchAgent] = None):
        self.config = config or Config()

        self.site_store = JsonDocumentStore(self.config.site_data_dir)
        self.content_store = JsonDocumentStore(self.config.content_data_dir)
        self.selections_store = JsonDocumentStore(self.config.content_data_dir / "selections")
        self.poi_store = JsonDocumentStore(self.config.content_data_dir / "poi")
        self.research_store = JsonDocumentStore(self.config.research_dir)

        self.search = search or ImageSearchService.from_config(self.config)
        self.sessions = SearchSessionStore(self.config.sessions_file, self.config.max_search_history)
        self.research = ResearchSearch(self.search, self.sessions)
        self.parser = parser or ItineraryLLMParser(self.config)
        self.poi_agent = poi_agent or PoiResearchAgent(self.config)

        self.max_workers = 4
        self.executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="tourcms")

    async def _run_in_executor(self, func: Callable, *args):
        """在共享线程池中运行同步函数"""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, func, *args)

    def shutdown(self):
        self.executor.shutdown(wait=False)

    # ============================================
    # 网站文档（itinerary-v2 / info-page / home-page）
    # ============================================

    def load_site_document(self, name: str) -> Optional[Dict[str, Any]]:
        return self.site_store.load(name)

    def save_site_document(self, name: str, data: Optional[Dict[str, Any]]) -> Path:
        if not data:
            raise ContentError("Data is required")
        if name == SITE_ITINERARY:
            editor.touch_metadata(data)
        path = self.site_store.save(name, data)
        logger.info(f"💾 已保存 {name}")
        return path

    def site_days(self) -> List[Dict[str, Any]]:
        return transform_itinerary(self.site_store.load(SITE_ITINERARY))

    def site_day(self, day: int) -> Dict[str, Any]:
        for entry in self.site_days():
            if entry.get("day") == day:
                return entry
        raise DayNotFoundError(day)

    def route_map_html(self, language: str = "en") -> str:
        return render_route_map(language=language)

    async def itinerary_pdf(self, language: str = "en") -> Tuple[bytes, str]:
        """生成PDF，返回 (PDF字节, 文件名)"""
        builder = ItineraryPdfBuilder(language)
        days = self.site_days()
        info = self.site_store.load(SITE_INFO)
        pdf = await self._run_in_executor(builder.build, days, info)
        return pdf, builder.filename

    # ============================================
    # 内容管理行程（CMS 工作副本）
    # ============================================

    def load_content_itinerary(self) -> Dict[str, Any]:
        return self.content_store.load(CONTENT_ITINERARY) or editor.create_empty_itinerary()

    def save_content_itinerary(self, itinerary: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        if not itinerary:
            raise ContentError("Data is required")
        editor.touch_metadata(itinerary)
        self.content_store.save(CONTENT_ITINERARY, itinerary)
        return itinerary

    def edit_content_itinerary(self, operation: Callable[[Dict[str, Any]], Any]) -> Any:
        """读取行程、执行编辑操作并保存，返回操作结果"""
        itinerary = self.load_content_itinerary()
        result = operation(itinerary)
        self.save_content_itinerary(itinerary)
        return result

    def get_settings(self) -> Dict[str, Any]:
        return editor.get_settings(self.load_content_itinerary())

    def update_settings(self, updates: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        if not updates:
            raise ContentError("Settings are required")
        return self.edit_content_itinerary(lambda it: editor.update_settings(it, updates))

    def get_trip_info(self) -> Dict[str, Any]:
        return editor.get_trip_info(self.load_content_itinerary())

    # ============================================
    # 解析
    # ============================================

    def parse_text(self, raw_text: Optional[str]) -> List[Dict[str, Any]]:
        if not raw_text:
            raise ContentError("Raw text required")
        return parse_itinerary_text(raw_text)

    async def parse_with_llm(self, raw_text: Optional[str]) -> List[Dict[str, Any]]:
        return await self._run_in_executor(self.parser.parse_itinerary, raw_text)

    async def parse_trip_info(self, raw_text: Optional[str]) -> Dict[str, Any]:
        return await self._run_in_executor(self.parser.parse_trip_info, raw_text)

    # ============================================
    # 图片搜索与研究
    # ============================================

    async def search_images(self, query: Optional[str], provider: str, count: int) -> List[Dict[str, Any]]:
        records = await self._run_in_executor(self.search.search, query, provider, count)
        return [r.to_dict() for r in records]

    async def research_search(self, query: Optional[str], count: int) -> Dict[str, Any]:
        return await self._run_in_executor(self.research.search, query, count)

    def rate_image(self, query: Optional[str], image_id: Optional[str], rating: Optional[str]) -> Dict[str, Any]:
        if not query or not image_id or not rating:
            raise ContentError("query, imageId, and rating are required")
        return self.sessions.rate(query, image_id, rating)

    def research_days(self) -> List[int]:
        return self.research_store.list_days("research")

    def load_research(self, day: int) -> Dict[str, Any]:
        data = self.research_store.load_day("research", day)
        if data is None:
            raise DocumentNotFoundError(f"Research data for day {day} not found")
        return data

    def save_upload(self, filename: Optional[str], content: bytes) -> str:
        """保存上传的图片，返回网站路径 /images/<文件名>"""
        ext = Path(filename or "").suffix.lower()
        if ext not in IMAGE_EXTENSIONS:
            raise ContentError(f"Unsupported image type: {ext or 'unknown'}")
        if not content:
            raise ContentError("Uploaded file is empty")

        images_dir = self.config.site_images_dir
        images_dir.mkdir(parents=True, exist_ok=True)
        name = f"upload-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{ext}"
        (images_dir / name).write_bytes(content)
        logger.info(f"📤 已保存上传图片 {name} ({len(content)} 字节)")
        return f"/images/{name}"

    # ============================================
    # 图片选择
    # ============================================

    def load_selections(self, day: int) -> Optional[Dict[str, Any]]:
        return self.selections_store.load_day("selections", day)

    def save_selections(self, day: int, selections: Optional[Dict[str, Any]]) -> Path:
        if not selections:
            raise ContentError("Selections data is required")
        data = {"day": day, "lastModified": datetime.now().isoformat(), **selections}
        return self.selections_store.save_day("selections", day, data)

    def all_selections(self) -> List[Dict[str, Any]]:
        return [self.selections_store.load_day("selections", d) for d in self.selections_store.list_days("selections")]

    def export_days(self) -> List[Dict[str, Any]]:
        return export_selections(self.all_selections())

    # ============================================
    # 景点
    # ============================================

    def load_pois(self, day: int) -> List[Dict[str, Any]]:
        doc = self.poi_store.load_day("poi", day) or {}
        return doc.get("pois") or []

    def save_pois(self, day: int, pois: Optional[List[Dict[str, Any]]]) -> Path:
        if pois is None:
            raise ContentError("POI data is required")
        doc = {"day": day, "lastModified": datetime.now().isoformat(), "pois": pois}
        return self.poi_store.save_day("poi", day, doc)

    async def research_pois(self, day: int) -> Dict[str, Any]:
        """对网站行程中的某天运行景点研究，保存研究结果和审阅页"""
        site_day = self.site_day(day)
        research = await self._run_in_executor(self.poi_agent.research_day, site_day)
        self.poi_agent.save(research)
        return research

    # ============================================
    # 已保存行程
    # ============================================

    def saved_trips(self) -> List[Dict[str, Any]]:
        doc = self.content_store.load(SAVED_TRIPS) or {}
        return doc.get("trips") or []

    def save_trips(self, trips: Optional[List[Dict[str, Any]]]) -> Path:
        if trips is None:
            raise ContentError("Trips data is required")
        return self.content_store.save(SAVED_TRIPS, {"trips": trips})

    def edit_saved_trips(self, operation: Callable[[editor.SavedTripRegistry], Any]) -> Any:
        registry = editor.SavedTripRegistry(self.saved_trips())
        result = operation(registry)
        self.save_trips(registry.trips)
        return result

    def save_current_trip_as(self, name: str) -> Dict[str, Any]:
        current = self.load_content_itinerary()
        return self.edit_saved_trips(lambda registry: registry.save_current_as(name, current))

    def load_saved_trip(self, trip_id: str) -> Dict[str, Any]:
        """把已保存行程设为当前行程"""
        data = editor.SavedTripRegistry(self.saved_trips()).load(trip_id)
        self.content_store.save(CONTENT_ITINERARY, data)
        return data

    def update_saved_trip(self, trip_id: str) -> Dict[str, Any]:
        current = self.load_content_itinerary()
        return self.edit_saved_trips(lambda registry: registry.update(trip_id, current))

    def rename_saved_trip(self, trip_id: str, name: str) -> Dict[str, Any]:
        return self.edit_saved_trips(lambda registry: registry.rename(trip_id, name))

    def delete_saved_trip(self, trip_id: str):
        if not self.edit_saved_trips(lambda registry: registry.delete(trip_id)):
            raise DocumentNotFoundError(f"Trip {trip_id} not found")

    # ============================================
    # 意向登记
    # ============================================

    def record_interest(self, submission: Dict[str, Any]) -> Dict[str, Any]:
        doc = self.content_store.load(INTEREST_SUBMISSIONS) or {"submissions": []}
        entry = {**submission, "submittedAt": datetime.now().isoformat()}
        doc["submissions"].append(entry)
        self.content_store.save(INTEREST_SUBMISSIONS, doc)
        logger.info(f"📬 收到意向登记: {submission.get('name')} <{submission.get('email')}>")
        return entry
