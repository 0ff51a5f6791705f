"""
多来源图片搜索
- ImageSearchService: CMS 图片搜索，按服务商并发查询后按顺序拼接
- ResearchSearch: 图片研究搜索，合并去重、相关度排序并记录搜索历史
"""

import math
import time
import logging
from datetime import datetime
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

import requests

from .providers import ImageProvider, PexelsProvider, PixabayProvider, UnsplashProvider, WikimediaProvider
from .relevance import calculate_relevance
from .session_store import SearchSessionStore
from ..config.config import Config
from ..core.errors import ContentError
from ..models.data_models import ImageRecord, SearchHistoryEntry

logger = logging.getLogger(__name__)


PROVIDER_GROUPS = {
    "all": ["unsplash", "pexels", "pixabay", "wikimedia"],
    "both": ["unsplash", "pexels"],
}

# 图片研究合并顺序
RESEARCH_ORDER = ["wikimedia", "unsplash", "pexels", "pixabay"]


class ImageSearchService:
    """图片搜索服务"""

    def __init__(self, providers: Dict[str, ImageProvider], max_workers: int = 4):
        self.providers = providers
        self.max_workers = max_workers

    @classmethod
    def from_config(cls, config: Config, session: Optional[requests.Session] = None) -> "ImageSearchService":
        session = session or requests.Session()
        timeout = config.http_timeout
        return cls({
            "unsplash": UnsplashProvider(config.unsplash_access_key, session, timeout),
            "pexels": PexelsProvider(config.pexels_api_key, session, timeout),
            "pixabay": PixabayProvider(config.pixabay_api_key, session, timeout),
            "wikimedia": WikimediaProvider("", session, timeout),
        })

    def resolve_providers(self, provider: str) -> List[str]:
        names = PROVIDER_GROUPS.get(provider, [provider])
        unknown = [n for n in names if n not in self.providers]
        if unknown:
            raise ContentError(f"Unknown image provider: {provider}")
        return names

    def search_each(self, query: str, names: List[str], per_provider: int) -> Dict[str, List[ImageRecord]]:
        """并发查询多个服务商，返回 服务商 -> 结果"""
        if not names:
            return {}
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(names))) as executor:
            futures = {name: executor.submit(self.providers[name].search, query, per_provider) for name in names}
            return {name: future.result() for name, future in futures.items()}

    def search(self, query: str, provider: str = "all", count: int = 15) -> List[ImageRecord]:
        """
        搜索图片

        Args:
            query: 搜索词
            provider: all / both / unsplash / pexels / pixabay / wikimedia
            count: 期望的总数量，平均分配到各服务商（向上取整）

        Returns:
            按服务商顺序拼接的图片列表
        """
        if not query:
            raise ContentError("Query is required")
        names = self.resolve_providers(provider)
        per_provider = math.ceil(count / len(names))
        results = self.search_each(query, names, per_provider)
        images = [image for name in names for image in results[name]]
        logger.info(f"🖼️ 搜索 '{query}' ({provider}) 共 {len(images)} 张图片")
        return images


class ResearchSearch:
    """图片研究搜索：全部来源、去重、相关度排序、用户评分、搜索历史"""

    def __init__(self, service: ImageSearchService, sessions: SearchSessionStore):
        self.service = service
        self.sessions = sessions

    def search(self, query: str, count: int = 30) -> Dict[str, Any]:
        if not query:
            raise ContentError("Query is required")

        per_source = math.ceil(count / len(RESEARCH_ORDER))
        results = self.service.search_each(query, RESEARCH_ORDER, per_source)

        seen_urls = set()
        images: List[Dict[str, Any]] = []
        for name in RESEARCH_ORDER:
            for record in results[name]:
                if record.src in seen_urls:
                    continue
                seen_urls.add(record.src)
                image = record.to_dict()
                image["relevance"] = calculate_relevance(image, query)
                images.append(image)

        images.sort(key=lambda img: img["relevance"], reverse=True)

        ratings = self.sessions.ratings_for(query)
        for image in images:
            image["userRating"] = ratings.get(image["id"])

        sources = {name: len(results[name]) for name in RESEARCH_ORDER}
        entry = SearchHistoryEntry(
            id=f"search-{int(time.time() * 1000)}",
            query=query,
            timestamp=datetime.now().isoformat(),
            result_count=len(images),
            sources=sources,
        )
        self.sessions.record_search(entry)
        logger.info(f"🔬 研究搜索 '{query}'：{len(images)} 张图片 {sources}")

        return {"images": images, "searchId": entry.id, "sources": sources}
