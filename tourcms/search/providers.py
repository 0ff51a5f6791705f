"""
图片搜索服务提供方
Unsplash / Pexels / Pixabay / Wikimedia Commons，结果统一为 ImageRecord
"""

import re
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from ..models.data_models import ImageRecord
from ..utils.text_utils import strip_html

logger = logging.getLogger(__name__)


class ImageProvider:
    """图片服务基类，子类实现 _search；任何异常都记录日志并返回空列表"""

    name = ""

    def __init__(self, api_key: str = "", session: Optional[requests.Session] = None, timeout: float = 15):
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def search(self, query: str, count: int) -> List[ImageRecord]:
        if not self.available:
            return []
        try:
            results = self._search(query, count)
            logger.info(f"🔎 {self.name} '{query}' 返回 {len(results)} 张图片")
            return results
        except Exception as e:
            logger.error(f"❌ {self.name} 搜索失败: {e}")
            return []

    def _search(self, query: str, count: int) -> List[ImageRecord]:
        raise NotImplementedError

    def _get_json(self, url: str, params: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        response = self.session.get(url, params=params, headers=headers or {}, timeout=self.timeout)
        response.raise_for_status()
        return response.json()


class UnsplashProvider(ImageProvider):
    name = "unsplash"
    API_URL = "https://api.unsplash.com/search/photos"

    def _search(self, query: str, count: int) -> List[ImageRecord]:
        data = self._get_json(
            self.API_URL,
            params={"query": query, "per_page": count, "orientation": "landscape"},
            headers={"Authorization": f"Client-ID {self.api_key}", "Accept-Version": "v1"},
        )
        return [
            ImageRecord(
                id=f"unsplash-{photo['id']}",
                src=photo["urls"]["regular"],
                thumb=photo["urls"]["small"],
                full=photo["urls"]["full"],
                alt=photo.get("alt_description") or photo.get("description") or query,
                photographer=photo["user"]["name"],
                photographer_url=photo["user"]["links"]["html"],
                source="unsplash",
                source_url=f"https://unsplash.com/photos/{photo['id']}",
                width=photo.get("width"),
                height=photo.get("height"),
                tags=", ".join(t.get("title", "") for t in photo.get("tags") or []),
            )
            for photo in data.get("results") or []
        ]


class PexelsProvider(ImageProvider):
    name = "pexels"
    API_URL = "https://api.pexels.com/v1/search"

    def _search(self, query: str, count: int) -> List[ImageRecord]:
        data = self._get_json(
            self.API_URL,
            params={"query": query, "per_page": count, "orientation": "landscape"},
            headers={"Authorization": self.api_key},
        )
        return [
            ImageRecord(
                id=f"pexels-{photo['id']}",
                src=photo["src"]["large"],
                thumb=photo["src"]["medium"],
                full=photo["src"]["original"],
                alt=photo.get("alt") or query,
                photographer=photo.get("photographer") or "",
                photographer_url=photo.get("photographer_url") or "",
                source="pexels",
                source_url=photo.get("url") or "",
                width=photo.get("width"),
                height=photo.get("height"),
            )
            for photo in data.get("photos") or []
        ]


class PixabayProvider(ImageProvider):
    name = "pixabay"
    API_URL = "https://pixabay.com/api/"
    MIN_PER_PAGE = 3

    def _search(self, query: str, count: int) -> List[ImageRecord]:
        data = self._get_json(
            self.API_URL,
            params={
                "key": self.api_key,
                "q": query,
                # Pixabay 要求 per_page 至少为 3
                "per_page": max(self.MIN_PER_PAGE, count),
                "orientation": "horizontal",
                "image_type": "photo",
                "safesearch": "true",
            },
        )
        return [
            ImageRecord(
                id=f"pixabay-{photo['id']}",
                src=photo["webformatURL"],
                thumb=photo.get("previewURL") or "",
                full=photo.get("largeImageURL") or "",
                alt=photo.get("tags") or query,
                photographer=photo.get("user") or "",
                photographer_url=f"https://pixabay.com/users/{photo.get('user')}-{photo.get('user_id')}/",
                source="pixabay",
                source_url=photo.get("pageURL") or "",
                width=photo.get("imageWidth"),
                height=photo.get("imageHeight"),
                tags=photo.get("tags") or "",
            )
            for photo in data.get("hits") or []
        ]


class WikimediaProvider(ImageProvider):
    """Wikimedia Commons，无需密钥：先全文搜索文件，再逐个获取图片信息"""

    name = "wikimedia"
    API_URL = "https://commons.wikimedia.org/w/api.php"
    ALLOWED_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp")
    max_workers = 4

    @property
    def available(self) -> bool:
        return True

    def _search(self, query: str, count: int) -> List[ImageRecord]:
        data = self._get_json(self.API_URL, params={
            "action": "query",
            "list": "search",
            "srsearch": query,
            "srnamespace": 6,
            "srlimit": count,
            "format": "json",
        })
        titles = [r["title"] for r in (data.get("query") or {}).get("search") or []]
        if not titles:
            return []

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            records = list(executor.map(self._image_info, titles))
        return [r for r in records if r is not None]

    @staticmethod
    def thumb_url(url: str, file_name: str, width: int) -> str:
        """原图URL转为指定宽度的缩略图URL"""
        thumb = url.replace("/commons/", "/commons/thumb/", 1)
        return re.sub(r"(\.\w+)$", lambda m: f"{m.group(1)}/{width}px-{file_name}", thumb)

    def _image_info(self, title: str) -> Optional[ImageRecord]:
        try:
            data = self._get_json(self.API_URL, params={
                "action": "query",
                "titles": title,
                "prop": "imageinfo",
                "iiprop": "url|size|extmetadata",
                "format": "json",
            })
        except Exception as e:
            logger.warning(f"⚠️ Wikimedia 获取图片信息失败 {title}: {e}")
            return None

        pages = (data.get("query") or {}).get("pages") or {}
        page = next(iter(pages.values()), None)
        info = ((page or {}).get("imageinfo") or [None])[0]
        if not info or not info.get("url"):
            return None

        url = info["url"]
        if url.rsplit(".", 1)[-1].lower() not in self.ALLOWED_EXTENSIONS:
            return None

        metadata = info.get("extmetadata") or {}
        file_name = title.replace("File:", "", 1)
        page_url = f"https://commons.wikimedia.org/wiki/{quote(title, safe='')}"
        return ImageRecord(
            id=f"wikimedia-{page.get('pageid')}",
            src=self.thumb_url(url, file_name, 800),
            thumb=self.thumb_url(url, file_name, 300),
            full=url,
            alt=strip_html((metadata.get("ImageDescription") or {}).get("value"))
            or re.sub(r"\.\w+$", "", file_name),
            photographer=strip_html((metadata.get("Artist") or {}).get("value")) or "Wikimedia Commons",
            photographer_url=page_url,
            source="wikimedia",
            source_url=page_url,
            width=info.get("width"),
            height=info.get("height"),
            tags=(metadata.get("Categories") or {}).get("value") or "",
        )
