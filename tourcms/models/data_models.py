"""
内部数据模型
定义系统内部使用的数据结构
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ImageRecord:
    """统一的图片搜索结果"""
    id: str
    src: str
    thumb: str
    full: str
    alt: str
    photographer: str
    photographer_url: str
    source: str
    source_url: str
    width: Optional[int] = None
    height: Optional[int] = None
    tags: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """序列化为接口格式，url 与 src 相同，兼容旧客户端"""
        return {
            "id": self.id,
            "src": self.src,
            "url": self.src,
            "thumb": self.thumb,
            "full": self.full,
            "alt": self.alt,
            "photographer": self.photographer,
            "photographerUrl": self.photographer_url,
            "source": self.source,
            "sourceUrl": self.source_url,
            "width": self.width,
            "height": self.height,
            "tags": self.tags,
        }


@dataclass
class PointOfInterest:
    """从行程亮点中提取的景点"""
    id: str
    name: str
    day: int
    location: str
    search_query: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "day": self.day,
            "location": self.location,
            "searchQuery": self.search_query,
        }


@dataclass
class WikiSummary:
    """维基百科检索结果"""
    title: str
    extract: str
    url: str


@dataclass
class PoiSynthesis:
    """大模型生成的景点介绍"""
    summary: str
    historical_context: str
    practical_tips: str
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "historicalContext": self.historical_context,
            "practicalTips": self.practical_tips,
            "confidence": self.confidence,
        }


@dataclass
class SearchHistoryEntry:
    """图片研究搜索历史"""
    id: str
    query: str
    timestamp: str
    result_count: int
    sources: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "query": self.query,
            "timestamp": self.timestamp,
            "resultCount": self.result_count,
            "sources": self.sources,
        }


@dataclass
class ResearchActivity:
    """重新生成研究数据时的单个活动"""
    name: str
    activity: str
    search_term: str
    images: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "activity": self.activity,
            "searchTerm": self.search_term,
            "images": self.images,
        }
