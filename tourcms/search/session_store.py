"""
图片研究会话存储
搜索历史、图片评分和各来源评分统计，保存在单个JSON文件中
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..core.document_store import JsonDocumentStore
from ..core.errors import ContentError
from ..models.data_models import SearchHistoryEntry

logger = logging.getLogger(__name__)


RATINGS = ("veryRelevant", "relevant", "notRelevant")
QUALIFIERS = ["china", "chinese", "travel", "tourism", "landmark", "historic", "scenic"]
MAX_SUGGESTIONS = 5


def _empty_sessions() -> Dict[str, Any]:
    return {"searches": [], "ratings": {}, "sourceStats": {}}


class SearchSessionStore:
    """会话文件 {searches, ratings, sourceStats} 的读写"""

    def __init__(self, path: Union[str, Path], max_history: int = 50):
        path = Path(path)
        self.store = JsonDocumentStore(path.parent)
        self.name = path.name
        self.max_history = max_history

    def load(self) -> Dict[str, Any]:
        data = self.store.load(self.name)
        if not isinstance(data, dict):
            return _empty_sessions()
        for key, value in _empty_sessions().items():
            data.setdefault(key, value)
        return data

    def save(self, data: Dict[str, Any]):
        self.store.save(self.name, data)

    def sessions(self) -> Dict[str, Any]:
        data = self.load()
        return {"searches": data["searches"], "sourceStats": data["sourceStats"]}

    def ratings_for(self, query: str) -> Dict[str, str]:
        return self.load()["ratings"].get(query.lower(), {})

    def record_search(self, entry: SearchHistoryEntry) -> Dict[str, Any]:
        """新搜索放在最前，只保留最近 max_history 条"""
        data = self.load()
        data["searches"].insert(0, entry.to_dict())
        data["searches"] = data["searches"][:self.max_history]
        self.save(data)
        return entry.to_dict()

    def rate(self, query: str, image_id: str, rating: str) -> Dict[str, Any]:
        """
        记录图片评分

        评分按查询词（小写）归档；来源统计以图片ID的前缀（如 unsplash-xxx 中的 unsplash）为键。

        Raises:
            ContentError: 评分值无效
        """
        if rating not in RATINGS:
            raise ContentError(f"rating must be one of {', '.join(RATINGS)}")

        data = self.load()
        data["ratings"].setdefault(query.lower(), {})[image_id] = rating

        source = image_id.split("-")[0]
        stats = data["sourceStats"].setdefault(source, {r: 0 for r in RATINGS})
        stats[rating] = stats.get(rating, 0) + 1

        self.save(data)
        logger.info(f"⭐ 评分 '{query}' {image_id} -> {rating}")
        return data["sourceStats"][source]

    def suggestions(self, query: str) -> List[Dict[str, str]]:
        """搜索改进建议：补充限定词，以及评分最高的来源"""
        data = self.load()
        lowered = query.lower()
        suggestions = [
            {
                "type": "add_qualifier",
                "suggestion": f"{query} {qual}",
                "reason": f'Adding "{qual}" may improve results',
            }
            for qual in QUALIFIERS
            if qual not in lowered
        ]

        best = self._best_source(data["sourceStats"])
        if best:
            source, stats = best
            suggestions.append({
                "type": "source_tip",
                "suggestion": f"{source} has your most highly-rated images",
                "reason": f'{stats.get("veryRelevant", 0)} images rated "very relevant"',
            })

        return suggestions[:MAX_SUGGESTIONS]

    @staticmethod
    def _best_source(source_stats: Dict[str, Dict[str, int]]) -> Optional[tuple]:
        if not source_stats:
            return None
        return max(source_stats.items(), key=lambda item: item[1].get("veryRelevant", 0))

    def stats(self) -> Dict[str, Any]:
        data = self.load()
        counts = {r: 0 for r in RATINGS}
        total = 0
        for query_ratings in data["ratings"].values():
            for rating in query_ratings.values():
                total += 1
                counts[rating] = counts.get(rating, 0) + 1
        return {
            "totalSearches": len(data["searches"]),
            "totalRatings": total,
            "ratingCounts": counts,
            "sourceStats": data["sourceStats"],
        }
