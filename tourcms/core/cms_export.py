"""
CMS 数据导出与同步
- CMS1 行程 + 图片选择 -> CMS2 网站格式
- 图片选择 -> 网站图片格式
- POI 研究结果 -> 行程
- 网站标题/描述 -> CMS1 行程
"""

import uuid
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from .regions import get_region
from ..utils.text_utils import get_text

logger = logging.getLogger(__name__)


def _image_url(image: Dict[str, Any]) -> str:
    return image.get("url") or image.get("src") or ""


def _id_prefix(identifier: str) -> str:
    return "-".join(str(identifier).split("-")[:2])


def get_segment_images(segment_id: str, selections: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    收集片段的已选图片

    选择记录的ID与片段ID相同，或两者按 '-' 分割后前两段相同即视为同一片段，
    结果按URL去重。
    """
    if not selections or not selections.get("segments"):
        return []

    segment_prefix = _id_prefix(segment_id)
    images = []
    seen_urls = set()
    for selection_id, segment_data in selections["segments"].items():
        if selection_id != segment_id and _id_prefix(selection_id) != segment_prefix:
            continue
        for img in (segment_data or {}).get("images") or []:
            url = _image_url(img)
            if url in seen_urls:
                continue
            seen_urls.add(url)
            images.append({
                "id": img.get("id") or f"img-{uuid.uuid4().hex[:12]}",
                "src": url,
                "thumb": img.get("thumb"),
                "full": img.get("full"),
                "alt": img.get("alt") or "",
                "photographer": img.get("photographer"),
                "photographerUrl": img.get("photographerUrl"),
                "source": img.get("source"),
                "sourceUrl": img.get("sourceUrl"),
            })
    return images


def _export_day(cms_day: Dict[str, Any], selections: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    # CMS1 从第0天开始编号
    day_number = cms_day["day"] + 1
    segments = [
        {
            "id": seg.get("id"),
            "time": seg.get("time") or "Morning",
            "type": seg.get("type") or "activity",
            "title": seg.get("title") or "",
            "description": seg.get("description") or "",
            "duration": seg.get("duration") or "",
            "location": seg.get("location") or "",
            "mode": seg.get("mode") or "",
            "from": seg.get("from") or "",
            "to": seg.get("to") or "",
            "walkDetails": seg.get("walkDetails") or None,
            "highlights": seg.get("highlights") or [],
            "images": get_segment_images(str(seg.get("id", "")), selections),
        }
        for seg in cms_day.get("segments") or []
    ]

    accommodation = cms_day.get("accommodation") or {}
    return {
        "day": day_number,
        "date": cms_day.get("date") or "",
        "title": cms_day.get("title") or "",
        "location": cms_day.get("location") or "",
        "region": get_region(day_number),
        "description": (cms_day.get("enhanced") or {}).get("description") or "",
        "segments": segments,
        "meals": cms_day.get("meals") or "",
        "accommodation": {
            "name": accommodation.get("name") or "",
            "rating": accommodation.get("rating") or "",
        },
    }


def export_cms1_to_cms2(itinerary: Dict[str, Any],
                        selections_by_day: Dict[int, Dict[str, Any]]) -> Tuple[Dict[str, Any], Dict[str, int]]:
    """
    CMS1 行程导出为 CMS2 网站格式

    Args:
        itinerary: CMS1 行程文档
        selections_by_day: CMS1 天数 -> 图片选择文档

    Returns:
        (CMS2 文档, 汇总 {days, segments, images})
    """
    days = [_export_day(day, selections_by_day.get(day["day"])) for day in itinerary.get("days") or []]
    output = {
        "metadata": {
            "version": 2,
            "exportedFrom": "CMS1",
            "exportedAt": datetime.now().isoformat(),
        },
        "days": days,
    }

    summary = {
        "days": len(days),
        "segments": sum(len(d["segments"]) for d in days),
        "images": sum(len(s["images"]) for d in days for s in d["segments"]),
    }
    logger.info(f"📦 导出 {summary['days']} 天，{summary['segments']} 个片段，{summary['images']} 张图片")
    return output, summary


def export_selections(selection_docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """图片选择转换为网站图片格式，按天排序"""
    days = []
    for doc in selection_docs:
        images = []
        for segment in (doc.get("segments") or {}).values():
            for img in (segment or {}).get("images") or []:
                images.append({
                    "src": _image_url(img),
                    "alt": img.get("alt") or {"en": img.get("altText") or "", "cn": ""},
                    "caption": img.get("caption") or {"en": "", "cn": ""},
                })
        days.append({"day": doc.get("day"), "images": images, "segments": doc.get("segments")})

    days.sort(key=lambda d: d["day"] or 0)
    return days


def sync_pois_to_itinerary(itinerary: Dict[str, Any],
                           poi_docs: Dict[int, Dict[str, Any]]) -> Tuple[List[int], List[int]]:
    """
    把 POI 研究结果写入行程各天的 pointsOfInterest

    Returns:
        (已更新的天数, 行程中不存在的天数)
    """
    updated, missing = [], []
    days_by_number = {d.get("day"): d for d in itinerary.get("days") or []}
    now = datetime.now().isoformat()

    for day_number in sorted(poi_docs):
        day = days_by_number.get(day_number)
        if day is None:
            logger.warning(f"⚠️ 行程中没有第 {day_number} 天")
            missing.append(day_number)
            continue

        day["pointsOfInterest"] = [
            {
                "name": poi.get("name"),
                "summary": poi.get("summary"),
                "history": poi.get("historicalContext"),
                "tips": poi.get("practicalTips"),
                "links": poi.get("links") or [],
                "status": poi.get("status") or "pending",
                "confidence": poi.get("confidence"),
                "images": poi.get("images") or [],
            }
            for poi in poi_docs[day_number].get("pois") or []
        ]
        day["lastModified"] = now
        logger.info(f"  ✓ 第 {day_number} 天: {len(day['pointsOfInterest'])} 个POI")
        updated.append(day_number)

    itinerary.setdefault("metadata", {})["lastModified"] = now
    return updated, missing


def sync_website_to_cms(cms_itinerary: Dict[str, Any], website_days: List[Dict[str, Any]]) -> List[int]:
    """按天数把网站的标题和描述同步回 CMS 行程，返回更新的天数"""
    by_day = {d.get("day"): d for d in website_days}
    updated = []
    for cms_day in cms_itinerary.get("days") or []:
        website_day = by_day.get(cms_day.get("day"))
        if not website_day:
            continue
        logger.info(f"🔁 第 {cms_day['day']} 天: {cms_day.get('title')!r} -> {get_text(website_day.get('title'))!r}")
        cms_day["title"] = get_text(website_day.get("title"))
        cms_day.setdefault("enhanced", {})["description"] = get_text(website_day.get("description"))
        updated.append(cms_day["day"])
    return updated
