"""
网站数据转换
把 CMS2 格式的行程（itinerary-v2.json）转换为网站展示所需的结构
"""

import logging
from typing import Any, Dict, List, Optional

from .itinerary_editor import TIME_ORDER
from .regions import get_coordinates, get_region

logger = logging.getLogger(__name__)


FALLBACK_IMAGE_SRC = (
    "https://images.unsplash.com/photo-1547981609-4b6bfe67ca0b"
    "?q=80&w=2070&auto=format&fit=crop"
)

_MODE_ICONS = {
    "flight": "Plane",
    "train": "Train",
    "coach": "Bus",
    "high-speed rail": "Train",
    "cable car": "CableCar",
}


def get_mode_icon(mode: Optional[str]) -> str:
    """交通方式对应的图标名"""
    return _MODE_ICONS.get((mode or "").lower(), "Car")


def transform_day(day: Dict[str, Any], previous_accommodation: str = "") -> Dict[str, Any]:
    """
    转换单天数据

    Args:
        day: CMS2 格式的天数据
        previous_accommodation: 前一天的住宿名，用于判断是否换住处

    Returns:
        网站格式的天数据
    """
    pois = day.get("pointsOfInterest") or []
    segments = [
        {**seg, "modeIcon": get_mode_icon(seg.get("mode")), "poi": find_poi_content(seg, pois)}
        for seg in day.get("segments") or []
    ]

    all_images = [image for seg in segments for image in seg.get("images") or []]

    main_transfer = next((s for s in segments if s.get("type") == "transfer" and s.get("mode")), None)
    featured_transit = None
    if main_transfer:
        featured_transit = {
            "mode": main_transfer.get("mode"),
            "modeIcon": main_transfer["modeIcon"],
            "from": main_transfer.get("from"),
            "to": main_transfer.get("to"),
            "duration": main_transfer.get("duration"),
            "title": main_transfer.get("title"),
        }

    accommodation = day.get("accommodation") or {}
    accommodation_name = accommodation.get("name")
    is_new_stay = previous_accommodation != accommodation_name and accommodation_name != ""

    if not all_images:
        all_images = [{
            "src": FALLBACK_IMAGE_SRC,
            "alt": "China landscape",
            "caption": day.get("title"),
        }]

    return {
        "day": day.get("day"),
        "date": day.get("date"),
        "title": day.get("title"),
        "location": day.get("location"),
        "region": get_region(day.get("day") or 0),
        "coordinates": get_coordinates(day.get("location")),
        "description": day.get("description") or "",
        "highlights": [h for seg in segments for h in seg.get("highlights") or []],
        "segments": segments,
        "timeline": group_by_time(segments),
        "featuredTransit": featured_transit,
        "accommodation": {**accommodation, "isNewStay": is_new_stay},
        "meals": day.get("meals") or "",
        "pointsOfInterest": pois,
        "images": all_images,
    }


def transform_itinerary(data: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """转换整份行程，按顺序追踪住宿变化"""
    days = []
    previous_accommodation = ""
    for day in (data or {}).get("days") or []:
        days.append(transform_day(day, previous_accommodation))
        name = (day.get("accommodation") or {}).get("name")
        if name:
            previous_accommodation = name

    logger.info(f"🌐 网站数据转换完成，共 {len(days)} 天")
    return days


def group_by_time(segments: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """按时段分组：先按固定时段顺序，其余时段按首次出现顺序"""
    groups: Dict[str, List[Dict[str, Any]]] = {}
    for segment in segments or []:
        groups.setdefault(segment.get("time") or "Other", []).append(segment)

    ordered = [{"time": t, "segments": groups.pop(t)} for t in TIME_ORDER if t in groups]
    ordered.extend({"time": t, "segments": segs} for t, segs in groups.items())
    return ordered


def find_poi_content(segment: Dict[str, Any], pois: Optional[List[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    """
    为片段匹配景点研究内容

    POI 名称首词出现在片段标题中，或片段标题首词出现在 POI 名称中即匹配，
    返回第一个匹配项。
    """
    if not pois:
        return None
    segment_title = (segment.get("title") or "").lower()
    for poi in pois:
        poi_name = (poi.get("name") or "").lower()
        if poi_name.split(" ")[0] in segment_title or segment_title.split(" ")[0] in poi_name:
            return poi
    return None
