"""
行程文档编辑
对 CMS 行程文档 {days, tripInfo, metadata, settings} 的增删改操作，
所有函数直接修改传入的字典并返回结果
"""

import copy
import time
import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from .errors import (
    ContentError, DayNotFoundError, DocumentNotFoundError,
    DuplicateDayError, SegmentNotFoundError,
)

logger = logging.getLogger(__name__)


SEGMENT_TYPES = ["activity", "transfer", "check-in", "check-out", "meal", "free-time"]
TRANSFER_MODES = ["train", "flight", "bus", "coach", "walk", "cable-car", "boat"]
TIME_ORDER = ["Morning", "Midday", "Full Day", "Afternoon", "Evening", "Night"]


def _now() -> str:
    return datetime.now().isoformat()


def _new_id(taken: Iterable[str] = ()) -> str:
    """毫秒时间戳ID，与已有ID冲突时顺延"""
    taken = set(taken)
    candidate = int(time.time() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def create_empty_segment() -> Dict[str, Any]:
    return {
        "id": _new_id(),
        "time": "",
        "type": "activity",
        "title": "",
        "location": "",
        "description": "",
        "duration": "",
        # 交通片段字段
        "from": "",
        "to": "",
        "mode": "",
        # 活动片段字段
        "highlights": [],
        "walkDetails": None,
        "images": [],
    }


def create_empty_day(day: int, date_text: str = "") -> Dict[str, Any]:
    return {
        "day": day,
        "date": date_text,
        "title": "",
        "location": "",
        "segments": [],
        "original": {
            "rawText": "",
            "title": "",
            "location": "",
            "description": "",
            "highlights": [],
            "meals": "",
            "accommodation": "",
        },
        "enhanced": {
            "title": "",
            "location": "",
            "description": "",
            "highlights": [],
            "accommodation": {"name": "", "rating": "", "location": ""},
        },
        "accommodation": {
            "name": "",
            "rating": "",
            "location": "",
            "address": "",
            "bookingUrl": "",
        },
        "meals": "",
        "practicalInfo": {
            "weather": "",
            "whatToPack": [],
            "timing": "",
            "notes": "",
        },
        "images": [],
        "status": "draft",
        "lastModified": _now(),
    }


def _empty_flight() -> Dict[str, str]:
    return {"from": "", "to": "", "date": "", "time": "", "airline": "", "flightNo": ""}


def create_empty_trip_info() -> Dict[str, Any]:
    return {
        "tripName": "",
        "dates": {"start": "", "end": ""},
        "duration": "",
        "costs": {
            "perPerson": "",
            "singleSupplement": "",
            "currency": "GBP",
            "included": [],
            "excluded": [],
        },
        "flights": {
            "outbound": _empty_flight(),
            "return": _empty_flight(),
            "notes": "",
        },
        "visa": {"required": True, "type": "", "notes": ""},
        "insurance": {"included": False, "notes": ""},
        "packingList": [],
        "healthSafety": {
            "vaccinations": "",
            "medications": "",
            "emergencyContacts": "",
            "notes": "",
        },
        "notes": "",
        "lastModified": _now(),
    }


def create_empty_itinerary() -> Dict[str, Any]:
    return {
        "days": [],
        "tripInfo": create_empty_trip_info(),
        "metadata": {"lastModified": None, "version": 2},
        "settings": {"startDate": None},
    }


def calculate_date(day_number: int, start_date: Optional[str]) -> Optional[str]:
    """
    根据出发日期计算某天的日期

    第0天即出发日期，第1天为次日，依此类推。

    Args:
        day_number: 天数
        start_date: ISO 格式出发日期，如 "2026-05-08"

    Returns:
        形如 "Fri, 8 May 2026" 的日期文本，无出发日期时返回 None
    """
    if not start_date:
        return None
    start = date.fromisoformat(start_date[:10])
    target = start + timedelta(days=day_number)
    return f"{target:%a}, {target.day} {target:%b} {target.year}"


def touch_metadata(itinerary: Dict[str, Any]) -> Dict[str, Any]:
    """更新文档元数据：版本号和修改时间"""
    itinerary["metadata"] = {
        **(itinerary.get("metadata") or {}),
        "version": 2,
        "lastModified": _now(),
    }
    return itinerary


def _sort_days(itinerary: Dict[str, Any]):
    itinerary["days"].sort(key=lambda d: d.get("day") or 0)


def find_day(itinerary: Dict[str, Any], day: int) -> Dict[str, Any]:
    for entry in itinerary.get("days", []):
        if entry.get("day") == day:
            return entry
    raise DayNotFoundError(day)


def get_settings(itinerary: Dict[str, Any]) -> Dict[str, Any]:
    return itinerary.get("settings") or {"startDate": None}


def update_settings(itinerary: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """
    合并行程设置

    出发日期变化时按新日期重算每天的 date，清空出发日期时保留原有日期文本。
    """
    start_date = updates.get("startDate")
    if start_date:
        try:
            date.fromisoformat(str(start_date)[:10])
        except ValueError as e:
            raise ContentError(f"Invalid startDate: {start_date}", e)

    settings = {**get_settings(itinerary), **updates}
    itinerary["settings"] = settings

    if start_date:
        for entry in itinerary.get("days", []):
            if entry.get("day") is not None:
                entry["date"] = calculate_date(entry["day"], start_date)
        logger.info(f"📅 出发日期设为 {start_date}，已重算 {len(itinerary.get('days', []))} 天的日期")
    return settings


def get_trip_info(itinerary: Dict[str, Any]) -> Dict[str, Any]:
    return itinerary.get("tripInfo") or create_empty_trip_info()


def add_day(itinerary: Dict[str, Any], day: int, title: str = "") -> Dict[str, Any]:
    """新增一天，天数已存在时抛出 DuplicateDayError；设置了出发日期时自动填写日期"""
    days = itinerary.setdefault("days", [])
    if any(d.get("day") == day for d in days):
        raise DuplicateDayError(day)

    new_day = create_empty_day(day, calculate_date(day, get_settings(itinerary).get("startDate")) or "")
    new_day["original"]["title"] = title
    new_day["enhanced"]["title"] = title
    days.append(new_day)
    _sort_days(itinerary)
    return new_day


def delete_day(itinerary: Dict[str, Any], day: int) -> Dict[str, Any]:
    itinerary["days"] = [d for d in itinerary.get("days", []) if d.get("day") != day]
    return itinerary


def move_day(itinerary: Dict[str, Any], from_day: int, to_day: int) -> Dict[str, Any]:
    """修改某天的天数"""
    entry = find_day(itinerary, from_day)
    if any(d.get("day") == to_day for d in itinerary["days"]):
        raise DuplicateDayError(to_day)
    entry["day"] = to_day
    _sort_days(itinerary)
    return entry


def renumber_days(itinerary: Dict[str, Any], start_from: int = 1) -> Dict[str, Any]:
    """按当前顺序从 start_from 开始连续编号"""
    _sort_days(itinerary)
    for index, entry in enumerate(itinerary["days"]):
        entry["day"] = start_from + index
    return itinerary


def update_day(itinerary: Dict[str, Any], day: int, updates: Dict[str, Any]) -> Dict[str, Any]:
    days = itinerary.get("days", [])
    for index, entry in enumerate(days):
        if entry.get("day") == day:
            days[index] = {**entry, **updates, "lastModified": _now()}
            return days[index]
    raise DayNotFoundError(day)


# ============================================
# 片段操作
# ============================================

def add_segment(itinerary: Dict[str, Any], day: int, segment: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    entry = find_day(itinerary, day)
    segments = entry.setdefault("segments", [])
    new_segment = {
        **create_empty_segment(),
        **(segment or {}),
        "id": _new_id(s.get("id") for s in segments),
    }
    segments.append(new_segment)
    entry["lastModified"] = _now()
    return new_segment


def _segment_index(entry: Dict[str, Any], segment_id: str) -> int:
    for index, segment in enumerate(entry.get("segments") or []):
        if segment.get("id") == segment_id:
            return index
    raise SegmentNotFoundError(entry.get("day"), segment_id)


def update_segment(itinerary: Dict[str, Any], day: int, segment_id: str,
                   updates: Dict[str, Any]) -> Dict[str, Any]:
    entry = find_day(itinerary, day)
    index = _segment_index(entry, segment_id)
    entry["segments"][index] = {**entry["segments"][index], **updates}
    entry["lastModified"] = _now()
    return entry["segments"][index]


def delete_segment(itinerary: Dict[str, Any], day: int, segment_id: str) -> Dict[str, Any]:
    entry = find_day(itinerary, day)
    entry["segments"] = [s for s in entry.get("segments") or [] if s.get("id") != segment_id]
    entry["lastModified"] = _now()
    return entry


def reorder_segments(itinerary: Dict[str, Any], day: int, segment_ids: List[str]) -> List[Dict[str, Any]]:
    """按给定ID顺序重排片段，未知ID被忽略，未列出的片段被移除"""
    entry = find_day(itinerary, day)
    by_id = {s.get("id"): s for s in entry.get("segments") or []}
    reordered = [by_id[sid] for sid in segment_ids if sid in by_id]
    entry["segments"] = reordered
    entry["lastModified"] = _now()
    return reordered


# ============================================
# 导入解析结果
# ============================================

def _accommodation_name(accommodation: Any) -> str:
    if isinstance(accommodation, str):
        return accommodation
    if isinstance(accommodation, dict):
        return accommodation.get("name") or ""
    return ""


def _build_day(parsed: Dict[str, Any], stamp: int) -> Dict[str, Any]:
    """由解析结果构建完整的天数据"""
    day_number = parsed["day"]
    new_day = create_empty_day(day_number, parsed.get("date") or "")
    new_day["title"] = parsed.get("title") or ""
    new_day["location"] = parsed.get("location") or ""
    new_day["meals"] = parsed.get("meals") or ""

    segments = parsed.get("segments") or []
    enhanced_description = ""
    enhanced_highlights: List[str] = []
    if segments:
        enhanced_description = "\n\n".join(s["description"] for s in segments if s.get("description"))
        for segment in segments:
            enhanced_highlights.extend(segment.get("highlights") or [])
        # 没有亮点时使用活动标题
        if not enhanced_highlights:
            enhanced_highlights = [
                s["title"] for s in segments if s.get("type") == "activity" and s.get("title")
            ]

    accommodation = parsed.get("accommodation")
    accommodation_name = _accommodation_name(accommodation)
    accommodation_dict = accommodation if isinstance(accommodation, dict) else {}

    new_day["original"] = {
        "rawText": parsed.get("rawText") or parsed.get("description") or "",
        "title": parsed.get("title") or "",
        "location": parsed.get("location") or "",
        "highlights": parsed.get("highlights") or [],
        "meals": parsed.get("meals") or "",
        "accommodation": accommodation_name,
    }
    new_day["enhanced"] = {
        "title": parsed.get("title") or "",
        "location": parsed.get("location") or "",
        "description": enhanced_description or parsed.get("description") or "",
        "highlights": enhanced_highlights or parsed.get("highlights") or [],
        "accommodation": {
            "name": accommodation_name,
            "rating": accommodation_dict.get("rating") or "",
            "location": accommodation_dict.get("location") or "",
        },
    }

    if isinstance(accommodation, str) and accommodation:
        new_day["accommodation"] = {
            "name": accommodation, "rating": "", "location": "", "address": "", "bookingUrl": "",
        }
    elif accommodation_dict:
        new_day["accommodation"] = {**new_day["accommodation"], **accommodation_dict}

    if isinstance(parsed.get("segments"), list):
        new_day["segments"] = [
            {
                "id": f"{day_number}-{idx}-{stamp}",
                "time": seg.get("time") or "",
                "type": seg.get("type") or "activity",
                "title": seg.get("title") or "",
                "location": seg.get("location") or "",
                "description": seg.get("description") or "",
                "duration": seg.get("duration") or "",
                "from": seg.get("from") or "",
                "to": seg.get("to") or "",
                "mode": seg.get("mode") or "",
                "highlights": seg.get("highlights") or [],
                "walkDetails": seg.get("walkDetails") or None,
                "images": [],
            }
            for idx, seg in enumerate(segments)
        ]
    return new_day


def import_days(itinerary: Dict[str, Any], parsed_days: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    导入解析后的天数据

    同一天数的已有数据整体替换，其余追加，最后按天数排序。

    Args:
        itinerary: 行程文档
        parsed_days: 解析器（规则或大模型）输出的天列表

    Returns:
        更新后的行程文档
    """
    days = itinerary.setdefault("days", [])
    stamp = int(time.time() * 1000)
    for parsed in parsed_days:
        if parsed.get("day") is None:
            raise ContentError("Parsed day is missing its day number")
        new_day = _build_day(parsed, stamp)
        existing = next((i for i, d in enumerate(days) if d.get("day") == parsed["day"]), None)
        if existing is None:
            days.append(new_day)
        else:
            days[existing] = new_day

    _sort_days(itinerary)
    logger.info(f"📥 导入 {len(parsed_days)} 天行程")
    return itinerary


_TRIP_INFO_MERGED = ("dates", "costs", "flights", "visa", "insurance", "healthSafety")
_TRIP_INFO_REPLACED = ("tripName", "duration", "packingList", "notes")


def import_trip_info(itinerary: Dict[str, Any], parsed: Dict[str, Any]) -> Dict[str, Any]:
    """把解析出的行程信息合并到空白模板后写入文档"""
    trip_info = create_empty_trip_info()
    for key in _TRIP_INFO_REPLACED:
        if parsed.get(key):
            trip_info[key] = parsed[key]
    for key in _TRIP_INFO_MERGED:
        value = parsed.get(key)
        if isinstance(value, dict):
            trip_info[key] = {**trip_info[key], **value}
        elif value:
            logger.warning(f"⚠️ 行程信息字段 {key} 不是对象，已忽略: {value!r}")

    trip_info["lastModified"] = _now()
    itinerary["tripInfo"] = trip_info
    return trip_info


# ============================================
# 已保存行程
# ============================================

class SavedTripRegistry:
    """已保存行程列表，条目形如 {id, name, createdAt, lastModified, data}"""

    def __init__(self, trips: Optional[List[Dict[str, Any]]] = None):
        self.trips = trips if trips is not None else []

    def _find(self, trip_id: str) -> Dict[str, Any]:
        for trip in self.trips:
            if trip.get("id") == trip_id:
                return trip
        raise DocumentNotFoundError(f"Trip {trip_id} not found")

    def save_current_as(self, name: str, data: Dict[str, Any]) -> Dict[str, Any]:
        now = _now()
        trip = {
            "id": _new_id(t.get("id") for t in self.trips),
            "name": name,
            "createdAt": now,
            "lastModified": now,
            "data": copy.deepcopy(data),
        }
        self.trips.append(trip)
        return trip

    def load(self, trip_id: str) -> Dict[str, Any]:
        """返回保存的行程数据副本"""
        return copy.deepcopy(self._find(trip_id)["data"])

    def update(self, trip_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        trip = self._find(trip_id)
        trip["data"] = copy.deepcopy(data)
        trip["lastModified"] = _now()
        return trip

    def delete(self, trip_id: str) -> bool:
        before = len(self.trips)
        self.trips[:] = [t for t in self.trips if t.get("id") != trip_id]
        return len(self.trips) < before

    def rename(self, trip_id: str, name: str) -> Dict[str, Any]:
        trip = self._find(trip_id)
        trip["name"] = name
        trip["lastModified"] = _now()
        return trip
