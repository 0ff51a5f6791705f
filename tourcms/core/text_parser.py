"""
规则行程文本解析器
从 Word 文档等半结构化文本中按日期标记切分出每天的内容，
不依赖大模型，可离线使用
"""

import re
import logging
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


_MONTHS = "May|June|July|August|September|October|November|December|January|February|March|April"

# 日期标记：17th May / 19/05 / Day 3
DAY_PATTERN = re.compile(
    rf"(?:^|\n)(\d{{1,2}}(?:st|nd|rd|th)?\s+(?:{_MONTHS})|\d{{1,2}}/\d{{1,2}}(?:/\d{{2,4}})?|Day\s+\d+)",
    re.IGNORECASE,
)

_LOCATION_PATTERNS = [
    re.compile(r"(?:in|to|at)\s+([A-Z][a-zA-Z]+(?:\s+[A-Z][a-zA-Z]+)?)"),
    re.compile(r"(?:Xi'an|Beijing|Lushan|Jiujiang|Jingdezhen|Wuyuan|Tai'an|Qufu|Qingdao)", re.IGNORECASE),
]

_TITLE_DATE_PREFIX = re.compile(r"^\d{1,2}(?:st|nd|rd|th)?\s+\w+\s*:?\s*", re.IGNORECASE)

_BULLET_PATTERN = re.compile(r"[·•\-\*]\s*([^·•\-\*\n]+)")
_ACTIVITY_PATTERN = re.compile(
    r"(?:visit|tour|hike|walk|explore|transfer to|arrive at)\s+(?:the\s+)?([^,.]+)",
    re.IGNORECASE,
)

_MEAL_PATTERNS = [
    re.compile(r"\(([^)]*(?:breakfast|lunch|dinner)[^)]*)\)", re.IGNORECASE),
    re.compile(r"meals?[:\s]+([^.]+(?:breakfast|lunch|dinner)[^.]*)", re.IGNORECASE),
    re.compile(r"(?:breakfast|lunch|dinner)(?:\s*,\s*(?:breakfast|lunch|dinner))+", re.IGNORECASE),
]

_LODGING = r"(?:hotel|inn|lodge|house|resort|homestay)"
_ACCOMMODATION_PATTERNS = [
    re.compile(rf"check\s*in\s*(?:at|to)?\s*([^,.]+{_LODGING}[^,.]*)", re.IGNORECASE),
    re.compile(rf"stay\s*(?:at|in)?\s*([^,.]+{_LODGING}[^,.]*)", re.IGNORECASE),
    re.compile(r"overnight\s*(?:at|in)?\s*([^,.]+)", re.IGNORECASE),
    re.compile(rf"([^,.]+{_LODGING}[^,.]*)", re.IGNORECASE),
]

MAX_HIGHLIGHTS = 6
MAX_TITLE_LENGTH = 60


def parse_itinerary_text(raw_text: str) -> List[Dict[str, Any]]:
    """
    解析整段行程文本

    Args:
        raw_text: 原始行程文本

    Returns:
        天列表，每项包含 day/date/rawText/title/location/description/
        highlights/meals/accommodation
    """
    markers = [(m.start(), m.group(1).strip()) for m in DAY_PATTERN.finditer(raw_text or "")]

    days = []
    for index, (start, date_text) in enumerate(markers):
        end = markers[index + 1][0] if index + 1 < len(markers) else len(raw_text)
        content = raw_text[start:end].strip()
        days.append(parse_day_content(content, index + 1, date_text))

    logger.info(f"📝 规则解析完成，共 {len(days)} 天")
    return days


def parse_day_content(content: str, day_number: int, date_text: str) -> Dict[str, Any]:
    lines = [line.strip() for line in content.split("\n") if line.strip()]
    location = extract_location(content)
    return {
        "day": day_number,
        "date": extract_date(date_text),
        "rawText": content,
        "title": extract_title(lines, location),
        "location": location,
        "description": clean_description(content),
        "highlights": extract_highlights(content),
        "meals": extract_meals(content),
        "accommodation": extract_accommodation(content),
    }


def extract_date(date_text: str) -> str:
    """去掉序数后缀：17th May -> 17 May"""
    return re.sub(r"(\d+)(st|nd|rd|th)", r"\1", date_text, count=1, flags=re.IGNORECASE)


def extract_location(content: str) -> str:
    for pattern in _LOCATION_PATTERNS:
        match = pattern.search(content)
        if match:
            return match.group(1) if match.groups() else match.group(0)
    return ""


def extract_title(lines: List[str], location: str) -> str:
    if not lines:
        return f"Day in {location}"
    title = _TITLE_DATE_PREFIX.sub("", lines[0], count=1)
    if len(title) > MAX_TITLE_LENGTH:
        title = title[:MAX_TITLE_LENGTH - 3] + "..."
    return title or f"Day in {location}"


def extract_highlights(content: str) -> List[str]:
    """优先取项目符号，没有时再匹配 visit/tour/hike 等活动短语"""
    highlights = []
    for match in _BULLET_PATTERN.finditer(content):
        highlight = match.group(1).strip()
        if 5 < len(highlight) < 100:
            highlights.append(highlight)

    if not highlights:
        for match in _ACTIVITY_PATTERN.finditer(content):
            activity = match.group(1).strip()
            if 3 < len(activity) < 80 and activity not in highlights:
                highlights.append(activity)

    return highlights[:MAX_HIGHLIGHTS]


def extract_meals(content: str) -> str:
    for pattern in _MEAL_PATTERNS:
        match = pattern.search(content)
        if match:
            return match.group(1) if match.groups() else match.group(0)
    return ""


def extract_accommodation(content: str) -> str:
    for pattern in _ACCOMMODATION_PATTERNS:
        match = pattern.search(content)
        if match and match.group(1):
            return match.group(1).strip()
    return ""


def clean_description(content: str) -> str:
    """压缩空白，项目符号统一为换行加圆点"""
    text = re.sub(r"\s+", " ", content)
    text = re.sub(r"[·•\-\*]\s*", "\n• ", text)
    return text.strip()
