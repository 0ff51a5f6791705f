"""
每日图片研究
- research_day: 按当天亮点搜索 Unsplash/Pexels 图片，生成备选 alt 文本和酒店搜索链接
- regenerate_research: 按行程片段从全部来源重新生成 day-N-research.json
"""

import re
import time
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
from urllib.parse import quote

from ..core.document_store import JsonDocumentStore
from ..models.data_models import ResearchActivity
from ..reports.html_report import render_image_research, write_report
from ..search.aggregator import ImageSearchService
from ..utils.text_utils import get_text, strip_parentheses
from .poi_research import day_highlights

logger = logging.getLogger(__name__)


SEARCH_KEYWORDS = [
    ("terracotta warriors", "terracotta warriors xian china"),
    ("big wild goose pagoda", "big wild goose pagoda xian"),
    ("city wall", "xian ancient city wall china"),
    ("muslim quarter", "xian muslim quarter street food"),
    ("bell tower", "xian bell tower china"),
    ("drum tower", "xian drum tower china"),
    ("dumpling", "chinese dumplings xian"),
    ("forbidden city", "forbidden city beijing china palace"),
    ("fragrant hills", "fragrant hills beijing autumn"),
    ("great wall", "great wall of china badaling"),
    ("peking duck", "peking duck beijing restaurant"),
    ("lushan", "lushan mountain china scenic"),
    ("mount tai", "mount tai china sunrise"),
    ("jade emperor", "jade emperor peak mount tai"),
    ("confucius", "confucius temple qufu china"),
    ("wuyuan", "wuyuan village china rapeseed"),
    ("huangling", "huangling terraces china"),
    ("daming palace", "daming palace xian ruins"),
    ("beilin", "beilin museum xian steles"),
    ("cable car", "mountain cable car china"),
    ("sleeper train", "china sleeper train soft sleeper"),
    ("high-speed", "china high speed rail train"),
    ("airport", "china airport terminal"),
    ("hotel", "{location} china hotel lobby"),
    ("welcome dinner", "chinese banquet dinner"),
    ("hiking", "{location} china hiking trail"),
]

HIGHLIGHT_PROVIDERS = ("unsplash", "pexels")
IMAGES_PER_PROVIDER = 4
SEGMENT_IMAGE_COUNT = 8
SKIPPED_SEGMENT_TYPES = ("check-in", "check-out", "meal")
RESEARCH_PROVIDERS = ["unsplash", "pexels", "pixabay", "wikimedia"]
TRIPADVISOR_SEARCH = "https://www.tripadvisor.com/Search?q="


def get_search_terms(highlight: str, location: str) -> str:
    """亮点转搜索词：先查常用关键词表，找不到时用 '<亮点> <地点> china tourism'"""
    clean = strip_parentheses(str(highlight))
    lowered = clean.lower()
    for key, term in SEARCH_KEYWORDS:
        if key in lowered:
            return term.format(location=location)
    return f"{clean} {location} china tourism"


def segment_search_term(segment: Dict[str, Any], day_location: str = "") -> str:
    """
    片段转搜索词

    去掉括号内容，& 换成 and；标题中不含地点时补上城市名（地点按 , - > 分割取第一段）和 China。
    """
    title = get_text(segment.get("title"))
    location = get_text(segment.get("location")) or day_location or ""

    term = strip_parentheses(title).replace("&", "and").strip()

    if location and location.lower() not in term.lower():
        city = re.split(r"[,\->]", location)[0].strip()
        if len(city) > 2:
            term = f"{term} {city} China"
    elif "china" not in term.lower():
        term = f"{term} China"

    return term


def _accommodation_name(day: Dict[str, Any]) -> str:
    accommodation = day.get("accommodation")
    if isinstance(accommodation, dict) and "name" in accommodation:
        return get_text(accommodation.get("name"))
    return get_text(accommodation)


class ImageResearcher:
    """图片研究：结果写入研究目录，供 /api/research 读取"""

    def __init__(self, search: ImageSearchService, output_dir: Union[str, Path], delay: float = 0.5):
        self.search = search
        self.store = JsonDocumentStore(output_dir)
        self.delay = delay

    def research_day(self, day: Dict[str, Any]) -> Dict[str, Any]:
        """
        按亮点研究一天的图片

        Args:
            day: 网站格式的一天

        Returns:
            研究结果，activities 中每项包含 name/searchTerm/images/suggestedAlt
        """
        location = get_text(day.get("location"))
        accommodation = _accommodation_name(day)
        highlights = day_highlights(day)
        logger.info(f"🔍 研究 Day {day.get('day')}: {get_text(day.get('title'))} ({len(highlights)} 个亮点)")

        activities = []
        for highlight in highlights:
            search_term = get_search_terms(highlight, location)
            results = self.search.search_each(search_term, list(HIGHLIGHT_PROVIDERS), IMAGES_PER_PROVIDER)
            images = [img.to_dict() for name in HIGHLIGHT_PROVIDERS for img in results[name]]
            logger.info(f"  📸 {highlight} -> '{search_term}'：{len(images)} 张")
            activities.append({
                "name": highlight,
                "searchTerm": search_term,
                "images": images,
                "suggestedAlt": [
                    f"{highlight} in {location}, China",
                    f"{highlight} - travel photography",
                    f"{highlight} tourist attraction",
                ],
            })

        return {
            "day": day.get("day"),
            "date": day.get("date"),
            "title": day.get("title"),
            "location": day.get("location"),
            "description": day.get("description"),
            "highlights": day.get("highlights"),
            "meals": day.get("meals"),
            "accommodation": accommodation,
            "activities": activities,
            "hotelSearch": f"{TRIPADVISOR_SEARCH}{quote(f'{accommodation} {location}', safe='')}",
        }

    def save_day(self, research: Dict[str, Any]) -> Tuple[Path, Path]:
        day = research["day"]
        json_path = self.store.save_day("research", day, research)
        html_path = write_report(render_image_research(research), self.store.root / f"day-{day}-research.html")
        return json_path, html_path

    def regenerate_day(self, day: Dict[str, Any]) -> Dict[str, Any]:
        """按片段重新生成一天的研究数据并保存"""
        title = get_text(day.get("title"))
        location = get_text(day.get("location"))
        logger.info(f"📅 Day {day.get('day')}: {title}")

        activities: List[ResearchActivity] = []
        for segment in day.get("segments") or []:
            if segment.get("type") in SKIPPED_SEGMENT_TYPES:
                continue

            search_term = segment_search_term(segment, location)
            if self.delay:
                time.sleep(self.delay)
            images = [img.to_dict() for img in self.search.search(search_term, "all", SEGMENT_IMAGE_COUNT)]
            segment_title = get_text(segment.get("title"))
            logger.info(f"  🔍 '{segment_title}' -> '{search_term}'：{len(images)} 张")
            activities.append(ResearchActivity(
                name=segment_title,
                activity=segment_title,
                search_term=search_term,
                images=images,
            ))

        research = {
            "day": day.get("day"),
            "title": {"en": title, "cn": get_text(day.get("title"), "cn") or title},
            "location": {"en": location, "cn": get_text(day.get("location"), "cn") or location},
            "generatedAt": datetime.now().isoformat(),
            "providers": RESEARCH_PROVIDERS,
            "activities": [a.to_dict() for a in activities],
            "sampleImages": [{"activity": a.activity, "images": a.images} for a in activities if a.images],
        }
        self.store.save_day("research", research["day"], research)
        return research

    def regenerate_research(self, itinerary: Optional[Dict[str, Any]]) -> Dict[str, int]:
        """
        重新生成整份行程的研究数据

        Returns:
            {days, activities, images} 统计
        """
        days = (itinerary or {}).get("days") or []
        totals = {"days": 0, "activities": 0, "images": 0}
        for day in days:
            research = self.regenerate_day(day)
            totals["days"] += 1
            totals["activities"] += len(research["activities"])
            totals["images"] += sum(len(a["images"]) for a in research["activities"])
        logger.info(f"✅ 已重新生成 {totals['days']} 天：{totals['activities']} 个活动，{totals['images']} 张图片")
        return totals
