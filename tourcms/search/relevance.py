"""
图片相关度评分
分辨率、关键词匹配、来源、宽高比四项各 0-25 分，总分上限 100
"""

import re
from typing import Any, Dict

SOURCE_SCORES = {
    "wikimedia": 25,
    "unsplash": 22,
    "pexels": 20,
    "pixabay": 18,
    "flickr": 15,
}
DEFAULT_SOURCE_SCORE = 10

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600


def resolution_score(width: int, height: int) -> int:
    pixels = width * height
    if pixels >= 4_000_000:
        return 25
    if pixels >= 2_000_000:
        return 20
    if pixels >= 1_000_000:
        return 15
    if pixels >= 500_000:
        return 10
    return 5


def keyword_score(image: Dict[str, Any], query: str) -> int:
    """查询词在 alt/摄影师/标签中的命中比例"""
    terms = re.split(r"\s+", query.lower())
    text = f"{image.get('alt') or ''} {image.get('photographer') or ''} {image.get('tags') or ''}".lower()
    matched = sum(1 for term in terms if term in text)
    # 四舍五入，.5 进位
    return min(25, int(matched / len(terms) * 25 + 0.5))


def aspect_score(width: int, height: int) -> int:
    ratio = width / height
    if 1.3 <= ratio <= 1.8:
        return 25
    if 1.1 <= ratio <= 2.0:
        return 20
    if 0.9 <= ratio <= 1.1:
        return 15
    return 10


def calculate_relevance(image: Dict[str, Any], query: str) -> int:
    """
    计算图片与查询的相关度

    Args:
        image: 图片字典（ImageRecord.to_dict() 格式）
        query: 搜索词

    Returns:
        0-100 的整数分
    """
    width = image.get("width") or DEFAULT_WIDTH
    height = image.get("height") or DEFAULT_HEIGHT
    score = (
        resolution_score(width, height)
        + keyword_score(image, query)
        + SOURCE_SCORES.get(image.get("source"), DEFAULT_SOURCE_SCORE)
        + aspect_score(width, height)
    )
    return min(100, score)
