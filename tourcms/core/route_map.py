"""
路线地图
使用 folium 生成交互式HTML地图：区域标记 + 路线折线
"""

import logging
from typing import Any, Dict, List, Optional

import folium

from .errors import ContentError
from .regions import DESTINATION_REGIONS, ROUTE_COORDINATES
from .pdf_builder import day_range_label
from ..utils.text_utils import get_text

logger = logging.getLogger(__name__)


ROUTE_COLOR = "#D84315"


def render_route_map(regions: Optional[List[Dict[str, Any]]] = None,
                     route: Optional[List[List[float]]] = None,
                     language: str = "en",
                     zoom_start: int = 5) -> str:
    """
    生成路线地图HTML

    地图中心为路线坐标均值；每个区域一个标记，
    第一个为绿色，最后一个为红色，其余为蓝色。

    Args:
        regions: 区域列表，默认使用内置目的地区域
        route: 路线坐标 [[纬度, 经度], ...]，默认使用内置路线
        language: 标记文字语言
        zoom_start: 初始缩放级别

    Returns:
        完整的HTML文档
    """
    regions = DESTINATION_REGIONS if regions is None else regions
    route = ROUTE_COORDINATES if route is None else route

    points = route or [r["coordinates"] for r in regions]
    if not points:
        raise ContentError("Cannot render a map without coordinates")

    center_lat = sum(p[0] for p in points) / len(points)
    center_lon = sum(p[1] for p in points) / len(points)
    m = folium.Map(location=[center_lat, center_lon], zoom_start=zoom_start)

    for i, region in enumerate(regions):
        icon_color = "green" if i == 0 else "red" if i == len(regions) - 1 else "blue"
        name = get_text(region.get("name"), language)
        folium.Marker(
            location=region["coordinates"],
            popup=f"{name} ({day_range_label(region.get('days') or [], language)})",
            tooltip=name,
            icon=folium.Icon(color=icon_color),
        ).add_to(m)

    if len(route) >= 2:
        folium.PolyLine(route, weight=3, color=ROUTE_COLOR, opacity=0.8).add_to(m)

    logger.info(f"🗺️ 路线地图生成完成：{len(regions)} 个区域，{len(route)} 个路线点")
    return m.get_root().render()
