"""
研究结果的HTML审阅页面
使用 jinja2 模板渲染 POI 审阅页和图片研究页
"""

import logging
from pathlib import Path
from typing import Any, Dict, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..utils.text_utils import get_text

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
DEFAULT_API_BASE = "http://localhost:8000"


def confidence_class(confidence: float) -> str:
    if confidence >= 0.8:
        return "confidence-high"
    if confidence >= 0.5:
        return "confidence-medium"
    return "confidence-low"


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["confidence_class"] = confidence_class
    return env


def render_poi_review(research: Dict[str, Any], api_base: str = DEFAULT_API_BASE) -> str:
    """渲染单日 POI 审阅页，保存按钮回写 /api/poi/{day}"""
    template = _environment().get_template("poi_review.html")
    return template.render(
        research=research,
        title=get_text(research.get("title")),
        location=get_text(research.get("location")),
        api_base=api_base,
    )


def render_image_research(research: Dict[str, Any]) -> str:
    """渲染单日图片研究页"""
    template = _environment().get_template("image_research.html")
    total_images = sum(len(a.get("images") or []) for a in research.get("activities") or [])
    return template.render(
        research=research,
        title=get_text(research.get("title")),
        location=get_text(research.get("location")),
        description=get_text(research.get("description")),
        accommodation=get_text(research.get("accommodation")),
        total_images=total_images,
    )


def write_report(html: str, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html, encoding="utf-8")
    logger.info(f"📄 已生成审阅页面 {path}")
    return path
