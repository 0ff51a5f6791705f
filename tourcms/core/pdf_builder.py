"""
行程PDF生成
使用 reportlab 画布排版 A4 行程手册：封面、按区域分组的每日行程、重要信息页
"""

import io
import logging
from typing import Any, Dict, List, Optional

from reportlab.lib.colors import HexColor, white
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfgen import canvas

from .regions import DESTINATION_REGIONS
from .site_builder import group_by_time
from ..utils.text_utils import get_text

logger = logging.getLogger(__name__)


# ─── 颜色 ───
COVER_BG = HexColor("#1a1a2e")
REGION_COLOR = HexColor("#d84315")
DAY_BADGE = HexColor("#1976d2")
STAY_COLOR = HexColor("#388e3c")
TEXT_DARK = HexColor("#222222")
TEXT_BODY = HexColor("#555555")
TEXT_MUTED = HexColor("#666666")
TEXT_FAINT = HexColor("#999999")
RULE = HexColor("#e0e0e0")
TIME_BG = HexColor("#f5f5f5")

W, H = A4
MARGIN = 18 * mm
CONTENT_W = W - 2 * MARGIN

CJK_FONT = "STSong-Light"

LABELS = {
    "en": {
        "yourJourney": "Your Journey",
        "essentialInfo": "Essential Information",
        "meals": "Meals",
        "stay": "Stay",
        "title": "China 2026",
        "subtitle": "Hiking Trip",
        "adventure": "14 Days of Adventure",
        "dates": "May 8 - May 22, 2026",
        "filename": "China_2026_Hiking_Trip_Itinerary.pdf",
        "priceInfo": "Price Information",
    },
    "cn": {
        "yourJourney": "您的旅程",
        "essentialInfo": "重要信息",
        "meals": "餐食",
        "stay": "住宿",
        "title": "2026中国",
        "subtitle": "徒步之旅",
        "adventure": "14天探险之旅",
        "dates": "2026年5月8日 - 5月22日",
        "filename": "2026中国徒步之旅行程.pdf",
        "priceInfo": "价格信息",
    },
}


def pdf_filename(language: str = "en") -> str:
    return LABELS.get(language, LABELS["en"])["filename"]


def day_range_label(days: List[int], language: str = "en", spaced: bool = False) -> str:
    """区域天数范围文本：Days 1-4 / Day 11 / 第1-4天"""
    if not days:
        return ""
    first, last = days[0], days[-1]
    sep = " - " if spaced else "-"
    if len(days) > 1:
        return f"第{first}{sep}{last}天" if language == "cn" else f"Days {first}{sep}{last}"
    return f"第{first}天" if language == "cn" else f"Day {first}"


class ItineraryPdfBuilder:
    """行程PDF排版器"""

    def __init__(self, language: str = "en"):
        self.language = language if language in LABELS else "en"
        self.ui = LABELS[self.language]
        if self.language == "cn":
            if CJK_FONT not in pdfmetrics.getRegisteredFontNames():
                pdfmetrics.registerFont(UnicodeCIDFont(CJK_FONT))
            self.font = CJK_FONT
            self.bold_font = CJK_FONT
        else:
            self.font = "Helvetica"
            self.bold_font = "Helvetica-Bold"
        self.c: Optional[canvas.Canvas] = None
        self.y = H - MARGIN

    @property
    def filename(self) -> str:
        return self.ui["filename"]

    def t(self, value: Any) -> str:
        return get_text(value, self.language)

    # ─── 绘制工具 ───

    def _text(self, text: str, x: float, y: float, size: float = 10, color=TEXT_DARK,
              bold: bool = False, align: str = "left"):
        self.c.saveState()
        self.c.setFont(self.bold_font if bold else self.font, size)
        self.c.setFillColor(color)
        if align == "center":
            self.c.drawCentredString(x, y, text)
        elif align == "right":
            self.c.drawRightString(x, y, text)
        else:
            self.c.drawString(x, y, text)
        self.c.restoreState()

    def _width(self, text: str, size: float, bold: bool = False) -> float:
        return pdfmetrics.stringWidth(text, self.bold_font if bold else self.font, size)

    def wrap(self, text: str, max_width: float, size: float, bold: bool = False) -> List[str]:
        """按单词换行，单个词超宽（如中文）时按字符断开"""
        lines: List[str] = []
        for paragraph in (text or "").split("\n"):
            current = ""
            for word in paragraph.split():
                candidate = f"{current} {word}" if current else word
                if self._width(candidate, size, bold) <= max_width:
                    current = candidate
                    continue
                if current:
                    lines.append(current)
                current = ""
                for char in word:
                    if self._width(current + char, size, bold) > max_width and current:
                        lines.append(current)
                        current = char
                    else:
                        current += char
            if current:
                lines.append(current)
        return lines

    def _paragraph(self, text: str, x: float, max_width: float, size: float = 10,
                   color=TEXT_BODY, bold: bool = False, leading: Optional[float] = None):
        leading = leading or size * 1.45
        for line in self.wrap(text, max_width, size, bold):
            self.ensure_space(leading)
            self._text(line, x, self.y, size, color, bold)
            self.y -= leading

    def new_page(self):
        self.c.showPage()
        self.y = H - MARGIN

    def ensure_space(self, needed: float):
        """剩余空间不足时换页"""
        if self.y - needed < MARGIN:
            self.new_page()

    # ─── 页面 ───

    def draw_cover(self):
        c = self.c
        c.saveState()
        c.setFillColor(COVER_BG)
        c.rect(0, 0, W, H, fill=1, stroke=0)
        c.restoreState()

        y = H - 70 * mm
        self._text(self.ui["title"], W / 2, y, 40, white, bold=True, align="center")
        y -= 16 * mm
        self._text(self.ui["subtitle"], W / 2, y, 32, white, bold=True, align="center")
        y -= 14 * mm
        self._text(self.ui["adventure"], W / 2, y, 14, white, align="center")
        y -= 7 * mm
        self._text(self.ui["dates"], W / 2, y, 14, white, align="center")

        y -= 10 * mm
        c.saveState()
        c.setFillColor(REGION_COLOR)
        c.rect(W / 2 - 14 * mm, y, 28 * mm, 1 * mm, fill=1, stroke=0)
        c.restoreState()

        # 旅程概览框
        row_h = 9 * mm
        box_w = 120 * mm
        box_h = 20 * mm + row_h * len(DESTINATION_REGIONS)
        box_x = (W - box_w) / 2
        box_top = y - 10 * mm
        c.saveState()
        c.setFillColor(white)
        c.roundRect(box_x, box_top - box_h, box_w, box_h, 3 * mm, fill=1, stroke=0)
        c.restoreState()

        row_y = box_top - 10 * mm
        self._text(self.ui["yourJourney"], W / 2, row_y, 14, TEXT_DARK, bold=True, align="center")
        row_y -= row_h
        for region in DESTINATION_REGIONS:
            self._text(self.t(region["name"]), box_x + 8 * mm, row_y, 11, TEXT_DARK)
            self._text(day_range_label(region["days"], self.language), box_x + box_w - 8 * mm,
                       row_y, 11, TEXT_MUTED, align="right")
            row_y -= row_h

        self.new_page()

    def draw_region_header(self, region: Dict[str, Any]):
        header_h = 16 * mm
        self.ensure_space(header_h + 30 * mm)
        top = self.y + 4 * mm
        c = self.c
        c.saveState()
        c.setFillColor(REGION_COLOR)
        c.rect(0, top - header_h, W, header_h, fill=1, stroke=0)
        c.restoreState()
        self._text(self.t(region["name"]), W / 2, top - 7 * mm, 16, white, bold=True, align="center")
        self._text(day_range_label(region["days"], self.language, spaced=True), W / 2,
                   top - 12.5 * mm, 10, white, align="center")
        self.y = top - header_h - 8 * mm

    def draw_day_card(self, day: Dict[str, Any]):
        self.ensure_space(25 * mm)
        badge = f"第{day['day']}天" if self.language == "cn" else f"Day {day['day']}"
        badge_w = self._width(badge, 9, bold=True) + 6 * mm
        c = self.c
        c.saveState()
        c.setFillColor(DAY_BADGE)
        c.roundRect(MARGIN, self.y - 1.8 * mm, badge_w, 6 * mm, 1.2 * mm, fill=1, stroke=0)
        c.restoreState()
        self._text(badge, MARGIN + 3 * mm, self.y, 9, white, bold=True)
        meta = f"{day.get('date') or ''} • {self.t(day.get('location'))}"
        self._text(meta, MARGIN + badge_w + 3 * mm, self.y, 10, TEXT_MUTED)
        self.y -= 9 * mm

        if day.get("title"):
            self._paragraph(self.t(day["title"]), MARGIN, CONTENT_W, 14, TEXT_DARK, bold=True)
        description = self.t(day.get("description"))
        if description:
            self._paragraph(description, MARGIN, CONTENT_W, 10, TEXT_BODY)
            self.y -= 2 * mm

        timeline = day.get("timeline") or group_by_time([s for s in day.get("segments") or [] if s])
        for group in timeline:
            for segment in [s for s in group["segments"] if s and s.get("title")]:
                self.draw_segment(segment)

        self.draw_day_footer(day)

        self.y -= 3 * mm
        self.ensure_space(6 * mm)
        c.saveState()
        c.setStrokeColor(RULE)
        c.setLineWidth(0.5)
        c.line(MARGIN, self.y, W - MARGIN, self.y)
        c.restoreState()
        self.y -= 7 * mm

    def draw_segment(self, segment: Dict[str, Any]):
        indent = MARGIN + 7 * mm
        width = CONTENT_W - 7 * mm
        self.ensure_space(12 * mm)
        start_y = self.y + 4 * mm

        x = indent
        seg_time = self.t(segment.get("time"))
        if seg_time:
            time_w = self._width(seg_time, 8) + 4 * mm
            self.c.saveState()
            self.c.setFillColor(TIME_BG)
            self.c.rect(x, self.y - 1.5 * mm, time_w, 5 * mm, fill=1, stroke=0)
            self.c.restoreState()
            self._text(seg_time, x + 2 * mm, self.y, 8, TEXT_MUTED)
            x += time_w + 2 * mm

        heading = self.t(segment.get("title"))
        if segment.get("duration"):
            heading = f"{heading} ({segment['duration']})"
        heading_lines = self.wrap(heading, W - MARGIN - x, 11, bold=True)
        for index, line in enumerate(heading_lines):
            self._text(line, x if index == 0 else indent, self.y, 11, TEXT_DARK, bold=True)
            self.y -= 5.5 * mm

        description = self.t(segment.get("description"))
        if description:
            self._paragraph(description, indent, width, 9.5, TEXT_BODY)
        highlights = segment.get("highlights") or []
        if highlights:
            self._paragraph(" • ".join(self.t(h) for h in highlights), indent, width, 9, TEXT_FAINT)

        # 左侧竖线，跨页时只画当前页部分
        end_y = self.y + 2 * mm
        if end_y < start_y:
            self.c.saveState()
            self.c.setStrokeColor(RULE)
            self.c.setLineWidth(1.5)
            self.c.line(MARGIN + 3.5 * mm, min(start_y, H - MARGIN), MARGIN + 3.5 * mm, end_y)
            self.c.restoreState()
        self.y -= 2 * mm

    def draw_day_footer(self, day: Dict[str, Any]):
        meals = self.t(day.get("meals"))
        accommodation = day.get("accommodation") or {}
        stay = accommodation.get("name") or ""
        show_stay = bool(stay) and stay != "N/A"
        if not meals and not show_stay:
            return

        if meals:
            self._paragraph(f"{self.ui['meals']}: {meals}", MARGIN, CONTENT_W, 9.5, TEXT_MUTED)
        if show_stay:
            rating = f" ({accommodation['rating']})" if accommodation.get("rating") else ""
            self._paragraph(f"{self.ui['stay']}: {stay}{rating}", MARGIN, CONTENT_W, 9.5, STAY_COLOR)

    def draw_info_page(self, info: Dict[str, Any]):
        self.new_page()
        c = self.c
        c.saveState()
        c.setFillColor(DAY_BADGE)
        c.rect(0, H - 28 * mm, W, 28 * mm, fill=1, stroke=0)
        c.restoreState()
        self._text(self.ui["essentialInfo"], W / 2, H - 17 * mm, 20, white, bold=True, align="center")
        self.y = H - 42 * mm

        price = info.get("price") or {}
        self._text(self.ui["priceInfo"], MARGIN, self.y, 12, TEXT_DARK, bold=True)
        self.y -= 9 * mm
        price_line = f"{price.get('amount', '')} {self.t(price.get('perPerson'))} • {self.t(price.get('dates'))}"
        c.saveState()
        c.setFillColor(REGION_COLOR)
        c.roundRect(MARGIN, self.y - 3.5 * mm, CONTENT_W, 10 * mm, 2 * mm, fill=1, stroke=0)
        c.restoreState()
        self._text(price_line, W / 2, self.y, 11, white, bold=True, align="center")
        self.y -= 12 * mm

        for detail in (price.get("basis"), price.get("singleSupplement")):
            if self.t(detail):
                self._paragraph(self.t(detail), MARGIN, CONTENT_W, 9, TEXT_MUTED)
        self.y -= 4 * mm

        self._draw_item_list(info.get("included") or {}, STAY_COLOR, TEXT_BODY)
        self._draw_item_list(info.get("notIncluded") or {}, TEXT_FAINT, HexColor("#888888"))

    def _draw_item_list(self, section: Dict[str, Any], title_color, item_color):
        title = self.t(section.get("title"))
        if title:
            self.ensure_space(12 * mm)
            self._text(title.upper(), MARGIN, self.y, 10, title_color, bold=True)
            self.y -= 7 * mm
        for item in section.get("items") or []:
            lines = self.wrap(self.t(item.get("text")), CONTENT_W - 6 * mm, 10)
            for index, line in enumerate(lines):
                self.ensure_space(5 * mm)
                if index == 0:
                    self._text("•", MARGIN + 1 * mm, self.y, 10, item_color)
                self._text(line, MARGIN + 6 * mm, self.y, 10, item_color)
                self.y -= 5 * mm
        self.y -= 4 * mm

    def build(self, days: List[Dict[str, Any]], info: Optional[Dict[str, Any]] = None) -> bytes:
        """
        生成PDF

        Args:
            days: 网站格式的天数据（见 site_builder.transform_itinerary）
            info: 信息页数据（price / included / notIncluded）

        Returns:
            PDF 字节内容
        """
        buffer = io.BytesIO()
        self.c = canvas.Canvas(buffer, pagesize=A4)
        self.c.setTitle(f"{self.ui['title']} {self.ui['subtitle']}")
        self.y = H - MARGIN

        self.draw_cover()
        for region in DESTINATION_REGIONS:
            region_days = [d for d in days if d and d.get("day", 0) > 0 and d.get("region") == region["id"]]
            if not region_days:
                continue
            self.draw_region_header(region)
            for day in region_days:
                self.draw_day_card(day)

        if info:
            self.draw_info_page(info)

        self.c.save()
        logger.info(f"📄 PDF生成完成 ({self.language})，共 {self.c.getPageNumber() - 1} 页")
        return buffer.getvalue()
