"""
核心处理模块
包含文档存储、行程编辑、文本解析和网站数据转换等核心业务逻辑
"""

from .document_store import JsonDocumentStore
from .errors import (
    ContentError,
    DocumentNotFoundError,
    DayNotFoundError,
    SegmentNotFoundError,
    DuplicateDayError,
    LLMNotConfiguredError,
    LLMResponseError,
)
from .itinerary_editor import SavedTripRegistry
from .text_parser import parse_itinerary_text
from .site_builder import transform_itinerary
from .pdf_builder import ItineraryPdfBuilder
from .route_map import render_route_map

__all__ = [
    'JsonDocumentStore',
    'ContentError',
    'DocumentNotFoundError',
    'DayNotFoundError',
    'SegmentNotFoundError',
    'DuplicateDayError',
    'LLMNotConfiguredError',
    'LLMResponseError',
    'SavedTripRegistry',
    'parse_itinerary_text',
    'transform_itinerary',
    'ItineraryPdfBuilder',
    'render_route_map'
]
