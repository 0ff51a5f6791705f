"""
数据模型模块
"""

from .api_models import (
    DocumentPayload,
    DocumentResponse,
    ImageSearchRequest,
    ResearchSearchRequest,
    RateRequest,
    ParseRequest,
    SuccessResponse,
)
from .data_models import (
    ImageRecord,
    PointOfInterest,
    PoiSynthesis,
    SearchHistoryEntry,
    ResearchActivity,
    WikiSummary,
)

__all__ = [
    'DocumentPayload',
    'DocumentResponse',
    'ImageSearchRequest',
    'ResearchSearchRequest',
    'RateRequest',
    'ParseRequest',
    'SuccessResponse',
    'ImageRecord',
    'PointOfInterest',
    'PoiSynthesis',
    'SearchHistoryEntry',
    'ResearchActivity',
    'WikiSummary'
]
