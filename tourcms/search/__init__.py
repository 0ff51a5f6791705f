"""
图片搜索模块
包含各图片服务商、相关度评分和研究会话
"""

from .aggregator import ImageSearchService, ResearchSearch
from .relevance import calculate_relevance
from .session_store import SearchSessionStore

__all__ = [
    'ImageSearchService',
    'ResearchSearch',
    'calculate_relevance',
    'SearchSessionStore'
]
