"""
研究与解析代理模块
包含大模型行程解析、景点研究和图片研究
"""

from .llm_parser import ItineraryLLMParser
from .poi_research import PoiResearchAgent, WikipediaClient, extract_pois, is_poi
from .image_research import ImageResearcher, get_search_terms, segment_search_term

__all__ = [
    'ItineraryLLMParser',
    'PoiResearchAgent',
    'WikipediaClient',
    'extract_pois',
    'is_poi',
    'ImageResearcher',
    'get_search_terms',
    'segment_search_term'
]
