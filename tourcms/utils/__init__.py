"""
工具模块
"""

from .text_utils import get_text, strip_html, slugify, strip_parentheses, parse_llm_json

__all__ = [
    'get_text',
    'strip_html',
    'slugify',
    'strip_parentheses',
    'parse_llm_json'
]
