"""
配置模块
"""

from .config import Config, PLACEHOLDER_API_KEY

__all__ = [
    'Config',
    'PLACEHOLDER_API_KEY'
]
