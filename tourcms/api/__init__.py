"""
API模块
"""

from .app import app
from .service import ContentService

__all__ = [
    'app',
    'ContentService'
]
