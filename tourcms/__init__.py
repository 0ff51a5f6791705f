"""
旅行行程内容管理服务
"""

__version__ = "2.0.0"
