"""
审阅页面模块
"""

from .html_report import render_image_research, render_poi_review, write_report

__all__ = [
    'render_image_research',
    'render_poi_review',
    'write_report'
]
