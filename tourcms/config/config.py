"""
系统配置管理
"""

import os
import logging
from pathlib import Path


PLACEHOLDER_API_KEY = "your-key-here"

_TRUE_VALUES = ("true", "1", "yes", "on")


class Config:
    """系统配置类"""

    def __init__(self):
        self._setup_environment()
        self._setup_logging()

    def _setup_environment(self):
        """设置环境变量"""
        # OpenAI 配置
        os.environ["OPENAI_API_KEY"] = os.getenv("OPENAI_API_KEY", "")
        os.environ["OPENAI_BASE_URL"] = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
        os.environ["LLM_MODEL_NAME"] = os.getenv("LLM_MODEL_NAME", "gpt-4o-mini")

        # 图片搜索服务密钥（Wikimedia 无需密钥）
        os.environ["UNSPLASH_ACCESS_KEY"] = os.getenv("UNSPLASH_ACCESS_KEY", "")
        os.environ["PEXELS_API_KEY"] = os.getenv("PEXELS_API_KEY", "")
        os.environ["PIXABAY_API_KEY"] = os.getenv("PIXABAY_API_KEY", "")

        # 数据目录
        os.environ["CONTENT_DATA_DIR"] = os.getenv("CONTENT_DATA_DIR", "data/content")
        os.environ["SITE_DATA_DIR"] = os.getenv("SITE_DATA_DIR", "data/site")
        os.environ["RESEARCH_DIR"] = os.getenv("RESEARCH_DIR", "data/research-output")
        os.environ["POI_RESEARCH_DIR"] = os.getenv("POI_RESEARCH_DIR", "data/poi-research-output")
        os.environ["SITE_IMAGES_DIR"] = os.getenv("SITE_IMAGES_DIR", "data/site/images")
        os.environ["SESSIONS_FILE"] = os.getenv("SESSIONS_FILE", "data/content/sessions.json")

        # 外部请求配置
        os.environ["HTTP_TIMEOUT"] = os.getenv("HTTP_TIMEOUT", "15")
        os.environ["MAX_SEARCH_HISTORY"] = os.getenv("MAX_SEARCH_HISTORY", "50")

        # 调试配置
        os.environ["DEBUG_REQUEST_BODY"] = os.getenv("DEBUG_REQUEST_BODY", "false")
        os.environ["LOG_LEVEL"] = os.getenv("LOG_LEVEL", "INFO")

    def _setup_logging(self):
        """设置日志配置"""
        logging.basicConfig(level=getattr(logging, self.log_level, logging.INFO))

    @property
    def openai_api_key(self) -> str:
        return os.environ.get("OPENAI_API_KEY", "")

    @property
    def openai_base_url(self) -> str:
        return os.environ.get("OPENAI_BASE_URL", "")

    @property
    def llm_model_name(self) -> str:
        return os.environ.get("LLM_MODEL_NAME", "gpt-4o-mini")

    @property
    def llm_configured(self) -> bool:
        """是否已配置可用的大模型密钥"""
        key = self.openai_api_key
        return bool(key) and key != PLACEHOLDER_API_KEY

    @property
    def unsplash_access_key(self) -> str:
        return os.environ.get("UNSPLASH_ACCESS_KEY", "")

    @property
    def pexels_api_key(self) -> str:
        return os.environ.get("PEXELS_API_KEY", "")

    @property
    def pixabay_api_key(self) -> str:
        return os.environ.get("PIXABAY_API_KEY", "")

    @property
    def content_data_dir(self) -> Path:
        """内容管理数据目录（itinerary、selections、poi、saved-trips）"""
        return Path(os.environ.get("CONTENT_DATA_DIR", "data/content"))

    @property
    def site_data_dir(self) -> Path:
        """网站数据目录（itinerary-v2、info-page、home-page）"""
        return Path(os.environ.get("SITE_DATA_DIR", "data/site"))

    @property
    def research_dir(self) -> Path:
        return Path(os.environ.get("RESEARCH_DIR", "data/research-output"))

    @property
    def poi_research_dir(self) -> Path:
        return Path(os.environ.get("POI_RESEARCH_DIR", "data/poi-research-output"))

    @property
    def site_images_dir(self) -> Path:
        return Path(os.environ.get("SITE_IMAGES_DIR", "data/site/images"))

    @property
    def sessions_file(self) -> Path:
        """图片研究会话文件（搜索历史、评分）"""
        return Path(os.environ.get("SESSIONS_FILE", "data/content/sessions.json"))

    @property
    def http_timeout(self) -> float:
        """外部请求超时（秒）"""
        return float(os.environ.get("HTTP_TIMEOUT", "15"))

    @property
    def max_search_history(self) -> int:
        """保留的搜索历史条数"""
        return int(os.environ.get("MAX_SEARCH_HISTORY", "50"))

    @property
    def debug_request_body(self) -> bool:
        """是否开启请求体调试日志"""
        return os.environ.get("DEBUG_REQUEST_BODY", "false").lower() in _TRUE_VALUES

    @property
    def log_level(self) -> str:
        return os.environ.get("LOG_LEVEL", "INFO").upper()
