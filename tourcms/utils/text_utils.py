"""
文本处理工具
"""

import re
import json
from typing import Any, Optional


_HTML_TAG_PATTERN = re.compile(r'<[^>]*>')
_CODE_FENCE_PATTERN = re.compile(r'```(?:json)?\n?')


def get_text(value: Any, lang: str = "en") -> str:
    """
    读取双语字段

    双语字段形如 {"en": "...", "cn": "..."}，也可能直接是字符串。
    找不到目标语言时回退到英文，仍找不到则返回空字符串。

    Args:
        value: 字符串或双语字典
        lang: 语言代码 "en" 或 "cn"

    Returns:
        对应语言的文本
    """
    if not value:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        if value.get(lang):
            return str(value[lang])
        if value.get("en"):
            return str(value["en"])
    return ""


def strip_html(text: Optional[str]) -> str:
    """去除HTML标签"""
    if not text:
        return ""
    return _HTML_TAG_PATTERN.sub('', text).strip()


def slugify(text: str) -> str:
    """生成URL友好的标识"""
    slug = re.sub(r'[^a-z0-9]+', '-', text.lower())
    return slug.strip('-')


def strip_parentheses(text: str) -> str:
    """去除括号内容，如 (13.7km)"""
    return re.sub(r'\([^)]*\)', '', text).strip()


def parse_llm_json(content: str) -> Any:
    """
    解析大模型返回的JSON

    先去掉 ```json 代码块标记；整体解析失败时，
    再尝试提取最外层的数组或对象。

    Args:
        content: 大模型原始输出

    Returns:
        解析后的对象

    Raises:
        json.JSONDecodeError: 无法解析为JSON
    """
    cleaned = _CODE_FENCE_PATTERN.sub('', content or '').strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        # 查找 JSON 内容（包括多行）
        json_match = re.search(r'(\[.*\]|\{.*\})', cleaned, re.DOTALL)
        if not json_match:
            raise
        return json.loads(json_match.group(0))
