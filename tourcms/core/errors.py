"""
内容管理错误类型
API 层统一把这些错误映射为 HTTP 状态码
"""

from typing import Optional


class ContentError(Exception):
    """内容操作错误基类"""

    status_code = 400

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class DocumentNotFoundError(ContentError):
    """JSON 文档不存在"""

    status_code = 404


class DayNotFoundError(ContentError):
    """行程中不存在该天"""

    status_code = 404

    def __init__(self, day: int):
        super().__init__(f"Day {day} not found")
        self.day = day


class SegmentNotFoundError(ContentError):
    """该天中不存在该片段"""

    status_code = 404

    def __init__(self, day: int, segment_id: str):
        super().__init__(f"Segment {segment_id} not found in day {day}")
        self.day = day
        self.segment_id = segment_id


class DuplicateDayError(ContentError):
    """目标天数已存在"""

    status_code = 409

    def __init__(self, day: int):
        super().__init__(f"Day {day} already exists")
        self.day = day


class LLMNotConfiguredError(ContentError):
    """未配置大模型密钥"""

    status_code = 400

    def __init__(self):
        super().__init__("OpenAI API key not configured. Edit .env file.")


class LLMResponseError(ContentError):
    """大模型返回内容无法解析为JSON"""

    status_code = 500

    def __init__(self, raw: str, cause: Optional[Exception] = None):
        super().__init__("Failed to parse LLM response as JSON", cause)
        self.raw = raw
