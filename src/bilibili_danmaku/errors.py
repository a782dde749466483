"""异常类型定义。"""
from __future__ import annotations

from typing import Optional


class DanmakuError(RuntimeError):
    """所有本项目异常的基类。"""


class InvalidArgument(DanmakuError, ValueError):
    """缺少必要参数，在发出任何网络请求前抛出。"""


class UpstreamError(DanmakuError):
    """表示B站接口返回业务错误或网络请求失败。"""

    def __init__(self, message: str, endpoint: str, code: Optional[int] = None) -> None:
        if code is None:
            super().__init__(f"请求{endpoint}失败: {message}")
        else:
            super().__init__(f"API响应错误(code={code}, message={message}, endpoint={endpoint})")
        self.message = message
        self.endpoint = endpoint
        self.code = code


class ParseError(DanmakuError):
    """弹幕XML文档无法解析。"""
