"""通用工具方法。"""
from __future__ import annotations

import re
from typing import TYPE_CHECKING, Dict, Optional

import requests

if TYPE_CHECKING:
    from .config import ClientConfig

_MARKUP_PATTERN = re.compile(r"<[^>]+>")


def strip_markup(text: str) -> str:
    """去掉标题中的HTML标签（如搜索关键词高亮的 ``<em>``）。"""
    return _MARKUP_PATTERN.sub("", text)


def build_session(config: "ClientConfig", extra_headers: Optional[Dict[str, str]] = None) -> requests.Session:
    """构造带固定Headers的requests会话。"""
    session = requests.Session()
    session.headers.update(config.headers())
    if extra_headers:
        session.headers.update(extra_headers)
    return session
