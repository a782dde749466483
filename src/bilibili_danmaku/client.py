"""B站搜索、分P与弹幕API封装。"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests

from .bv_tools import parse_video_id
from .config import ClientConfig
from .danmaku_parser import parse_danmaku_xml
from .errors import InvalidArgument, UpstreamError
from .models import CommentRecord, SegmentDescriptor, VideoSummary
from .utils import build_session

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "未知错误"

T = TypeVar("T")


def _ensure_list(value: Any, endpoint: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise UpstreamError("列表字段格式异常", endpoint)
    return value


def _build(factory: Callable[[Dict[str, Any]], T], item: Any, endpoint: str) -> T:
    """把接口返回的单个条目转换为模型，格式不符时抛出 :class:`UpstreamError`。"""
    if not isinstance(item, dict):
        raise UpstreamError(f"条目格式异常: {item!r}", endpoint)
    try:
        return factory(item)
    except (TypeError, ValueError) as exc:
        raise UpstreamError(f"条目字段无效: {exc}", endpoint) from exc


class BiliDanmakuClient:
    """封装视频搜索、CID列表与旧版XML弹幕接口。

    客户端本身不保存调用之间的状态。``requests.Session`` 不保证线程安全，
    多线程调用时每个线程应各自构造客户端。
    """

    def __init__(self, session: Optional[requests.Session] = None, config: Optional[ClientConfig] = None) -> None:
        self.config = config or ClientConfig()
        self.session = session or build_session(self.config)

    def _get(self, url: str, **kwargs) -> requests.Response:
        logger.debug("GET %s params=%s", url, kwargs.get("params"))
        try:
            response = self.session.get(url, timeout=self.config.timeout, **kwargs)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise UpstreamError(str(exc), url) from exc
        return response

    def _get_json(self, url: str, params: Dict[str, Any]) -> Any:
        response = self._get(url, params=params)
        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError("响应不是有效的JSON", url) from exc
        if not isinstance(payload, dict):
            raise UpstreamError(UNKNOWN_ERROR, url)
        code = payload.get("code")
        if code != 0:
            raise UpstreamError(payload.get("message") or UNKNOWN_ERROR, url, code=code)
        return payload.get("data")

    def search_videos(self, keyword: str, page: int = 1) -> List[VideoSummary]:
        """按关键词搜索视频。"""
        url = self.config.search_endpoint
        data = self._get_json(url, params={"search_type": "video", "keyword": keyword, "page": page})
        if data is None:
            data = {}
        elif not isinstance(data, dict):
            raise UpstreamError("搜索结果格式异常", url)
        results = _ensure_list(data.get("result"), url)
        return [_build(VideoSummary.from_search_item, item, url) for item in results]

    def resolve_segments(self, video_id: str) -> List[SegmentDescriptor]:
        """获取视频的分P列表（CID列表），保持接口返回的顺序。"""
        parsed = parse_video_id(video_id)
        url = self.config.pagelist_endpoint
        pages = _ensure_list(self._get_json(url, params=parsed.query_params()), url)
        return [_build(SegmentDescriptor.from_page_item, item, url) for item in pages]

    def fetch_comments(self, cid: int) -> List[CommentRecord]:
        """获取指定CID的弹幕，按出现时间升序排列。

        旧版XML接口无需登录，但最多只返回数千条弹幕。
        """
        if not cid:
            raise InvalidArgument("必须提供CID")
        response = self._get(self.config.comment_url(cid))
        comments = parse_danmaku_xml(response.content)
        logger.debug("cid=%s 解析到 %d 条弹幕", cid, len(comments))
        return comments
