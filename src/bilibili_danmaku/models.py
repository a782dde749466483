"""数据模型定义。"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Sequence

from .utils import strip_markup


@dataclass(frozen=True, slots=True)
class VideoSummary:
    """搜索结果中的视频摘要。"""

    id: str
    title: str
    cover: str = ""
    desc: str = ""

    @classmethod
    def from_search_item(cls, item: Dict[str, Any]) -> "VideoSummary":
        """按 bvid -> aid -> 空串 的顺序确定视频ID。"""
        video_id = item.get("bvid") or item.get("aid") or ""
        return cls(
            id=str(video_id),
            title=strip_markup(str(item.get("title") or "")),
            cover=item.get("pic") or "",
            desc=item.get("description") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "cover": self.cover, "desc": self.desc}


@dataclass(frozen=True, slots=True)
class SegmentDescriptor:
    """视频的一个分P。"""

    cid: int
    page: int
    name: str

    @classmethod
    def from_page_item(cls, item: Dict[str, Any]) -> "SegmentDescriptor":
        return cls(
            cid=int(item.get("cid") or 0),
            page=int(item.get("page") or 0),
            name=item.get("part") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"cid": self.cid, "page": self.page, "name": self.name}


@dataclass(frozen=True, slots=True)
class CommentRecord:
    """一条弹幕。

    前八个字段来自 ``<d>`` 元素的 ``p`` 属性，依次为：出现时间（秒）、类型、
    字号、颜色、发送时间戳、弹幕池、发送者midHash、弹幕dmid。
    ``content`` 取自元素文本。``dmid`` 可能超出整数安全范围，保留为字符串。
    """

    time: float
    mode: int
    font_size: int
    color: int
    timestamp: int
    pool: int
    mid_hash: str
    dmid: str
    content: str

    @classmethod
    def from_fields(cls, fields: Sequence[str], content: str) -> "CommentRecord":
        """由 ``p`` 属性拆分出的字段构造记录，数值非法时抛出 ``ValueError``。"""
        if len(fields) < 8:
            raise ValueError(f"p属性字段不足8个: {len(fields)}")
        time = float(fields[0])
        if not math.isfinite(time):
            raise ValueError(f"出现时间非法: {fields[0]}")
        return cls(
            time=time,
            mode=int(fields[1]),
            font_size=int(fields[2]),
            color=int(fields[3]),
            timestamp=int(fields[4]),
            pool=int(fields[5]),
            mid_hash=fields[6],
            dmid=fields[7],
            content=content,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "mode": self.mode,
            "fontSize": self.font_size,
            "color": self.color,
            "timestamp": self.timestamp,
            "pool": self.pool,
            "midHash": self.mid_hash,
            "dmid": self.dmid,
            "content": self.content,
        }
