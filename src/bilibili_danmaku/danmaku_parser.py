"""旧版XML弹幕解析。

弹幕文档形如::

    <i>
      <d p="time,mode,fontSize,color,timestamp,pool,midHash,dmid">弹幕内容</d>
      ...
    </i>
"""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import List, Union

from .errors import ParseError
from .models import CommentRecord

logger = logging.getLogger(__name__)

COMMENT_TAG = "d"
POSITION_ATTR = "p"


def parse_comment_element(elem: ET.Element) -> CommentRecord:
    """解析单个 ``<d>`` 元素，``p`` 属性缺失或非法时抛出 ``ValueError``。"""
    attrs = elem.get(POSITION_ATTR)
    if not attrs:
        raise ValueError("缺少p属性")
    return CommentRecord.from_fields(attrs.split(","), elem.text or "")


def parse_danmaku_xml(document: Union[str, bytes]) -> List[CommentRecord]:
    """解析整个弹幕文档，返回按出现时间升序排列的弹幕列表。

    单条弹幕的 ``p`` 属性缺失、字段不足8个或数值非法时跳过该条；
    文档本身无法解析时抛出 :class:`ParseError`。
    """
    try:
        root = ET.fromstring(document)
    except ET.ParseError as exc:
        raise ParseError(f"弹幕XML解析失败: {exc}") from exc

    comments: List[CommentRecord] = []
    skipped = 0
    for elem in root.iter(COMMENT_TAG):
        try:
            comments.append(parse_comment_element(elem))
        except ValueError as exc:
            skipped += 1
            logger.debug("跳过无效弹幕 p=%r: %s", elem.get(POSITION_ATTR), exc)
    if skipped:
        logger.debug("共跳过 %d 条无效弹幕", skipped)
    # sorted是稳定排序，相同时间的弹幕保持原顺序
    return sorted(comments, key=lambda c: c.time)
