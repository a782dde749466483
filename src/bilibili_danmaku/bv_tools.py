"""视频ID识别：BV号与AV号。"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Union

from .errors import InvalidArgument

BV_PREFIX_PATTERN = re.compile(r"^BV", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class CanonicalCode:
    """BV号，例如 ``BV1xx411c7mD``。"""

    value: str

    def query_params(self) -> Dict[str, str]:
        return {"bvid": self.value}


@dataclass(frozen=True, slots=True)
class NumericId:
    """旧版AV号。不做格式校验，原样传给接口。"""

    value: str

    def query_params(self) -> Dict[str, str]:
        return {"aid": self.value}


VideoId = Union[CanonicalCode, NumericId]


def parse_video_id(text: str) -> VideoId:
    """以 ``BV`` 开头（不区分大小写）视为BV号，其余一律视为AV号。"""
    if not text:
        raise InvalidArgument("必须提供BV号或AV号")
    if BV_PREFIX_PATTERN.match(text):
        return CanonicalCode(text)
    return NumericId(text)
