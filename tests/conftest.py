import sys
from pathlib import Path

import pytest

# 未安装时直接从src目录导入bilibili_danmaku
SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if SRC_PATH.exists():
    sys.path.insert(0, str(SRC_PATH))

from bilibili_danmaku.client import BiliDanmakuClient  # noqa: E402
from bilibili_danmaku.config import ClientConfig  # noqa: E402


@pytest.fixture
def client() -> BiliDanmakuClient:
    return BiliDanmakuClient(config=ClientConfig())
