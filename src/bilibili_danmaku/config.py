"""客户端配置。"""
from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Optional

APP_DIR_NAME = "bilibili_danmaku"
CONFIG_FILENAME = "config.json"

SEARCH_ENDPOINT = "https://api.bilibili.com/x/web-interface/search/type"
PAGELIST_ENDPOINT = "https://api.bilibili.com/x/player/pagelist"
COMMENT_URL_TEMPLATE = "https://comment.bilibili.com/{cid}.xml"
DEFAULT_USER_AGENT = "Mozilla/5.0 (bilibili-danmaku)"
DEFAULT_TIMEOUT = 10.0


def _parse_timeout(value: object) -> float:
    if value is None:
        return DEFAULT_TIMEOUT
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"timeout必须是数字: {value!r}") from exc


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """请求相关的配置项。"""

    user_agent: str = DEFAULT_USER_AGENT
    referer: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    search_endpoint: str = SEARCH_ENDPOINT
    pagelist_endpoint: str = PAGELIST_ENDPOINT
    comment_url_template: str = COMMENT_URL_TEMPLATE

    def __post_init__(self) -> None:
        if not self.timeout > 0:
            raise ValueError(f"timeout必须大于0: {self.timeout}")

    def headers(self) -> Dict[str, str]:
        headers = {"User-Agent": self.user_agent}
        if self.referer:
            headers["Referer"] = self.referer
        return headers

    def comment_url(self, cid: int) -> str:
        return self.comment_url_template.format(cid=cid)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ClientConfig":
        return cls(
            user_agent=data.get("user_agent") or DEFAULT_USER_AGENT,
            referer=data.get("referer"),
            timeout=_parse_timeout(data.get("timeout")),
            search_endpoint=data.get("search_endpoint") or SEARCH_ENDPOINT,
            pagelist_endpoint=data.get("pagelist_endpoint") or PAGELIST_ENDPOINT,
            comment_url_template=data.get("comment_url_template") or COMMENT_URL_TEMPLATE,
        )


def _resolve_config_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_DIR_NAME
    return Path.home() / ".config" / APP_DIR_NAME


def default_config_path() -> Path:
    return _resolve_config_dir() / CONFIG_FILENAME


def load_config(path: Optional[Path] = None) -> ClientConfig:
    """读取JSON配置文件，文件不存在时返回默认配置。"""
    config_path = path or default_config_path()
    if not config_path.exists():
        return ClientConfig()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"配置文件不是有效的JSON: {config_path}") from exc
    if not isinstance(raw, dict):
        raise ValueError(f"配置文件内容必须是JSON对象: {config_path}")
    return ClientConfig.from_dict(raw)


def save_config(config: ClientConfig, path: Optional[Path] = None) -> Path:
    config_path = path or default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(config.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
    return config_path
