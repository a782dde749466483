"""命令行入口。"""
from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional

import typer

from .client import BiliDanmakuClient
from .config import ClientConfig, load_config
from .errors import DanmakuError
from .registry import invoke, metadata_dict

app = typer.Typer(add_completion=False, help="搜索B站视频并获取其弹幕")


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, ensure_ascii=False, indent=2))


def _client(ctx: typer.Context) -> BiliDanmakuClient:
    config: ClientConfig = ctx.obj
    return BiliDanmakuClient(config=config)


def _parse_param_pairs(pairs: List[str]) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"参数格式应为key=value: {pair}")
        params[key.strip()] = value
    return params


def _fail(exc: DanmakuError) -> NoReturn:
    typer.secho(str(exc), fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="JSON配置文件路径"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="请求超时时间(秒)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = load_config(config_path) if config_path else ClientConfig()
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc
    if timeout is not None:
        if timeout <= 0:
            raise typer.BadParameter("timeout必须大于0", param_hint="--timeout")
        config = replace(config, timeout=timeout)
    ctx.obj = config


@app.command(name="search")
def search_command(
    ctx: typer.Context,
    keyword: str = typer.Argument(..., help="搜索关键词"),
    page: int = typer.Option(1, "--page", "-p", help="页码"),
) -> None:
    """搜索视频。"""
    try:
        videos = _client(ctx).search_videos(keyword, page=page)
    except DanmakuError as exc:
        _fail(exc)
    _echo_json([v.to_dict() for v in videos])


@app.command(name="pages")
def pages_command(
    ctx: typer.Context,
    video_id: str = typer.Argument(..., help="BV号或AV号"),
) -> None:
    """获取视频的CID列表。"""
    try:
        segments = _client(ctx).resolve_segments(video_id)
    except DanmakuError as exc:
        _fail(exc)
    _echo_json([s.to_dict() for s in segments])


@app.command(name="comments")
def comments_command(
    ctx: typer.Context,
    cid: int = typer.Argument(..., help="分P的CID"),
) -> None:
    """获取弹幕，按出现时间排序。"""
    try:
        comments = _client(ctx).fetch_comments(cid)
    except DanmakuError as exc:
        _fail(exc)
    _echo_json([c.to_dict() for c in comments])


@app.command(name="invoke")
def invoke_command(
    ctx: typer.Context,
    module_id: str = typer.Argument(..., help="模块ID，如searchVideo"),
    param: List[str] = typer.Option([], "--param", "-p", help="模块参数，格式key=value，可重复"),
) -> None:
    """按宿主模块ID调用功能。"""
    params = _parse_param_pairs(param)
    try:
        result = invoke(_client(ctx), module_id, params)
    except DanmakuError as exc:
        _fail(exc)
    _echo_json(result)


@app.command(name="modules")
def modules_command() -> None:
    """输出插件元数据。"""
    _echo_json(metadata_dict())


def main() -> None:
    app()


if __name__ == "__main__":
    main()
