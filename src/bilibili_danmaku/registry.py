"""宿主插件的元数据注册表与按名称调用。

宿主通过模块ID（``searchVideo``、``getCidList``、``getComments``）调用功能，
参数按照这里声明的类型与默认值进行整理后再交给 :class:`BiliDanmakuClient`。
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .client import BiliDanmakuClient
from .errors import InvalidArgument


@dataclass(frozen=True, slots=True)
class ParamSpec:
    """模块参数声明。"""

    id: str
    name: str
    type: str
    required: bool = False
    default: Any = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "default": self.default,
        }


@dataclass(frozen=True, slots=True)
class ModuleSpec:
    """宿主可调用的模块。"""

    id: str
    title: str
    function_name: str
    type: str
    params: Tuple[ParamSpec, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "functionName": self.function_name,
            "type": self.type,
            "params": [p.to_dict() for p in self.params],
        }


@dataclass(frozen=True, slots=True)
class WidgetMetadata:
    id: str
    title: str
    version: str
    description: str
    author: str
    required_version: str
    modules: Tuple[ModuleSpec, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "version": self.version,
            "description": self.description,
            "author": self.author,
            "requiredVersion": self.required_version,
            "globalParams": [],
            "modules": [m.to_dict() for m in self.modules],
        }


WIDGET_METADATA = WidgetMetadata(
    id="forward.biliDanmu",
    title="bilibiliDanmu",
    version="1.0.0",
    description="搜索B站视频并获取其弹幕",
    author="Avalon",
    required_version="1.0.0",
    modules=(
        ModuleSpec(
            id="searchVideo",
            title="搜索视频",
            function_name="searchVideo",
            type="search",
            params=(
                ParamSpec(id="keyword", name="关键词", type="string", required=True, default=""),
                ParamSpec(id="page", name="页码", type="number", required=False, default=1),
            ),
        ),
        ModuleSpec(
            id="getCidList",
            title="获取CID列表",
            function_name="getCidList",
            type="getDetail",
            params=(ParamSpec(id="bvId", name="BV号或AV号", type="string", required=True, default=""),),
        ),
        ModuleSpec(
            id="getComments",
            title="获取弹幕",
            function_name="getComments",
            type="getComments",
            params=(ParamSpec(id="cid", name="CID", type="number", required=True, default=0),),
        ),
    ),
)


def metadata_dict() -> dict:
    return WIDGET_METADATA.to_dict()


def find_module(module_id: str) -> ModuleSpec:
    for module in WIDGET_METADATA.modules:
        if module.id == module_id:
            return module
    raise InvalidArgument(f"未知模块: {module_id}")


def _coerce(param: ParamSpec, value: Any) -> Any:
    if param.type == "number":
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise InvalidArgument(f"参数{param.id}必须是数字: {value!r}") from exc
    return "" if value is None else str(value)


def coerce_params(module: ModuleSpec, raw: Mapping[str, Any]) -> Dict[str, Any]:
    """按模块声明补全默认值并转换类型。

    必填参数缺失时抛出 :class:`InvalidArgument`；空值交由对应功能自行判断。
    """
    params: Dict[str, Any] = {}
    for param in module.params:
        if param.id in raw and raw[param.id] is not None:
            params[param.id] = _coerce(param, raw[param.id])
        elif param.required:
            raise InvalidArgument(f"缺少必填参数: {param.id}")
        else:
            params[param.id] = param.default
    return params


def _search_video(client: BiliDanmakuClient, params: Dict[str, Any]) -> List[Any]:
    return client.search_videos(params["keyword"], page=params["page"])


def _get_cid_list(client: BiliDanmakuClient, params: Dict[str, Any]) -> List[Any]:
    return client.resolve_segments(params["bvId"])


def _get_comments(client: BiliDanmakuClient, params: Dict[str, Any]) -> List[Any]:
    return client.fetch_comments(params["cid"])


HANDLERS: Dict[str, Callable[[BiliDanmakuClient, Dict[str, Any]], List[Any]]] = {
    "searchVideo": _search_video,
    "getCidList": _get_cid_list,
    "getComments": _get_comments,
}


def invoke(client: BiliDanmakuClient, module_id: str, raw_params: Optional[Mapping[str, Any]] = None) -> List[dict]:
    """按模块ID调用功能，返回宿主使用的字典列表。"""
    module = find_module(module_id)
    params = coerce_params(module, raw_params or {})
    records = HANDLERS[module.function_name](client, params)
    return [record.to_dict() for record in records]
