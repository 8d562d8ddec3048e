# src/contourix/core/primitive_registry.py
# primitive 名 -> RealizedGeometry 生成関数のレジストリと `@primitive` デコレータ。

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

from contourix.core.meta import ParamMeta
from contourix.core.realized_geometry import RealizedGeometry

PrimitiveFunc = Callable[[tuple[tuple[str, Any], ...]], RealizedGeometry]

_BUILTIN_MODULE_PREFIX = "contourix.core.primitives."


@dataclass(frozen=True, slots=True)
class PrimitiveSpec:
    """登録済み primitive 1 件分の情報。

    Parameters
    ----------
    name : str
        op 名（関数名）。
    func : PrimitiveFunc
        正規化済み args（Geometry.args）を受け取る生成関数。
    meta : dict[str, ParamMeta]
        引数ごとのメタ情報。meta 無しで登録したユーザー primitive では空。
    defaults : dict[str, Any]
        meta を持つ引数のシグネチャ既定値。
    param_order : tuple[str, ...]
        meta を持つ引数のシグネチャ順。
    """

    name: str
    func: PrimitiveFunc
    meta: dict[str, ParamMeta] = field(default_factory=dict)
    defaults: dict[str, Any] = field(default_factory=dict)
    param_order: tuple[str, ...] = ()


class PrimitiveRegistry:
    """op 名から PrimitiveSpec を引くレジストリ。"""

    def __init__(self) -> None:
        self._specs: dict[str, PrimitiveSpec] = {}

    def register(self, spec: PrimitiveSpec, *, overwrite: bool = True) -> None:
        if not overwrite and spec.name in self._specs:
            raise ValueError(f"primitive '{spec.name}' は既に登録されている")
        self._specs[spec.name] = spec

    def spec(self, name: str) -> PrimitiveSpec:
        """op 名の PrimitiveSpec を返す。

        Raises
        ------
        KeyError
            未登録の op 名が指定された場合。
        """
        try:
            return self._specs[name]
        except KeyError:
            raise KeyError(f"未登録の primitive: {name!r}") from None

    def get(self, name: str) -> PrimitiveFunc:
        return self.spec(name).func

    def __getitem__(self, name: str) -> PrimitiveFunc:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._specs))

    def get_meta(self, name: str) -> dict[str, ParamMeta]:
        return dict(self.spec(name).meta)

    def get_defaults(self, name: str) -> dict[str, Any]:
        return dict(self.spec(name).defaults)

    def get_param_order(self, name: str) -> tuple[str, ...]:
        return self.spec(name).param_order


primitive_registry = PrimitiveRegistry()
"""グローバルな primitive レジストリインスタンス。"""


def _defaults_from_signature(
    f: Callable[..., RealizedGeometry],
    meta: dict[str, ParamMeta],
) -> tuple[dict[str, Any], tuple[str, ...]]:
    """meta を持つ引数の (既定値辞書, シグネチャ順) を返す。"""
    params = inspect.signature(f).parameters
    for arg in meta:
        if arg not in params:
            raise ValueError(
                f"primitive '{f.__name__}' の meta 引数がシグネチャに存在しない: {arg!r}"
            )

    defaults: dict[str, Any] = {}
    order: list[str] = []
    for name, param in params.items():
        if name not in meta:
            continue
        if param.default is inspect.Parameter.empty:
            raise ValueError(f"primitive '{f.__name__}' の meta 引数は default 必須: {name!r}")
        if param.default is None:
            raise ValueError(
                f"primitive '{f.__name__}' の meta 引数 default に None は使えない: {name!r}"
            )
        defaults[name] = param.default
        order.append(name)
    return defaults, tuple(order)


def primitive(
    func: Callable[..., RealizedGeometry] | None = None,
    *,
    overwrite: bool = True,
    meta: dict[str, ParamMeta] | None = None,
):
    """関数を primitive としてグローバルレジストリへ登録するデコレータ。

    関数名がそのまま op 名になる。`contourix.core.primitives` 配下の
    組み込み primitive は meta 必須。

    Examples
    --------
    @primitive(meta={"threshold": ParamMeta(kind="float", ui_min=0, ui_max=255)})
    def contour(*, field=((0.0, 0.0), (0.0, 0.0)), threshold=128.0):
        ...

    @primitive
    def my_segment(*, length=1.0):
        ...
    """

    def decorator(f: Callable[..., RealizedGeometry]) -> Callable[..., RealizedGeometry]:
        if meta is None and str(f.__module__).startswith(_BUILTIN_MODULE_PREFIX):
            raise ValueError(f"組み込み primitive は meta 必須: {f.__module__}.{f.__name__}")

        def from_args(args: tuple[tuple[str, Any], ...]) -> RealizedGeometry:
            return f(**dict(args))

        if meta is None:
            spec = PrimitiveSpec(name=f.__name__, func=from_args)
        else:
            defaults, order = _defaults_from_signature(f, meta)
            spec = PrimitiveSpec(
                name=f.__name__,
                func=from_args,
                meta=dict(meta),
                defaults=defaults,
                param_order=order,
            )
        primitive_registry.register(spec, overwrite=overwrite)
        return f

    if func is None:
        return decorator
    return decorator(func)
