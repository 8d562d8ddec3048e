# どこで: `src/contourix/api/primitives.py`。
# 何を: 登録済み primitive の Geometry ノードを作る公開名前空間 G を提供する。

from __future__ import annotations

from typing import Any, Callable

from contourix.core.geometry import Geometry
from contourix.core.primitive_registry import primitive_registry

# 組み込み primitive（contour / grid_lines）をレジストリへ登録させる。
from contourix.core import primitives as _builtin_primitives  # noqa: F401


class PrimitiveNamespace:
    """`G.<primitive名>(**params)` で Geometry を返す名前空間。

    省略した引数はシグネチャ既定値で埋めてから署名するので、
    ``G.grid_lines()`` と ``G.grid_lines(rows=12, cols=12)`` は同じ id になる。
    """

    def __getattr__(self, name: str) -> Callable[..., Geometry]:
        if name.startswith("_") or name not in primitive_registry:
            raise AttributeError(f"未登録の primitive: {name!r}")

        def factory(**params: Any) -> Geometry:
            resolved = primitive_registry.get_defaults(name)
            resolved.update(params)
            return Geometry.create(op=name, params=resolved)

        factory.__name__ = name
        return factory

    def __dir__(self) -> list[str]:
        return list(primitive_registry)


G = PrimitiveNamespace()
"""primitive Geometry ノードを生成する公開名前空間。"""

__all__ = ["G"]
