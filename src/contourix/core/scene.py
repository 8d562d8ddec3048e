"""
どこで: `src/contourix/core/scene.py`。
何を: draw(t) の戻り値（Geometry / Layer / それらのネスト列）を描画順の `list[Layer]` に平坦化する。
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeAlias

from contourix.core.geometry import Geometry
from contourix.core.layer import Layer

SceneItem: TypeAlias = Geometry | Layer | Sequence["SceneItem"] | None


def normalize_scene(scene: SceneItem) -> list[Layer]:
    """シーンを描画順の Layer 列にする。

    素の `Geometry` は ``site_id="implicit:{n}"``（n は出現順の 1 始まり連番）の
    Layer に包む。None は読み飛ばすので、draw(t) 内で罫線などを条件付きで
    省略できる。

    Raises
    ------
    TypeError
        Geometry/Layer/Sequence/None 以外が含まれる場合。
    """
    layers: list[Layer] = []
    # 深さ優先・左から順に取り出すため逆順で積む。
    stack: list[object] = [scene]
    n_implicit = 0
    while stack:
        item = stack.pop()
        if item is None:
            continue
        if isinstance(item, Layer):
            layers.append(item)
        elif isinstance(item, Geometry):
            n_implicit += 1
            layers.append(Layer(geometry=item, site_id=f"implicit:{n_implicit}"))
        elif isinstance(item, Sequence) and not isinstance(item, (str, bytes)):
            stack.extend(reversed(item))
        else:
            raise TypeError(f"シーンに含められない型: {type(item)!r}")
    return layers
