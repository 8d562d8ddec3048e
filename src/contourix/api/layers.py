# どこで: `src/contourix/api/layers.py`。
# 何を: Geometry に色・線幅を付けて Layer 化する公開ヘルパ L を提供する。

from __future__ import annotations

from typing import Sequence

from contourix.core.geometry import Geometry
from contourix.core.layer import ColorRGB, Layer
from contourix.core.site_id import caller_site_id


def _as_geometries(geometry_or_list: Geometry | Sequence[Geometry]) -> list[Geometry]:
    if isinstance(geometry_or_list, Geometry):
        return [geometry_or_list]
    if not isinstance(geometry_or_list, Sequence) or isinstance(geometry_or_list, str):
        raise TypeError(
            f"L は Geometry またはその列のみを受け付けます: {type(geometry_or_list)!r}"
        )
    bad = [type(g) for g in geometry_or_list if not isinstance(g, Geometry)]
    if bad:
        raise TypeError(f"L には Geometry だけを渡してください: {bad[0]!r}")
    if not geometry_or_list:
        raise ValueError("L に空の Geometry リストは渡せません")
    return list(geometry_or_list)


class LayerHelper:
    """`L(geometry, color=..., thickness=...)` で 1 要素の Layer リストを作る。

    複数の Geometry を渡すと concat して同じスタイルの 1 Layer にまとめる。
    site_id は L の呼び出し箇所から決まるため、毎フレーム同じ行で呼べば
    同じ Layer として扱われる。
    """

    def __call__(
        self,
        geometry_or_list: Geometry | Sequence[Geometry],
        *,
        color: ColorRGB | None = None,
        thickness: float | None = None,
        name: str | None = None,
    ) -> list[Layer]:
        """Layer を生成する。

        Parameters
        ----------
        geometry_or_list : Geometry or Sequence[Geometry]
            Layer 化する Geometry。
        color : tuple[float, float, float] or None, optional
            RGB（0..1）。None なら出力時の既定色。
        thickness : float or None, optional
            線幅。None なら出力時の既定線幅。
        name : str or None, optional
            Layer 名。

        Raises
        ------
        TypeError
            Geometry 以外が含まれる場合。
        ValueError
            thickness が 0 以下、または空の列が渡された場合。
        """
        if thickness is not None and thickness <= 0:
            raise ValueError("thickness は正の値である必要がある")

        geometry = Geometry.concat(*_as_geometries(geometry_or_list))
        layer = Layer(
            geometry=geometry,
            site_id=caller_site_id(skip=1),
            color=color,
            thickness=thickness,
            name=name,
        )
        return [layer]


L = LayerHelper()
"""Geometry を Layer 化する公開ヘルパ。"""

__all__ = ["L"]
