"""
どこで: `src/contourix/core/layer.py`。
何を: Geometry に描画スタイル（RGB 色・線幅）を付けた Layer と、欠損スタイルの解決を定義する。
なぜ: 等高線リングごとに色と線幅を変えつつ、罫線など素の Geometry には既定スタイルを当てるため。
"""

from __future__ import annotations

from dataclasses import dataclass
from math import isfinite

from contourix.core.geometry import Geometry

ColorRGB = tuple[float, float, float]


def _check_color(color: ColorRGB, *, label: str) -> ColorRGB:
    if len(color) != 3:
        raise ValueError(f"{label} は (r, g, b) の 3 要素である必要がある: {color!r}")
    rgb = (float(color[0]), float(color[1]), float(color[2]))
    if not all(isfinite(v) for v in rgb):
        raise ValueError(f"{label} に非有限値が含まれている: {color!r}")
    return rgb


def _check_thickness(thickness: float, *, label: str) -> float:
    value = float(thickness)
    if not isfinite(value) or value <= 0:
        raise ValueError(f"{label} は正の値である必要がある: {thickness!r}")
    return value


@dataclass(frozen=True, slots=True)
class Layer:
    """シーンの 1 要素。

    Attributes
    ----------
    geometry : Geometry
        描画する線のレシピ。
    site_id : str
        フレームをまたいで同じ Layer を指す識別子（例: ``"contour:0"``）。
    color : tuple[float, float, float] or None
        RGB（0..1）。None なら既定色。
    thickness : float or None
        線幅（キャンバス短辺の半分を 1 とする単位）。None なら既定線幅。
    name : str or None
        表示用の名前。
    """

    geometry: Geometry
    site_id: str
    color: ColorRGB | None = None
    thickness: float | None = None
    name: str | None = None


@dataclass(frozen=True, slots=True)
class LayerStyleDefaults:
    """Layer の欠損スタイルを埋める既定値。"""

    color: ColorRGB
    thickness: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "color", _check_color(self.color, label="既定色"))
        object.__setattr__(
            self, "thickness", _check_thickness(self.thickness, label="既定線幅")
        )


@dataclass(frozen=True, slots=True)
class ResolvedLayer:
    layer: Layer
    color: ColorRGB
    thickness: float


def resolve_layer_style(layer: Layer, defaults: LayerStyleDefaults) -> ResolvedLayer:
    """Layer の None スタイルを既定値で埋めて返す。

    Raises
    ------
    ValueError
        Layer の線幅が正でない、または色が 3 要素の有限値でない場合。
    """
    if layer.thickness is None:
        thickness = defaults.thickness
    else:
        thickness = _check_thickness(layer.thickness, label=f"Layer {layer.site_id} の線幅")

    if layer.color is None:
        color = defaults.color
    else:
        color = _check_color(layer.color, label=f"Layer {layer.site_id} の色")

    return ResolvedLayer(layer=layer, color=color, thickness=thickness)
