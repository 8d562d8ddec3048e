"""
どこで: `src/contourix/core/contour_layers.py`。
何を: 1 つのしきい値から段階的に下げたしきい値で等高線を重ね、リングごとに色・線幅を割り当てた Layer 列を作る。
なぜ: 外側を寒色・細線、内側（深い層）を暖色・太線にする多重リング表現を、設定値だけで組み立てられるようにするため。
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from contourix.core.geometry import FieldArg, Geometry
from contourix.core.layer import ColorRGB, Layer
from contourix.core.primitives import contour as _primitive_contour  # noqa: F401
from contourix.core.runtime_config import runtime_config
from contourix.core.style import hsv_to_rgb01


@dataclass(frozen=True, slots=True)
class ContourStyle:
    """多重リングの描画設定（フレームごとに渡す不変値）。

    Parameters
    ----------
    layers : int
        リング数。k=0 が最も外側（元のしきい値）。
    step : float
        1 層深くなるごとに下げるしきい値幅。
    min_thickness, max_thickness : float
        最外層・最内層の線幅。
    hue_outer, hue_inner : float
        最外層・最内層の色相 [deg]。
    saturation, brightness : float
        リング共通の彩度・明度（0..1）。
    cell_size : float
        格子 1 単位あたりのキャンバス長。
    """

    layers: int = 5
    step: float = 14.0
    min_thickness: float = 0.00625
    max_thickness: float = 0.0208
    hue_outer: float = 210.0
    hue_inner: float = 20.0
    saturation: float = 0.8
    brightness: float = 0.95
    cell_size: float = 1.0

    def __post_init__(self) -> None:
        if int(self.layers) < 1:
            raise ValueError("layers は 1 以上である必要がある")
        if float(self.step) < 0:
            raise ValueError("step は 0 以上である必要がある")
        if float(self.min_thickness) <= 0 or float(self.max_thickness) <= 0:
            raise ValueError("thickness は正の値である必要がある")
        if float(self.cell_size) <= 0:
            raise ValueError("cell_size は正の値である必要がある")

    @classmethod
    def from_config(cls, *, cell_size: float = 1.0) -> "ContourStyle":
        """config.yaml の `contours` セクションから生成する。"""
        d = runtime_config().contours
        return cls(
            layers=d.layers,
            step=d.step,
            min_thickness=d.min_thickness,
            max_thickness=d.max_thickness,
            hue_outer=d.hue_outer,
            hue_inner=d.hue_inner,
            saturation=d.saturation,
            brightness=d.brightness,
            cell_size=float(cell_size),
        )


def _depth(k: int, style: ContourStyle) -> float:
    # 1 層だけのときは最外層扱い。
    if style.layers <= 1:
        return 0.0
    return float(k) / float(style.layers - 1)


def layer_threshold(threshold: float, k: int, style: ContourStyle) -> float:
    """k 層目のしきい値 ``threshold - k * step`` を返す。"""
    return float(threshold) - float(k) * float(style.step)


def layer_color(k: int, style: ContourStyle) -> ColorRGB:
    """k 層目の RGB を返す（色相を外側→内側へ線形補間）。"""
    u = _depth(k, style)
    hue = style.hue_outer + (style.hue_inner - style.hue_outer) * u
    return hsv_to_rgb01(hue, style.saturation, style.brightness)


def layer_thickness(k: int, style: ContourStyle) -> float:
    """k 層目の線幅を返す（外側→内側へ線形補間）。"""
    u = _depth(k, style)
    return float(style.min_thickness + (style.max_thickness - style.min_thickness) * u)


def contour_layers(
    field: np.ndarray,
    threshold: float,
    style: ContourStyle | None = None,
) -> list[Layer]:
    """輝度フィールドから多重リングの Layer 列を生成する。

    Parameters
    ----------
    field : np.ndarray
        shape (H, W) の輝度フィールド（有限値）。
    threshold : float
        最外層のしきい値。
    style : ContourStyle or None, optional
        None の場合は `ContourStyle.from_config()` を使う。

    Returns
    -------
    list[Layer]
        外側（k=0）から内側の順の Layer 列。site_id は ``"contour:{k}"``。

    Raises
    ------
    ValueError
        field が 2 次元でない場合。NaN/inf を含むフィールドは許可し、該当線分だけ落とす。
    """
    st = style if style is not None else ContourStyle.from_config()
    field_arg = field if isinstance(field, FieldArg) else FieldArg.from_array(field)

    layers: list[Layer] = []
    for k in range(int(st.layers)):
        geometry = Geometry.create(
            "contour",
            params={
                "field": field_arg,
                "threshold": layer_threshold(threshold, k, st),
                "cell_size": float(st.cell_size),
                "offset": (0.0, 0.0),
            },
        )
        layers.append(
            Layer(
                geometry=geometry,
                site_id=f"contour:{k}",
                color=layer_color(k, st),
                thickness=layer_thickness(k, st),
                name=f"contour {k}",
            )
        )
    return layers
