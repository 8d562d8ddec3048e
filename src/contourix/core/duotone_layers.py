"""
どこで: `src/contourix/core/duotone_layers.py`。
何を: 輝度フィールドのセルをしきい値で内側/外側に分け、それぞれ別色の `mask_cells` Layer にする。
なぜ: 等高線リングと同じ内外判定で、セル単位の 2 色フィルタを重ねるため。
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from contourix.core.geometry import FieldArg, Geometry
from contourix.core.layer import ColorRGB, Layer
from contourix.core.primitives import mask_cells as _primitive_mask_cells  # noqa: F401
from contourix.core.runtime_config import runtime_config


@dataclass(frozen=True, slots=True)
class DuotoneStyle:
    """内側/外側セルの描画設定。

    Parameters
    ----------
    inside_color, outside_color : tuple[float, float, float]
        内側（``value >= threshold``）・外側セルの RGB（0..1）。
    hatch : int
        セル 1 つあたりのハッチ本数。0 なら外周のみ。
    thickness : float
        線幅。
    cell_size : float
        セル 1 辺のキャンバス長。
    """

    inside_color: ColorRGB = (1.0, 0.62, 0.25)
    outside_color: ColorRGB = (0.22, 0.42, 0.85)
    hatch: int = 3
    thickness: float = 0.002
    cell_size: float = 1.0

    def __post_init__(self) -> None:
        if int(self.hatch) < 0:
            raise ValueError("hatch は 0 以上である必要がある")
        if float(self.thickness) <= 0:
            raise ValueError("thickness は正の値である必要がある")
        if float(self.cell_size) <= 0:
            raise ValueError("cell_size は正の値である必要がある")

    @classmethod
    def from_config(cls, *, cell_size: float = 1.0) -> "DuotoneStyle":
        """config.yaml の `duotone` セクションから生成する。"""
        d = runtime_config().duotone
        return cls(
            inside_color=d.inside_color,
            outside_color=d.outside_color,
            hatch=d.hatch,
            thickness=d.thickness,
            cell_size=float(cell_size),
        )


def duotone_layers(
    field: np.ndarray,
    threshold: float,
    style: DuotoneStyle | None = None,
) -> list[Layer]:
    """内側セル・外側セルの 2 枚の Layer を返す。

    Parameters
    ----------
    field : np.ndarray
        shape (H, W) のセル輝度。
    threshold : float
        内外判定のしきい値（`threshold_mask` と同じ ``>=``）。
    style : DuotoneStyle or None, optional
        None の場合は `DuotoneStyle.from_config()` を使う。

    Returns
    -------
    list[Layer]
        ``[内側, 外側]``。site_id は ``"duotone:inside"`` / ``"duotone:outside"``。
    """
    st = style if style is not None else DuotoneStyle.from_config()
    field_arg = field if isinstance(field, FieldArg) else FieldArg.from_array(field)

    layers: list[Layer] = []
    for side, color in (("inside", st.inside_color), ("outside", st.outside_color)):
        geometry = Geometry.create(
            "mask_cells",
            params={
                "field": field_arg,
                "threshold": float(threshold),
                "inside": side == "inside",
                "hatch": int(st.hatch),
                "cell_size": float(st.cell_size),
                "offset": (0.0, 0.0),
            },
        )
        layers.append(
            Layer(
                geometry=geometry,
                site_id=f"duotone:{side}",
                color=color,
                thickness=float(st.thickness),
                name=f"duotone {side}",
            )
        )
    return layers
