"""
どこで: `src/contourix/core/primitives/contour.py`。等高線プリミティブの実体生成。
何を: 輝度フィールドとしきい値から marching squares の線分を取り出し、キャンバス座標の 2 点ポリライン列にする。
なぜ: 等高線をシーン上の Geometry として扱い、Layer の色・線幅や realize キャッシュに乗せるため。
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from contourix.core.contours import extract_contours
from contourix.core.meta import ParamMeta
from contourix.core.primitive_registry import primitive
from contourix.core.realized_geometry import RealizedGeometry

contour_meta = {
    "field": ParamMeta(kind="field"),
    "threshold": ParamMeta(kind="float", ui_min=0.0, ui_max=255.0),
    "cell_size": ParamMeta(kind="float", ui_min=0.0, ui_max=100.0),
    "offset": ParamMeta(kind="vec2", ui_min=-500.0, ui_max=500.0),
}


@primitive(meta=contour_meta)
def contour(
    *,
    field: Sequence[Sequence[float]] = ((0.0, 0.0), (0.0, 0.0)),
    threshold: float = 128.0,
    cell_size: float = 1.0,
    offset: tuple[float, float] = (0.0, 0.0),
) -> RealizedGeometry:
    """フィールドの等値線を線分ポリライン列として生成する。

    Parameters
    ----------
    field : Sequence[Sequence[float]]
        行優先の輝度フィールド ``field[row][col]``。
    threshold : float
        等値線の値。
    cell_size : float
        格子 1 単位あたりのキャンバス長。
    offset : tuple[float, float]
        格子原点 (row=0, col=0) のキャンバス座標 (x, y)。

    Returns
    -------
    RealizedGeometry
        各線分が 2 頂点ポリラインになった実体ジオメトリ。
        x は列方向、y は行方向（下向き）に対応する。
    """
    try:
        s = float(cell_size)
    except (TypeError, ValueError) as exc:
        raise ValueError("contour の cell_size は float である必要がある") from exc
    try:
        ox, oy = (float(v) for v in offset)
    except (TypeError, ValueError) as exc:
        raise ValueError("contour の offset は長さ 2 のシーケンスである必要がある") from exc

    segments = extract_contours(np.asarray(field, dtype=np.float64), float(threshold))
    if segments.shape[0] == 0:
        return RealizedGeometry.empty()

    # (row, col) -> (x, y)
    xy = segments[:, :, ::-1] * s
    xy[:, :, 0] += ox
    xy[:, :, 1] += oy
    return RealizedGeometry.from_segments(xy)
