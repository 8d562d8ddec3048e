"""
どこで: `src/contourix/core/primitives/mask_cells.py`。しきい値マスクのセル塗り分けプリミティブ。
何を: 輝度フィールドの各セルを `threshold_mask` で内外に分け、指定側のセルの外周とハッチ線を構築する。
なぜ: デュオトーン（内側/外側で色を変えるセル塗り）を線描で表すため。
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from contourix.core.brightness import threshold_mask
from contourix.core.meta import ParamMeta
from contourix.core.primitive_registry import primitive
from contourix.core.realized_geometry import RealizedGeometry

# 1 セルあたりのハッチ本数の上限。
MAX_HATCH_LINES = 32

mask_cells_meta = {
    "field": ParamMeta(kind="field"),
    "threshold": ParamMeta(kind="float", ui_min=0.0, ui_max=255.0),
    "inside": ParamMeta(kind="bool"),
    "hatch": ParamMeta(kind="int", ui_min=0, ui_max=MAX_HATCH_LINES),
    "cell_size": ParamMeta(kind="float", ui_min=0.0, ui_max=100.0),
    "offset": ParamMeta(kind="vec2", ui_min=-500.0, ui_max=500.0),
}

# 外周は左上から時計回りに閉じる 5 頂点。
_OUTLINE_UNIT = np.array(
    [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0], [0.0, 0.0]],
    dtype=np.float64,
)


@primitive(meta=mask_cells_meta)
def mask_cells(
    *,
    field: Sequence[Sequence[float]] = ((0.0, 0.0), (0.0, 0.0)),
    threshold: float = 128.0,
    inside: bool = True,
    hatch: int | float = 0,
    cell_size: float = 1.0,
    offset: tuple[float, float] = (0.0, 0.0),
) -> RealizedGeometry:
    """マスクの内側（または外側）にあるセルを線で描く。

    Parameters
    ----------
    field : array-like
        shape (H, W) のセル輝度。``field[row, col]`` がセル (row, col) の値。
    threshold : float
        ``value >= threshold`` のセルを内側とみなす。
    inside : bool
        True なら内側セル、False なら外側セルを描く。
    hatch : int | float
        セル 1 つあたりの水平ハッチ本数。0 なら外周のみ。
    cell_size : float
        セル 1 辺のキャンバス長。
    offset : tuple[float, float]
        盤面左上のキャンバス座標 (x, y)。

    Returns
    -------
    RealizedGeometry
        選ばれたセルの外周（行優先順、5 頂点の閉ポリライン）の後に、
        同じ順でハッチ線（セルごとに上から、2 頂点）が並ぶ。

    Notes
    -----
    NaN のセルは内側にも外側にも含めない。
    """
    arr = np.asarray(field, dtype=np.float64)
    if arr.ndim != 2:
        raise ValueError(f"mask_cells の field は 2 次元である必要がある: ndim={arr.ndim}")
    hatch_i = int(hatch)
    if hatch_i < 0 or hatch_i > MAX_HATCH_LINES:
        raise ValueError(f"mask_cells の hatch は 0..{MAX_HATCH_LINES} である必要がある: {hatch_i}")

    mask = threshold_mask(arr, threshold)
    selected = mask if bool(inside) else (~mask & ~np.isnan(arr))
    cells = np.argwhere(selected)
    k = int(cells.shape[0])
    if k == 0:
        return RealizedGeometry.empty()

    s = float(cell_size)
    ox, oy = float(offset[0]), float(offset[1])
    x0 = cells[:, 1].astype(np.float64) * s + ox
    y0 = cells[:, 0].astype(np.float64) * s + oy

    outlines = _OUTLINE_UNIT[None, :, :] * s
    outlines = outlines + np.stack([x0, y0], axis=1)[:, None, :]

    hatches = np.empty((k, hatch_i, 2, 2), dtype=np.float64)
    ys = np.arange(1, hatch_i + 1, dtype=np.float64) * (s / (hatch_i + 1))
    hatches[:, :, 0, 0] = x0[:, None]
    hatches[:, :, 1, 0] = x0[:, None] + s
    hatches[:, :, 0, 1] = y0[:, None] + ys[None, :]
    hatches[:, :, 1, 1] = hatches[:, :, 0, 1]

    n_outline_vertices = 5 * k
    coords = np.concatenate([outlines.reshape((-1, 2)), hatches.reshape((-1, 2))], axis=0)
    offsets = np.concatenate(
        [
            np.arange(0, n_outline_vertices + 1, 5),
            n_outline_vertices + np.arange(2, 2 * k * hatch_i + 1, 2),
        ]
    ).astype(np.int32)
    return RealizedGeometry(coords=coords.astype(np.float32), offsets=offsets)
