"""
どこで: `src/contourix/core/primitives/grid_lines.py`。セル盤面の罫線プリミティブ。
何を: rows x cols セル盤面の内側の縦線 (cols-1) 本と横線 (rows-1) 本を線分列として構築する。
なぜ: タイル状に分割したカメラ画像の上に、薄いガイド線を重ねるため。
"""

from __future__ import annotations

import numpy as np

from contourix.core.meta import ParamMeta
from contourix.core.primitive_registry import primitive
from contourix.core.realized_geometry import RealizedGeometry

grid_lines_meta = {
    "rows": ParamMeta(kind="int", ui_min=1, ui_max=64),
    "cols": ParamMeta(kind="int", ui_min=1, ui_max=64),
    "cell_size": ParamMeta(kind="float", ui_min=0.0, ui_max=100.0),
    "offset": ParamMeta(kind="vec2", ui_min=-500.0, ui_max=500.0),
}


@primitive(meta=grid_lines_meta)
def grid_lines(
    *,
    rows: int | float = 12,
    cols: int | float = 12,
    cell_size: float = 1.0,
    offset: tuple[float, float] = (0.0, 0.0),
) -> RealizedGeometry:
    """セル境界の内側罫線を生成する。

    Parameters
    ----------
    rows, cols : int | float
        セルの行数・列数。
    cell_size : float
        セル 1 辺のキャンバス長。
    offset : tuple[float, float]
        盤面左上のキャンバス座標 (x, y)。

    Returns
    -------
    RealizedGeometry
        縦線（左から）→ 横線（上から）の順に並ぶ 2 頂点ポリライン列。
    """
    rows_i = int(rows)
    cols_i = int(cols)
    if rows_i < 1 or cols_i < 1:
        raise ValueError("grid_lines の rows/cols は 1 以上である必要がある")

    n_vertical = cols_i - 1
    n_horizontal = rows_i - 1
    if n_vertical == 0 and n_horizontal == 0:
        return RealizedGeometry.empty()

    s = float(cell_size)
    width = cols_i * s
    height = rows_i * s

    lines = np.empty((n_vertical + n_horizontal, 2, 2), dtype=np.float64)

    xs = np.arange(1, cols_i, dtype=np.float64) * s
    vertical = lines[:n_vertical]
    vertical[:, 0, 0] = xs
    vertical[:, 1, 0] = xs
    vertical[:, 0, 1] = 0.0
    vertical[:, 1, 1] = height

    ys = np.arange(1, rows_i, dtype=np.float64) * s
    horizontal = lines[n_vertical:]
    horizontal[:, 0, 0] = 0.0
    horizontal[:, 1, 0] = width
    horizontal[:, 0, 1] = ys
    horizontal[:, 1, 1] = ys

    ox, oy = float(offset[0]), float(offset[1])
    lines[:, :, 0] += ox
    lines[:, :, 1] += oy
    return RealizedGeometry.from_segments(lines)
