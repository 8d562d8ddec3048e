"""
どこで: `sketch/duotone_contours.py`。
何を: 合成した輝度フィールドからデュオトーンのセル塗りと等高線リングを作り、罫線を重ねて 1 フレームを SVG に保存する。
なぜ: カメラ無しで等高線フィルタの見た目を確認するため。
"""

from __future__ import annotations

import logging
import math

import numpy as np

from contourix import (
    ContourStyle,
    DuotoneStyle,
    Export,
    G,
    L,
    brightness_grid,
    contour_layers,
    duotone_layers,
)
from contourix.export.svg import default_svg_output_path

CANVAS_SIZE = 480
CUBE_COUNT = 12
THRESHOLD = 128


def synthetic_frame(t: float, size: int = CANVAS_SIZE) -> np.ndarray:
    """中心が時間とともに回る明るいブロブの RGB フレームを返す。"""
    ys, xs = np.mgrid[0:size, 0:size].astype(np.float64) / size
    cx = 0.5 + 0.2 * math.cos(t)
    cy = 0.5 + 0.2 * math.sin(t)
    blob = np.exp(-((xs - cx) ** 2 + (ys - cy) ** 2) / 0.05)
    luma = (40.0 + 200.0 * blob).clip(0, 255).astype(np.uint8)
    return np.repeat(luma[:, :, None], 3, axis=2)


def draw(t: float):
    cell_size = CANVAS_SIZE / CUBE_COUNT
    field = brightness_grid(synthetic_frame(t), CUBE_COUNT)
    grid = G.grid_lines(rows=CUBE_COUNT, cols=CUBE_COUNT, cell_size=cell_size)
    # 描画順: セル塗り分け -> 等高線リング -> 罫線。
    duotone = duotone_layers(field, THRESHOLD, DuotoneStyle.from_config(cell_size=cell_size))
    rings = contour_layers(field, THRESHOLD, ContourStyle.from_config(cell_size=cell_size))
    return duotone, rings, L(grid, color=(0.8, 0.8, 0.8), thickness=0.002)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    out = default_svg_output_path("duotone_contours")
    Export(
        draw,
        0.0,
        "svg",
        out,
        canvas_size=(CANVAS_SIZE, CANVAS_SIZE),
        background_color=(0.08, 0.08, 0.08),
    )
    logging.getLogger(__name__).info("saved: %s", out)
