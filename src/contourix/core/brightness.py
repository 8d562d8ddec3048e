"""
どこで: `src/contourix/core/brightness.py`。
何を: カメラフレームをセル単位の平均輝度フィールドへ縮約し、しきい値マスクを作る。
なぜ: 等高線抽出とデュオトーン塗り分けが同じ輝度フィールド・同じ内外判定を共有するため。
"""

from __future__ import annotations

import math

import numpy as np


def brightness_grid(
    frame: np.ndarray,
    grid: int,
    *,
    mirror: bool = True,
    target_samples: int = 64,
) -> np.ndarray:
    """フレームを grid x grid セルに分割し、各セルの平均輝度を返す。

    Parameters
    ----------
    frame : np.ndarray
        shape (H, W, C) の画像（C >= 3、RGB 順）。alpha チャネルは無視する。
    grid : int
        1 辺あたりのセル数。
    mirror : bool, default True
        True なら水平反転（セルフィー表示）した画像として集計する。
    target_samples : int, default 64
        1 セルあたりのおおよそのサンプル画素数。セル内を間引いて読む。

    Returns
    -------
    np.ndarray
        float64 型 shape (grid, grid) の輝度フィールド。画素値は (r+g+b)/3。
        サンプルが 1 つも無いセルは 0。
    """
    img = np.asarray(frame)
    if img.ndim != 3 or img.shape[2] < 3:
        raise ValueError(f"frame は shape (H, W, C>=3) である必要がある: shape={img.shape}")
    grid_i = int(grid)
    if grid_i < 1:
        raise ValueError("grid は 1 以上である必要がある")
    if int(target_samples) < 1:
        raise ValueError("target_samples は 1 以上である必要がある")

    src_h, src_w = int(img.shape[0]), int(img.shape[1])
    luma = img[:, :, :3].astype(np.float64).sum(axis=2) / 3.0
    if mirror:
        luma = luma[:, ::-1]

    side = math.sqrt(float(target_samples))
    stride_x = max(1, int((src_w / grid_i) / side))
    stride_y = max(1, int((src_h / grid_i) / side))

    out = np.zeros((grid_i, grid_i), dtype=np.float64)
    for gy in range(grid_i):
        y0 = int(gy * src_h / grid_i)
        y1 = int((gy + 1) * src_h / grid_i)
        for gx in range(grid_i):
            x0 = int(gx * src_w / grid_i)
            x1 = int((gx + 1) * src_w / grid_i)
            samples = luma[y0:y1:stride_y, x0:x1:stride_x]
            if samples.size:
                out[gy, gx] = float(samples.mean())
    return out


def threshold_mask(field: np.ndarray, threshold: float) -> np.ndarray:
    """``field >= threshold`` の bool マスクを返す（等高線抽出と同じ内側判定）。"""
    arr = np.asarray(field, dtype=np.float64)
    return arr >= float(threshold)
