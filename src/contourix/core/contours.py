"""
どこで: `src/contourix/core/contours.py`。
何を: スカラーフィールド（セルごとの輝度）からしきい値の等値線を線分列として取り出す（marching squares）。
なぜ: webcam フィルタの等高線リングを、状態を持たない純関数として毎フレーム計算できるようにするため。
"""

from __future__ import annotations

import logging

import numpy as np
from numba import njit  # type: ignore[import-untyped]

_logger = logging.getLogger(__name__)

INTERP_EPS = 1e-6
"""辺の両端値の差がこれ未満なら補間をやめて中点を使う。"""

EDGE_TOP = 0
EDGE_RIGHT = 1
EDGE_BOTTOM = 2
EDGE_LEFT = 3

_T, _R, _B, _L = EDGE_TOP, EDGE_RIGHT, EDGE_BOTTOM, EDGE_LEFT

# case index -> 最大 2 本の線分 (edge_a, edge_b, edge_c, edge_d)。-1 は線分なし。
# 5 と 10（saddle）は平均値で判定せず固定の組み合わせで結ぶ。
CASE_TABLE = np.array(
    [
        [-1, -1, -1, -1],  # 0: 全て外
        [_L, _B, -1, -1],  # 1: BL
        [_B, _R, -1, -1],  # 2: BR
        [_L, _R, -1, -1],  # 3: BL, BR
        [_T, _R, -1, -1],  # 4: TR
        [_T, _L, _R, _B],  # 5: TR, BL
        [_T, _B, -1, -1],  # 6: TR, BR
        [_T, _L, -1, -1],  # 7: TL 以外
        [_L, _T, -1, -1],  # 8: TL
        [_B, _T, -1, -1],  # 9: TL, BL
        [_L, _B, _T, _R],  # 10: TL, BR
        [_R, _T, -1, -1],  # 11: TR 以外
        [_R, _L, -1, -1],  # 12: TL, TR
        [_R, _B, -1, -1],  # 13: BR 以外
        [_B, _L, -1, -1],  # 14: BL 以外
        [-1, -1, -1, -1],  # 15: 全て内
    ],
    dtype=np.int64,
)
CASE_TABLE.setflags(write=False)


def case_index(tl: float, tr: float, br: float, bl: float, threshold: float) -> int:
    """4 隅の値から CellCase（0..15）を返す。

    各隅は ``value >= threshold`` なら内側（1）。ビットは TL, TR, BR, BL の順で
    TL が最上位ビットになる。NaN は常に外側として扱われる。
    """
    t = float(threshold)
    b_tl = 1 if float(tl) >= t else 0
    b_tr = 1 if float(tr) >= t else 0
    b_br = 1 if float(br) >= t else 0
    b_bl = 1 if float(bl) >= t else 0
    return (b_tl << 3) | (b_tr << 2) | (b_br << 1) | b_bl


@njit(cache=True)  # type: ignore[misc]
def _crossing_fraction(a: float, b: float, threshold: float) -> float:
    denom = b - a
    if abs(denom) < INTERP_EPS:
        return 0.5
    return (threshold - a) / denom


# NaN の比較結果（常に False）に依存するため fastmath は付けない。
@njit(cache=True)  # type: ignore[misc]
def _marching_squares_kernel(
    field: np.ndarray,
    threshold: float,
    table: np.ndarray,
    out: np.ndarray,
) -> int:
    """全セルを走査して線分を out に書き込み、本数を返す。"""
    h = field.shape[0]
    w = field.shape[1]
    # セル間で使い回す。CASE_TABLE は当該セルで計算済みの辺しか参照しないので前セルの値は読まれない。
    crossings = np.zeros((4, 2), dtype=np.float64)
    n = 0

    for r in range(h - 1):
        for c in range(w - 1):
            v_tl = field[r, c]
            v_tr = field[r, c + 1]
            v_br = field[r + 1, c + 1]
            v_bl = field[r + 1, c]

            b_tl = 1 if v_tl >= threshold else 0
            b_tr = 1 if v_tr >= threshold else 0
            b_br = 1 if v_br >= threshold else 0
            b_bl = 1 if v_bl >= threshold else 0

            idx = (b_tl << 3) | (b_tr << 2) | (b_br << 1) | b_bl
            if idx == 0 or idx == 15:
                continue

            # 交差点は分類が異なる辺にだけ求める（table はそれ以外の辺を参照しない）。
            if b_tl != b_tr:
                f = _crossing_fraction(v_tl, v_tr, threshold)
                crossings[EDGE_TOP, 0] = r
                crossings[EDGE_TOP, 1] = c + f
            if b_tr != b_br:
                f = _crossing_fraction(v_tr, v_br, threshold)
                crossings[EDGE_RIGHT, 0] = r + f
                crossings[EDGE_RIGHT, 1] = c + 1
            if b_bl != b_br:
                f = _crossing_fraction(v_bl, v_br, threshold)
                crossings[EDGE_BOTTOM, 0] = r + 1
                crossings[EDGE_BOTTOM, 1] = c + f
            if b_tl != b_bl:
                f = _crossing_fraction(v_tl, v_bl, threshold)
                crossings[EDGE_LEFT, 0] = r + f
                crossings[EDGE_LEFT, 1] = c

            for p in range(0, 4, 2):
                ea = table[idx, p]
                eb = table[idx, p + 1]
                if ea < 0:
                    break
                out[n, 0, 0] = crossings[ea, 0]
                out[n, 0, 1] = crossings[ea, 1]
                out[n, 1, 0] = crossings[eb, 0]
                out[n, 1, 1] = crossings[eb, 1]
                n += 1

    return n


def _empty_segments() -> np.ndarray:
    return np.zeros((0, 2, 2), dtype=np.float64)


def extract_contours(field: np.ndarray, threshold: float) -> np.ndarray:
    """スカラーフィールドからしきい値の等値線を線分列として取り出す。

    Parameters
    ----------
    field : np.ndarray
        shape (H, W) の行優先スカラーフィールド。``field[row, col]``。
        入力は変更しない。
    threshold : float
        等値線の値。``value >= threshold`` の格子点を内側とみなす。

    Returns
    -------
    np.ndarray
        float64 型 shape (N, 2, 2) の線分配列。各線分は 2 点 ``(row, col)``
        （格子単位の小数座標）。セルは行優先順、セル内は case 表の順に並ぶ。

    Raises
    ------
    ValueError
        要素を持つ field が 2 次元でない場合。

    Notes
    -----
    - 要素が 0 個、または H < 2 か W < 2 のときはセルが無いので空配列を返す。
    - セルをまたいだ線分の連結（閉ポリライン化）は行わない。
    - 非有限値を含むセルからは非有限座標が生じ得るが、それらの線分は捨てる。
    """
    arr = np.asarray(field, dtype=np.float64)
    if arr.size == 0:
        return _empty_segments()
    if arr.ndim != 2:
        raise ValueError(f"field は 2 次元配列である必要がある: ndim={arr.ndim}")

    h, w = arr.shape
    if h < 2 or w < 2:
        return _empty_segments()

    arr = np.ascontiguousarray(arr)
    out = np.empty((2 * (h - 1) * (w - 1), 2, 2), dtype=np.float64)
    n = int(_marching_squares_kernel(arr, float(threshold), CASE_TABLE, out))

    segments = out[:n]
    finite = np.isfinite(segments).all(axis=(1, 2))
    if not bool(finite.all()):
        _logger.debug(
            "非有限座標の線分を破棄: %d / %d (threshold=%s)",
            int(n - np.count_nonzero(finite)),
            n,
            threshold,
        )
        segments = segments[finite]

    return np.array(segments, dtype=np.float64, copy=True)


__all__ = [
    "CASE_TABLE",
    "EDGE_BOTTOM",
    "EDGE_LEFT",
    "EDGE_RIGHT",
    "EDGE_TOP",
    "INTERP_EPS",
    "case_index",
    "extract_contours",
]
