# src/contourix/core/realized_geometry.py
# Geometry 評価結果である 2D ポリライン配列のモデルと検証ロジック。

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, slots=True)
class RealizedGeometry:
    """Geometry を評価した結果である 2D ポリライン列を表現する。

    Parameters
    ----------
    coords : np.ndarray
        float32 型 shape (N, 2) の頂点配列（x, y）。
    offsets : np.ndarray
        int32 型 shape (M+1,) のポリライン開始インデックス配列。

    Notes
    -----
    不変性を契約とし、配列は writeable=False で保持する。
    offsets と coords の整合性はコンストラクタ内で検証する。
    """

    coords: np.ndarray
    offsets: np.ndarray

    def __post_init__(self) -> None:
        """配列形状と整合性を検証し、不変条件を満たす形に固定する。"""
        coords = np.asarray(self.coords)
        offsets = np.asarray(self.offsets)

        if coords.ndim == 1 and coords.size == 0:
            coords = coords.reshape((0, 2))

        if coords.ndim != 2 or coords.shape[1] != 2:
            raise ValueError("coords は shape (N,2) の 2 次元配列である必要がある")

        if coords.dtype != np.float32:
            coords = coords.astype(np.float32, copy=False)

        if offsets.ndim != 1:
            raise ValueError("offsets は 1 次元配列である必要がある")

        if offsets.dtype != np.int32:
            offsets = offsets.astype(np.int32, copy=False)

        if offsets.size == 0:
            raise ValueError("offsets は少なくとも 1 要素を含む必要がある")

        if offsets[0] != 0:
            raise ValueError("offsets[0] は 0 である必要がある")

        if offsets[-1] != coords.shape[0]:
            raise ValueError("offsets[-1] は coords 行数と一致する必要がある")

        if np.any(np.diff(offsets) < 0):
            raise ValueError("offsets は単調非減少である必要がある")

        # 呼び出し側の配列を凍結しないようにコピーしてから writeable=False にする。
        if coords.flags.writeable:
            coords = coords.copy()
        if offsets.flags.writeable:
            offsets = offsets.copy()
        coords.setflags(write=False)
        offsets.setflags(write=False)

        object.__setattr__(self, "coords", coords)
        object.__setattr__(self, "offsets", offsets)

    @classmethod
    def empty(cls) -> "RealizedGeometry":
        """頂点もポリラインも持たない空ジオメトリを返す。"""
        return cls(
            coords=np.zeros((0, 2), dtype=np.float32),
            offsets=np.zeros((1,), dtype=np.int32),
        )

    @classmethod
    def from_segments(cls, segments: np.ndarray) -> "RealizedGeometry":
        """shape (K, 2, 2) の線分配列から 2 頂点ポリライン K 本を作る。

        線分の各点は (x, y) として解釈する。
        """
        segs = np.asarray(segments, dtype=np.float32)
        if segs.size == 0:
            return cls.empty()
        if segs.ndim != 3 or segs.shape[1:] != (2, 2):
            raise ValueError("segments は shape (K,2,2) である必要がある")
        coords = segs.reshape((-1, 2))
        offsets = np.arange(0, coords.shape[0] + 1, 2, dtype=np.int32)
        return cls(coords=coords, offsets=offsets)

    @property
    def n_lines(self) -> int:
        """ポリライン本数。"""
        return int(self.offsets.size) - 1


def concat_realized_geometries(*geometries: RealizedGeometry) -> RealizedGeometry:
    """複数の RealizedGeometry を連結して 1 つにまとめる。"""
    if not geometries:
        return RealizedGeometry.empty()

    total_coords = np.concatenate([g.coords for g in geometries], axis=0)

    new_offsets: list[int] = [0]
    offset_base = 0
    for g in geometries:
        # 先頭 0 を除いた部分だけをシフトして足し込む。
        new_offsets.extend((g.offsets[1:] + offset_base).tolist())
        offset_base += int(g.offsets[-1])

    return RealizedGeometry(
        coords=total_coords,
        offsets=np.asarray(new_offsets, dtype=np.int32),
    )
