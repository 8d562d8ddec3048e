# src/contourix/core/geometry.py
# contourix の Geometry レシピノード定義。
# primitive/concat からなるレシピ DAG と、引数（輝度フィールドを含む）の内容署名を実装する。

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from hashlib import blake2b
from math import isfinite
from numbers import Real
from types import NotImplementedType
from typing import Any, Mapping, Sequence

import numpy as np

GeometryId = str

DEFAULT_SCHEMA_VERSION = 1


@dataclass(frozen=True, eq=False, slots=True)
class FieldArg:
    """Geometry 引数として保持する読み取り専用の 2D スカラーフィールド。

    Parameters
    ----------
    array : np.ndarray
        float64 型 shape (H, W) の C 連続配列（writeable=False）。
    digest : str
        shape と生バイト列から計算した blake2b ダイジェスト。

    Notes
    -----
    webcam のフィールドは毎フレーム作り直されるため、ネストしたタプルへ
    展開せずに配列のまま保持し、署名にはダイジェストだけを使う。
    ``np.asarray(field_arg)`` で元の配列として読める。
    """

    array: np.ndarray
    digest: str

    @classmethod
    def from_array(cls, value: Any) -> "FieldArg":
        """配列/行リストから FieldArg を作る（入力はコピーする）。

        NaN/inf はそのまま保持する（欠損画素は抽出側で線分ごと捨てる）。

        Raises
        ------
        ValueError
            2 次元でない場合。
        """
        arr = np.array(value, dtype=np.float64, order="C", copy=True)
        if arr.ndim != 2:
            raise ValueError(f"フィールド引数は 2 次元である必要がある: ndim={arr.ndim}")
        # -0.0 と 0.0 を同一視し、NaN のビット列（符号/payload）を 1 つに揃える。
        arr += 0.0
        arr[np.isnan(arr)] = np.nan
        arr.setflags(write=False)

        h = blake2b(digest_size=16)
        h.update(f"{arr.shape[0]}x{arr.shape[1]}:".encode("ascii"))
        h.update(arr.tobytes())
        return cls(array=arr, digest=h.hexdigest())

    @property
    def shape(self) -> tuple[int, int]:
        return (int(self.array.shape[0]), int(self.array.shape[1]))

    def __array__(self, dtype: Any = None, copy: bool | None = None) -> np.ndarray:
        if dtype is not None and np.dtype(dtype) != self.array.dtype:
            return self.array.astype(dtype)
        if copy:
            return self.array.copy()
        return self.array

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldArg):
            return NotImplemented
        return self.digest == other.digest

    def __hash__(self) -> int:
        return hash(self.digest)

    def __repr__(self) -> str:
        h, w = self.shape
        return f"FieldArg({h}x{w}, digest={self.digest[:8]})"


def _is_scalar_number(value: Any) -> bool:
    return isinstance(value, (Real, np.number)) and not isinstance(value, (bool, np.bool_))


def _looks_like_field_rows(value: Sequence[Any]) -> bool:
    """行の長さが揃った数値の行列（list of rows）なら True。"""
    if not value:
        return False
    width = -1
    for row in value:
        if not isinstance(row, (list, tuple, np.ndarray)):
            return False
        if width < 0:
            width = len(row)
        if len(row) != width or width == 0:
            return False
        if not all(_is_scalar_number(v) for v in row):
            return False
    return True


def _normalize_value(value: Any) -> Any:
    """引数値を内容署名用に正規化する。

    Parameters
    ----------
    value : Any
        元の値。2D 配列と長さの揃った数値の行リストは `FieldArg` にする。

    Returns
    -------
    Any
        正規化済み値。

    Raises
    ------
    TypeError
        サポートされない型が渡された場合。
    ValueError
        スカラー float が NaN/inf の場合（フィールド内の NaN/inf は許可）。
    """
    if value is None or isinstance(value, FieldArg):
        return value
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, np.ndarray):
        if value.ndim == 2:
            return FieldArg.from_array(value)
        return _normalize_value(value.tolist())
    if isinstance(value, (int, float)):
        v = float(value)
        if not isfinite(v):
            raise ValueError("非有限の float は Geometry 引数に使用できない")
        if isinstance(value, int):
            return int(value)
        return 0.0 if v == 0.0 else v
    if isinstance(value, str):
        return value
    if isinstance(value, Enum):
        return f"{value.__class__.__name__}.{value.name}"
    if isinstance(value, (list, tuple)):
        if _looks_like_field_rows(value):
            return FieldArg.from_array(value)
        return tuple(_normalize_value(v) for v in value)
    if isinstance(value, dict):
        return tuple(
            (str(k), _normalize_value(v))
            for k, v in sorted(value.items(), key=lambda item: str(item[0]))
        )
    raise TypeError(f"正規化できない引数型: {type(value)!r}")


def normalize_args(params: Mapping[str, Any]) -> tuple[tuple[str, Any], ...]:
    """パラメータ辞書をキー順の (名前, 正規化値) タプル列に変換する。"""
    return tuple((str(name), _normalize_value(params[name])) for name in sorted(params))


def _update_hash_with_value(hasher: blake2b, value: Any) -> None:
    if value is None:
        hasher.update(b"n")
    elif isinstance(value, bool):
        hasher.update(b"b1" if value else b"b0")
    elif isinstance(value, (int, float)):
        hasher.update(b"f")
        hasher.update(f"{value:.17g}".encode("ascii"))
    elif isinstance(value, str):
        hasher.update(b"s")
        hasher.update(value.encode("utf-8"))
    elif isinstance(value, FieldArg):
        hasher.update(b"a")
        hasher.update(value.digest.encode("ascii"))
    elif isinstance(value, tuple):
        hasher.update(b"t[")
        for item in value:
            _update_hash_with_value(hasher, item)
            hasher.update(b",")
        hasher.update(b"]")
    else:
        raise TypeError(f"署名に使用できない値型: {type(value)!r}")


def compute_geometry_id(
    op: str,
    inputs: Sequence["Geometry"],
    args: tuple[tuple[str, Any], ...],
    *,
    schema_version: int = DEFAULT_SCHEMA_VERSION,
) -> GeometryId:
    """op・子ノード ID・正規化済み引数から GeometryId（内容署名）を計算する。"""
    h = blake2b(digest_size=16)
    h.update(f"v{schema_version}|op:{op}|inputs:".encode("utf-8"))
    for g in inputs:
        h.update(b"#")
        h.update(g.id.encode("ascii"))

    h.update(b"|args:")
    for name, value in args:
        h.update(f"k:{name}=".encode("utf-8"))
        _update_hash_with_value(h, value)

    return h.hexdigest()


@dataclass(frozen=True, slots=True)
class Geometry:
    """線描レシピを表す不変 Geometry ノード。

    Parameters
    ----------
    id : GeometryId
        内容署名に基づく GeometryId。
    op : str
        演算子名。primitive 名または ``"concat"``。
    inputs : tuple[Geometry, ...]
        子ノード列。primitive の場合は空タプル。
    args : tuple[tuple[str, Any], ...]
        正規化済み引数の (名前, 値) タプル列。

    Notes
    -----
    同じ内容（op/inputs/args）なら同じ id になるので、
    フレーム間で輝度フィールドが変わらなければ realize キャッシュが効く。
    """

    id: GeometryId
    op: str
    inputs: tuple["Geometry", ...]
    args: tuple[tuple[str, Any], ...]

    @classmethod
    def create(
        cls,
        op: str,
        *,
        inputs: Sequence["Geometry"] | None = None,
        params: Mapping[str, Any] | None = None,
        schema_version: int = DEFAULT_SCHEMA_VERSION,
    ) -> "Geometry":
        """演算子名とパラメータから Geometry ノードを生成する。

        Parameters
        ----------
        op : str
            演算子名。
        inputs : Sequence[Geometry] or None, optional
            子ノード列。省略時は空とみなす。
        params : Mapping[str, Any] or None, optional
            元の引数辞書。None の場合は空辞書とみなす。
        schema_version : int, optional
            署名スキーマのバージョン。

        Returns
        -------
        Geometry
            生成された Geometry ノード。
        """
        inputs_tuple = tuple(inputs) if inputs is not None else ()
        normalized_args = normalize_args(params if params is not None else {})
        geometry_id = compute_geometry_id(
            op=op,
            inputs=inputs_tuple,
            args=normalized_args,
            schema_version=schema_version,
        )
        return cls(id=geometry_id, op=op, inputs=inputs_tuple, args=normalized_args)

    @staticmethod
    def concat(*geometries: "Geometry") -> "Geometry":
        """複数の Geometry を 1 つの `concat` ノードにまとめる。

        ネストした concat は平坦化し、1 要素ならその Geometry 自身を返す。
        """
        flat: list[Geometry] = []
        for g in geometries:
            if g.op == "concat" and not g.args:
                flat.extend(g.inputs)
            else:
                flat.append(g)

        if not flat:
            raise ValueError("concat する Geometry が 1 つも無い")
        if len(flat) == 1:
            return flat[0]
        return Geometry.create(op="concat", inputs=flat)

    def __add__(self, other: object) -> "Geometry | NotImplementedType":
        """`g1 + g2` を `concat` として表現する。"""
        if not isinstance(other, Geometry):
            return NotImplemented
        return Geometry.concat(self, other)

    def __radd__(self, other: object) -> "Geometry | NotImplementedType":
        """`sum([...])` のために `0 + Geometry` を許可する。"""
        if other == 0:
            return self
        if not isinstance(other, Geometry):
            return NotImplemented
        return Geometry.concat(other, self)
