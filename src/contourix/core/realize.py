# src/contourix/core/realize.py
# Geometry ノードの評価と realize_cache（LRU）管理を実装する。

from __future__ import annotations

import logging
import threading
from collections import OrderedDict

from contourix.core.geometry import Geometry, GeometryId
from contourix.core.primitive_registry import primitive_registry
from contourix.core.realized_geometry import RealizedGeometry, concat_realized_geometries
from contourix.core.runtime_config import runtime_config

_logger = logging.getLogger(__name__)


class RealizeError(RuntimeError):
    """realize 実行中の例外をラップするエラー。"""


class RealizeCache:
    """GeometryId をキーとする実体ジオメトリの LRU キャッシュ。

    Notes
    -----
    webcam 由来のフィールドは毎フレーム内容が変わり得るため、容量上限を設ける。
    `max_items` を省略した場合は初回アクセス時に config の
    `realize.cache_size` を読む。
    """

    def __init__(self, max_items: int | None = None) -> None:
        if max_items is not None and int(max_items) < 1:
            raise ValueError("max_items は 1 以上である必要がある")
        self._lock = threading.Lock()
        self._items: OrderedDict[GeometryId, RealizedGeometry] = OrderedDict()
        self._max_items = None if max_items is None else int(max_items)

    def _capacity(self) -> int:
        if self._max_items is None:
            self._max_items = int(runtime_config().realize_cache_size)
        return self._max_items

    def get(self, key: GeometryId) -> RealizedGeometry | None:
        """キャッシュから値を取得する。見つからなければ None を返す。"""
        with self._lock:
            value = self._items.get(key)
            if value is not None:
                self._items.move_to_end(key)
            return value

    def set(self, key: GeometryId, value: RealizedGeometry) -> None:
        """キャッシュに値を保存し、上限を超えた古いエントリを捨てる。"""
        capacity = self._capacity()
        with self._lock:
            self._items[key] = value
            self._items.move_to_end(key)
            while len(self._items) > capacity:
                evicted, _ = self._items.popitem(last=False)
                _logger.debug("realize_cache evict: id=%s", evicted)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items


realize_cache = RealizeCache()


def _evaluate_geometry_node(geometry: Geometry) -> RealizedGeometry:
    """単一 Geometry ノードを評価して RealizedGeometry を生成する。"""
    if geometry.op == "concat":
        return concat_realized_geometries(*(realize(g) for g in geometry.inputs))

    if geometry.inputs:
        raise ValueError(f"入力を持つ op は未対応: {geometry.op!r}")

    primitive_func = primitive_registry.get(geometry.op)
    return primitive_func(geometry.args)


def realize(geometry: Geometry) -> RealizedGeometry:
    """Geometry を評価し、RealizedGeometry を返す。

    Parameters
    ----------
    geometry : Geometry
        評価対象の Geometry ノード。

    Returns
    -------
    RealizedGeometry
        評価結果。同じ id の結果はキャッシュから返す。

    Raises
    ------
    RealizeError
        評価中に発生した例外をラップして送出する。
    """
    cached = realize_cache.get(geometry.id)
    if cached is not None:
        return cached

    try:
        result = _evaluate_geometry_node(geometry)
    except RealizeError:
        raise
    except Exception as exc:
        raise RealizeError(
            f"realize に失敗した: op={geometry.op!r} id={geometry.id}"
        ) from exc

    realize_cache.set(geometry.id, result)
    return result
