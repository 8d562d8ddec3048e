# どこで: `src/contourix/api/__init__.py`。
# 何を: 公開 API（G/L/Export）と、ユーザー定義登録用の primitive を再エクスポートする。
# なぜ: ユーザーコードからシンプルに API を import できるようにするため。

from __future__ import annotations

from contourix.core.primitive_registry import primitive

from .export import Export
from .layers import L
from .primitives import G

__all__ = ["Export", "G", "L", "primitive"]
