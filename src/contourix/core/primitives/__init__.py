# どこで: `src/contourix/core/primitives/__init__.py`。
# 何を: 組み込み primitive モジュールを import してレジストリへ登録させる。

from __future__ import annotations

from contourix.core.primitives import contour as _primitive_contour  # noqa: F401
from contourix.core.primitives import grid_lines as _primitive_grid_lines  # noqa: F401
from contourix.core.primitives import mask_cells as _primitive_mask_cells  # noqa: F401
