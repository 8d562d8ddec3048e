# どこで: `src/contourix/__init__.py`。
# 何を: ルート `contourix` パッケージを定義し、主要 API を再エクスポートする。
# なぜ: import 起点を `contourix` に統一するため。

from __future__ import annotations

from contourix.api import Export, G, L, primitive
from contourix.core.brightness import brightness_grid, threshold_mask
from contourix.core.contour_layers import ContourStyle, contour_layers
from contourix.core.contours import extract_contours
from contourix.core.duotone_layers import DuotoneStyle, duotone_layers

__all__ = [
    "ContourStyle",
    "DuotoneStyle",
    "Export",
    "G",
    "L",
    "brightness_grid",
    "contour_layers",
    "duotone_layers",
    "extract_contours",
    "primitive",
    "threshold_mask",
]
