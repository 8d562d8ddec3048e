"""
どこで: `src/contourix/api/export.py`。
何を: `draw(t)` の 1 フレームをウィンドウ無しでファイルへ書き出す `Export` を提供する。
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from contourix.core.layer import ColorRGB, LayerStyleDefaults
from contourix.core.pipeline import RealizedLayer, realize_scene
from contourix.core.scene import SceneItem
from contourix.export.svg import export_svg

_logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("svg",)


class Export:
    """`draw(t)` の 1 フレームを保存する。

    インスタンス化した時点で書き出しまで終わる。書き出した Layer 列は
    `layers`、保存先は `path` で参照できる。

    Parameters
    ----------
    draw : Callable[[float], SceneItem]
        フレーム時刻 t を受け取り Geometry/Layer/Sequence を返すコールバック。
    t : float
        出力するフレーム時刻。
    fmt : str
        出力フォーマット（大文字小文字は区別しない）。現在は ``"svg"`` のみ。
    path : str or Path
        出力先パス。
    canvas_size : tuple[int, int]
        キャンバス寸法（SVG の viewBox）。
    line_color, line_thickness
        色・線幅を持たない Layer（素の Geometry 等）の既定スタイル。
    background_color : tuple[float, float, float] or None
        背景色（0..1）。None なら背景無し。

    Raises
    ------
    ValueError
        未対応の fmt が指定された場合。
    """

    def __init__(
        self,
        draw: Callable[[float], SceneItem],
        t: float,
        fmt: str,
        path: str | Path,
        *,
        canvas_size: tuple[int, int] = (480, 480),
        line_color: ColorRGB = (0.0, 0.0, 0.0),
        line_thickness: float = 0.004,
        background_color: ColorRGB | None = None,
    ) -> None:
        self.fmt = str(fmt).strip().lower()
        if self.fmt not in SUPPORTED_FORMATS:
            raise ValueError(f"未対応の export fmt: {fmt!r}（対応: {', '.join(SUPPORTED_FORMATS)}）")

        defaults = LayerStyleDefaults(color=line_color, thickness=line_thickness)
        self.layers: list[RealizedLayer] = realize_scene(draw, float(t), defaults)
        self.path = export_svg(
            self.layers,
            path,
            canvas_size=canvas_size,
            background_color=background_color,
        )
        _logger.info("exported %s: %s (layers=%d)", self.fmt, self.path, len(self.layers))
