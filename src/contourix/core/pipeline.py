"""
どこで: `src/contourix/core/pipeline.py`。
何を: draw(t) のシーンを正規化し、スタイルを解決して realize した Layer 列を返す。
なぜ: SVG 出力とテストが同じ 1 フレーム評価経路を通るようにするため。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable

from contourix.core.layer import ColorRGB, Layer, LayerStyleDefaults, resolve_layer_style
from contourix.core.realize import realize
from contourix.core.realized_geometry import RealizedGeometry
from contourix.core.scene import SceneItem, normalize_scene

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RealizedLayer:
    """realize 済みの Layer（出力直前の形）。"""

    layer: Layer
    realized: RealizedGeometry
    color: ColorRGB
    thickness: float


def realize_layers(
    layers: Iterable[Layer], defaults: LayerStyleDefaults
) -> list[RealizedLayer]:
    """Layer ごとにスタイルを確定させ、Geometry を realize する。"""
    out: list[RealizedLayer] = []
    for layer in layers:
        resolved = resolve_layer_style(layer, defaults)
        out.append(
            RealizedLayer(
                layer=layer,
                realized=realize(layer.geometry),
                color=resolved.color,
                thickness=resolved.thickness,
            )
        )
    return out


def realize_scene(
    draw: Callable[[float], SceneItem],
    t: float,
    defaults: LayerStyleDefaults,
) -> list[RealizedLayer]:
    """1 フレーム分のシーンを realize して返す。

    Parameters
    ----------
    draw : Callable[[float], SceneItem]
        フレーム時刻 t を受け取り Geometry / Layer / Sequence を返すコールバック。
    t : float
        フレーム時刻 [s]。
    defaults : LayerStyleDefaults
        色・線幅が None の Layer に使う既定スタイル。

    Returns
    -------
    list[RealizedLayer]
        描画順の realize 済み Layer 列。
    """
    realized = realize_layers(normalize_scene(draw(t)), defaults)
    if _logger.isEnabledFor(logging.DEBUG):
        _logger.debug(
            "realize_scene: t=%.3f layers=%d lines=%d",
            t,
            len(realized),
            sum(item.realized.n_lines for item in realized),
        )
    return realized
