"""
どこで: `src/contourix/export/svg.py`。
何を: realize 済みシーンを、Layer 1 枚 = `<path>` 1 本の SVG として保存する。
なぜ: 等高線リングは短い線分の集まりなので、線分ごとに要素を分けず Layer 単位のサブパスにまとめ、
     差分比較できる決定的な出力を得るため。
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from pathlib import Path
from xml.sax.saxutils import quoteattr

import numpy as np

from contourix.core.pipeline import RealizedLayer
from contourix.core.runtime_config import output_root_dir
from contourix.core.style import rgb01_to_hex

_logger = logging.getLogger(__name__)

_SVG_NS = "http://www.w3.org/2000/svg"
_FLOAT_DECIMALS = 3


def _fmt(value: float) -> str:
    """座標・線幅を小数 3 桁の決定的な文字列にする（-0 は 0 に寄せる）。"""
    text = f"{float(value):.{_FLOAT_DECIMALS}f}"
    if text.startswith("-") and float(text) == 0.0:
        return text[1:]
    return text


def _drawable_polylines(coords: np.ndarray, offsets: np.ndarray) -> Iterator[np.ndarray]:
    """描ける polyline（2 頂点以上かつ全座標が有限）だけを返す。"""
    starts = offsets[:-1]
    ends = offsets[1:]
    skipped = 0
    for start, end in zip(starts.tolist(), ends.tolist()):
        if end - start < 2:
            continue
        polyline = coords[start:end]
        if not bool(np.isfinite(polyline).all()):
            skipped += 1
            continue
        yield polyline
    if skipped:
        _logger.debug("非有限座標の polyline を SVG 出力から除外: %d 本", skipped)


def _subpath(polyline: np.ndarray) -> str:
    """polyline 1 本を `M ... L ...` のサブパスにする。始点に戻る閉曲線は `Z` で閉じる。"""
    pts = [f"{_fmt(x)} {_fmt(y)}" for x, y in polyline.tolist()]
    closed = len(pts) >= 4 and pts[0] == pts[-1]
    if closed:
        pts = pts[:-1]
    d = "M " + " L ".join(pts)
    return d + " Z" if closed else d


def layer_path_data(layer: RealizedLayer) -> str:
    """Layer の全 polyline をサブパスとして連結した d 属性を返す（描ける線が無ければ空文字）。"""
    coords = np.asarray(layer.realized.coords, dtype=np.float64)
    offsets = np.asarray(layer.realized.offsets, dtype=np.int64)
    return " ".join(_subpath(p) for p in _drawable_polylines(coords, offsets))


def default_svg_output_path(name: str) -> Path:
    """`{output_root}/svg/{name}.svg` を返す。"""
    return output_root_dir() / "svg" / f"{name}.svg"


def export_svg(
    layers: Sequence[RealizedLayer],
    path: str | Path,
    *,
    canvas_size: tuple[int, int] | None = None,
    background_color: tuple[float, float, float] | None = None,
) -> Path:
    """Layer 列を SVG として保存する。

    Parameters
    ----------
    layers : Sequence[RealizedLayer]
        realize 済みの Layer 列（描画順）。
    path : str or Path
        出力先パス。親ディレクトリは作成する。
    canvas_size : tuple[int, int] or None, optional
        キャンバス寸法 (幅, 高さ)。必須。
    background_color : tuple[float, float, float] or None, optional
        背景色（0..1）。None なら背景 rect を出力しない。

    Returns
    -------
    Path
        保存先パス。

    Raises
    ------
    ValueError
        canvas_size が None、または正でない場合。

    Notes
    -----
    Layer ごとに `<path>` を 1 本出力し、``data-site-id`` に Layer の site_id を入れる。
    描ける polyline が 1 本も無い Layer は出力しない。
    """
    if canvas_size is None:
        raise ValueError("canvas_size は必須")
    canvas_w, canvas_h = (int(v) for v in canvas_size)
    if canvas_w <= 0 or canvas_h <= 0:
        raise ValueError(f"canvas_size は正の値である必要がある: {canvas_size!r}")

    # 線幅は短辺の半分を 1.0 とする単位で持つ。
    stroke_scale = min(canvas_w, canvas_h) / 2.0

    out = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="{_SVG_NS}" viewBox="0 0 {canvas_w} {canvas_h}" '
        f'width="{canvas_w}" height="{canvas_h}">',
    ]
    if background_color is not None:
        out.append(
            f'  <rect x="0" y="0" width="{canvas_w}" height="{canvas_h}" '
            f'fill="{rgb01_to_hex(background_color)}" />'
        )

    written = 0
    for layer in layers:
        d = layer_path_data(layer)
        if not d:
            continue
        out.append(
            f"  <path data-site-id={quoteattr(layer.layer.site_id)} d=\"{d}\" fill=\"none\" "
            f'stroke="{rgb01_to_hex(layer.color)}" '
            f'stroke-width="{_fmt(float(layer.thickness) * stroke_scale)}" '
            'stroke-linecap="round" stroke-linejoin="round" />'
        )
        written += 1
    out.append("</svg>")

    _path = Path(path)
    _path.parent.mkdir(parents=True, exist_ok=True)
    _path.write_text("\n".join(out) + "\n", encoding="utf-8", newline="\n")
    _logger.debug("SVG を書き出し: %s (paths=%d / layers=%d)", _path, written, len(layers))
    return _path
