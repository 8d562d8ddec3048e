"""
どこで: `src/contourix/core/style.py`。
何を: 色表現（RGB 0..1 / RGB 0..255 / HSV）の変換ユーティリティを定義する。
なぜ: リング色の算出と SVG の stroke 色出力で同じ変換規則を使うため。
"""

from __future__ import annotations

import colorsys


def _clamp01(v: float) -> float:
    fv = float(v)
    return 0.0 if fv < 0.0 else 1.0 if fv > 1.0 else fv


def rgb01_to_rgb255(rgb: tuple[float, float, float]) -> tuple[int, int, int]:
    """0..1 float の RGB を 0..255 int の RGB に変換して返す（範囲外は clamp）。"""

    r, g, b = rgb
    return (
        int(round(_clamp01(r) * 255.0)),
        int(round(_clamp01(g) * 255.0)),
        int(round(_clamp01(b) * 255.0)),
    )


def rgb01_to_hex(rgb: tuple[float, float, float]) -> str:
    """0..1 float RGB を #RRGGBB に変換して返す。"""

    r, g, b = rgb01_to_rgb255(rgb)
    return f"#{r:02X}{g:02X}{b:02X}"


def hsv_to_rgb01(
    hue_deg: float, saturation: float, brightness: float
) -> tuple[float, float, float]:
    """色相 [deg]・彩度・明度（0..1）から RGB 0..1 を返す。

    色相は 360 で周回する。彩度・明度は 0..1 に clamp する。
    """

    h = (float(hue_deg) % 360.0) / 360.0
    r, g, b = colorsys.hsv_to_rgb(h, _clamp01(saturation), _clamp01(brightness))
    return float(r), float(g), float(b)
