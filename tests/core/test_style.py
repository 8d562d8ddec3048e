"""色変換ユーティリティのテスト。"""

from __future__ import annotations

import pytest

from contourix.core.style import hsv_to_rgb01, rgb01_to_hex, rgb01_to_rgb255


def test_rgb01_to_rgb255_clamps() -> None:
    assert rgb01_to_rgb255((1.5, -0.2, 0.5)) == (255, 0, 128)


def test_rgb01_to_hex() -> None:
    assert rgb01_to_hex((1.0, 0.0, 0.0)) == "#FF0000"
    assert rgb01_to_hex((0.0, 0.0, 0.0)) == "#000000"


def test_hsv_primary_hues() -> None:
    assert hsv_to_rgb01(0.0, 1.0, 1.0) == pytest.approx((1.0, 0.0, 0.0))
    assert hsv_to_rgb01(120.0, 1.0, 1.0) == pytest.approx((0.0, 1.0, 0.0))
    assert hsv_to_rgb01(240.0, 1.0, 1.0) == pytest.approx((0.0, 0.0, 1.0))


def test_hsv_hue_wraps() -> None:
    assert hsv_to_rgb01(360.0 + 120.0, 1.0, 1.0) == pytest.approx(hsv_to_rgb01(120.0, 1.0, 1.0))
