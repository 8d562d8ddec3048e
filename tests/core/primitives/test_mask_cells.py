"""mask_cells プリミティブ（しきい値マスクのセル塗り分け）のテスト群。"""

from __future__ import annotations

import numpy as np
import pytest

from contourix.api import G
from contourix.core.primitive_registry import primitive_registry
from contourix.core.realize import RealizeError, realize

_FIELD = [
    [200.0, 50.0],
    [50.0, 200.0],
]


def test_inside_cells_are_closed_outlines() -> None:
    realized = realize(G.mask_cells(field=_FIELD, threshold=128.0, cell_size=10.0))

    # 内側は (0,0) と (1,1) の 2 セル。行優先で並ぶ。
    assert realized.offsets.tolist() == [0, 5, 10]
    expected = np.array(
        [
            [0.0, 0.0],
            [10.0, 0.0],
            [10.0, 10.0],
            [0.0, 10.0],
            [0.0, 0.0],
            [10.0, 10.0],
            [20.0, 10.0],
            [20.0, 20.0],
            [10.0, 20.0],
            [10.0, 10.0],
        ]
    )
    np.testing.assert_allclose(realized.coords, expected)


def test_outside_cells_are_the_complement() -> None:
    realized = realize(
        G.mask_cells(field=_FIELD, threshold=128.0, inside=False, cell_size=10.0, offset=(5.0, 0.0))
    )

    assert realized.n_lines == 2
    # 外側は (0,1) と (1,0)。外周の始点がセル左上。
    np.testing.assert_allclose(realized.coords[0], [15.0, 0.0])
    np.testing.assert_allclose(realized.coords[5], [5.0, 10.0])


def test_threshold_is_inclusive() -> None:
    realized = realize(G.mask_cells(field=[[128.0, 127.0]], threshold=128.0))

    assert realized.n_lines == 1
    np.testing.assert_allclose(realized.coords[0], [0.0, 0.0])


def test_hatch_lines_follow_outlines() -> None:
    realized = realize(
        G.mask_cells(field=[[0.0, 255.0]], threshold=128.0, hatch=3, cell_size=8.0)
    )

    # 外周 1 本 + ハッチ 3 本。
    assert realized.offsets.tolist() == [0, 5, 7, 9, 11]
    hatch = realized.coords[5:].reshape((3, 2, 2))
    np.testing.assert_allclose(hatch[:, 0, 0], [8.0, 8.0, 8.0])
    np.testing.assert_allclose(hatch[:, 1, 0], [16.0, 16.0, 16.0])
    np.testing.assert_allclose(hatch[:, 0, 1], [2.0, 4.0, 6.0])
    np.testing.assert_allclose(hatch[:, 1, 1], [2.0, 4.0, 6.0])


def test_nan_cells_are_neither_inside_nor_outside() -> None:
    field = [[np.nan, 200.0], [50.0, 50.0]]

    inside = realize(G.mask_cells(field=field, threshold=128.0))
    outside = realize(G.mask_cells(field=field, threshold=128.0, inside=False))

    assert inside.n_lines == 1
    assert outside.n_lines == 2
    assert np.isfinite(outside.coords).all()


def test_no_matching_cells_is_empty() -> None:
    realized = realize(G.mask_cells(field=[[0.0, 0.0], [0.0, 0.0]], threshold=128.0))

    assert realized.coords.shape == (0, 2)
    assert realized.offsets.tolist() == [0]


@pytest.mark.parametrize("hatch", [-1, 33])
def test_out_of_range_hatch_fails_at_realize(hatch: int) -> None:
    with pytest.raises(RealizeError):
        realize(G.mask_cells(field=[[0.0, 255.0]], threshold=128.0, hatch=hatch))


def test_mask_cells_defaults_are_registered() -> None:
    assert primitive_registry.get_param_order("mask_cells") == (
        "field",
        "threshold",
        "inside",
        "hatch",
        "cell_size",
        "offset",
    )
    assert primitive_registry.get_defaults("mask_cells")["inside"] is True
