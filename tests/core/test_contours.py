"""marching squares による等値線抽出（extract_contours）のテスト群。"""

from __future__ import annotations

import numpy as np
import pytest

from contourix.core.contours import CASE_TABLE, INTERP_EPS, case_index, extract_contours

IN = 10.0
OUT = 0.0
THRESHOLD = 5.0

# 2x2 セルで全隅が IN/OUT のとき、交差点は各辺の中点になる。(row, col)
TOP = (0.0, 0.5)
RIGHT = (0.5, 1.0)
BOTTOM = (1.0, 0.5)
LEFT = (0.5, 0.0)

EXPECTED_SEGMENTS = {
    1: [(LEFT, BOTTOM)],
    2: [(BOTTOM, RIGHT)],
    3: [(LEFT, RIGHT)],
    4: [(TOP, RIGHT)],
    5: [(TOP, LEFT), (RIGHT, BOTTOM)],
    6: [(TOP, BOTTOM)],
    7: [(TOP, LEFT)],
    8: [(LEFT, TOP)],
    9: [(BOTTOM, TOP)],
    10: [(LEFT, BOTTOM), (TOP, RIGHT)],
    11: [(RIGHT, TOP)],
    12: [(RIGHT, LEFT)],
    13: [(RIGHT, BOTTOM)],
    14: [(BOTTOM, LEFT)],
}


def _cell_for_case(idx: int) -> np.ndarray:
    """case index（TL,TR,BR,BL の順で MSB から）に対応する 2x2 フィールドを返す。"""
    tl = IN if idx & 0b1000 else OUT
    tr = IN if idx & 0b0100 else OUT
    br = IN if idx & 0b0010 else OUT
    bl = IN if idx & 0b0001 else OUT
    return np.array([[tl, tr], [bl, br]], dtype=np.float64)


@pytest.mark.parametrize("idx", [0, 15])
def test_uniform_cells_produce_no_segments(idx: int) -> None:
    segments = extract_contours(_cell_for_case(idx), THRESHOLD)
    assert segments.shape == (0, 2, 2)


@pytest.mark.parametrize("idx", sorted(EXPECTED_SEGMENTS))
def test_case_table_segments(idx: int) -> None:
    field = _cell_for_case(idx)
    assert case_index(field[0, 0], field[0, 1], field[1, 1], field[1, 0], THRESHOLD) == idx

    segments = extract_contours(field, THRESHOLD)

    expected = np.array(EXPECTED_SEGMENTS[idx], dtype=np.float64)
    np.testing.assert_allclose(segments, expected, rtol=0.0, atol=1e-12)


@pytest.mark.parametrize("idx", [1, 2, 4, 7, 8, 11, 13, 14])
def test_single_corner_cases_touch_edges_adjacent_to_lone_corner(idx: int) -> None:
    """3 隅と異なる 1 隅に隣接する 2 辺に端点が乗る 1 本の線分になる。"""
    segments = extract_contours(_cell_for_case(idx), THRESHOLD)
    assert segments.shape == (1, 2, 2)

    inside = [(idx >> 3) & 1, (idx >> 2) & 1, (idx >> 1) & 1, idx & 1]
    lone = 1 if inside.count(1) == 1 else 0
    corner = inside.index(lone)  # 0=TL, 1=TR, 2=BR, 3=BL
    adjacent = {
        0: {TOP, LEFT},
        1: {TOP, RIGHT},
        2: {BOTTOM, RIGHT},
        3: {BOTTOM, LEFT},
    }[corner]
    endpoints = {tuple(float(v) for v in p) for p in segments[0]}
    assert endpoints == adjacent


def test_saddle_cases_use_fixed_pairing() -> None:
    seg5 = extract_contours(_cell_for_case(5), THRESHOLD)
    seg10 = extract_contours(_cell_for_case(10), THRESHOLD)

    assert seg5.shape == (2, 2, 2)
    assert seg10.shape == (2, 2, 2)

    # 補完的な組み合わせ（top-right / left-bottom を case 5 で結ぶ等）にはならない。
    np.testing.assert_allclose(seg5, [[TOP, LEFT], [RIGHT, BOTTOM]])
    np.testing.assert_allclose(seg10, [[LEFT, BOTTOM], [TOP, RIGHT]])


def test_saddle_pairing_ignores_cell_average() -> None:
    """中心平均が内側でも外側でも case 5 の結び方は変わらない。"""
    low_center = np.array([[0.0, 6.0], [6.0, 0.0]])
    high_center = np.array([[4.0, 100.0], [100.0, 4.0]])

    for field in (low_center, high_center):
        segments = extract_contours(field, THRESHOLD)
        assert segments.shape == (2, 2, 2)
        # 1 本目は top-left（row=0 の点と col=0 の点）。
        assert segments[0, 0, 0] == 0.0
        assert segments[0, 1, 1] == 0.0
        # 2 本目は right-bottom（col=1 の点と row=1 の点）。
        assert segments[1, 0, 1] == 1.0
        assert segments[1, 1, 0] == 1.0


def test_interpolation_on_top_edge() -> None:
    """TL=0, TR=10, t=4 なら top 交差点は TL から列方向 0.4。"""
    field = np.array([[0.0, 10.0], [0.0, 0.0]])
    segments = extract_contours(field, 4.0)

    assert segments.shape == (1, 2, 2)
    top = segments[0, 0]
    np.testing.assert_allclose(top, (0.0, 0.4), rtol=0.0, atol=1e-12)


def test_equal_to_threshold_counts_as_inside() -> None:
    """TL=TR=threshold の上辺は両端とも内側なので交差点を持たない。"""
    field = np.array([[5.0, 5.0], [0.0, 0.0]])
    segments = extract_contours(field, 5.0)

    # case 12 (TL, TR 内側) -> right-left のみ。
    assert segments.shape == (1, 2, 2)
    np.testing.assert_allclose(segments[0], [(0.0, 1.0), (0.0, 0.0)], atol=1e-12)
    # どの端点も上辺の内部 (row=0, 0<col<1) には無い。
    for row, col in segments.reshape(-1, 2):
        assert not (row == 0.0 and 0.0 < col < 1.0)


def test_near_equal_endpoints_fall_back_to_midpoint() -> None:
    a = 5.0 - INTERP_EPS / 10.0
    field = np.array([[a, 5.0], [0.0, 0.0]])
    segments = extract_contours(field, 5.0)

    # case 4 (TR) -> top-right。top は中点にフォールバックする。
    assert segments.shape == (1, 2, 2)
    np.testing.assert_allclose(segments[0, 0], (0.0, 0.5), atol=1e-12)
    np.testing.assert_allclose(segments[0, 1], (0.0, 1.0), atol=1e-12)


def test_end_to_end_single_cell_example() -> None:
    field = [[0.0, 0.0], [0.0, 10.0]]
    segments = extract_contours(np.asarray(field), 5.0)

    np.testing.assert_allclose(segments, [[(1.0, 0.5), (0.5, 1.0)]], atol=1e-12)


@pytest.mark.parametrize(
    "field",
    [
        np.array([[0.0, 100.0, 0.0, 100.0]]),
        np.array([[0.0], [100.0], [0.0]]),
        np.zeros((0, 0)),
        np.zeros((1, 1)),
        [],
        np.zeros((0, 3, 3)),
    ],
)
def test_degenerate_shapes_yield_no_segments(field: np.ndarray) -> None:
    segments = extract_contours(field, 50.0)
    assert segments.shape == (0, 2, 2)


def test_non_2d_field_is_rejected() -> None:
    with pytest.raises(ValueError):
        extract_contours(np.zeros((2, 2, 2)), 1.0)


def test_non_finite_segments_are_dropped() -> None:
    field = np.array(
        [
            [np.nan, 10.0, 10.0],
            [10.0, 10.0, 10.0],
            [10.0, 10.0, 0.0],
        ]
    )
    segments = extract_contours(field, 5.0)

    assert np.isfinite(segments).all()
    # NaN 隅のセル（左上）からの線分は消え、右下セルの 1 本だけが残る。
    np.testing.assert_allclose(segments, [[(1.5, 2.0), (2.0, 1.5)]], atol=1e-12)


def test_infinite_values_do_not_raise() -> None:
    field = np.array([[np.inf, 0.0], [0.0, -np.inf]])
    segments = extract_contours(field, 5.0)
    assert np.isfinite(segments).all()


def test_input_field_is_not_modified() -> None:
    field = np.array([[0.0, 10.0], [10.0, 0.0]])
    before = field.copy()
    extract_contours(field, 5.0)
    np.testing.assert_array_equal(field, before)


def test_repeated_calls_are_identical() -> None:
    rng = np.random.default_rng(0)
    field = rng.uniform(0.0, 255.0, size=(12, 12))

    a = extract_contours(field, 128.0)
    b = extract_contours(field, 128.0)

    np.testing.assert_array_equal(a, b)


def test_peak_produces_closed_diamond_on_level() -> None:
    """中心が高い 3x3 フィールドは 4 セルから 1 本ずつ、ひし形状の線分になる。"""
    field = np.array(
        [
            [0.0, 0.0, 0.0],
            [0.0, 8.0, 0.0],
            [0.0, 0.0, 0.0],
        ]
    )
    segments = extract_contours(field, 2.0)

    assert segments.shape == (4, 2, 2)
    points = {tuple(np.round(p, 12)) for p in segments.reshape(-1, 2)}
    assert points == {(1.0, 0.25), (0.25, 1.0), (1.0, 1.75), (1.75, 1.0)}


def test_endpoints_lie_on_threshold_along_edges() -> None:
    """各端点は格子辺上にあり、辺に沿った線形補間値がしきい値に一致する。"""
    rng = np.random.default_rng(42)
    field = rng.uniform(0.0, 255.0, size=(8, 9))
    threshold = 100.0
    segments = extract_contours(field, threshold)
    assert segments.shape[0] > 0

    for row, col in segments.reshape(-1, 2):
        r0, c0 = int(np.floor(row)), int(np.floor(col))
        fr, fc = row - r0, col - c0
        if fr == 0.0:
            a = field[r0, c0]
            b = field[r0, min(c0 + 1, field.shape[1] - 1)]
            value = a + (b - a) * fc
        else:
            assert fc == 0.0
            a = field[r0, c0]
            b = field[min(r0 + 1, field.shape[0] - 1), c0]
            value = a + (b - a) * fr
        assert value == pytest.approx(threshold, abs=1e-6)


def test_case_table_is_read_only() -> None:
    with pytest.raises(ValueError):
        CASE_TABLE[1, 0] = 0
