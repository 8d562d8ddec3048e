"""primitive レジストリと `@primitive` デコレータのテスト。"""

from __future__ import annotations

import pytest

from contourix.api import primitive
from contourix.core.geometry import Geometry
from contourix.core.meta import ParamMeta
from contourix.core.primitive_registry import primitive_registry
from contourix.core.primitives import contour as _contour_module  # noqa: F401
from contourix.core.primitives import grid_lines as _grid_lines_module  # noqa: F401
from contourix.core.realize import realize
from contourix.core.realized_geometry import RealizedGeometry


def test_builtin_primitives_are_registered_with_meta() -> None:
    assert "contour" in primitive_registry
    assert "grid_lines" in primitive_registry

    meta = primitive_registry.get_meta("contour")
    assert meta["field"].kind == "field"
    assert meta["threshold"].kind == "float"
    assert primitive_registry.get_param_order("contour") == (
        "field",
        "threshold",
        "cell_size",
        "offset",
    )


def test_defaults_come_from_signature() -> None:
    defaults = primitive_registry.get_defaults("grid_lines")
    assert defaults == {"rows": 12, "cols": 12, "cell_size": 1.0, "offset": (0.0, 0.0)}


def test_user_primitive_can_be_registered_without_meta() -> None:
    @primitive
    def single_segment(*, length: float = 1.0) -> RealizedGeometry:
        return RealizedGeometry.from_segments([[(0.0, 0.0), (float(length), 0.0)]])

    try:
        realized = realize(Geometry.create("single_segment", params={"length": 3.0}))
        assert realized.coords.tolist() == [[0.0, 0.0], [3.0, 0.0]]
    finally:
        primitive_registry._specs.pop("single_segment", None)


def test_meta_argument_must_exist_in_signature() -> None:
    with pytest.raises(ValueError):

        @primitive(meta={"missing": ParamMeta(kind="float")})
        def broken(*, x: float = 1.0) -> RealizedGeometry:
            return RealizedGeometry.empty()


def test_meta_argument_default_must_not_be_none() -> None:
    with pytest.raises(ValueError):

        @primitive(meta={"x": ParamMeta(kind="float")})
        def broken(*, x: float | None = None) -> RealizedGeometry:
            return RealizedGeometry.empty()


def test_param_meta_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError):
        ParamMeta(kind="rgb")


def test_choice_meta_requires_choices() -> None:
    with pytest.raises(ValueError):
        ParamMeta(kind="choice")


def test_unknown_primitive_raises_key_error() -> None:
    with pytest.raises(KeyError):
        primitive_registry.get("no_such_primitive")


def test_registry_iterates_sorted_names() -> None:
    names = list(primitive_registry)
    assert names == sorted(names)
    assert {"contour", "grid_lines"} <= set(names)


def test_choice_meta_freezes_choices() -> None:
    meta = ParamMeta(kind="choice", choices=["a", "b"])
    assert meta.choices == ("a", "b")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"kind": "float", "ui_min": 2.0, "ui_max": 1.0},
        {"kind": "bool", "ui_min": 0, "ui_max": 1},
        {"kind": "int", "choices": ["x"]},
    ],
)
def test_param_meta_rejects_inconsistent_options(kwargs) -> None:
    with pytest.raises(ValueError):
        ParamMeta(**kwargs)
