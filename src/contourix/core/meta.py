# どこで: `src/contourix/core/meta.py`。
# 何を: primitive 引数の種類と UI レンジ ParamMeta を定義する。

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

PARAM_KINDS = ("float", "int", "bool", "str", "choice", "vec2", "field")
_RANGED_KINDS = ("float", "int", "vec2")


@dataclass(frozen=True, slots=True)
class ParamMeta:
    """primitive 引数 1 つ分のメタ情報。

    Attributes
    ----------
    kind : str
        ``"float"`` / ``"int"`` / ``"bool"`` / ``"str"`` / ``"choice"`` /
        ``"vec2"`` / ``"field"``（2D スカラーフィールド）のいずれか。
    ui_min, ui_max : Any or None
        外部 UI のスライダー初期レンジ。実値はクランプしない。
    choices : Sequence[str] or None
        kind="choice" の選択肢。
    """

    kind: str
    ui_min: Any | None = None
    ui_max: Any | None = None
    choices: Sequence[str] | None = None

    def __post_init__(self) -> None:
        if self.kind not in PARAM_KINDS:
            raise ValueError(f"未対応の ParamMeta.kind: {self.kind!r}")
        if self.kind == "choice":
            if not self.choices:
                raise ValueError("kind='choice' には choices が必要")
            object.__setattr__(self, "choices", tuple(str(c) for c in self.choices))
        elif self.choices is not None:
            raise ValueError(f"choices は kind='choice' でのみ指定できる: kind={self.kind!r}")

        if self.ui_min is not None and self.ui_max is not None:
            if self.kind not in _RANGED_KINDS:
                raise ValueError(f"kind={self.kind!r} には ui_min/ui_max を指定できない")
            if float(self.ui_min) > float(self.ui_max):
                raise ValueError(f"ui_min > ui_max: {self.ui_min!r} > {self.ui_max!r}")
