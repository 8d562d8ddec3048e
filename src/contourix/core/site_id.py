# どこで: `src/contourix/core/site_id.py`。
# 何を: `L(...)` などの呼び出し箇所を表す site_id を作る。

from __future__ import annotations

import inspect
from functools import lru_cache
from pathlib import Path
from types import FrameType

UNKNOWN_SITE_ID = "<unknown>:0:0"


@lru_cache(maxsize=256)
def _canonical_filename(filename: str) -> str:
    # "<stdin>" や "<string>" はそのまま使う。
    if not filename or filename.startswith("<"):
        return filename
    try:
        return str(Path(filename).resolve())
    except OSError:
        return filename


def make_site_id(frame: FrameType | None = None) -> str:
    """フレームから ``"{filename}:{co_firstlineno}:{f_lasti}"`` 形式の site_id を返す。

    frame を省略した場合は呼び出し元のフレームを使う。
    同じ関数の同じ式から呼ばれる限り、フレームをまたいで同じ値になる。
    """
    if frame is None:
        here = inspect.currentframe()
        frame = here.f_back if here is not None else None
    if frame is None:
        return UNKNOWN_SITE_ID
    code = frame.f_code
    return f"{_canonical_filename(code.co_filename)}:{code.co_firstlineno}:{frame.f_lasti}"


def caller_site_id(skip: int = 1) -> str:
    """この関数から ``skip + 1`` 段上のフレームの site_id を返す。

    skip=1 なら「caller_site_id を呼んだ関数」の呼び出し元になる。
    """
    frame = inspect.currentframe()
    for _ in range(int(skip) + 1):
        if frame is None:
            return UNKNOWN_SITE_ID
        frame = frame.f_back
    if frame is None:
        return UNKNOWN_SITE_ID
    return make_site_id(frame)
