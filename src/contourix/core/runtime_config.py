# どこで: `src/contourix/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: 出力先・realize キャッシュ容量・等高線リングとデュオトーンの既定スタイルをユーザーが差し替えられるようにするため。

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ContourDefaults:
    """等高線リング描画の既定値（config.yaml の `contours` セクション）。"""

    layers: int
    step: float
    min_thickness: float
    max_thickness: float
    hue_outer: float
    hue_inner: float
    saturation: float
    brightness: float


@dataclass(frozen=True, slots=True)
class DuotoneDefaults:
    """デュオトーンセル描画の既定値（config.yaml の `duotone` セクション）。"""

    inside_color: tuple[float, float, float]
    outside_color: tuple[float, float, float]
    hatch: int
    thickness: float


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """contourix の実行時設定。"""

    config_path: Path | None
    output_dir: Path
    realize_cache_size: int
    contours: ContourDefaults
    duotone: DuotoneDefaults


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    どちらの場合もロード済みキャッシュは破棄する。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    _EXPLICIT_CONFIG_PATH = None if path is None else Path(str(path)).expanduser()
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    return (
        Path.cwd() / ".contourix" / "config.yaml",
        Path.home() / ".config" / "contourix" / "config.yaml",
    )


def _as_optional_path(value: Any) -> Path | None:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return Path(os.path.expandvars(os.path.expanduser(s)))


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_float(value: Any, *, key: str) -> float:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    if isinstance(value, bool):
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _as_int(value: Any, *, key: str) -> int:
    f = _as_float(value, key=key)
    if not f.is_integer():
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}")
    return int(f)


def _as_rgb01(value: Any, *, key: str) -> tuple[float, float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise RuntimeError(f"{key} は長さ 3 の RGB 配列である必要があります: got={value!r}")
    r, g, b = (_as_float(v, key=key) for v in value)
    if not all(0.0 <= c <= 1.0 for c in (r, g, b)):
        raise ValueError(f"{key} の各成分は 0..1 である必要があります: got={value!r}")
    return (r, g, b)


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """mapping 同士は再帰的に、その他は後勝ちでマージする。"""
    out = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")
    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    return _load_yaml_text(path.read_text(encoding="utf-8"), source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    blob = (
        resources.files("contourix")
        .joinpath("resource", "default_config.yaml")
        .read_text(encoding="utf-8")
    )
    return _load_yaml_text(blob, source="contourix/resource/default_config.yaml")


def _contour_defaults(payload: dict[str, Any]) -> ContourDefaults:
    contours = _as_mapping(payload.get("contours"), key="contours")
    defaults = ContourDefaults(
        layers=_as_int(contours.get("layers"), key="contours.layers"),
        step=_as_float(contours.get("step"), key="contours.step"),
        min_thickness=_as_float(contours.get("min_thickness"), key="contours.min_thickness"),
        max_thickness=_as_float(contours.get("max_thickness"), key="contours.max_thickness"),
        hue_outer=_as_float(contours.get("hue_outer"), key="contours.hue_outer"),
        hue_inner=_as_float(contours.get("hue_inner"), key="contours.hue_inner"),
        saturation=_as_float(contours.get("saturation"), key="contours.saturation"),
        brightness=_as_float(contours.get("brightness"), key="contours.brightness"),
    )
    if defaults.layers < 1:
        raise ValueError(f"contours.layers は 1 以上である必要があります: got={defaults.layers}")
    if defaults.min_thickness <= 0 or defaults.max_thickness <= 0:
        raise ValueError("contours.min_thickness/max_thickness は正の値である必要があります")
    return defaults


def _duotone_defaults(payload: dict[str, Any]) -> DuotoneDefaults:
    duotone = _as_mapping(payload.get("duotone"), key="duotone")
    defaults = DuotoneDefaults(
        inside_color=_as_rgb01(duotone.get("inside_color"), key="duotone.inside_color"),
        outside_color=_as_rgb01(duotone.get("outside_color"), key="duotone.outside_color"),
        hatch=_as_int(duotone.get("hatch"), key="duotone.hatch"),
        thickness=_as_float(duotone.get("thickness"), key="duotone.thickness"),
    )
    if defaults.hatch < 0:
        raise ValueError(f"duotone.hatch は 0 以上である必要があります: got={defaults.hatch}")
    if defaults.thickness <= 0:
        raise ValueError("duotone.thickness は正の値である必要があります")
    return defaults


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.contourix/config.yaml` / `~/.config/contourix/config.yaml`（先に見つかった方）
    3) `set_config_path(...)` で指定したパス
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload = _merge(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge(payload, _load_yaml_config(explicit_path))

    version = _as_int(payload.get("version"), key="version")
    if version != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version}")

    paths = _as_mapping(payload.get("paths"), key="paths")
    output_dir = _as_optional_path(paths.get("output_dir"))
    if output_dir is None:
        raise RuntimeError(
            "paths.output_dir が未設定です（同梱 default_config.yaml を確認してください）"
        )

    realize = _as_mapping(payload.get("realize"), key="realize")
    cache_size = _as_int(realize.get("cache_size"), key="realize.cache_size")
    if cache_size < 1:
        raise ValueError(f"realize.cache_size は 1 以上である必要があります: got={cache_size}")

    config_path = explicit_path or discovered_path
    cfg = RuntimeConfig(
        config_path=config_path,
        output_dir=output_dir,
        realize_cache_size=cache_size,
        contours=_contour_defaults(payload),
        duotone=_duotone_defaults(payload),
    )
    if config_path is not None:
        _logger.info("config.yaml をロードしました: %s", config_path)
    _CONFIG_CACHE = cfg
    return cfg


def output_root_dir() -> Path:
    """出力ファイルを保存する既定ルートディレクトリを返す。"""

    return Path(runtime_config().output_dir)


__all__ = [
    "ContourDefaults",
    "RuntimeConfig",
    "output_root_dir",
    "runtime_config",
    "set_config_path",
]
