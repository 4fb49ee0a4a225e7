"""
Runtime configuration: container/item sizes, counting mode, fallback threshold,
presets and presentation settings, loaded from YAML or JSON.
"""

from dataclasses import dataclass, field, asdict, fields
from typing import Dict, List, Optional, Tuple
import json
import math
import os
from pathlib import Path

import yaml

from .grid import Dimensions, Mode
from .render_mode import DEFAULT_FALLBACK_THRESHOLD


ENV_CONFIG = "VOXELSPACE_CONFIG"
DEFAULT_CONFIG_NAMES = ("voxelspace.yaml", "voxelspace.yml", "voxelspace.json")

# (width, height, depth) in metres
CONTAINER_PRESETS: Dict[str, Tuple[float, float, float]] = {
    "20ft": (5.89, 2.39, 2.35),
    "40ft": (12.03, 2.39, 2.35),
    "40hc": (12.03, 2.69, 2.35),
}

ITEM_PRESETS: Dict[str, Tuple[float, float, float]] = {
    "euro": (1.20, 0.144, 0.80),
    "us": (1.22, 0.15, 1.02),
    "box": (0.40, 0.40, 0.40),
}


# ------------------ Data model ------------------
@dataclass
class Config:
    """
Dataclass for all runtime settings (sizes, counting, rendering, interaction).
    """

    # Sizes in metres: [width, height, depth]
    container: List[float] = field(default_factory=lambda: list(CONTAINER_PRESETS["20ft"]))
    item: List[float] = field(default_factory=lambda: list(ITEM_PRESETS["euro"]))

    # Optional preset names; when set they override container/item
    container_preset: Optional[str] = None
    item_preset: Optional[str] = None

    # "packing" (floor, cells fully inside) | "coverage" (ceil, cells needed to cover)
    mode: str = "packing"

    # Above this many cells a single aggregate block is drawn instead of instances
    fallback_threshold: int = DEFAULT_FALLBACK_THRESHOLD

    # Lock item to a cube (all sides follow the width)
    aspect_lock: bool = False

    # Rendering & interaction
    background: str = "#0a0e17"
    show_grid: bool = True
    show_axes: bool = True
    enable_picking: bool = True
    pick_instruction: str = "Left click: inspect voxel | Right click: hide voxel | u: unhide all | g: grid | r: reset view"

    instance_color: str = "#3b82f6"
    fallback_color: str = "#3b82f6"
    fallback_opacity: float = 0.6
    wireframe_color: str = "#3b82f6"
    wireframe_opacity: float = 0.3
    highlight_color: str = "yellow"
    grid_color: str = "#334155"

    # Instances are drawn slightly smaller than a cell so neighbours stay distinguishable
    instance_gap: float = 0.96
    highlight_scale: float = 1.05

    # Floor grid below the container
    grid_offset: float = 0.05
    grid_divisions: int = 20

    # Readout precision
    value_digits: int = 3
    derivation_digits: int = 2

    def container_dims(self) -> Dimensions:
        return Dimensions.from_sequence(self.container)

    def item_dims(self) -> Dimensions:
        return Dimensions.from_sequence(self.item)


# ------------------ Config I/O ------------------
def guess_default_config() -> Optional[str]:
    """
Search the environment variable and the working directory for a config file.
    """

    env = os.getenv(ENV_CONFIG)
    if env and Path(env).exists():
        return env
    for name in DEFAULT_CONFIG_NAMES:
        cand = Path.cwd() / name
        if cand.exists():
            return str(cand)
    return None


def _read_mapping(path: str) -> dict:
    ext = os.path.splitext(path)[1].lower()
    with open(path, "r", encoding="utf-8") as f:
        if ext in (".yaml", ".yml"):
            try:
                raw = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"{path}: invalid YAML: {e}") from None
        else:
            raw = json.load(f)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: top level must be a mapping, got {type(raw).__name__}")
    return raw


def load_config(path: Optional[str]) -> Config:
    """
Load configuration from YAML/JSON. Unknown keys are rejected.
    """

    if path is None:
        return Config()
    raw = _read_mapping(path)
    known = {f.name for f in fields(Config)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"{path}: unknown config keys: {', '.join(unknown)}")
    for key in ("container", "item"):
        if key in raw and raw[key] is not None:
            raw[key] = [float(v) for v in raw[key]]
    return Config(**raw)


def write_mapping(d: dict, path: str):
    """Write a plain mapping as YAML or JSON, chosen by the file extension."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    if path.lower().endswith((".yaml", ".yml")):
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(d, f, sort_keys=False)
    else:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(d, f, indent=2)


def dump_config(cfg: Config, path: str):
    """
Write the current configuration to a YAML or JSON file.
    """

    d = asdict(cfg)
    d["container"] = [float(v) for v in cfg.container]
    d["item"] = [float(v) for v in cfg.item]
    write_mapping(d, path)


# ------------------ Normalization ------------------
def _lookup_preset(table: Dict[str, Tuple[float, float, float]], name: str, kind: str):
    key = (name or "").strip().lower()
    if key not in table:
        raise ValueError(f"Unknown {kind} preset: {name!r} (choose from {', '.join(table)})")
    return list(table[key])


def _check_positive(name: str, value) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(v) or v <= 0:
        raise ValueError(f"{name} must be > 0, got {value!r}")
    return v


def normalize_config(cfg: Config) -> Config:
    """
Resolve presets and aspect lock, then validate every field the core relies on.
    """

    if cfg.container_preset:
        cfg.container = _lookup_preset(CONTAINER_PRESETS, cfg.container_preset, "container")
    if cfg.item_preset:
        cfg.item = _lookup_preset(ITEM_PRESETS, cfg.item_preset, "item")
        # picking a concrete item turns the cube lock off
        cfg.aspect_lock = False

    for key in ("container", "item"):
        vals = list(getattr(cfg, key))
        if len(vals) != 3:
            raise ValueError(f"{key} needs 3 values (width, height, depth), got {len(vals)}")
        setattr(cfg, key, [_check_positive(f"{key}[{n}]", v) for n, v in enumerate(vals)])

    if cfg.aspect_lock:
        w = cfg.item[0]
        cfg.item = [w, w, w]

    cfg.mode = Mode.parse(cfg.mode).value

    t = cfg.fallback_threshold
    if isinstance(t, bool) or not isinstance(t, (int, float)) or not math.isfinite(t) \
            or not float(t).is_integer() or t < 0:
        raise ValueError(f"fallback_threshold must be a non-negative integer, got {t!r}")
    cfg.fallback_threshold = int(t)

    cfg.instance_gap = _check_positive("instance_gap", cfg.instance_gap)
    cfg.highlight_scale = _check_positive("highlight_scale", cfg.highlight_scale)
    if cfg.grid_divisions < 1:
        raise ValueError(f"grid_divisions must be >= 1, got {cfg.grid_divisions!r}")
    return cfg
